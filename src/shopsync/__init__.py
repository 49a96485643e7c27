"""Store-to-store reconciliation of Shopify catalog content."""
