"""GraphQL documents for the Shopify Admin API."""

from __future__ import annotations

_PAGE_INFO = "pageInfo { hasNextPage endCursor }"
_USER_ERRORS = "userErrors { field message }"

_ATTRIBUTE = "id namespace key type value"

_VALIDATIONS = "validations { name value type }"

_DEFINITION = f"""
id
type
name
displayNameKey
access {{ admin storefront customerAccount }}
fieldDefinitions {{
  key
  name
  description
  required
  type {{ name category }}
  {_VALIDATIONS}
}}
"""

_INSTANCE = "id type handle fields { key type value }"

_ATTRIBUTE_DEFINITION = f"""
id
namespace
key
name
ownerType
description
pinnedPosition
type {{ name category }}
access {{ admin storefront customerAccount }}
{_VALIDATIONS}
"""

_FILE = "id alt preview { image { url } }"

_COLLECTION = "id handle title descriptionHtml templateSuffix"

_VARIANT = f"""
id
title
price
compareAtPrice
barcode
sku
taxable
inventoryPolicy
selectedOptions {{ name value }}
image {{ url }}
metafields(first: 250) {{ nodes {{ {_ATTRIBUTE} }} }}
"""

_PRODUCT = f"""
id
handle
title
descriptionHtml
productType
vendor
status
tags
templateSuffix
giftCardTemplateSuffix
requiresSellingPlan
isGiftCard
category {{ id }}
seo {{ title description }}
options {{ name position values }}
collections(first: 250) {{ nodes {{ {_COLLECTION} }} }}
media(first: 250) {{ nodes {{ id alt mediaContentType preview {{ image {{ url }} }} }} }}
variants(first: 250) {{ nodes {{ {_VARIANT} }} }}
metafields(first: 250) {{ nodes {{ {_ATTRIBUTE} }} }}
"""

_PAGE = f"""
id
handle
title
body
isPublished
templateSuffix
metafields(first: 250) {{ nodes {{ {_ATTRIBUTE} }} }}
"""

_MENU_ITEM = "id title type url resourceId tags"

# Menus nest at most three levels deep.
_MENU = f"""
id
handle
title
isDefault
items {{
  {_MENU_ITEM}
  items {{
    {_MENU_ITEM}
    items {{ {_MENU_ITEM} }}
  }}
}}
"""

# Definitions

DEFINITIONS = f"""
query Definitions($first: Int!, $after: String) {{
  metaobjectDefinitions(first: $first, after: $after) {{
    nodes {{ {_DEFINITION} }}
    {_PAGE_INFO}
  }}
}}
"""

DEFINITION_CREATE = f"""
mutation DefinitionCreate($definition: MetaobjectDefinitionCreateInput!) {{
  metaobjectDefinitionCreate(definition: $definition) {{
    metaobjectDefinition {{ {_DEFINITION} }}
    {_USER_ERRORS}
  }}
}}
"""

DEFINITION_UPDATE = f"""
mutation DefinitionUpdate($id: ID!, $definition: MetaobjectDefinitionUpdateInput!) {{
  metaobjectDefinitionUpdate(id: $id, definition: $definition) {{
    metaobjectDefinition {{ {_DEFINITION} }}
    {_USER_ERRORS}
  }}
}}
"""

DEFINITION_DELETE = f"""
mutation DefinitionDelete($id: ID!) {{
  metaobjectDefinitionDelete(id: $id) {{
    deletedId
    {_USER_ERRORS}
  }}
}}
"""

# Instances

INSTANCES = f"""
query Instances($type: String!, $first: Int!, $after: String) {{
  metaobjects(type: $type, first: $first, after: $after) {{
    nodes {{ {_INSTANCE} }}
    {_PAGE_INFO}
  }}
}}
"""

INSTANCE = f"""
query Instance($id: ID!) {{
  metaobject(id: $id) {{ {_INSTANCE} }}
}}
"""

INSTANCE_BY_HANDLE = f"""
query InstanceByHandle($handle: MetaobjectHandleInput!) {{
  metaobjectByHandle(handle: $handle) {{ {_INSTANCE} }}
}}
"""

INSTANCE_CREATE = f"""
mutation InstanceCreate($metaobject: MetaobjectCreateInput!) {{
  metaobjectCreate(metaobject: $metaobject) {{
    metaobject {{ {_INSTANCE} }}
    {_USER_ERRORS}
  }}
}}
"""

INSTANCE_UPDATE = f"""
mutation InstanceUpdate($id: ID!, $metaobject: MetaobjectUpdateInput!) {{
  metaobjectUpdate(id: $id, metaobject: $metaobject) {{
    metaobject {{ {_INSTANCE} }}
    {_USER_ERRORS}
  }}
}}
"""

INSTANCE_DELETE = f"""
mutation InstanceDelete($id: ID!) {{
  metaobjectDelete(id: $id) {{
    deletedId
    {_USER_ERRORS}
  }}
}}
"""

INSTANCES_BULK_DELETE = f"""
mutation InstancesBulkDelete($where: MetaobjectBulkDeleteWhereCondition!) {{
  metaobjectBulkDelete(where: $where) {{
    job {{ id done }}
    {_USER_ERRORS}
  }}
}}
"""

# Attribute definitions and attributes

ATTRIBUTE_DEFINITIONS = f"""
query AttributeDefinitions($ownerType: MetafieldOwnerType!, $first: Int!, $after: String) {{
  metafieldDefinitions(ownerType: $ownerType, first: $first, after: $after) {{
    nodes {{ {_ATTRIBUTE_DEFINITION} }}
    {_PAGE_INFO}
  }}
}}
"""

ATTRIBUTE_DEFINITION_CREATE = f"""
mutation AttributeDefinitionCreate($definition: MetafieldDefinitionInput!) {{
  metafieldDefinitionCreate(definition: $definition) {{
    createdDefinition {{ {_ATTRIBUTE_DEFINITION} }}
    {_USER_ERRORS}
  }}
}}
"""

ATTRIBUTE_DEFINITION_UPDATE = f"""
mutation AttributeDefinitionUpdate($definition: MetafieldDefinitionUpdateInput!) {{
  metafieldDefinitionUpdate(definition: $definition) {{
    updatedDefinition {{ {_ATTRIBUTE_DEFINITION} }}
    {_USER_ERRORS}
  }}
}}
"""

ATTRIBUTE_DEFINITION_DELETE = f"""
mutation AttributeDefinitionDelete($id: ID!) {{
  metafieldDefinitionDelete(id: $id, deleteAllAssociatedMetafields: true) {{
    deletedDefinitionId
    {_USER_ERRORS}
  }}
}}
"""

ATTRIBUTES_SET = f"""
mutation AttributesSet($metafields: [MetafieldsSetInput!]!) {{
  metafieldsSet(metafields: $metafields) {{
    metafields {{ {_ATTRIBUTE} }}
    {_USER_ERRORS}
  }}
}}
"""

ATTRIBUTES_DELETE = f"""
mutation AttributesDelete($metafields: [MetafieldIdentifierInput!]!) {{
  metafieldsDelete(metafields: $metafields) {{
    deletedMetafields {{ ownerId namespace key }}
    {_USER_ERRORS}
  }}
}}
"""

# Files

FILES = f"""
query Files($first: Int!, $after: String, $query: String) {{
  files(first: $first, after: $after, query: $query) {{
    nodes {{ {_FILE} }}
    {_PAGE_INFO}
  }}
}}
"""

FILE = f"""
query File($id: ID!) {{
  node(id: $id) {{
    ... on File {{ {_FILE} }}
  }}
}}
"""

FILES_CREATE = f"""
mutation FilesCreate($files: [FileCreateInput!]!) {{
  fileCreate(files: $files) {{
    files {{ {_FILE} }}
    {_USER_ERRORS}
  }}
}}
"""

# Products

PRODUCTS = f"""
query Products($first: Int!, $after: String) {{
  products(first: $first, after: $after) {{
    nodes {{ {_PRODUCT} }}
    {_PAGE_INFO}
  }}
}}
"""

PRODUCT = f"""
query Product($id: ID!) {{
  product(id: $id) {{ {_PRODUCT} }}
}}
"""

PRODUCT_BY_HANDLE = f"""
query ProductByHandle($handle: String!) {{
  productByHandle(handle: $handle) {{ {_PRODUCT} }}
}}
"""

PRODUCT_CREATE = f"""
mutation ProductCreate($product: ProductCreateInput!, $media: [CreateMediaInput!]) {{
  productCreate(product: $product, media: $media) {{
    product {{ {_PRODUCT} }}
    {_USER_ERRORS}
  }}
}}
"""

PRODUCT_UPDATE = f"""
mutation ProductUpdate($product: ProductUpdateInput!) {{
  productUpdate(product: $product) {{
    product {{ {_PRODUCT} }}
    {_USER_ERRORS}
  }}
}}
"""

VARIANTS_BULK_CREATE = f"""
mutation VariantsBulkCreate(
  $productId: ID!
  $variants: [ProductVariantsBulkInput!]!
  $strategy: ProductVariantsBulkCreateStrategy
) {{
  productVariantsBulkCreate(productId: $productId, variants: $variants, strategy: $strategy) {{
    productVariants {{ {_VARIANT} }}
    {_USER_ERRORS}
  }}
}}
"""

VARIANTS_BULK_UPDATE = f"""
mutation VariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {{
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {{
    productVariants {{ {_VARIANT} }}
    {_USER_ERRORS}
  }}
}}
"""

# Collections

COLLECTIONS = f"""
query Collections($first: Int!, $after: String) {{
  collections(first: $first, after: $after) {{
    nodes {{ {_COLLECTION} }}
    {_PAGE_INFO}
  }}
}}
"""

COLLECTION = f"""
query Collection($id: ID!) {{
  collection(id: $id) {{ {_COLLECTION} }}
}}
"""

COLLECTION_CREATE = f"""
mutation CollectionCreate($input: CollectionInput!) {{
  collectionCreate(input: $input) {{
    collection {{ {_COLLECTION} }}
    {_USER_ERRORS}
  }}
}}
"""

COLLECTION_DELETE = f"""
mutation CollectionDelete($input: CollectionDeleteInput!) {{
  collectionDelete(input: $input) {{
    deletedCollectionId
    {_USER_ERRORS}
  }}
}}
"""

# Pages and menus

PAGES = f"""
query Pages($first: Int!, $after: String) {{
  pages(first: $first, after: $after) {{
    nodes {{ {_PAGE} }}
    {_PAGE_INFO}
  }}
}}
"""

PAGE_CREATE = f"""
mutation PageCreate($page: PageCreateInput!) {{
  pageCreate(page: $page) {{
    page {{ {_PAGE} }}
    {_USER_ERRORS}
  }}
}}
"""

CUSTOMER_ACCOUNT_PAGES = f"""
query CustomerAccountPages($first: Int!, $after: String) {{
  customerAccountPages(first: $first, after: $after) {{
    nodes {{ id handle title }}
    {_PAGE_INFO}
  }}
}}
"""

MENUS = f"""
query Menus($first: Int!, $after: String) {{
  menus(first: $first, after: $after) {{
    nodes {{ {_MENU} }}
    {_PAGE_INFO}
  }}
}}
"""

MENU_CREATE = f"""
mutation MenuCreate($title: String!, $handle: String!, $items: [MenuItemCreateInput!]!) {{
  menuCreate(title: $title, handle: $handle, items: $items) {{
    menu {{ {_MENU} }}
    {_USER_ERRORS}
  }}
}}
"""

MENU_DELETE = f"""
mutation MenuDelete($id: ID!) {{
  menuDelete(id: $id) {{
    deletedMenuId
    {_USER_ERRORS}
  }}
}}
"""
