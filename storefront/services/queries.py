"""GraphQL documents for the storefront API"""

VARIANT_FIELDS = """
    id
    title
    availableForSale
    quantityAvailable
    currentlyNotInStock
    inventoryManagement
    inventoryPolicy
    priceV2 {
        amount
        currencyCode
    }
"""

CART_FRAGMENT = """
fragment CartFields on Cart {
    id
    checkoutUrl
    lines(first: 100) {
        edges {
            node {
                id
                quantity
                merchandise {
                    ... on ProductVariant {
                        %s
                        product {
                            title
                            featuredImage {
                                url
                            }
                        }
                    }
                }
            }
        }
    }
    cost {
        totalAmount {
            amount
            currencyCode
        }
        subtotalAmount {
            amount
            currencyCode
        }
    }
}
""" % VARIANT_FIELDS

USER_ERRORS = """
    userErrors {
        field
        message
    }
"""

CREATE_CART = """
mutation cartCreate($input: CartInput!) {
    cartCreate(input: $input) {
        cart { ...CartFields }
        %s
    }
}
""" % USER_ERRORS + CART_FRAGMENT

ADD_LINES = """
mutation cartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!) {
    cartLinesAdd(cartId: $cartId, lines: $lines) {
        cart { ...CartFields }
        %s
    }
}
""" % USER_ERRORS + CART_FRAGMENT

UPDATE_LINES = """
mutation cartLinesUpdate($cartId: ID!, $lines: [CartLineUpdateInput!]!) {
    cartLinesUpdate(cartId: $cartId, lines: $lines) {
        cart { ...CartFields }
        %s
    }
}
""" % USER_ERRORS + CART_FRAGMENT

REMOVE_LINES = """
mutation cartLinesRemove($cartId: ID!, $lineIds: [ID!]!) {
    cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {
        cart { ...CartFields }
        %s
    }
}
""" % USER_ERRORS + CART_FRAGMENT

GET_CART = """
query getCart($cartId: ID!) {
    cart(id: $cartId) { ...CartFields }
}
""" + CART_FRAGMENT

PRODUCT_FIELDS = """
    id
    title
    description
    handle
    featuredImage {
        url
        altText
    }
    variants(first: 10) {
        edges {
            node {
                %s
            }
        }
    }
""" % VARIANT_FIELDS

GET_PRODUCTS = """
query getProducts($first: Int!, $after: String) {
    products(first: $first, after: $after) {
        edges {
            node {
                %s
            }
            cursor
        }
        pageInfo {
            hasNextPage
            hasPreviousPage
            endCursor
        }
    }
}
""" % PRODUCT_FIELDS

GET_PRODUCT = """
query getProduct($handle: String!) {
    productByHandle(handle: $handle) {
        %s
    }
}
""" % PRODUCT_FIELDS
