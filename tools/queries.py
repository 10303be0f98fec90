"""
GraphQL documents for the Shopify Admin API (pinned to 2025-01).

Each document carries the fragments it references.
"""

ORDER_FRAGMENT = """
  fragment OrderDetails on Order {
    id
    name
    legacyResourceId
    createdAt
    cancelledAt
    closed
    displayFulfillmentStatus
    displayFinancialStatus
    lineItems(first: 10) {
      edges {
        node {
          id
          name
          quantity
          sku
          variant {
            id
            price
            product {
              id
              title
            }
          }
        }
      }
    }
    fulfillments(first: 5) {
      id
      status
      trackingInfo(first: 1) {
        company
        number
        url
      }
      createdAt
    }
    totalPriceSet { shopMoney { amount currencyCode } }
    subtotalPriceSet { shopMoney { amount currencyCode } }
    totalShippingPriceSet { shopMoney { amount currencyCode } }
    totalTaxSet { shopMoney { amount currencyCode } }
  }
"""

# ── Queries ────────────────────────────────────────────────────────────────────

GET_ORDER = ORDER_FRAGMENT + """
  query GetOrder($id: ID!) {
    order(id: $id) {
      ...OrderDetails
    }
  }
"""

# Resolves a human-facing order number (e.g. #1001) to its GID.
FIND_ORDER_ID_BY_NUMBER = """
  query FindOrderIdByNumber($query: String!) {
    orders(first: 1, query: $query) {
      edges {
        node {
          id
          name
        }
      }
    }
  }
"""

GET_ACTIVE_ORDERS = ORDER_FRAGMENT + """
  query GetActiveOrders($first: Int!) {
    orders(first: $first, query: "status:open") {
      edges {
        node {
          ...OrderDetails
        }
      }
    }
  }
"""

GET_FULFILLMENT_ORDERS = """
  query GetFulfillmentOrders($id: ID!) {
    order(id: $id) {
      id
      fulfillmentOrders(first: 5) {
        edges {
          node {
            id
            status
            lineItems(first: 50) {
              edges {
                node {
                  id
                  remainingQuantity
                  totalQuantity
                  lineItem {
                    id
                  }
                }
              }
            }
          }
        }
      }
    }
  }
"""

# ── Mutations ──────────────────────────────────────────────────────────────────

CREATE_FULFILLMENT = """
  mutation FulfillmentCreate($fulfillment: FulfillmentInput!) {
    fulfillmentCreate(fulfillment: $fulfillment) {
      fulfillment {
        id
        status
        trackingInfo(first: 1) {
          company
          number
          url
        }
        createdAt
      }
      userErrors {
        field
        message
      }
    }
  }
"""

ADD_TRACKING_INFO = """
  mutation FulfillmentTrackingInfoUpdate($fulfillmentId: ID!, $trackingInfoInput: FulfillmentTrackingInput!, $notifyCustomer: Boolean) {
    fulfillmentTrackingInfoUpdate(
      fulfillmentId: $fulfillmentId,
      trackingInfoInput: $trackingInfoInput,
      notifyCustomer: $notifyCustomer
    ) {
      fulfillment {
        id
        status
        trackingInfo(first: 1) {
          company
          number
          url
        }
      }
      userErrors {
        field
        message
      }
    }
  }
"""

# orderClose replaces the archive mutations removed from the Admin API.
CLOSE_ORDER = """
  mutation CloseOrder($input: OrderCloseInput!) {
    orderClose(input: $input) {
      order {
        id
        closed
      }
      userErrors {
        field
        message
      }
    }
  }
"""
