"""
Order reference handling shared by the order tools.

An agent may refer to an order as:
  - a human-facing order number: "#1001" or "1001"
  - a Shopify GID:                "gid://shopify/Order/5678901234"
  - anything else, assumed to be the numeric part of a GID
"""

import re
from enum import Enum

from clients.shopify import ShopifyGraphQLClient
from models.errors import NotFoundError
from models.order import OrderIdLookupResult
from tools.queries import FIND_ORDER_ID_BY_NUMBER
from utils.logger import get_logger

log = get_logger(__name__)

ORDER_GID_PREFIX = "gid://shopify/Order/"
FULFILLMENT_GID_PREFIX = "gid://shopify/Fulfillment/"
LINE_ITEM_GID_PREFIX = "gid://shopify/LineItem/"

_ORDER_NUMBER_RE = re.compile(r"^#?\d+$")


class ReferenceKind(str, Enum):
    SEQUENCE_NUMBER = "sequence_number"
    LONG_FORM_ID = "long_form_id"
    BARE_ID = "bare_id"


def classify_order_reference(ref: str) -> ReferenceKind:
    ref = ref.strip()
    if _ORDER_NUMBER_RE.match(ref):
        return ReferenceKind.SEQUENCE_NUMBER
    if ORDER_GID_PREFIX in ref:
        return ReferenceKind.LONG_FORM_ID
    return ReferenceKind.BARE_ID


def to_gid(ref: str, prefix: str) -> str:
    ref = ref.strip()
    return ref if ref.startswith("gid://") else f"{prefix}{ref}"


def numeric_tail(gid: str) -> str:
    """ "gid://shopify/Fulfillment/123" -> "123" """
    return gid.rstrip("/").rsplit("/", 1)[-1] or gid


def resolve_order_id(client: ShopifyGraphQLClient, ref: str) -> str:
    """
    Return the Order GID for any accepted reference.

    Order numbers cost one lookup call; GIDs pass through untouched and bare
    values get the Order GID prefix. Raises NotFoundError when an order
    number matches nothing.
    """
    kind = classify_order_reference(ref)
    ref = ref.strip()

    if kind is ReferenceKind.LONG_FORM_ID:
        return ref
    if kind is ReferenceKind.BARE_ID:
        return f"{ORDER_GID_PREFIX}{ref}"

    number = ref.lstrip("#")
    result = client.execute(
        FIND_ORDER_ID_BY_NUMBER,
        {"query": f"name:{number}"},
        response_model=OrderIdLookupResult,
    )
    if not result.orders.edges:
        raise NotFoundError(f"Order {ref} not found")

    order_id = result.orders.edges[0].node.id
    log.debug("Resolved order number %s -> %s", ref, order_id)
    return order_id
