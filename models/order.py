"""
Decoded Admin API payloads.

Field names follow the GraphQL schema (camelCase) through aliases so that the
raw `data` object can be validated as-is. Every model is built fresh per
request and discarded after formatting.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ── Order building blocks ──────────────────────────────────────────────────────

class MoneyV2(_Payload):
    amount: str
    currency_code: str = ""

    def __str__(self) -> str:
        return f"{self.amount} {self.currency_code}".strip()


class MoneyBag(_Payload):
    shop_money: MoneyV2


class TrackingInfo(_Payload):
    company: Optional[str] = None
    number: Optional[str] = None
    url: Optional[str] = None


class Product(_Payload):
    id: str
    title: str = ""


class Variant(_Payload):
    id: str
    price: Optional[str] = None
    product: Optional[Product] = None


class LineItem(_Payload):
    id: str
    name: str
    quantity: int = Field(ge=0)
    sku: Optional[str] = None
    variant: Optional[Variant] = None


class LineItemEdge(_Payload):
    node: LineItem


class LineItemConnection(_Payload):
    edges: list[LineItemEdge] = []


class Fulfillment(_Payload):
    id: str
    status: Optional[str] = None
    tracking_info: list[TrackingInfo] = []
    created_at: Optional[str] = None

    @property
    def tracking(self) -> Optional[TrackingInfo]:
        """First tracking entry that carries a number, if any."""
        for info in self.tracking_info:
            if info.number:
                return info
        return None


class Order(_Payload):
    id: str
    name: str = ""
    legacy_resource_id: Optional[str] = None
    created_at: Optional[str] = None
    cancelled_at: Optional[str] = None
    closed: Optional[bool] = None
    display_fulfillment_status: Optional[str] = None
    display_financial_status: Optional[str] = None
    line_items: LineItemConnection = LineItemConnection()
    fulfillments: list[Fulfillment] = []
    total_price_set: Optional[MoneyBag] = None
    subtotal_price_set: Optional[MoneyBag] = None
    total_shipping_price_set: Optional[MoneyBag] = None
    total_tax_set: Optional[MoneyBag] = None

    @property
    def items(self) -> list[LineItem]:
        return [edge.node for edge in self.line_items.edges]

    @property
    def number(self) -> str:
        """Human-facing order number, e.g. "#1001"."""
        if self.name:
            return self.name if self.name.startswith("#") else f"#{self.name}"
        if self.legacy_resource_id:
            return f"#{self.legacy_resource_id}"
        return f"#{self.id.rsplit('/', 1)[-1]}"

    @property
    def total(self) -> Optional[MoneyV2]:
        return self.total_price_set.shop_money if self.total_price_set else None


# ── Per-operation results ──────────────────────────────────────────────────────

class UserError(_Payload):
    field: Optional[list[str]] = None
    message: str


class OrderResult(_Payload):
    order: Optional[Order] = None


class OrderEdge(_Payload):
    node: Order


class OrderConnection(_Payload):
    edges: list[OrderEdge] = []


class OrderConnectionResult(_Payload):
    orders: OrderConnection

    @property
    def nodes(self) -> list[Order]:
        return [edge.node for edge in self.orders.edges]


class OrderRef(_Payload):
    id: str
    name: str = ""


class OrderRefEdge(_Payload):
    node: OrderRef


class OrderRefConnection(_Payload):
    edges: list[OrderRefEdge] = []


class OrderIdLookupResult(_Payload):
    orders: OrderRefConnection


class FulfillmentOrderLineItemRef(_Payload):
    id: str


class FulfillmentOrderLineItem(_Payload):
    id: str
    remaining_quantity: int = Field(0, ge=0)
    total_quantity: int = Field(0, ge=0)
    line_item: Optional[FulfillmentOrderLineItemRef] = None


class FulfillmentOrderLineItemEdge(_Payload):
    node: FulfillmentOrderLineItem


class FulfillmentOrderLineItemConnection(_Payload):
    edges: list[FulfillmentOrderLineItemEdge] = []


class FulfillmentOrder(_Payload):
    id: str
    status: Optional[str] = None
    line_items: FulfillmentOrderLineItemConnection = FulfillmentOrderLineItemConnection()

    @property
    def items(self) -> list[FulfillmentOrderLineItem]:
        return [edge.node for edge in self.line_items.edges]


class FulfillmentOrderEdge(_Payload):
    node: FulfillmentOrder


class FulfillmentOrderConnection(_Payload):
    edges: list[FulfillmentOrderEdge] = []


class OrderFulfillmentOrders(_Payload):
    id: str
    fulfillment_orders: FulfillmentOrderConnection = FulfillmentOrderConnection()


class FulfillmentOrdersResult(_Payload):
    order: Optional[OrderFulfillmentOrders] = None


class FulfillmentPayload(_Payload):
    fulfillment: Optional[Fulfillment] = None
    user_errors: list[UserError] = []


class FulfillmentCreateResult(_Payload):
    fulfillment_create: FulfillmentPayload


class TrackingInfoUpdateResult(_Payload):
    fulfillment_tracking_info_update: FulfillmentPayload


class ClosedOrder(_Payload):
    id: str
    closed: bool = False


class OrderClosePayload(_Payload):
    order: Optional[ClosedOrder] = None
    user_errors: list[UserError] = []


class OrderCloseResult(_Payload):
    order_close: OrderClosePayload


# ── Tool inputs ────────────────────────────────────────────────────────────────

class FulfillmentLineItemInput(_Payload):
    """One entry of request-fulfillment's lineItems argument."""

    line_item_id: str = Field(
        min_length=1,
        description="Order line item ID (e.g. gid://shopify/LineItem/123 or 123)",
    )
    quantity: int = Field(ge=1, description="Quantity to fulfill")
