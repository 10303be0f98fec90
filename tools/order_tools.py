"""
Shopify order tools: handler functions and their MCP registration.

Each handler is a plain Python function that takes the GraphQL client plus
validated arguments and returns a ToolResult. Any fault raised inside a
handler is converted to an error ToolResult at the handler boundary, so
nothing below startup level can crash the server.
"""

import functools
from typing import Annotated, Callable, Optional

import anyio
import jsonschema
from mcp import types
from mcp.server.fastmcp import FastMCP
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult
from pydantic import Field

from clients.shopify import ShopifyGraphQLClient
from models.errors import NotFoundError, ShopifyMCPError, TransportError, UpstreamError
from models.order import (
    FulfillmentCreateResult,
    FulfillmentLineItemInput,
    FulfillmentOrder,
    FulfillmentOrdersResult,
    OrderCloseResult,
    OrderConnectionResult,
    OrderResult,
    TrackingInfoUpdateResult,
    UserError,
)
from tools.order_refs import (
    FULFILLMENT_GID_PREFIX,
    LINE_ITEM_GID_PREFIX,
    numeric_tail,
    resolve_order_id,
    to_gid,
)
from tools.queries import (
    ADD_TRACKING_INFO,
    CLOSE_ORDER,
    CREATE_FULFILLMENT,
    GET_ACTIVE_ORDERS,
    GET_FULFILLMENT_ORDERS,
    GET_ORDER,
)
from utils.formatters import (
    ToolResult,
    format_error_response,
    format_order_response,
    format_orders_list_response,
    format_text_response,
)
from utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_ACTIVE_ORDERS_LIMIT = 10
MAX_ACTIVE_ORDERS_LIMIT = 100


def tool_handler(name: str, failure_prefix: str = "") -> Callable:
    """Log the call and turn any raised fault into an error ToolResult."""

    def decorator(fn: Callable[..., ToolResult]) -> Callable[..., ToolResult]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> ToolResult:
            log.info("Tool call → %s(%s)", name, kwargs or args[1:])
            try:
                return fn(*args, **kwargs)
            except ShopifyMCPError as exc:
                log.warning("Tool %s failed: %s", name, exc)
                message = str(exc)
            except Exception as exc:
                log.exception("Tool %s raised: %s", name, exc)
                message = f"{type(exc).__name__}: {exc}"
            if failure_prefix:
                message = f"{failure_prefix}: {message}"
            return format_error_response(message)

        return wrapper

    return decorator


def _raise_user_errors(user_errors: list[UserError]) -> None:
    if user_errors:
        first = user_errors[0]
        log.error("User errors: %s", [e.message for e in user_errors])
        raise UpstreamError(first.message)


def _tracking_input(
    number: Optional[str],
    company: Optional[str],
    url: Optional[str],
) -> dict[str, str]:
    fields = {"number": number, "company": company, "url": url}
    return {k: v for k, v in fields.items() if v}


# ── Handler Functions ──────────────────────────────────────────────────────────

@tool_handler("get-order-details")
def handle_get_order_details(client: ShopifyGraphQLClient, order_id: str) -> ToolResult:
    order_gid = resolve_order_id(client, order_id)
    result = client.execute(GET_ORDER, {"id": order_gid}, response_model=OrderResult)
    if result.order is None:
        raise NotFoundError(f"Order {order_id} not found")
    return format_order_response(result.order)


@tool_handler("get-active-orders")
def handle_get_active_orders(
    client: ShopifyGraphQLClient,
    limit: int = DEFAULT_ACTIVE_ORDERS_LIMIT,
) -> ToolResult:
    result = client.execute(
        GET_ACTIVE_ORDERS, {"first": limit}, response_model=OrderConnectionResult
    )
    return format_orders_list_response(result.nodes)


def _match_fulfillment_order_line_item(fulfillment_order: FulfillmentOrder, ref: str) -> str:
    """
    Map a requested line item to the fulfillment order line item that covers it.

    Accepts an order LineItem GID or its numeric part, or a
    FulfillmentOrderLineItem GID.
    """
    line_item_gid = to_gid(ref, LINE_ITEM_GID_PREFIX)
    for item in fulfillment_order.items:
        if item.id == ref.strip():
            return item.id
        if item.line_item and item.line_item.id == line_item_gid:
            return item.id
    raise NotFoundError(
        f"Line item {ref} not found on fulfillment order {fulfillment_order.id}"
    )


@tool_handler("request-fulfillment")
def handle_request_fulfillment(
    client: ShopifyGraphQLClient,
    order_id: str,
    line_items: list[FulfillmentLineItemInput],
    tracking_number: Optional[str] = None,
    tracking_company: Optional[str] = None,
    tracking_url: Optional[str] = None,
    notify_customer: bool = False,
) -> ToolResult:
    order_gid = resolve_order_id(client, order_id)

    fo_result = client.execute(
        GET_FULFILLMENT_ORDERS, {"id": order_gid}, response_model=FulfillmentOrdersResult
    )
    if fo_result.order is None:
        raise NotFoundError(f"Order {order_id} not found")
    edges = fo_result.order.fulfillment_orders.edges
    if not edges:
        raise NotFoundError(f"No fulfillment orders found for order {order_id}")
    fulfillment_order = edges[0].node
    log.debug(
        "Using fulfillment order %s (status=%s) for %s",
        fulfillment_order.id, fulfillment_order.status, order_gid,
    )

    fulfillment_input = {
        "lineItemsByFulfillmentOrder": [{
            "fulfillmentOrderId": fulfillment_order.id,
            "fulfillmentOrderLineItems": [
                {
                    "id": _match_fulfillment_order_line_item(fulfillment_order, item.line_item_id),
                    "quantity": item.quantity,
                }
                for item in line_items
            ],
        }],
        "notifyCustomer": notify_customer,
    }
    tracking = _tracking_input(tracking_number, tracking_company, tracking_url)
    if tracking:
        fulfillment_input["trackingInfo"] = tracking

    result = client.execute(
        CREATE_FULFILLMENT, {"fulfillment": fulfillment_input},
        response_model=FulfillmentCreateResult,
    )
    payload = result.fulfillment_create
    _raise_user_errors(payload.user_errors)
    if payload.fulfillment is None:
        raise UpstreamError("Fulfillment request failed. No fulfillment data returned.")

    fulfillment = payload.fulfillment
    log.info("Fulfillment %s created for %s (status=%s)", fulfillment.id, order_gid, fulfillment.status)
    return format_text_response(
        f"Fulfillment {fulfillment.id} created for order {order_id} "
        f"(status: {fulfillment.status or 'Unknown'})"
    )


def _update_tracking(
    client: ShopifyGraphQLClient,
    fulfillment_id: str,
    tracking_info: dict[str, str],
    notify_customer: bool,
) -> TrackingInfoUpdateResult:
    """One update attempt; raises only when the request itself fails."""
    return client.execute(
        ADD_TRACKING_INFO,
        {
            "fulfillmentId": fulfillment_id,
            "trackingInfoInput": tracking_info,
            "notifyCustomer": notify_customer,
        },
        response_model=TrackingInfoUpdateResult,
    )


@tool_handler("add-tracking", failure_prefix="Tracking information update failed")
def handle_add_tracking(
    client: ShopifyGraphQLClient,
    fulfillment_id: str,
    tracking_number: str,
    tracking_company: Optional[str] = None,
    tracking_url: Optional[str] = None,
    notify_customer: bool = True,
) -> ToolResult:
    tracking = _tracking_input(tracking_number, tracking_company, tracking_url)

    try:
        result = _update_tracking(client, fulfillment_id, tracking, notify_customer)
    except (UpstreamError, TransportError) as initial_error:
        # One retry with the numeric part; the first error is the one reported.
        if not fulfillment_id.startswith(FULFILLMENT_GID_PREFIX):
            raise
        numeric_id = numeric_tail(fulfillment_id)
        log.warning("First attempt failed (%s), retrying with numeric ID %s", initial_error, numeric_id)
        try:
            result = _update_tracking(client, numeric_id, tracking, notify_customer)
        except (UpstreamError, TransportError) as fallback_error:
            log.error("Both ID formats failed: %s | %s", initial_error, fallback_error)
            raise initial_error from fallback_error
        log.info("Tracking update succeeded with numeric ID %s", numeric_id)

    payload = result.fulfillment_tracking_info_update
    _raise_user_errors(payload.user_errors)
    if payload.fulfillment is None:
        raise UpstreamError("No fulfillment data returned.")

    return format_text_response(
        f"Tracking information added successfully to fulfillment {fulfillment_id}"
    )


@tool_handler("archive-order")
def handle_archive_order(client: ShopifyGraphQLClient, order_id: str) -> ToolResult:
    order_gid = resolve_order_id(client, order_id)

    log.info("Closing order (equivalent of archiving) - ID: %s", order_gid)
    result = client.execute(
        CLOSE_ORDER, {"input": {"id": order_gid}}, response_model=OrderCloseResult
    )
    _raise_user_errors(result.order_close.user_errors)

    return format_text_response(
        f"Order {order_id} closed successfully. "
        "This is the equivalent of archiving in the current API version."
    )


# ── Registration ───────────────────────────────────────────────────────────────

_ORDER_REF_DESCRIPTION = "The order ID or order number (e.g., #1001, 1001, or full Shopify ID)"


async def _run_handler(handler: Callable[..., ToolResult], *args, **kwargs) -> ToolResult:
    """Run a blocking handler in a worker thread so the event loop keeps serving."""
    return await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))


def install_argument_validation(server: FastMCP) -> None:
    """
    Check tools/call arguments against the tool's input schema before dispatch.

    Invalid arguments are answered with a JSON-RPC INVALID_PARAMS error, so
    they never reach a handler and never become a ToolResult.
    """
    lowlevel = server._mcp_server
    dispatch = lowlevel.request_handlers[types.CallToolRequest]

    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        schemas = {tool.name: tool.inputSchema for tool in await server.list_tools()}
        schema = schemas.get(req.params.name)
        if schema is not None:
            try:
                jsonschema.validate(instance=req.params.arguments or {}, schema=schema)
            except jsonschema.ValidationError as exc:
                location = ".".join(str(p) for p in exc.absolute_path) or "arguments"
                log.warning("Rejected %s call: %s: %s", req.params.name, location, exc.message)
                raise McpError(types.ErrorData(
                    code=types.INVALID_PARAMS,
                    message=f"Invalid arguments for {req.params.name}: {location}: {exc.message}",
                )) from exc
        return await dispatch(req)

    lowlevel.request_handlers[types.CallToolRequest] = call_tool


def register_order_tools(server: FastMCP, client: ShopifyGraphQLClient) -> None:
    """Bind every order tool to `server`, closing over the shared client."""

    @server.tool(
        name="get-order-details",
        description="Get detailed information about a specific order",
        structured_output=False,
    )
    async def get_order_details(
        orderId: Annotated[str, Field(description=_ORDER_REF_DESCRIPTION)],
    ) -> CallToolResult:
        return await _run_handler(handle_get_order_details, client, order_id=orderId)

    @server.tool(
        name="get-active-orders",
        description="Get a list of all active (open) orders",
        structured_output=False,
    )
    async def get_active_orders(
        limit: Annotated[int, Field(
            ge=1, le=MAX_ACTIVE_ORDERS_LIMIT,
            description="Maximum number of orders to return",
        )] = DEFAULT_ACTIVE_ORDERS_LIMIT,
    ) -> CallToolResult:
        return await _run_handler(handle_get_active_orders, client, limit=limit)

    @server.tool(
        name="request-fulfillment",
        description=(
            "Fulfill line items of an order against its first fulfillment order, "
            "optionally attaching tracking information"
        ),
        structured_output=False,
    )
    async def request_fulfillment(
        orderId: Annotated[str, Field(description=_ORDER_REF_DESCRIPTION)],
        lineItems: Annotated[list[FulfillmentLineItemInput], Field(
            min_length=1, description="Line items and quantities to fulfill",
        )],
        trackingNumber: Annotated[Optional[str], Field(description="Tracking number")] = None,
        trackingCompany: Annotated[Optional[str], Field(description="Tracking company")] = None,
        trackingUrl: Annotated[Optional[str], Field(description="Tracking URL")] = None,
        notifyCustomer: Annotated[bool, Field(description="Whether to notify the customer")] = False,
    ) -> CallToolResult:
        return await _run_handler(
            handle_request_fulfillment,
            client,
            order_id=orderId,
            line_items=lineItems,
            tracking_number=trackingNumber,
            tracking_company=trackingCompany,
            tracking_url=trackingUrl,
            notify_customer=notifyCustomer,
        )

    @server.tool(
        name="add-tracking",
        description="Add tracking information to a fulfilled order",
        structured_output=False,
    )
    async def add_tracking(
        fulfillmentId: Annotated[str, Field(description="The ID of the fulfillment")],
        trackingNumber: Annotated[str, Field(description="Tracking number")],
        trackingCompany: Annotated[Optional[str], Field(description="Tracking company")] = None,
        trackingUrl: Annotated[Optional[str], Field(description="Tracking URL")] = None,
        notifyCustomer: Annotated[bool, Field(description="Whether to notify the customer")] = True,
    ) -> CallToolResult:
        return await _run_handler(
            handle_add_tracking,
            client,
            fulfillment_id=fulfillmentId,
            tracking_number=trackingNumber,
            tracking_company=trackingCompany,
            tracking_url=trackingUrl,
            notify_customer=notifyCustomer,
        )

    @server.tool(
        name="archive-order",
        description="Archive an order (closes it; the current API has no separate archive)",
        structured_output=False,
    )
    async def archive_order(
        orderId: Annotated[str, Field(description=_ORDER_REF_DESCRIPTION)],
    ) -> CallToolResult:
        return await _run_handler(handle_archive_order, client, order_id=orderId)

    install_argument_validation(server)
