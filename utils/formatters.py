"""
Builders for MCP tool responses.

Every tool returns a CallToolResult (the ToolResult envelope): one text content
block plus the isError flag. None of these functions can fail.
"""

from typing import Union

from mcp.types import CallToolResult, TextContent

from models.order import Fulfillment, Order

ToolResult = CallToolResult


def format_text_response(text: str) -> ToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def format_error_response(error: Union[Exception, str]) -> ToolResult:
    message = error if isinstance(error, str) else (str(error) or type(error).__name__)
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {message or 'Unknown error'}")],
        isError=True,
    )


def _format_fulfillment(index: int, fulfillment: Fulfillment) -> str:
    lines = [
        f"Fulfillment #{index}",
        f"ID: {fulfillment.id}",
        f"Status: {fulfillment.status or 'Unknown'}",
    ]
    tracking = fulfillment.tracking
    if tracking:
        lines.append(f"Tracking: {tracking.number}")
        if tracking.company:
            lines.append(f"Carrier: {tracking.company}")
        if tracking.url:
            lines.append(f"URL: {tracking.url}")
    else:
        lines.append("Tracking: None")
    lines.append(f"Created: {fulfillment.created_at or 'Unknown'}")
    return "\n".join(lines) + "\n\n"


def format_order_response(order: Order) -> ToolResult:
    text = f"Order {order.number}\n"
    text += f"Status: {order.display_fulfillment_status or 'Unknown'}\n"
    text += f"Payment: {order.display_financial_status or 'Unknown'}\n"
    text += f"Created: {order.created_at or 'Unknown'}\n"
    if order.cancelled_at:
        text += f"Cancelled: {order.cancelled_at}\n"
    text += f"Total: {order.total or 'Unknown'}\n\n"

    if order.fulfillments:
        text += "==== Fulfillments ====\n"
        for i, fulfillment in enumerate(order.fulfillments, start=1):
            text += _format_fulfillment(i, fulfillment)
    else:
        text += "No fulfillments found for this order.\n\n"

    items = order.items
    if items:
        text += "==== Line Items ====\n"
        text += "".join(f"{item.quantity}x {item.name}\n" for item in items)

    return format_text_response(text)


def format_orders_list_response(orders: list[Order]) -> ToolResult:
    if not orders:
        return format_text_response("No orders found")

    summaries = [
        f"Order {order.number}\n"
        f"Status: {order.display_fulfillment_status or 'Unknown'}\n"
        f"Date: {order.created_at or 'Unknown'}\n"
        f"Total: {order.total or 'Unknown'}\n"
        f"---"
        for order in orders
    ]
    return format_text_response("\n\n".join(summaries))
