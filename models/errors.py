"""
Error taxonomy for the Shopify order tools.

Everything below startup level is caught at the tool-handler boundary and
turned into an error ToolResult; only ConfigError is fatal.
"""


class ShopifyMCPError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(ShopifyMCPError):
    """Required configuration is missing or invalid."""


class NotFoundError(ShopifyMCPError):
    """An order (or one of its sub-resources) could not be found."""


class UpstreamError(ShopifyMCPError):
    """The Admin API answered with a GraphQL error or a mutation user error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(ShopifyMCPError):
    """The HTTP round trip itself could not be completed."""
