"""
Shopify MCP Server
Entry point. Reads .env, wires the GraphQL client and the order tools, then
serves MCP over stdio until the client disconnects.

Usage:
    python main.py
"""

import sys

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

# LOG_LEVEL / LOG_FILE are read from the environment when loggers are built,
# so .env has to be loaded before the first get_logger call.
ENV_FILE = ".env"
load_dotenv(ENV_FILE)

from utils.logger import get_logger  # noqa: E402

log = get_logger("main")

SERVER_NAME = "shopify"


def build_server(settings) -> FastMCP:
    from clients.shopify import ShopifyGraphQLClient
    from tools.order_tools import register_order_tools

    client = ShopifyGraphQLClient(settings)
    server = FastMCP(SERVER_NAME)
    register_order_tools(server, client)
    return server


def main() -> None:
    log.info("Initialising Shopify MCP Server...")

    from config.settings import load_settings
    from models.errors import ConfigError

    try:
        settings = load_settings()
    except ConfigError as exc:
        log.error("Configuration error: %s", exc)
        log.error("Please create a .env file based on .env.example")
        sys.exit(1)

    log.info(
        "Config loaded — shop=%s  api_version=%s",
        settings.shop_host, settings.shopify_api_version,
    )

    server = build_server(settings)

    log.info("Shopify MCP Server running on stdio")
    try:
        server.run(transport="stdio")
    except KeyboardInterrupt:
        log.info("Shutdown requested")
    except Exception as exc:
        log.exception("Fatal error in main(): %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
