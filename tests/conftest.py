from typing import Any, Optional

import pytest

from config.settings import REQUIRED_ENV_VARS, Settings, load_settings


class FakeShopifyClient:
    """
    Stands in for ShopifyGraphQLClient.

    Replies are consumed in order; an Exception instance is raised instead of
    returned. Every call is recorded as (document, variables).
    """

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, dict]] = []

    def execute(self, document: str, variables: Optional[dict] = None, response_model=None):
        self.calls.append((document, variables or {}))
        if not self.replies:
            raise AssertionError(f"unexpected GraphQL call: {document.strip()[:60]}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if response_model is not None:
            return response_model.model_validate(reply)
        return reply


@pytest.fixture
def clean_env(monkeypatch):
    for name in REQUIRED_ENV_VARS + ["SHOPIFY_SCOPES", "SHOPIFY_API_VERSION"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings() -> Settings:
    return load_settings(
        _env_file=None,
        shopify_api_key="key",
        shopify_api_secret="secret",
        shopify_shop="example.myshopify.com",
        shopify_access_token="shpat_test",
        shopify_scopes="read_orders, write_orders",
    )


def make_order(**overrides) -> dict:
    order = {
        "id": "gid://shopify/Order/5001",
        "name": "#1001",
        "legacyResourceId": "5001",
        "createdAt": "2025-03-01T10:00:00Z",
        "cancelledAt": None,
        "displayFulfillmentStatus": "PARTIALLY_FULFILLED",
        "displayFinancialStatus": "PAID",
        "lineItems": {"edges": [
            {"node": {"id": "gid://shopify/LineItem/11", "name": "Widget", "quantity": 2, "sku": "W-1"}},
            {"node": {"id": "gid://shopify/LineItem/12", "name": "Gadget", "quantity": 1, "sku": None}},
        ]},
        "fulfillments": [],
        "totalPriceSet": {"shopMoney": {"amount": "42.50", "currencyCode": "USD"}},
    }
    order.update(overrides)
    return order
