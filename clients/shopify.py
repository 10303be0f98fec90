"""
Shopify Admin GraphQL API client.

POST https://{SHOPIFY_SHOP}/admin/api/{SHOPIFY_API_VERSION}/graphql.json
with JSON body {"query": ..., "variables": {...}}
Authorization header: X-Shopify-Access-Token: {SHOPIFY_ACCESS_TOKEN}

One authenticated requests.Session is created per client and reused for every
call; the client is built once at process start.
"""

import json
from typing import Any, Optional, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from config.settings import Settings
from models.errors import TransportError, UpstreamError
from utils.logger import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ShopifyGraphQLClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self._url = settings.graphql_url
        self._timeout = settings.shopify_request_timeout
        self._scopes = settings.scopes
        self._session = session or requests.Session()
        self._session.headers.update({
            "X-Shopify-Access-Token": settings.shopify_access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        log.debug(
            "ShopifyGraphQLClient initialised (shop=%s  version=%s  scopes=%s)",
            settings.shop_host, settings.shopify_api_version, ",".join(self._scopes) or "-",
        )

    @property
    def url(self) -> str:
        return self._url

    def execute(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        response_model: Optional[type[ModelT]] = None,
    ) -> Any:
        """
        Run a query or mutation and return its `data` object.

        When `response_model` is given the data is validated into that model;
        a shape mismatch raises UpstreamError. GraphQL errors raise
        UpstreamError with the first message (partial data is discarded);
        network failures and non-2xx answers without an error body raise
        TransportError.
        """
        variables = variables or {}
        log.debug("Executing GraphQL operation: %s", _first_line(document))
        log.debug("Variables: %s", json.dumps(variables, default=str))

        try:
            resp = self._session.post(
                self._url,
                json={"query": document, "variables": variables},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            log.error("GraphQL request failed: %s", exc)
            raise TransportError(f"Network error calling Shopify: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if not resp.ok:
                raise TransportError(f"HTTP {resp.status_code} from Shopify: {resp.text[:200]}")
            raise TransportError("Shopify returned a non-JSON response")

        errors = body.get("errors")
        log.debug(
            "Response structure: status=%s hasData=%s errorCount=%d",
            resp.status_code,
            body.get("data") is not None,
            len(errors) if isinstance(errors, list) else int(bool(errors)),
        )

        if errors:
            message = _first_error_message(errors)
            self._log_graphql_error(message, errors, variables)
            raise UpstreamError(message)

        if not resp.ok:
            raise TransportError(f"HTTP {resp.status_code} from Shopify: {resp.text[:200]}")

        data = body.get("data")
        if data is None:
            raise UpstreamError("Shopify response contained no data")

        if response_model is None:
            return data
        try:
            return response_model.model_validate(data)
        except ValidationError as exc:
            log.error("Unexpected %s payload: %s", response_model.__name__, exc)
            raise UpstreamError(
                f"Unexpected response shape from Shopify ({response_model.__name__})"
            ) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_graphql_error(self, message: str, errors: Any, variables: dict) -> None:
        first = errors[0] if isinstance(errors, list) and errors and isinstance(errors[0], dict) else {}
        log.error(
            "GraphQL error: %s  locations=%s  path=%s  variables=%s",
            message, first.get("locations"), first.get("path"), json.dumps(variables, default=str),
        )
        if "not approved to access" in message:
            log.error(
                "Permission error. Consider updating the app's API scopes (current: %s)",
                ",".join(self._scopes) or "none configured",
            )
        elif "doesn't exist on type" in message:
            log.error("Schema error. The field does not exist in the pinned API version")


def _first_line(document: str) -> str:
    lines = [line.strip() for line in document.splitlines() if line.strip()]
    for line in lines:
        if line.startswith(("query", "mutation")):
            return line
    return lines[0] if lines else ""


def _first_error_message(errors: Any) -> str:
    """Shopify sends either a list of error objects or a bare string."""
    if isinstance(errors, str):
        return errors
    if isinstance(errors, dict):
        return str(errors.get("message") or next(iter(errors.values()), "Unknown error"))
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            return str(first.get("message") or "Unknown error")
        return str(first)
    return "Unknown error"
