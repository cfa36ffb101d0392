"""Thin httpx wrapper around the store backend's JSON API.

The backend answers with an envelope ``{"success": bool, "data": ...,
"message": str}``.  This module unwraps it and turns transport failures
and error statuses into domain exceptions, so nothing above the
infrastructure layer ever sees an httpx type.

Requests are never retried here.  A timed-out sale creation may or may
not have been applied by the backend; the caller decides whether to try
again, and sale creation carries an idempotency key for that case.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from storeops.domain.exceptions import (
    AuthorizationError,
    BackendError,
    ConflictError,
    EntityNotFoundError,
    NetworkError,
    RequestTimeout,
    StockConflict,
    ValidationError,
)

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"

_STOCK_CODES = frozenset({"STOCK_EXCEEDED", "INSUFFICIENT_STOCK", "OUT_OF_STOCK"})


class ApiClient:

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 15.0,
        extended_timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._timeout = timeout
        self._extended_timeout = extended_timeout
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Verbs ----------------------------------------------------------------

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def post(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        extended: bool = False,
        idempotency_key: str | None = None,
    ) -> Any:
        headers = {IDEMPOTENCY_HEADER: idempotency_key} if idempotency_key else None
        return self._request("POST", path, json=payload, headers=headers, extended=extended)

    def patch(self, path: str, payload: dict[str, Any]) -> Any:
        return self._request("PATCH", path, json=payload)

    # --- Internal helpers -----------------------------------------------------

    def _request(self, method: str, path: str, *, extended: bool = False, **kwargs: Any) -> Any:
        timeout = self._extended_timeout if extended else self._timeout
        logger.debug("%s %s (timeout %.0fs)", method, path, timeout)
        try:
            response = self._client.request(method, path, timeout=timeout, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out after %.0fs", method, path, timeout)
            raise RequestTimeout(
                f"The server did not answer within {timeout:.0f}s; "
                f"check the result before trying again"
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"Could not reach the server: {exc}") from exc
        return _handle_response(response)


def _handle_response(response: httpx.Response) -> Any:
    """Unwrap the envelope or raise the matching domain exception."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        if response.is_success:
            raise BackendError(
                f"Unexpected response from {response.request.url.path} "
                f"(HTTP {response.status_code})"
            )
        body = {}

    message = body.get("message") or response.reason_phrase or "Request failed"
    status = response.status_code

    if response.is_success and body.get("success", True):
        return body.get("data", body)

    if status in (400, 422) or response.is_success:
        raise ValidationError(message)
    if status in (401, 403):
        raise AuthorizationError(message)
    if status == 404:
        raise EntityNotFoundError(message, entity_id=_offending_id(body))
    if status == 409:
        code = str(body.get("code") or body.get("error") or "").upper()
        if code in _STOCK_CODES or "stock" in message.lower():
            raise StockConflict(message)
        raise ConflictError(message)
    raise BackendError(f"Server error (HTTP {status}): {message}")


def _offending_id(body: dict) -> str | None:
    data = body.get("data")
    for source in (body, data if isinstance(data, dict) else {}):
        for key in ("productId", "id"):
            if source.get(key) is not None:
                return str(source[key])
    return None
