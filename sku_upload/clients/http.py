from __future__ import annotations

import logging
from typing import Any

import requests

from ..models.outcomes import RemoteValidationResponse, ValidationOutcome
from ..models.row_error import ErrorCode, ErrorStage
from .base import RemoteCallError, row_errors_from_payload

"""HTTP implementations of the remote collaborators (requests).

Wire format (JSON):
    validate: POST {"csvContent"} -> {"errors": [...], "filteredCsv": str|null}
    submit:   POST {"cartId", "csvContent"} -> {"success": bool, "errors": [...]}
    cart:     GET -> {"cartId": str}

Calls are single-shot: no retry, one configured timeout per request.
"""

__all__ = [
    "HttpCartProvider",
    "HttpServiceClient",
    "HttpSubmissionClient",
    "HttpValidationClient",
]

logger = logging.getLogger(__name__)

USER_AGENT = "sku-upload/0.1"


def _failure_detail(response: requests.Response) -> str:
    """Extract the service's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code} {response.reason or ''}".strip()


class HttpServiceClient:
    """Shared plumbing: base URL, bearer token, timeout and JSON handling."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        api_token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        if api_token:
            self.session.headers["Authorization"] = f"Bearer {api_token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteCallError(str(e) or None) from e
        if not response.ok:
            raise RemoteCallError(_failure_detail(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteCallError(f"invalid JSON response from {url}") from e


class HttpValidationClient(HttpServiceClient):
    def __init__(self, base_url: str, *, validate_path: str = "/csv/validate", **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self.validate_path = validate_path

    def validate(self, csv_content: str) -> RemoteValidationResponse:
        body = self._request("POST", self.validate_path, {"csvContent": csv_content})
        if not isinstance(body, dict):
            raise RemoteCallError("malformed validation response")
        filtered = body.get("filteredCsv")
        return RemoteValidationResponse(
            errors=row_errors_from_payload(
                body.get("errors"), ErrorStage.BUSINESS_RULE, ErrorCode.BUSINESS_RULE_VIOLATION
            ),
            filtered_csv=filtered if isinstance(filtered, str) and filtered else None,
        )


class HttpSubmissionClient(HttpServiceClient):
    def __init__(self, base_url: str, *, submit_path: str = "/cart/items", **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self.submit_path = submit_path

    def submit(self, cart_id: str, csv_content: str) -> ValidationOutcome:
        body = self._request(
            "POST", self.submit_path, {"cartId": cart_id, "csvContent": csv_content}
        )
        if not isinstance(body, dict):
            raise RemoteCallError("malformed submission response")
        return ValidationOutcome(
            success=body.get("success") is True,
            errors=row_errors_from_payload(
                body.get("errors"), ErrorStage.SUBMISSION, ErrorCode.SUBMISSION_ROW_VIOLATION
            ),
        )


class HttpCartProvider(HttpServiceClient):
    """Looks up the current cart id from the cart summary endpoint.

    Lookup failures are logged and reported as "no cart" so that submission
    is skipped rather than failing the run.
    """

    def __init__(self, base_url: str, *, cart_path: str = "/cart/current", **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self.cart_path = cart_path

    def get_cart_id(self) -> str | None:
        try:
            body = self._request("GET", self.cart_path)
        except RemoteCallError as e:
            logger.error(f"Error retrieving cart ID: {e}")
            return None
        if isinstance(body, dict) and body.get("cartId"):
            return str(body["cartId"])
        logger.warning("cart summary response has no cartId")
        return None
