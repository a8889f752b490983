"""HTTP transport for OpenAI-compatible chat completion endpoints.

Summary:
- Streamed turns: ``open_stream`` yields the raw response body chunks.
- Single-shot suggestions: ``complete`` returns the trimmed reply text.

Authentication:
    The public OpenAI endpoint gets ``Authorization: Bearer <key>``; any other
    URL is treated as an Azure-style deployment and gets ``api-key: <key>``.

Failure modes:
    Every failure surfaces as :class:`TransportFailure` carrying a normalized
    ``ErrorCode``: non-2xx statuses are classified by status and carry the
    ``{"error": {"message": ...}}`` text when the body has one; network
    errors and timeouts are classified from the exception. Nothing is retried.

Timeouts:
    Opening the stream is guarded by ``operation_timeout`` with the start
    timeout; single-shot requests with the HTTP timeout.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import httpx
from pydantic import ValidationError

from ..base.constants import OPENAI_CHAT_URL
from ..base.dto.completion import CompletionResponseDTO
from ..base.errors import ErrorCode, TransportFailure, classify_exception, status_to_code
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import RequestPayload
from ..base.timeouts import get_timeout_config, operation_timeout

MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - sentinel string, not a secret


def select_auth_headers(api_url: str, api_key: str) -> Dict[str, str]:
    """Return the authentication header for ``api_url``."""
    if api_url == OPENAI_CHAT_URL:
        return {"Authorization": f"Bearer {api_key}"}
    return {"api-key": api_key}


def _error_message(response: httpx.Response) -> Optional[str]:
    """Extract ``error.message`` from a response body, if present."""
    try:
        body = CompletionResponseDTO.model_validate(response.json())
    except (ValueError, ValidationError, RecursionError):
        return None
    if body.error is None:
        return None
    return body.error.message or None


class CompletionTransport:
    """Sends completion requests to one endpoint with one credential."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str],
        *,
        client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.api_url = api_url
        self._api_key = api_key or ""
        self._client = client
        self._logger = logger or get_logger("policy_assistant.transport")
        self._ctx = LogContext(component="transport")

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", **select_auth_headers(self.api_url, self._api_key)}

    def _client_for(self, purpose: str) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client(self.api_url, purpose)

    def _require_key(self) -> None:
        if not self._api_key:
            raise TransportFailure(MISSING_API_KEY_ERROR, code=ErrorCode.AUTH)

    @contextmanager
    def open_stream(self, payload: RequestPayload) -> Iterator[Iterator[bytes]]:
        """Open a streamed request and yield an iterator over body chunks.

        The response is closed when the context exits, which stops reading.
        """
        self._require_key()
        client = self._client_for("stream")
        request = client.build_request("POST", self.api_url, json=payload.to_dict(), headers=self.headers())
        try:
            with operation_timeout(get_timeout_config().start_timeout_seconds):
                response = client.send(request, stream=True)
        except (httpx.HTTPError, TimeoutError) as exc:
            raise self._wrap(exc) from exc
        try:
            if not response.is_success:
                response.read()
                raise self._status_failure(response)
            yield response.iter_bytes()
        finally:
            response.close()

    def complete(self, payload: RequestPayload) -> Optional[str]:
        """Send a non-streamed request and return the trimmed reply text.

        Returns ``None`` when the response has no choices.
        """
        self._require_key()
        client = self._client_for("complete")
        try:
            with operation_timeout(get_timeout_config().http_timeout_seconds):
                response = client.post(self.api_url, json=payload.to_dict(), headers=self.headers())
        except (httpx.HTTPError, TimeoutError) as exc:
            raise self._wrap(exc) from exc
        if not response.is_success:
            raise self._status_failure(response)
        try:
            body = CompletionResponseDTO.model_validate(response.json())
        except (ValueError, ValidationError, RecursionError) as exc:
            raise self._logged(TransportFailure("response body is not a completion", raw=exc)) from exc
        if body.error is not None:
            raise self._logged(TransportFailure(body.error.message or "endpoint returned an error", status=response.status_code))
        return body.first_content()

    def _status_failure(self, response: httpx.Response) -> TransportFailure:
        status = response.status_code
        detail = _error_message(response)
        message = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"
        return self._logged(TransportFailure(message, code=status_to_code(status), status=status))

    def _wrap(self, exc: Exception) -> TransportFailure:
        return self._logged(TransportFailure(str(exc) or exc.__class__.__name__, code=classify_exception(exc), raw=exc))

    def _logged(self, failure: TransportFailure) -> TransportFailure:
        log_event(
            self._logger,
            "transport.error",
            self._ctx,
            level=logging.WARNING,
            error_code=failure.code.value,
            status=failure.status,
            message=failure.message,
        )
        return failure


__all__ = ["CompletionTransport", "select_auth_headers", "MISSING_API_KEY_ERROR"]
