from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

import httpx


class HelpdeskError(RuntimeError):
    """Raised when a call to the external helpdesk fails."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class ConversationResult:
    """Outcome of the create-conversation step."""

    success: bool
    conversation_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class MessageResult:
    """Outcome of the post-message step."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class BridgeStatus(str, enum.Enum):
    CREATED = "created"
    # Conversation exists upstream but its first message was not posted.
    CONVERSATION_ONLY = "conversation_only"
    FAILED = "failed"


@dataclass(frozen=True)
class BridgeResult:
    """Result of the two-step create conversation + post message pipeline."""

    status: BridgeStatus
    conversation_slug: str | None = None
    message_id: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status is BridgeStatus.CREATED

    @property
    def is_partial(self) -> bool:
        return self.status is BridgeStatus.CONVERSATION_ONLY


def build_status_error(response: httpx.Response) -> HelpdeskError:
    """Build a normalized helpdesk error from an HTTP response."""

    status = response.status_code
    message = f"Helpdesk returned {status}: {_extract_response_message(response)}"
    if status == 429:
        return HelpdeskError("HELPDESK_RATE_LIMIT", message, status_code=status)
    if status >= 500:
        return HelpdeskError("HELPDESK_UPSTREAM", message, status_code=status)
    return HelpdeskError("HELPDESK_BAD_STATUS", message, status_code=status)


def _extract_response_message(response: httpx.Response) -> str:
    """Extract a concise error message from JSON/text payloads."""

    try:
        payload: Any = response.json()
    except ValueError:
        return (response.text or "Unknown error from helpdesk.").strip()

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            detail = error.get("message") or error.get("code")
            if isinstance(detail, str) and detail.strip():
                return detail.strip()
        if isinstance(error, str) and error.strip():
            return error.strip()
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return (response.text or "Unknown error from helpdesk.").strip()


class HTTPHelpdeskTransport:
    """Shared HTTP behavior for helpdesk calls."""

    def __init__(
        self, timeout_sec: float = 15, http_client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self._timeout = timeout_sec
        self._client = http_client

    async def _request_json(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> dict[str, Any]:
        response = await self._request(method, url, headers=headers, content=content)
        try:
            payload = response.json()
        except ValueError as exc:
            raise HelpdeskError("HELPDESK_PARSE_ERROR", "Invalid JSON from helpdesk.") from exc
        if not isinstance(payload, dict):
            raise HelpdeskError("HELPDESK_PARSE_ERROR", "Helpdesk returned invalid JSON payload.")
        return payload

    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        try:
            if self._client:
                response = await self._client.request(
                    method, url, headers=headers, content=content, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(method, url, headers=headers, content=content)
        except httpx.TimeoutException as exc:
            raise HelpdeskError("HELPDESK_TIMEOUT", "Helpdesk request timed out.") from exc
        except httpx.RequestError as exc:
            raise HelpdeskError("HELPDESK_CONNECTION_ERROR", "Helpdesk connection failed.") from exc
        if response.status_code >= 400:
            raise build_status_error(response)
        return response
