from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote, urlencode

import httpx

from helpdesk_bridge.core.config import Settings
from helpdesk_bridge.core.observability import ErrorReporter, LoggingErrorReporter
from helpdesk_bridge.helpdesk.base import (
    BridgeResult,
    BridgeStatus,
    ConversationResult,
    HelpdeskError,
    HTTPHelpdeskTransport,
    MessageResult,
)
from helpdesk_bridge.helpdesk.session_token import WidgetSession, WidgetTokenIssuer
from helpdesk_bridge.helpdesk.signing import AdminRequestSigner, canonical_json
from helpdesk_bridge.utils.time_utils import epoch_seconds

DEFAULT_SUBJECT = "Support Request"
CUSTOMER_INFO_PATH = "/api/support/customer-info"


class HelpdeskClient(HTTPHelpdeskTransport):
    """Client for the external helpdesk conversation API.

    User-scoped calls are authenticated with widget session tokens and
    administrative calls with HMAC-signed bodies. No public method raises on
    upstream failure; failures are reported and returned as results.
    """

    def __init__(
        self,
        signer: AdminRequestSigner,
        token_issuer: WidgetTokenIssuer,
        *,
        api_base_url: str,
        widget_host: str,
        mailbox_slug: str,
        customer_info_host: Optional[str] = None,
        reporter: Optional[ErrorReporter] = None,
        timeout_sec: float = 15,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(timeout_sec=timeout_sec, http_client=http_client)
        self._signer = signer
        self._token_issuer = token_issuer
        self._api_base_url = api_base_url.rstrip("/")
        self._widget_host = widget_host.rstrip("/")
        self._mailbox_slug = mailbox_slug
        self._customer_info_host = (customer_info_host or "").rstrip("/")
        self._reporter = reporter or LoggingErrorReporter()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        reporter: Optional[ErrorReporter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "HelpdeskClient":
        return cls(
            AdminRequestSigner(settings.helpdesk_secret_key),
            WidgetTokenIssuer(
                settings.helpdesk_widget_secret, title=settings.helpdesk_widget_title
            ),
            api_base_url=settings.helpdesk_api_base_url,
            widget_host=settings.helpdesk_widget_host,
            mailbox_slug=settings.helpdesk_mailbox_slug,
            customer_info_host=settings.customer_info_host,
            reporter=reporter,
            timeout_sec=settings.helpdesk_timeout_sec,
            http_client=http_client,
        )

    # ------------------------------------------------------------------
    # User-scoped conversation flow
    # ------------------------------------------------------------------

    async def create_conversation_for_unauthenticated_user(
        self, email: str, subject: str, message: str
    ) -> BridgeResult:
        """Create a conversation and post its first message as the user.

        Both steps share one widget session. When the conversation is created
        but the message is not, the conversation stays upstream and the result
        is ``CONVERSATION_ONLY``.
        """

        session = self._token_issuer.build_session(email, subject=subject)

        conversation = await self._create_conversation(session, subject)
        if not conversation.success or not conversation.conversation_id:
            return BridgeResult(status=BridgeStatus.FAILED, error=conversation.error)

        slug = conversation.conversation_id
        posted = await self._create_message(session, slug, message)
        if not posted.success:
            return BridgeResult(
                status=BridgeStatus.CONVERSATION_ONLY,
                conversation_slug=slug,
                error=posted.error,
            )

        return BridgeResult(
            status=BridgeStatus.CREATED,
            conversation_slug=slug,
            message_id=posted.message_id,
        )

    def customer_info_url(self, email: Optional[str]) -> Optional[str]:
        if not email or not self._customer_info_host:
            return None
        return f"{self._customer_info_host}{CUSTOMER_INFO_PATH}?{urlencode({'email': email})}"

    async def _create_conversation(
        self, session: WidgetSession, subject: Optional[str]
    ) -> ConversationResult:
        body = {
            "subject": subject or DEFAULT_SUBJECT,
            "isPrompt": False,
            "customerInfoUrl": self.customer_info_url(session.email),
        }
        url = f"{self._widget_host}/api/chat/conversation"
        try:
            data = await self._request_json(
                "POST", url, headers=self._widget_headers(session), content=canonical_json(body)
            )
        except HelpdeskError as exc:
            self._reporter.notify(
                "Helpdesk error: could not create conversation",
                subject=subject,
                response=exc.message,
                status_code=exc.status_code,
            )
            return ConversationResult(success=False, error="Failed to create conversation")

        slug = data.get("conversationSlug")
        if not isinstance(slug, str) or not slug:
            self._reporter.notify(
                "Helpdesk error: conversation response missing slug", subject=subject
            )
            return ConversationResult(success=False, error="Failed to create conversation")
        return ConversationResult(success=True, conversation_id=slug)

    async def _create_message(
        self, session: WidgetSession, conversation_slug: str, message: str
    ) -> MessageResult:
        body = {
            "content": message,
            "attachments": [],
            "tools": {},
            "customerSpecificTools": False,
            "customerInfoUrl": self.customer_info_url(session.email),
        }
        url = f"{self._widget_host}/api/chat/conversation/{quote(conversation_slug, safe='')}/message"
        try:
            data = await self._request_json(
                "POST", url, headers=self._widget_headers(session), content=canonical_json(body)
            )
        except HelpdeskError as exc:
            self._reporter.notify(
                "Helpdesk error: could not create message",
                conversation_slug=conversation_slug,
                message=message,
                response=exc.message,
                status_code=exc.status_code,
            )
            return MessageResult(success=False, error="Failed to create message")
        message_id = data.get("messageId")
        return MessageResult(success=True, message_id=str(message_id) if message_id else None)

    def _widget_headers(self, session: WidgetSession) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token_issuer.issue(session)}",
        }

    # ------------------------------------------------------------------
    # Administrative calls
    # ------------------------------------------------------------------

    async def add_note(self, conversation_id: str, message: str) -> bool:
        payload = {"message": message, "timestamp": epoch_seconds()}
        return await self._admin_call(
            "POST",
            f"{self._conversation_path(conversation_id)}/notes/",
            payload,
            "Helpdesk error: could not add note",
            conversation_id=conversation_id,
            message=message,
        )

    async def send_reply(
        self,
        conversation_id: str,
        message: str,
        draft: bool = False,
        response_to: Optional[str] = None,
    ) -> bool:
        payload = {
            "message": message,
            "response_to": response_to,
            "draft": draft,
            "timestamp": epoch_seconds(),
        }
        return await self._admin_call(
            "POST",
            f"{self._conversation_path(conversation_id)}/emails/",
            payload,
            "Helpdesk error: could not send reply",
            conversation_id=conversation_id,
            message=message,
        )

    async def close_conversation(self, conversation_id: str) -> bool:
        payload = {"status": "closed", "timestamp": epoch_seconds()}
        return await self._admin_call(
            "PATCH",
            f"{self._conversation_path(conversation_id)}/",
            payload,
            "Helpdesk error: could not close conversation",
            conversation_id=conversation_id,
        )

    async def _admin_call(
        self,
        method: str,
        path: str,
        payload: dict[str, Any],
        failure_message: str,
        **context: Any,
    ) -> bool:
        signed = self._signer.signed_json(payload)
        try:
            await self._request(
                method, f"{self._api_base_url}{path}", headers=signed.headers, content=signed.body
            )
        except HelpdeskError as exc:
            self._reporter.notify(
                failure_message, response=exc.message, status_code=exc.status_code, **context
            )
            return False
        return True

    def _conversation_path(self, conversation_id: str) -> str:
        return (
            f"/api/v1/mailboxes/{self._mailbox_slug}"
            f"/conversations/{quote(str(conversation_id), safe='')}"
        )
