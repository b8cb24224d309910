"""Widget sessions and the signed tokens that authenticate them."""

from __future__ import annotations

import hashlib
import hmac
import uuid
from dataclasses import dataclass
from typing import NewType, Optional

import jwt

from helpdesk_bridge.utils.time_utils import epoch_millis

WidgetToken = NewType("WidgetToken", str)

TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class WidgetSession:
    """Ephemeral identity for one ticket-creation attempt."""

    email: str
    email_hash: str
    timestamp_millis: int
    anonymous_session_id: str
    title: str
    subject: Optional[str] = None
    is_anonymous: bool = True
    show_widget: bool = True
    is_whitelabel: bool = False


class WidgetTokenIssuer:
    """Build widget sessions and sign session tokens with the widget secret."""

    def __init__(self, secret: str, title: str = "Support") -> None:
        if not secret:
            raise ValueError("HELPDESK_WIDGET_SECRET is required for widget sessions.")
        self._secret = secret
        self._title = title

    def build_session(
        self,
        email: str,
        subject: Optional[str] = None,
        timestamp_millis: Optional[int] = None,
    ) -> WidgetSession:
        """Create a fresh anonymous session; the session id is never reused."""

        timestamp = timestamp_millis if timestamp_millis is not None else epoch_millis()
        return WidgetSession(
            email=email,
            email_hash=self.email_hash(email, timestamp),
            timestamp_millis=timestamp,
            anonymous_session_id=str(uuid.uuid4()),
            title=self._title,
            subject=subject,
        )

    def email_hash(self, email: str, timestamp_millis: int) -> str:
        message = f"{email}:{timestamp_millis}".encode("utf-8")
        return hmac.new(self._secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def issue(self, session: WidgetSession) -> WidgetToken:
        """Encode the session claims into a signed bearer token.

        The token has no ``exp`` claim; freshness is checked by the helpdesk
        against the session timestamp.
        """

        claims = {
            "email": session.email,
            "showWidget": session.show_widget,
            "isWhitelabel": session.is_whitelabel,
            "title": session.title,
            "isAnonymous": session.is_anonymous,
            "anonymousSessionId": session.anonymous_session_id,
        }
        return WidgetToken(jwt.encode(claims, self._secret, algorithm=TOKEN_ALGORITHM))
