from __future__ import annotations

import hashlib
import hmac
import uuid

import jwt
import pytest

from helpdesk_bridge.helpdesk.session_token import WidgetTokenIssuer

from conftest import ADMIN_SECRET, WIDGET_SECRET


def test_build_session_generates_fresh_anonymous_ids(token_issuer):
    first = token_issuer.build_session("known@x.com", subject="Help")
    second = token_issuer.build_session("known@x.com", subject="Help")

    assert first.anonymous_session_id != second.anonymous_session_id
    uuid.UUID(first.anonymous_session_id)
    assert first.is_anonymous is True
    assert first.title == "Test Support"
    assert first.subject == "Help"


def test_email_hash_binds_email_and_timestamp(token_issuer):
    session = token_issuer.build_session("known@x.com", timestamp_millis=1700000000123)

    expected = hmac.new(
        WIDGET_SECRET.encode(), b"known@x.com:1700000000123", hashlib.sha256
    ).hexdigest()
    assert session.email_hash == expected
    assert session.timestamp_millis == 1700000000123
    assert token_issuer.email_hash("known@x.com", 1700000000124) != expected


def test_issue_encodes_fixed_claim_set(token_issuer):
    session = token_issuer.build_session("known@x.com", subject="Help")
    token = token_issuer.issue(session)

    claims = jwt.decode(token, WIDGET_SECRET, algorithms=["HS256"])
    assert claims == {
        "email": "known@x.com",
        "showWidget": True,
        "isWhitelabel": False,
        "title": "Test Support",
        "isAnonymous": True,
        "anonymousSessionId": session.anonymous_session_id,
    }


def test_token_is_not_valid_under_admin_secret(token_issuer):
    token = token_issuer.issue(token_issuer.build_session("known@x.com"))
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(token, ADMIN_SECRET, algorithms=["HS256"])


def test_issuer_requires_secret():
    with pytest.raises(ValueError):
        WidgetTokenIssuer("")
