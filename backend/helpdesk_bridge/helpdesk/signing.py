"""HMAC credentials for administrative helpdesk calls."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode


class SigningError(ValueError):
    """Raised when a signer is called with an invalid payload combination."""


@dataclass(frozen=True)
class SignedRequest:
    """Body bytes together with the headers that authenticate exactly them."""

    body: bytes
    headers: dict[str, str]


def canonical_json(document: Any) -> bytes:
    """Serialize a document as compact JSON with stable key order."""

    return json.dumps(document, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode(
        "utf-8"
    )


def canonical_query(params: Mapping[str, Any]) -> bytes:
    """Serialize a flat mapping as a key-sorted query string."""

    items = [(str(key), "" if value is None else str(value)) for key, value in params.items()]
    return urlencode(sorted(items)).encode("utf-8")


class AdminRequestSigner:
    """Sign administrative payloads with the helpdesk HMAC secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise SigningError("HELPDESK_SECRET_KEY is required for administrative calls.")
        self._secret = secret.encode("utf-8")

    def sign(
        self,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> bytes:
        """Return the raw HMAC-SHA256 digest over the canonical payload.

        Exactly one of ``params`` (query-string form) or ``json`` (document
        form) must be given.
        """

        return self._digest(self.serialize(params=params, json=json))

    @staticmethod
    def serialize(
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> bytes:
        if (params is None) == (json is None):
            raise SigningError("Either params or json must be provided, but not both")
        if json is not None:
            return canonical_json(json)
        return canonical_query(params)

    def authorization(self, digest: bytes) -> str:
        return f"Bearer {base64.b64encode(digest).decode('ascii')}"

    def signed_json(self, document: Mapping[str, Any]) -> SignedRequest:
        """Serialize a document once and sign those exact bytes."""

        body = canonical_json(document)
        return SignedRequest(
            body=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": self.authorization(self._digest(body)),
            },
        )

    def _digest(self, body: bytes) -> bytes:
        return hmac.new(self._secret, body, hashlib.sha256).digest()
