"""Signing and verification of upload capability tokens.

A token is ``<payload>.<signature>``: the payload is URL-safe base64 of a
compact JSON object and the signature is an HMAC-SHA256 over the encoded
payload, also URL-safe base64. Padding is stripped from both parts so the
token can be used as a single path segment.
"""

import base64
import binascii
import hashlib
import hmac
import json
from datetime import datetime, timezone

from filepipe.storage.exceptions import (
    ContentTypeMismatchError,
    ExpiredCapabilityError,
    InvalidCapabilityError,
)
from filepipe.storage.models import WriteCapability


def media_type(content_type: str) -> str:
    """Return the lowercased ``type/subtype`` part of a Content-Type value."""
    return content_type.split(";", 1)[0].strip().lower()


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class CapabilitySigner:
    """Encodes WriteCapability values into opaque tokens and back."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Capability signing secret must not be empty")
        self._secret = secret.encode("utf-8")

    def sign(self, capability: WriteCapability) -> str:
        payload = {
            "k": capability.resource_key,
            "e": int(capability.expires_at.timestamp()),
            "t": capability.allowed_content_type,
        }
        encoded = _b64encode(
            json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        )
        return f"{encoded}.{self._signature(encoded)}"

    def verify(
        self,
        token: str,
        content_type: str,
        now: datetime | None = None,
    ) -> WriteCapability:
        """Check a token against the upload it is used for.

        Raises:
            InvalidCapabilityError: if the token is malformed or tampered with.
            ExpiredCapabilityError: if the token's expiry has passed.
            ContentTypeMismatchError: if content_type differs from the allowed one.
        """
        capability = self._decode(token)
        now = now or datetime.now(timezone.utc)
        if capability.is_expired(now):
            raise ExpiredCapabilityError(
                f"Upload capability for '{capability.resource_key}' has expired"
            )
        if media_type(content_type) != media_type(capability.allowed_content_type):
            raise ContentTypeMismatchError(
                f"Content-Type '{content_type}' does not match the authorized "
                f"'{capability.allowed_content_type}'"
            )
        return capability

    def _decode(self, token: str) -> WriteCapability:
        encoded, sep, signature = token.partition(".")
        if not sep or not encoded or not signature:
            raise InvalidCapabilityError("Malformed capability token")
        if not hmac.compare_digest(signature, self._signature(encoded)):
            raise InvalidCapabilityError("Capability token signature mismatch")
        try:
            payload = json.loads(_b64decode(encoded))
            return WriteCapability(
                resource_key=str(payload["k"]),
                expires_at=datetime.fromtimestamp(int(payload["e"]), tz=timezone.utc),
                allowed_content_type=str(payload["t"]),
            )
        except (binascii.Error, ValueError, KeyError, TypeError) as exc:
            raise InvalidCapabilityError(f"Malformed capability payload: {exc}") from exc

    def _signature(self, encoded: str) -> str:
        digest = hmac.new(self._secret, encoded.encode("ascii"), hashlib.sha256).digest()
        return _b64encode(digest)
