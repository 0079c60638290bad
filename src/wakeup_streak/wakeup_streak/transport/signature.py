"""HMAC-SHA256 signatures on inbound webhook bodies."""
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional

SIGNATURE_HEADER = "X-Signature"


def sign_body(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(secret: str, signature: Optional[str], body: bytes) -> bool:
    """Check the raw request body against the channel secret."""
    if not signature:
        return False
    return hmac.compare_digest(signature.strip(), sign_body(secret, body))
