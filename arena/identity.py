"""
Signed bearer tokens carrying a user id.

The server only needs `authenticate(token) -> user_id | None`; any identity
provider can be plugged into the socket layer in its place.
"""

from __future__ import annotations
import logging
from typing import Callable, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

Authenticator = Callable[[Optional[str]], Optional[str]]


class SignedTokenIdentity:

    SALT = "arena-auth"

    def __init__(self, secret_key: str, max_age: int = 24 * 3600):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self.max_age = max_age

    def issue(self, user_id: str) -> str:
        return self._serializer.dumps({"userId": user_id})

    def __call__(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except SignatureExpired:
            logger.info("Rejected expired token")
            return None
        except BadSignature:
            logger.info("Rejected token with bad signature")
            return None
        user_id = data.get("userId") if isinstance(data, dict) else None
        return str(user_id) if user_id else None
