"""Anti-forgery tokens for admin form submissions."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from .errors import InvalidNonceError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class NonceManager:
    """Issues and checks signed, expiring, action-bound tokens.

    Example:
        nonces = NonceManager(secret_key="...", lifetime=timedelta(days=1))
        token = nonces.create("update-nav_menu")
        nonces.verify(token, "update-nav_menu")  # True
    """

    def __init__(self, secret_key: str, lifetime: timedelta = timedelta(days=1)):
        self._secret_key = secret_key
        self._lifetime = lifetime

    def create(self, action: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "action": action,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def check(self, token: Optional[str], action: str) -> None:
        """Validate a token.

        Raises:
            InvalidNonceError: If the token is missing, invalid, expired or
                was issued for another action.
        """
        if not token:
            raise InvalidNonceError(action, "missing token")
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            raise InvalidNonceError(action, str(e))
        if payload.get("action") != action:
            raise InvalidNonceError(action, "token issued for another action")

    def verify(self, token: Optional[str], action: str) -> bool:
        try:
            self.check(token, action)
        except InvalidNonceError as e:
            logger.info("Rejected nonce: %s", e.message)
            return False
        return True
