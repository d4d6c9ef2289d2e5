from datetime import datetime, timedelta

import jwt
import structlog

from minibank.core.core import Service
from minibank.core.modules.session.models import AuthToken, Identity
from minibank.errors import AuthenticationError
from minibank.utils import now

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class SessionService(Service):
    """Issues and verifies signed, self-contained session tokens.

    Tokens are not stored server side. A token stays valid until its absolute
    expiry, even after the cookie carrying it has been cleared on logout.
    """

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.config.session_ttl_seconds)

    def issue_token(self, user_id: int, email: str, issued_at: datetime | None = None) -> AuthToken:
        issued_at = issued_at or now()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return AuthToken(jwt.encode(payload, self.config.session_secret_key, algorithm=JWT_ALGORITHM))

    def verify_token(self, auth_token: str) -> Identity:
        """Decode a token. Every kind of failure raises the same AuthenticationError."""
        try:
            payload = jwt.decode(
                auth_token,
                self.config.session_secret_key,
                algorithms=[JWT_ALGORITHM],
                options={"require": REQUIRED_CLAIMS},
            )
            return Identity(id=int(payload["sub"]), email=payload["email"])
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
            logger.debug("session_rejected", reason=type(e).__name__)
            raise AuthenticationError from None
