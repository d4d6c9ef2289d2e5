from minibank.core.core import Service
from minibank.core.modules.session.models import AuthToken, Identity
from minibank.errors import AuthenticationError


class AccessService(Service):
    def ensure_authenticated(self, auth_token: AuthToken | None) -> Identity:
        """Resolve the caller from a session token, missing or not."""
        if not auth_token:
            raise AuthenticationError
        return self.core.services.session.verify_token(auth_token)
