import bcrypt
import structlog

from minibank.core.modules.user.validators import MAX_PASSWORD_BYTES

logger = structlog.get_logger(__name__)


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor.

    The salt and cost are embedded in every hash, so changing ``rounds`` only
    affects new hashes and old ones keep verifying.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds
        self._dummy_hash: bytes | None = None

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. A malformed hash never matches."""
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Nothing stored can match, but spend the same bcrypt work as a real check
            self.verify_dummy(password)
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("malformed_password_hash")
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend the same work as a real verification, for logins with an unknown email."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=self._rounds))
        encoded = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
        bcrypt.checkpw(encoded, self._dummy_hash)
