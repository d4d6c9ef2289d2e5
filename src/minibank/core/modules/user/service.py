import asyncio

import structlog

from minibank.config import Config
from minibank.core.core import Service
from minibank.core.db import Database
from minibank.core.modules.user.models import User
from minibank.core.modules.user.passwords import PasswordHasher
from minibank.core.modules.user.validators import (
    normalize_email,
    validate_credentials_present,
    validate_email,
    validate_password,
)
from minibank.errors import DuplicateIdentityError, DuplicateKeyError, InvalidCredentialError, NotFoundError
from minibank.utils import mask_email

logger = structlog.get_logger(__name__)

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""
INSERT_USER = "INSERT INTO users (email, password_hash) VALUES ($1, $2) RETURNING id"
SELECT_USER_BY_EMAIL = "SELECT id, email, password_hash, created_at FROM users WHERE email = $1"


class UserService(Service):
    """Credential store: users with their password hashes."""

    def __init__(self, database: Database, config: Config) -> None:
        super().__init__(database, config)
        self.hasher = PasswordHasher(config.bcrypt_rounds)

    async def on_start(self) -> None:
        """Create the users table if missing."""
        await self.database.execute(CREATE_USERS_TABLE)
        logger.debug("user_service_started", bcrypt_rounds=self.hasher.rounds)

    async def create_user(self, email: str, password_hash: str) -> int:
        """Insert a user and return its id. Uniqueness is enforced by the database."""
        try:
            return int(await self.database.fetchval(INSERT_USER, email, password_hash))
        except DuplicateKeyError as e:
            raise DuplicateIdentityError from e

    async def find_user_by_email(self, email: str) -> User | None:
        row = await self.database.fetchrow(SELECT_USER_BY_EMAIL, email)
        if row is None:
            return None
        return User.from_row(row)

    async def get_user_by_email(self, email: str) -> User:
        user = await self.find_user_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def register_user(self, email: str, password: str) -> int:
        """Validate input, hash the password and store the new user."""
        email = normalize_email(email)
        validate_credentials_present(email, password)
        validate_email(email)
        validate_password(password)

        # bcrypt is CPU bound, keep it off the event loop
        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user_id = await self.create_user(email, password_hash)
        logger.info("user_created", user_id=user_id, email=mask_email(email))
        return user_id

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user owning these credentials.

        Unknown emails and wrong passwords raise the same InvalidCredentialError
        after the same amount of hashing work.
        """
        email = normalize_email(email)
        validate_credentials_present(email, password)

        user = await self.find_user_by_email(email)
        if user is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password)
            logger.info("login_failed", email=mask_email(email))
            raise InvalidCredentialError

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            logger.info("login_failed", email=mask_email(email))
            raise InvalidCredentialError

        logger.info("login_succeeded", user_id=user.id)
        return user
