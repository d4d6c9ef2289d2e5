from datetime import datetime

from minibank.core.db import DbModel


class User(DbModel):
    """User domain model with credentials."""

    id: int
    email: str
    password_hash: str  # bcrypt hash
    created_at: datetime | None = None
