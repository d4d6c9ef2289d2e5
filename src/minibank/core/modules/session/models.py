"""Session token models."""

from typing import NewType

from pydantic import BaseModel, Field

AuthToken = NewType("AuthToken", str)


class Identity(BaseModel):
    """Authenticated caller, decoded from a verified session token."""

    id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
