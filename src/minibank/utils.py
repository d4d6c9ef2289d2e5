from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def mask_email(email: str) -> str:
    """Keep only the domain part of an email for log events."""
    _, _, domain = email.rpartition("@")
    return f"***@{domain}" if domain else "***"
