from minibank.errors import ValidationError

MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt only looks at the first 72 bytes


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively, so they are stored lower-cased."""
    return email.strip().lower()


def validate_credentials_present(email: str, password: str) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required")

    # JSON allows lone surrogates, which cannot be UTF-8 encoded for hashing
    try:
        email.encode("utf-8")
        password.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError("Email and password must be valid text") from None


def validate_email(email: str) -> None:
    """Validate a normalized email address.

    Raises:
        ValidationError: If the address is too long or not of the form local@domain
    """
    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"Email must be at most {MAX_EMAIL_LENGTH} characters long")

    local, at, domain = email.rpartition("@")
    if not at or not local or not domain or any(char.isspace() for char in email):
        raise ValidationError("Invalid email address")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 6 characters
    - At most 72 bytes once UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
