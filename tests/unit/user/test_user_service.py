"""Tests for the credential store and login checks."""

import bcrypt
import pytest

from minibank.core.modules.user.service import INSERT_USER, SELECT_USER_BY_EMAIL
from minibank.errors import (
    DuplicateIdentityError,
    InvalidCredentialError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


@pytest.fixture
def users(core):
    return core.services.user


class TestRegisterUser:
    async def test_stores_normalized_email_and_hash(self, users, fake_db):
        user_id = await users.register_user(" A@B.com ", "secret1")

        stored = fake_db.users["a@b.com"]
        assert stored["id"] == user_id
        assert stored["password_hash"] != "secret1"
        assert users.hasher.verify("secret1", stored["password_hash"])

    async def test_uses_parameterized_insert(self, users, fake_db):
        await users.register_user("a@b.com", "secret1")

        query, args = next(call for call in fake_db.calls if call[0] == INSERT_USER)
        assert "$1" in query and "$2" in query
        assert args[0] == "a@b.com"

    async def test_duplicate_email_raises_duplicate_identity(self, users):
        await users.register_user("a@b.com", "secret1")

        with pytest.raises(DuplicateIdentityError, match="Email already exists"):
            await users.register_user("a@b.com", "another1")

    async def test_duplicate_detection_ignores_case(self, users):
        await users.register_user("a@b.com", "secret1")

        with pytest.raises(DuplicateIdentityError):
            await users.register_user("A@B.COM", "secret1")

    async def test_missing_fields_raise_validation_error(self, users):
        with pytest.raises(ValidationError, match="required"):
            await users.register_user("", "secret1")

    async def test_store_failure_propagates(self, users, fake_db):
        fake_db.error = StoreUnavailableError("Database unavailable")

        with pytest.raises(StoreUnavailableError):
            await users.register_user("a@b.com", "secret1")


class TestLookup:
    async def test_find_missing_user_returns_none(self, users):
        assert await users.find_user_by_email("nobody@b.com") is None

    async def test_get_missing_user_raises_not_found(self, users):
        with pytest.raises(NotFoundError):
            await users.get_user_by_email("nobody@b.com")

    async def test_get_user_by_email(self, users):
        user_id = await users.create_user("a@b.com", "$2b$04$hash")

        user = await users.get_user_by_email("a@b.com")
        assert user.id == user_id
        assert user.email == "a@b.com"


class TestAuthenticate:
    async def test_correct_credentials_return_user(self, users):
        user_id = await users.register_user("a@b.com", "secret1")

        user = await users.authenticate("A@b.com", "secret1")
        assert user.id == user_id

    async def test_wrong_password_and_unknown_email_fail_identically(self, users):
        await users.register_user("a@b.com", "secret1")

        with pytest.raises(InvalidCredentialError) as wrong_password:
            await users.authenticate("a@b.com", "wrong-password")
        with pytest.raises(InvalidCredentialError) as unknown_email:
            await users.authenticate("nobody@b.com", "secret1")

        assert str(wrong_password.value) == str(unknown_email.value) == "Invalid email or password"

    async def test_unknown_email_still_hashes(self, users, monkeypatch):
        calls = []
        monkeypatch.setattr(users.hasher, "verify_dummy", lambda password: calls.append(password))

        with pytest.raises(InvalidCredentialError):
            await users.authenticate("nobody@b.com", "secret1")

        assert calls == ["secret1"]

    async def test_overlong_password_hashes_for_known_and_unknown_email(self, users, monkeypatch):
        await users.register_user("a@b.com", "secret1")
        calls = []
        real_checkpw = bcrypt.checkpw

        def spy(password, hashed):
            calls.append(password)
            return real_checkpw(password, hashed)

        monkeypatch.setattr(bcrypt, "checkpw", spy)

        for email in ("a@b.com", "nobody@b.com"):
            with pytest.raises(InvalidCredentialError):
                await users.authenticate(email, "x" * 100)

        assert len(calls) == 2

    async def test_lookup_uses_normalized_email(self, users, fake_db):
        with pytest.raises(InvalidCredentialError):
            await users.authenticate(" Nobody@B.com", "secret1")

        assert (SELECT_USER_BY_EMAIL, ("nobody@b.com",)) in fake_db.calls
