from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from minibank.config import Config
from minibank.core.core import Core
from minibank.core.db import Database
from minibank.core.modules.account.models import BalanceView, TransactionListView, TransactionView
from minibank.core.modules.session.models import AuthToken, Identity


class App:
    """Facade for all application operations.

    Account reads take the Identity produced by ``authenticate`` and never a
    user id from the request, so a caller can only ever read their own data.
    """

    def __init__(self, config: Config, database: Database | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def signup(self, email: str, password: str) -> int:
        """Register a new user, returns the new user id."""
        return await self._core.services.user.register_user(email, password)

    async def login(self, email: str, password: str) -> AuthToken:
        """Verify credentials and issue a session token."""
        user = await self._core.services.user.authenticate(email, password)
        return self._core.services.session.issue_token(user.id, user.email)

    def authenticate(self, auth_token: AuthToken | None) -> Identity:
        """Resolve a session token to the caller's identity."""
        return self._core.services.access.ensure_authenticated(auth_token)

    async def get_balance(self, identity: Identity) -> BalanceView:
        balance = await self._core.services.account.get_balance(identity.id)
        return BalanceView(balance=float(balance))

    async def get_transactions(self, identity: Identity) -> TransactionListView:
        transactions = await self._core.services.account.get_transactions(identity.id)
        return TransactionListView(transactions=[TransactionView.from_domain(t) for t in transactions])
