from minibank.web.routers.account import router as account_router
from minibank.web.routers.auth import router as auth_router

__all__ = [
    "account_router",
    "auth_router",
]
