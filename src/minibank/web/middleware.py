import posixpath
from collections.abc import Iterable

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from minibank.app import App
from minibank.core.modules.session.models import AuthToken
from minibank.errors import AuthenticationError


def normalize_path(path: str) -> str:
    """Reduce a request path to the form StaticFiles resolves it to."""
    return posixpath.normpath("/" + path.lstrip("/"))


class ProtectedDocumentMiddleware(BaseHTTPMiddleware):
    """Gate protected documents before any static file handler can serve them.

    Browsers without a valid session are redirected to the login page.
    """

    def __init__(self, app: ASGIApp, *, protected_paths: Iterable[str], login_path: str, cookie_name: str) -> None:
        super().__init__(app)
        self._protected_paths = frozenset(normalize_path(path) for path in protected_paths)
        self._login_path = login_path
        self._cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if normalize_path(request.url.path) not in self._protected_paths:
            return await call_next(request)

        app: App = request.app.state.app
        token_cookie = request.cookies.get(self._cookie_name)
        try:
            request.state.identity = app.authenticate(AuthToken(token_cookie) if token_cookie else None)
        except AuthenticationError:
            return RedirectResponse(self._login_path, status_code=303)
        return await call_next(request)
