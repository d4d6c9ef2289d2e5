from typing import Annotated, cast

from fastapi import Depends, Request

from minibank.app import App
from minibank.config import Config
from minibank.core.modules.session.models import AuthToken, Identity


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_identity(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    config: Annotated[Config, Depends(get_config)],
) -> Identity:
    """Verify the session cookie and attach the caller's identity to the request.

    A missing cookie and an invalid token fail the same way.
    """
    token_cookie = request.cookies.get(config.session_cookie_name)
    identity = app.authenticate(AuthToken(token_cookie) if token_cookie else None)
    request.state.identity = identity
    return identity


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
IdentityDep = Annotated[Identity, Depends(get_identity)]
