from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from minibank.core.modules.session.models import Identity
from minibank.web.deps import AppDep, ConfigDep, IdentityDep
from minibank.web.openapi import ErrorResponse, SuccessResponse

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    """Email and password, used for both signup and login."""

    email: str = Field("", description="Email address")
    password: str = Field("", description="Password")


@router.post(
    "/signup",
    summary="Create account",
    description="Register a new user with email and password.",
    operation_id="signup",
    responses={
        200: {"description": "User registered"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields, or email already registered"},
    },
)
async def signup(credentials: CredentialsRequest, app: AppDep) -> SuccessResponse:
    await app.signup(credentials.email, credentials.password)
    return SuccessResponse(message="User registered successfully")


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password. The session token is returned in an HTTP-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(credentials: CredentialsRequest, app: AppDep, config: ConfigDep, response: Response) -> SuccessResponse:
    token = await app.login(credentials.email, credentials.password)

    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=config.cookie_secure,
        max_age=config.session_ttl_seconds,
    )

    return SuccessResponse(message="Login successful")


@router.post(
    "/logout",
    summary="End session",
    description="Clear the session cookie. The token itself stays valid until it expires.",
    operation_id="logout",
    responses={200: {"description": "Cookie cleared"}},
)
async def logout(config: ConfigDep, response: Response) -> SuccessResponse:
    response.delete_cookie(
        config.session_cookie_name, httponly=True, samesite="lax", secure=config.cookie_secure
    )
    return SuccessResponse(message="Logged out")


@router.get(
    "/me",
    summary="Get current user",
    description="Identity of the authenticated caller, as carried by the session token.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(identity: IdentityDep) -> Identity:
    return identity
