from fastapi import APIRouter, Response
from pydantic import AliasChoices, Field

from healthdesk.config import Config
from healthdesk.core.modules.auth.models import LoginResult, RegisterResult, ResetResult
from healthdesk.core.modules.session.models import AuthToken
from healthdesk.web.deps import AppDep, AuthTokenDep, ConfigDep
from healthdesk.web.openapi import CamelModel, ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(CamelModel):
    """Registration request."""

    username: str = Field(..., validation_alias=AliasChoices("username", "userName"), description="Desired username")
    password: str = Field(
        ..., validation_alias=AliasChoices("password", "plaintextPassword", "enteredPassword"), description="Plaintext password"
    )


class RegisterResponse(CamelModel):
    register_success: bool | None = Field(None, description="Set when a new account was created")
    is_registered: bool | None = Field(None, description="Set when the username was already taken")


class LoginRequest(CamelModel):
    """Authentication request."""

    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(CamelModel):
    success: bool


class ResetRequest(CamelModel):
    """Username and/or password change. Leave a field out to keep it."""

    username: str | None = Field(None, description="New username")
    password: str | None = Field(None, description="New password")
    existing_password: str | None = Field(None, description="Current password, required when changing the password")


class ResetResponse(CamelModel):
    username_updated: bool | None = None
    username_password_updated: bool | None = None
    password_updated: bool | None = None


class LogoutResponse(CamelModel):
    success: bool


class SessionStatusResponse(CamelModel):
    session_active: bool


@router.post(
    "/register",
    summary="Create account",
    description="Register a username and password and open a session for the new user.",
    operation_id="register",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Account created, or username already registered"},
        400: {"model": ErrorResponse, "description": "Invalid username or password"},
    },
)
async def register(request: RegisterRequest, app: AppDep, config: ConfigDep, response: Response) -> RegisterResponse:
    outcome = await app.register(request.username, request.password)
    if outcome.result is RegisterResult.ALREADY_REGISTERED or outcome.auth_token is None:
        return RegisterResponse(is_registered=True)
    _set_session_cookie(response, config, outcome.auth_token)
    return RegisterResponse(register_success=True)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with username and password and receive a session cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": LoginResponse, "description": "Invalid credentials"},
    },
)
async def login(request: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> LoginResponse:
    outcome = await app.login(request.username, request.password)
    if outcome.result is not LoginResult.SUCCESS or outcome.auth_token is None:
        response.status_code = 401
        return LoginResponse(success=False)
    _set_session_cookie(response, config, outcome.auth_token)
    return LoginResponse(success=True)


@router.post(
    "/resetUnamePwd",
    summary="Change username or password",
    description="Change the username and/or password of the signed-in user.",
    operation_id="resetCredentials",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Update applied, false when the new password equals the current one"},
        400: {"model": ErrorResponse, "description": "Invalid request or wrong current password"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        409: {"model": ErrorResponse, "description": "Username already taken"},
    },
)
async def reset_credentials(request: ResetRequest, app: AppDep, auth_token: AuthTokenDep) -> ResetResponse:
    result = await app.reset_credentials(auth_token, request.username, request.password, request.existing_password)
    match result:
        case ResetResult.USERNAME_UPDATED:
            return ResetResponse(username_updated=True)
        case ResetResult.USERNAME_AND_PASSWORD_UPDATED:
            return ResetResponse(username_password_updated=True)
        case ResetResult.PASSWORD_UPDATED:
            return ResetResponse(password_updated=True)
        case ResetResult.NO_CHANGE if request.username is not None:
            return ResetResponse(username_password_updated=False)
        case _:
            return ResetResponse(password_updated=False)


@router.get(
    "/logout",
    summary="End session",
    description="Destroy the current session. Succeeds even without one.",
    operation_id="logout",
)
async def logout(app: AppDep, config: ConfigDep, auth_token: AuthTokenDep, response: Response) -> LogoutResponse:
    await app.logout(auth_token)
    _clear_session_cookie(response, config)
    return LogoutResponse(success=True)


@router.get(
    "/session",
    summary="Session status",
    description="Report whether the session cookie belongs to a signed-in user.",
    operation_id="sessionStatus",
)
async def session_status(app: AppDep, auth_token: AuthTokenDep) -> SessionStatusResponse:
    return SessionStatusResponse(session_active=await app.is_session_active(auth_token))


def _set_session_cookie(response: Response, config: Config, auth_token: AuthToken) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=auth_token,
        max_age=config.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=config.session_cookie_secure,
        samesite=config.session_cookie_samesite,
    )


def _clear_session_cookie(response: Response, config: Config) -> None:
    response.delete_cookie(
        key=config.session_cookie_name,
        path="/",
        httponly=True,
        secure=config.session_cookie_secure,
        samesite=config.session_cookie_samesite,
    )
