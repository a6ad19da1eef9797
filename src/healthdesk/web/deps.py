from typing import Annotated, cast

from fastapi import Depends, Request

from healthdesk.app import App
from healthdesk.config import Config
from healthdesk.core.modules.session.models import AuthToken


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_auth_token(request: Request, config: Annotated[Config, Depends(get_config)]) -> AuthToken | None:
    """Session token from the cookie, if any. Validity is checked by the services."""
    token = request.cookies.get(config.session_cookie_name)
    return AuthToken(token) if token else None


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
