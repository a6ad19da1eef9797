from fastapi import APIRouter
from pydantic import Field

from healthdesk.core.modules.user.models import UserDetails
from healthdesk.web.deps import AppDep, AuthTokenDep
from healthdesk.web.openapi import CamelModel, ErrorResponse

router = APIRouter(tags=["profile"])


class DetailsRequest(CamelModel):
    """Personal details of the current user."""

    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    insurer_code: str | None = Field(None, description="Insurance plan code")


class DetailsResponse(CamelModel):
    saved: bool


class AddressRequest(CamelModel):
    """Home location picked by the user."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    readable_address: str = Field(..., description="Formatted address shown to the user")


class AddressResponse(CamelModel):
    addr_stored: bool


@router.get(
    "/getDetails",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getDetails",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_details(app: AppDep, auth_token: AuthTokenDep) -> UserDetails:
    return await app.get_details(auth_token)


@router.post(
    "/details",
    summary="Save personal details",
    operation_id="saveDetails",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def save_details(request: DetailsRequest, app: AppDep, auth_token: AuthTokenDep) -> DetailsResponse:
    await app.save_details(auth_token, request.first_name, request.last_name, request.insurer_code)
    return DetailsResponse(saved=True)


@router.post(
    "/saveAddressDetails",
    summary="Save home address",
    operation_id="saveAddress",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def save_address(request: AddressRequest, app: AppDep, auth_token: AuthTokenDep) -> AddressResponse:
    await app.save_address(auth_token, request.latitude, request.longitude, request.readable_address)
    return AddressResponse(addr_stored=True)
