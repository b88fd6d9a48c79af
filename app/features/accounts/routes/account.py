from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.accounts.models.account_property import PropertyType
from app.features.accounts.schemas.account import (
    AccountPropertiesResponse,
    AccountPropertyResponse,
    UpdatePropertyRequest,
    UpdatePropertyResponse,
    VerificationInstructions,
)
from app.features.accounts.services.account_service import AccountService
from app.features.auth.dependencies.auth import get_current_user
from app.features.auth.models.user import User
from app.features.verification.services.verify_user_data import website_probe_url
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/account", tags=["Account"])


@router.get(
    "/properties",
    response_model=dict,
    summary="List account properties",
    description="Values, visibility scopes and verification status of the current user's profile data",
)
async def list_account_properties(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = AccountService(db)
    properties = await service.list_properties(current_user)

    return api_response(
        message="Account properties retrieved successfully",
        data=AccountPropertiesResponse(
            properties=[AccountPropertyResponse.model_validate(p) for p in properties]
        ).model_dump(),
    )


@router.put(
    "/properties/{property_type}",
    response_model=dict,
    summary="Update an account property",
    description="Store a profile value; website, email and twitter values are queued for verification",
)
async def update_account_property(
    property_type: PropertyType,
    payload: UpdatePropertyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update one property of the current user.

    For websites the response carries the code to publish and the URL it
    must be reachable at.
    """
    service = AccountService(db)
    record, request = await service.update_property(
        current_user, property_type, payload.value, payload.scope
    )

    verification = None
    if request is not None:
        verification = VerificationInstructions(verification_code=request.verification_code)
        if property_type == PropertyType.website:
            verification.probe_url = website_probe_url(request.asserted_value)

    return api_response(
        message="Account property updated successfully",
        data=UpdatePropertyResponse(
            property=AccountPropertyResponse.model_validate(record),
            verification=verification,
        ).model_dump(),
    )
