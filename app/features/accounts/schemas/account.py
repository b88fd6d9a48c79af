from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.features.accounts.models.account_property import PropertyScope, VerificationStatus


class AccountPropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: str
    scope: PropertyScope
    verified: VerificationStatus


class AccountPropertiesResponse(BaseModel):
    properties: List[AccountPropertyResponse]


class UpdatePropertyRequest(BaseModel):
    value: str = Field(..., max_length=500)
    scope: Optional[PropertyScope] = None


class VerificationInstructions(BaseModel):
    verification_code: str
    # only set for websites, where the code must be published by the user
    probe_url: Optional[str] = None


class UpdatePropertyResponse(BaseModel):
    property: AccountPropertyResponse
    verification: Optional[VerificationInstructions] = None
