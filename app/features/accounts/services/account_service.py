import secrets
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.accounts.models.account_property import (
    VERIFIABLE_PROPERTIES,
    AccountProperty,
    PropertyScope,
    PropertyType,
    VerificationStatus,
)
from app.features.auth.models.user import User
from app.features.verification.models.pending_verification import PendingVerification
from app.features.verification.schemas.verification import VerificationRequest
from app.platform.logger import get_logger

logger = get_logger("account_service")


def generate_verification_code() -> str:
    return secrets.token_urlsafe(32)


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_property(self, user_id: str, name: str) -> Optional[AccountProperty]:
        result = await self.db.execute(
            select(AccountProperty).where(
                AccountProperty.user_id == user_id, AccountProperty.name == name
            )
        )
        return result.scalar_one_or_none()

    async def list_properties(self, user: User) -> List[AccountProperty]:
        result = await self.db.execute(
            select(AccountProperty).where(AccountProperty.user_id == user.id)
        )
        stored = {row.name: row for row in result.scalars().all()}
        return [
            stored.get(prop.value) or AccountProperty.default_for(user.id, prop.value)
            for prop in PropertyType
        ]

    async def update_property(
        self,
        user: User,
        property_type: PropertyType,
        value: str,
        scope: Optional[PropertyScope] = None,
    ) -> Tuple[AccountProperty, Optional[VerificationRequest]]:
        """
        Store a new property value.

        A changed, non-empty value of a verifiable property is marked
        in-progress and queued for background verification; any request
        still queued for the old value is dropped.
        """
        name = property_type.value
        record = await self._get_property(user.id, name)
        if record is None:
            record = AccountProperty.default_for(user.id, name)
            self.db.add(record)

        value = value.strip()
        changed = record.value != value
        record.value = value
        if scope is not None:
            record.scope = scope

        request = None
        if changed:
            await self.db.execute(
                delete(PendingVerification).where(
                    PendingVerification.user_id == user.id,
                    PendingVerification.property_type == name,
                )
            )
            if property_type in VERIFIABLE_PROPERTIES and value:
                record.verified = VerificationStatus.in_progress
                request = VerificationRequest(
                    user_id=user.id,
                    property_type=name,
                    asserted_value=value,
                    verification_code=generate_verification_code(),
                )
                self.db.add(PendingVerification.from_request(request))
                logger.info(f"Queued {name} verification for user {user.id}")
            else:
                record.verified = VerificationStatus.unverified

        await self.db.commit()
        await self.db.refresh(record)
        return record, request
