from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.models.user_preference import UserPreference


class PreferenceService:
    """Read and write per-user config values stored in `user_preferences`."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, user_id: str, app_id: str, key: str) -> Optional[UserPreference]:
        result = await self.db.execute(
            select(UserPreference).where(
                UserPreference.user_id == user_id,
                UserPreference.app_id == app_id,
                UserPreference.config_key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get_user_value(self, user_id: str, app_id: str, key: str, default: str = "") -> str:
        row = await self._get_row(user_id, app_id, key)
        if row is None:
            return default
        return row.config_value

    async def set_user_value(self, user_id: str, app_id: str, key: str, value: str) -> None:
        row = await self._get_row(user_id, app_id, key)
        if row is None:
            row = UserPreference(user_id=user_id, app_id=app_id, config_key=key)
            self.db.add(row)
        row.config_value = value
        await self.db.commit()
