from app.features.auth.models.user import User
from app.features.auth.models.user_preference import UserPreference

__all__ = ["User", "UserPreference"]
