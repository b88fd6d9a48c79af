from app.features.auth.services.preference_service import PreferenceService

__all__ = ["PreferenceService"]
