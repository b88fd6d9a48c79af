from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint

from app.platform.db.base import BaseModel


class UserPreference(BaseModel):
    """Per-user configuration value, namespaced by app id."""

    __tablename__ = "user_preferences"
    __table_args__ = (
        UniqueConstraint("user_id", "app_id", "config_key", name="uq_user_preference"),
    )

    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    app_id = Column(String(64), nullable=False)
    config_key = Column(String(64), nullable=False)
    config_value = Column(Text, nullable=False, default="")

    def __repr__(self):
        return (
            f"<UserPreference(user_id={self.user_id}, "
            f"{self.app_id}.{self.config_key}={self.config_value!r})>"
        )
