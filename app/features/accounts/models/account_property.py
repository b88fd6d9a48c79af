import enum

from sqlalchemy import Column, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class PropertyType(str, enum.Enum):
    displayname = "displayname"
    address = "address"
    phone = "phone"
    website = "website"
    email = "email"
    twitter = "twitter"


# Properties an external party can vouch for
VERIFIABLE_PROPERTIES = (PropertyType.website, PropertyType.email, PropertyType.twitter)


class PropertyScope(str, enum.Enum):
    private = "private"
    contacts = "contacts"
    public = "public"


class VerificationStatus(str, enum.Enum):
    unverified = "unverified"
    in_progress = "in-progress"
    verified = "verified"

    @classmethod
    def parse(cls, raw) -> "VerificationStatus":
        """
        Accept the status names as well as the legacy numeric codes
        (0 = unverified, 1 = in progress, 2 = verified) used by lookup servers.
        """
        legacy = {"0": cls.unverified, "1": cls.in_progress, "2": cls.verified}
        key = str(raw).strip()
        if key in legacy:
            return legacy[key]
        return cls(key)


class AccountProperty(BaseModel):
    __tablename__ = "account_properties"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_account_property"),)

    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(32), nullable=False)
    value = Column(String(500), nullable=False, default="")
    scope = Column(Enum(PropertyScope), nullable=False, default=PropertyScope.contacts)
    verified = Column(
        Enum(VerificationStatus),
        nullable=False,
        default=VerificationStatus.unverified,
    )

    user = relationship("User", back_populates="account_properties")

    def __repr__(self):
        return (
            f"<AccountProperty(user_id={self.user_id}, name={self.name}, "
            f"verified={self.verified})>"
        )

    @classmethod
    def default_for(cls, user_id: str, name: str) -> "AccountProperty":
        """Unsaved record with the defaults a fresh account starts with."""
        return cls(
            user_id=user_id,
            name=name,
            value="",
            scope=PropertyScope.contacts,
            verified=VerificationStatus.unverified,
        )
