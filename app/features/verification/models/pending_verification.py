from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from app.features.verification.schemas.verification import VerificationRequest
from app.platform.db.base import BaseModel


class PendingVerification(BaseModel):
    """A queued verification request waiting for its next run."""

    __tablename__ = "pending_verifications"

    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_type = Column(String(32), nullable=False)
    asserted_value = Column(String(500), nullable=False)
    verification_code = Column(String(255), nullable=False)
    attempt = Column(Integer, nullable=False, default=0)
    last_run_at = Column(BigInteger, nullable=False, default=0)

    @classmethod
    def from_request(cls, request: VerificationRequest) -> "PendingVerification":
        return cls(**request.model_dump())

    def to_request(self) -> VerificationRequest:
        return VerificationRequest(
            user_id=self.user_id,
            property_type=self.property_type,
            asserted_value=self.asserted_value,
            verification_code=self.verification_code,
            attempt=self.attempt,
            last_run_at=self.last_run_at,
        )

    def __repr__(self):
        return (
            f"<PendingVerification(user_id={self.user_id}, type={self.property_type}, "
            f"attempt={self.attempt})>"
        )
