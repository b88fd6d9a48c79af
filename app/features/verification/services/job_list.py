from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.features.verification.models.pending_verification import PendingVerification
from app.features.verification.schemas.verification import VerificationRequest


class JobList:
    """
    Queue of pending verification requests backed by `pending_verifications`.

    Changes are flushed, not committed: the caller owns the transaction so a
    remove followed by a re-add lands atomically.
    """

    def __init__(self, db: Session):
        self.db = db

    def _matching(self, request: VerificationRequest):
        return (
            PendingVerification.user_id == request.user_id,
            PendingVerification.property_type == request.property_type,
            PendingVerification.asserted_value == request.asserted_value,
            PendingVerification.verification_code == request.verification_code,
            PendingVerification.attempt == request.attempt,
            PendingVerification.last_run_at == request.last_run_at,
        )

    def add(self, request: VerificationRequest) -> PendingVerification:
        row = PendingVerification.from_request(request)
        self.db.add(row)
        self.db.flush()
        return row

    def remove(self, request: VerificationRequest) -> int:
        result = self.db.execute(
            delete(PendingVerification).where(*self._matching(request))
        )
        self.db.flush()
        return result.rowcount

    def has(self, request: VerificationRequest) -> bool:
        row = self.db.execute(
            select(PendingVerification.id).where(*self._matching(request)).limit(1)
        ).first()
        return row is not None

    def all_pending(self) -> List[VerificationRequest]:
        rows = self.db.execute(
            select(PendingVerification).order_by(PendingVerification.created_at)
        ).scalars().all()
        return [row.to_request() for row in rows]
