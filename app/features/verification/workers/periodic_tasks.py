"""
Celery periodic tasks for profile data verification.

Celery Beat triggers `process_pending_verifications` every
VERIFICATION_POLL_SECONDS; each pending request decides on its own whether
its retry interval has elapsed.
"""
import logging
from datetime import datetime

from celery import shared_task

from app.features.verification.schemas.verification import JobOutcome
from app.features.verification.services.factory import build_http_client, build_verify_user_data_job
from app.platform.celery_app import celery_app  # noqa: F401
from app.platform.db.session import get_sync_db

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name="app.features.verification.workers.periodic_tasks.process_pending_verifications",
)
def process_pending_verifications(self):
    """
    Run every due verification request once.

    Each request is committed on its own, so one failing request never
    rolls back the others.
    """
    logger.info("Processing pending profile verifications...")

    counts = {outcome.value: 0 for outcome in JobOutcome}
    processed = 0
    db = get_sync_db()

    try:
        with build_http_client() as http_client:
            job = build_verify_user_data_job(db, http_client)
            pending = job.job_list.all_pending()
            logger.info(f"Found {len(pending)} pending verification requests")

            for request in pending:
                try:
                    result = job.run(request)
                    db.commit()
                    counts[result.outcome.value] += 1
                    processed += 1
                except Exception as e:
                    logger.error(
                        f"Error processing verification of {request.property_type} "
                        f"for user {request.user_id}: {e}"
                    )
                    db.rollback()
                    continue

        return {
            "status": "success",
            "processed": processed,
            **counts,
            "timestamp": datetime.utcnow().isoformat(),
        }

    except Exception as e:
        logger.error(f"Error in process_pending_verifications: {e}")
        db.rollback()
        return {
            "status": "error",
            "error": str(e),
            "timestamp": datetime.utcnow().isoformat(),
        }
    finally:
        db.close()
