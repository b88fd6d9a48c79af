from celery import Celery
from kombu import Queue

from app.platform.config import settings

PROCESS_VERIFICATIONS_TASK = (
    "app.features.verification.workers.periodic_tasks.process_pending_verifications"
)


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Queue Structure:
    - default: anything not routed explicitly
    - verification: the profile verification poller

    The poller must only run on one worker at a time; start a single
    consumer for the verification queue.
    """
    celery_app = Celery(
        "cloud_dashboard",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
    )

    celery_app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer=settings.CELERY_RESULT_SERIALIZER,
        accept_content=[settings.CELERY_ACCEPT_CONTENT],
        timezone="UTC",
        enable_utc=True,
        task_track_started=settings.CELERY_TASK_TRACK_STARTED,
        task_time_limit=settings.CELERY_TASK_TIME_LIMIT,

        result_expires=3600,

        task_routes={
            PROCESS_VERIFICATIONS_TASK: {"queue": "verification"},
        },
        task_queues=(
            Queue("default"),
            Queue("verification"),
        ),
        task_default_queue="default",

        worker_prefetch_multiplier=1,

        task_acks_late=True,
        task_reject_on_worker_lost=True,

        beat_schedule={
            "process-pending-verifications": {
                "task": PROCESS_VERIFICATIONS_TASK,
                "schedule": settings.VERIFICATION_POLL_SECONDS,
            },
        },
    )

    celery_app.autodiscover_tasks(["app.features.verification.workers"])

    return celery_app


celery_app = create_celery_app()
