from typing import Optional

import httpx
from sqlalchemy.orm import Session

from app.features.accounts.services.account_manager import AccountManager
from app.features.verification.services.job_list import JobList
from app.features.verification.services.verify_user_data import VerifyUserDataJob
from app.platform.config import settings
from app.platform.logger import get_logger


def build_http_client() -> httpx.Client:
    return httpx.Client(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.LOOKUP_TIMEOUT, connect=settings.LOOKUP_CONNECT_TIMEOUT),
    )


def build_verify_user_data_job(
    db: Session, http_client: Optional[httpx.Client] = None
) -> VerifyUserDataJob:
    """Wire a VerifyUserDataJob with the production collaborators from settings."""
    return VerifyUserDataJob(
        account_manager=AccountManager(db, instance_host=settings.INSTANCE_HOST),
        job_list=JobList(db),
        http_client=http_client or build_http_client(),
        logger=get_logger("verify_user_data"),
        lookup_server_url=settings.LOOKUP_SERVER_URL,
        max_try=settings.VERIFICATION_MAX_TRY,
        interval=settings.VERIFICATION_INTERVAL,
        lookup_timeout=httpx.Timeout(
            settings.LOOKUP_TIMEOUT, connect=settings.LOOKUP_CONNECT_TIMEOUT
        ),
        probe_timeout=httpx.Timeout(
            settings.WEBSITE_PROBE_TIMEOUT, connect=settings.WEBSITE_PROBE_CONNECT_TIMEOUT
        ),
    )
