"""
Background verification of self-asserted profile data.

A pending request is retried every `interval` seconds until its property is
resolved or `max_try` attempts have been made:

- website: the user publishes the verification code at
  `<website>/CloudIdVerificationCode.txt` and we fetch it.
- email / twitter: the lookup server verifies the value and we copy its
  verdict onto the local account record.
"""
import logging
import time
from typing import Optional

import httpx

from app.features.accounts.models.account_property import PropertyType, VerificationStatus
from app.features.accounts.services.account_manager import AccountManager
from app.features.verification.schemas.verification import (
    JobOutcome,
    JobResult,
    VerificationRequest,
)
from app.features.verification.services.job_list import JobList

VERIFICATION_CODE_FILE = "CloudIdVerificationCode.txt"


def website_probe_url(website: str) -> str:
    """URL the verification code has to be published at for `website`."""
    return website.rstrip("/") + "/" + VERIFICATION_CODE_FILE


class VerifyUserDataJob:
    def __init__(
        self,
        account_manager: AccountManager,
        job_list: JobList,
        http_client: httpx.Client,
        logger: logging.Logger,
        lookup_server_url: str,
        max_try: int,
        interval: int,
        lookup_timeout: httpx.Timeout,
        probe_timeout: httpx.Timeout,
    ):
        self.account_manager = account_manager
        self.job_list = job_list
        self.http_client = http_client
        self.logger = logger
        self.lookup_server_url = lookup_server_url.rstrip("/")
        self.max_try = max_try
        self.interval = interval
        self.lookup_timeout = lookup_timeout
        self.probe_timeout = probe_timeout

    def should_run(self, request: VerificationRequest, now: Optional[int] = None) -> bool:
        """True once more than `interval` seconds passed since the last attempt."""
        now = int(time.time()) if now is None else now
        return (now - request.last_run_at) > self.interval

    def run(self, request: VerificationRequest, now: Optional[int] = None) -> JobResult:
        """Execute `request` if it is due, otherwise leave it queued untouched."""
        now = int(time.time()) if now is None else now
        if not self.should_run(request, now):
            return JobResult(outcome=JobOutcome.skipped, request=request)
        return self.execute(request, now)

    def execute(self, request: VerificationRequest, now: Optional[int] = None) -> JobResult:
        """
        Run one verification attempt.

        The request is always taken off the job list first; a request that was
        no longer queued ends without being checked. Otherwise it is re-added
        with an incremented attempt counter unless the property was resolved or
        the attempt ceiling is reached.
        """
        now = int(time.time()) if now is None else now
        if not self.job_list.remove(request):
            # dropped from the queue meanwhile, e.g. the value was changed again
            self.logger.info(
                f"Verification of {request.property_type} for {request.user_id} is no longer queued"
            )
            return JobResult(outcome=JobOutcome.terminal)

        try:
            resolved = self._verify(request)
        except Exception as e:
            self.logger.exception(
                f"Verifying {request.property_type} of {request.user_id} failed: {e}"
            )
            resolved = False

        if resolved or request.attempt + 1 > self.max_try:
            self.logger.info(
                f"Verification of {request.property_type} for {request.user_id} finished "
                f"after {request.attempt + 1} attempt(s), resolved={resolved}"
            )
            return JobResult(outcome=JobOutcome.terminal)

        updated = request.next_attempt(now)
        self.job_list.add(updated)
        self.logger.info(
            f"Verification of {request.property_type} for {request.user_id} rescheduled "
            f"(attempt {updated.attempt}/{self.max_try})"
        )
        return JobResult(outcome=JobOutcome.rescheduled, request=updated)

    def _verify(self, request: VerificationRequest) -> bool:
        if request.property_type == PropertyType.website:
            return self.verify_website(request)
        if request.property_type in (PropertyType.email, PropertyType.twitter):
            return self.verify_via_lookup_server(request, request.property_type)

        # no verifier for this type, retrying won't help
        self.logger.error(f"{request.property_type} is no valid type for user account data.")
        return True

    def verify_website(self, request: VerificationRequest) -> bool:
        """
        Fetch the published verification code from the user's website.

        Returns True when the code could be checked (whatever the verdict),
        False when the site was unreachable or didn't answer 200.
        """
        url = website_probe_url(request.asserted_value)

        try:
            response = self.http_client.get(url, timeout=self.probe_timeout)
        except (httpx.HTTPError, httpx.InvalidURL):
            return False

        if response.status_code != httpx.codes.OK:
            return False

        user = self.account_manager.get_user(request.user_id)
        if user is None:
            self.logger.error(f"{request.user_id} doesn't exist, can't verify user data.")
            return True

        user_data = self.account_manager.get_account_data(user)
        published_code = response.content
        if published_code == request.verification_code.encode("utf-8"):
            status = VerificationStatus.verified
        else:
            status = VerificationStatus.unverified

        record = user_data[PropertyType.website.value]
        record.verified = status
        self.account_manager.update_account_data(user, {PropertyType.website.value: record})
        return True

    def verify_via_lookup_server(self, request: VerificationRequest, property_type: str) -> bool:
        """
        Copy the lookup server's verdict for `property_type` onto the account.

        Returns False (try again later) while the lookup server has no data,
        holds a different value, or is still verifying.
        """
        user = self.account_manager.get_user(request.user_id)
        if user is None:
            self.logger.error(f"{request.user_id} doesn't exist, can't verify user data.")
            return True

        user_data = self.account_manager.get_account_data(user)
        cloud_id = self.account_manager.get_federation_id(user)

        lookup_data = self.query_lookup_server(cloud_id)
        if not lookup_data:
            return False

        remote = lookup_data.get(property_type)
        if not isinstance(remote, dict) or remote.get("value") != request.asserted_value:
            return False

        try:
            status = VerificationStatus.parse(remote.get("verified"))
        except ValueError:
            self.logger.warning(
                f"Lookup server sent unknown verification status {remote.get('verified')!r} "
                f"for {cloud_id}"
            )
            return False

        if status == VerificationStatus.in_progress:
            return False

        record = user_data[property_type]
        record.verified = status
        self.account_manager.update_account_data(user, {property_type: record})
        return True

    def query_lookup_server(self, cloud_id: str) -> dict:
        """Return the lookup server record of `cloud_id`, or {} if unavailable."""
        try:
            response = self.http_client.get(
                f"{self.lookup_server_url}/users",
                params={"search": cloud_id},
                timeout=self.lookup_timeout,
            )
            response.raise_for_status()
            body = response.json()

            for record in body:
                if isinstance(record, dict) and record.get("federationId") == cloud_id:
                    return record
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
            # retried on the next run
            self.logger.warning(f"Lookup server query for {cloud_id} failed: {e}")

        return {}
