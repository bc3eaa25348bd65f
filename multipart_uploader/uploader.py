"""
Module for uploading individual parts with retry logic.
"""
import logging
import queue
import time
from typing import Any, Callable

from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log,
    after_log
)

from .models import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY, PartRange, PartUploadResult, UploadSession

logger = logging.getLogger(__name__)


class PartUploader:
    """Uploads single parts of a multipart upload with a fixed-delay retry policy."""

    def __init__(self, store: Any, retries: int = DEFAULT_RETRIES,
                 retry_delay: float = DEFAULT_RETRY_DELAY,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the part uploader.

        Args:
            store: Object store client exposing upload_part(session, part_number, body)
            retries: Number of retries after the first attempt
            retry_delay: Seconds to wait between attempts
            sleep: Function used to wait between attempts
        """
        if retries < 0:
            raise ValueError("retries cannot be negative")
        self.store = store
        self.retries = retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(Exception),
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_fixed(self.retry_delay),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.DEBUG),
            reraise=True
        )

    def upload_part(self, session: UploadSession, part_range: PartRange,
                    data: bytes) -> PartUploadResult:
        """Upload one part, retrying failed attempts.

        Never raises: an exhausted retry budget is reported as a failed result.

        Args:
            session: Active upload session
            part_range: Range being uploaded
            data: Bytes of this part only

        Returns:
            PartUploadResult for the part
        """
        part_number = part_range.part_number
        attempts = 0

        def _attempt_upload() -> str:
            nonlocal attempts
            attempts += 1
            return self.store.upload_part(session, part_number, data)

        logger.debug(f"Uploading part {part_number} ({len(data)} bytes)")
        try:
            etag = self._retrying()(_attempt_upload)
        except Exception as e:
            logger.error(f"Part {part_number} failed after {attempts} attempts: {e}")
            return PartUploadResult.failed(part_number, str(e), attempts=attempts)

        return PartUploadResult.succeeded(part_number, etag, attempts=attempts)

    def run(self, session: UploadSession, part_range: PartRange, data: bytes,
            results: "queue.Queue[PartUploadResult]") -> None:
        """Task body: upload a part and send exactly one result on the channel.

        Args:
            session: Active upload session
            part_range: Range being uploaded
            data: Bytes of this part only
            results: Channel the coordinator drains
        """
        try:
            result = self.upload_part(session, part_range, data)
        except Exception as e:
            logger.error(f"Unexpected error uploading part {part_range.part_number}: {e}")
            result = PartUploadResult.failed(part_range.part_number, str(e))
        results.put(result)
