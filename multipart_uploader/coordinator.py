"""
Module for coordinating a multipart upload from planning to commit or abort.
"""
import logging
import queue
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .exceptions import AbortError, CompleteError, SessionCreationError
from .models import (
    DEFAULT_EXPIRY_DAYS,
    DEFAULT_PART_SIZE,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    NO_PARTS_REASON,
    CompletedPartSet,
    Outcome,
    PartRange,
    PartUploadResult,
    UploadConfig,
    UploadSession,
    UploadState,
)
from .notifier import Notifier, SnsPublisher
from .planner import plan_parts
from .store import S3ObjectStore
from .uploader import PartUploader

logger = logging.getLogger(__name__)

# Posted on the result channel once every part task has terminated.
_END_OF_RESULTS = object()


def _close_when_done(futures: List[Future], results: queue.Queue) -> None:
    wait(futures)
    results.put(_END_OF_RESULTS)


class UploadCoordinator:
    """Drives one multipart upload: create, upload parts, then commit or abort."""

    def __init__(self, store: Any, notifier: Notifier,
                 part_size: int = DEFAULT_PART_SIZE,
                 retries: int = DEFAULT_RETRIES,
                 retry_delay: float = DEFAULT_RETRY_DELAY,
                 expiry: timedelta = timedelta(days=DEFAULT_EXPIRY_DAYS),
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the upload coordinator.

        Args:
            store: Object store client (create_upload, upload_part,
                complete_upload, abort_upload)
            notifier: Notifier receiving the final outcome
            part_size: Size of each part in bytes
            retries: Retries per part after the first attempt
            retry_delay: Seconds to wait between part attempts
            expiry: Lifetime requested for the uploaded object
            sleep: Function used by part uploaders to wait between attempts
        """
        self.store = store
        self.notifier = notifier
        self.part_size = part_size
        self.expiry = expiry
        self.uploader = PartUploader(store, retries=retries,
                                     retry_delay=retry_delay, sleep=sleep)
        self.state: Optional[UploadState] = None

    @classmethod
    def from_config(cls, config: UploadConfig) -> "UploadCoordinator":
        """Build a coordinator backed by S3 and SNS from configuration."""
        store = S3ObjectStore(
            config.bucket,
            region=config.region,
            endpoint_url=config.endpoint_url
        )
        publisher = None
        if config.topic_arn:
            publisher = SnsPublisher(config.topic_arn, region=config.region)

        return cls(
            store,
            Notifier(publisher),
            part_size=config.part_size,
            retries=config.retries,
            retry_delay=config.retry_delay,
            expiry=timedelta(days=config.expiry_days)
        )

    def _transition(self, state: UploadState) -> None:
        logger.debug(f"Upload state {self.state.value if self.state else None} -> {state.value}")
        self.state = state

    def upload_file(self, file_path: Path, key: Optional[str] = None,
                    expires: Optional[datetime] = None) -> Outcome:
        """Read a local file and upload it.

        Args:
            file_path: Path to the file to upload
            key: Object key, defaults to the file name
            expires: Expiry for the uploaded object

        Returns:
            Outcome of the run
        """
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.run(key or Path(file_path).name, data, expires)

    def run(self, key: str, data: bytes, expires: Optional[datetime] = None) -> Outcome:
        """Upload data as a multipart object and notify the outcome.

        Args:
            key: Object key
            data: Complete contents of the object
            expires: Expiry for the uploaded object, defaults to now + expiry

        Returns:
            Outcome of the run

        Raises:
            InvalidInput: If the part size is not positive
            SessionCreationError: If the store cannot create the upload
            AbortError: If the store cannot abort after a part failure
        """
        self.state = None
        if not data:
            logger.warning(f"Nothing to upload for {key}: file is empty")
            self._transition(UploadState.ABORTED)
            return self._finish(Outcome.aborted(NO_PARTS_REASON))

        ranges = plan_parts(len(data), self.part_size)

        if expires is None:
            expires = datetime.now(timezone.utc) + self.expiry
        try:
            session = self.store.create_upload(key, expires)
        except SessionCreationError as e:
            logger.error(f"Could not start upload of {key}: {e}")
            raise
        self._transition(UploadState.CREATED)
        logger.info(
            f"Started multipart upload {session.upload_id} of {key}: "
            f"{len(data)} bytes in {len(ranges)} parts"
        )

        results = self._upload_parts(session, ranges, data)
        return self._finish(self._commit_or_abort(session, results))

    def _upload_parts(self, session: UploadSession, ranges: List[PartRange],
                      data: bytes) -> Dict[int, PartUploadResult]:
        """Upload every range concurrently and collect one result per part."""
        self._transition(UploadState.UPLOADING)
        results: "queue.Queue[PartUploadResult]" = queue.Queue()
        received: Dict[int, PartUploadResult] = {}

        with ThreadPoolExecutor(max_workers=len(ranges),
                                thread_name_prefix="part-upload") as executor:
            futures = []
            launch_error: Optional[Exception] = None
            remaining = len(data)
            for part_range in ranges:
                try:
                    futures.append(executor.submit(
                        self.uploader.run,
                        session,
                        part_range,
                        part_range.slice(data),
                        results
                    ))
                except Exception as e:
                    # Parts not yet launched are reported as failures below.
                    logger.error(f"Could not start upload of part {part_range.part_number}: {e}")
                    launch_error = e
                    break
                remaining -= part_range.length
                logger.info(f"Upload of part {part_range.part_number} started, {remaining} bytes remaining")

            closer = threading.Thread(
                target=_close_when_done,
                args=(futures, results),
                name=f"results-{session.upload_id}",
                daemon=True
            )
            closer.start()

            for result in iter(results.get, _END_OF_RESULTS):
                if result.part_number in received:
                    logger.warning(f"Ignoring duplicate result for part {result.part_number}")
                    continue
                received[result.part_number] = result
                if result.success:
                    logger.info(f"Upload of part {result.part_number} finished")
                else:
                    logger.error(f"Upload of part {result.part_number} failed: {result.error}")

            closer.join()

        for part_range in ranges:
            if part_range.part_number not in received:
                if launch_error is not None and part_range.part_number > len(futures):
                    error = f"upload not started: {launch_error}"
                else:
                    error = "no result reported"
                logger.error(f"Part {part_range.part_number}: {error}")
                received[part_range.part_number] = PartUploadResult.failed(
                    part_range.part_number, error
                )
        return received

    def _commit_or_abort(self, session: UploadSession,
                         results: Dict[int, PartUploadResult]) -> Outcome:
        failures = sorted(
            (r for r in results.values() if not r.success),
            key=lambda r: r.part_number
        )
        if failures:
            return self._abort(session, failures)

        completed = CompletedPartSet()
        for result in results.values():
            completed.add(result)

        if not completed:
            self._transition(UploadState.ABORTED)
            return Outcome.aborted(NO_PARTS_REASON)

        self._transition(UploadState.COMPLETING)
        try:
            location = self.store.complete_upload(session, completed.as_parts())
        except Exception as e:
            # The remote upload may be left in an undefined multipart state.
            logger.error(f"Error completing upload {session.upload_id}: {e}")
            self._transition(UploadState.ABORTED)
            reason = str(e) if isinstance(e, CompleteError) else f"Error completing upload: {e}"
            return Outcome.aborted(reason)

        self._transition(UploadState.COMPLETED)
        return Outcome.completed_at(location)

    def _abort(self, session: UploadSession, failures: List[PartUploadResult]) -> Outcome:
        self._transition(UploadState.ABORTING)
        try:
            self.store.abort_upload(session)
        except AbortError as e:
            logger.error(f"Could not abort upload {session.upload_id}, session left orphaned: {e}")
            raise
        self._transition(UploadState.ABORTED)

        first = failures[0]
        reason = f"part {first.part_number} failed: {first.error}"
        if len(failures) > 1:
            reason += f" ({len(failures)} parts failed)"
        return Outcome.aborted(reason)

    def _finish(self, outcome: Outcome) -> Outcome:
        if outcome.completed:
            logger.info(f"Upload completed: {outcome.location}")
        else:
            logger.error(f"Upload aborted: {outcome.reason}")
        self.notifier.notify_outcome(outcome)
        return outcome
