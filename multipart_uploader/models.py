"""
Module containing data models for the multipart uploader.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_PART_SIZE = 50_000_000
DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 15.0
DEFAULT_EXPIRY_DAYS = 1

SUCCESS_SUBJECT = "Upload Successful"
FAILURE_SUBJECT = "Upload Failed"
NO_PARTS_REASON = "no parts uploaded"


class UploadState(Enum):
    """Lifecycle states of one multipart upload run."""
    CREATED = "created"
    UPLOADING = "uploading"
    COMPLETING = "completing"
    COMPLETED = "completed"
    ABORTING = "aborting"
    ABORTED = "aborted"


@dataclass
class UploadConfig:
    """Static configuration for one upload run."""
    bucket: str
    key: str
    file_path: Path
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    part_size: int = DEFAULT_PART_SIZE
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    topic_arn: Optional[str] = None
    expiry_days: int = DEFAULT_EXPIRY_DAYS

    def __post_init__(self):
        """Validate the upload configuration."""
        if not self.bucket:
            raise ValueError("bucket cannot be empty")
        if not self.key:
            raise ValueError("key cannot be empty")
        if self.retries < 0:
            raise ValueError("retries cannot be negative")
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        if self.expiry_days <= 0:
            raise ValueError("expiry_days must be positive")


@dataclass(frozen=True)
class UploadSession:
    """Handle for one in-flight multipart upload issued by the store."""
    bucket: str
    key: str
    upload_id: str
    expires: Optional[datetime] = None


@dataclass(frozen=True)
class PartRange:
    """One planned chunk of the source file."""
    part_number: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        """Exclusive end offset of the range."""
        return self.offset + self.length

    def slice(self, data: bytes) -> bytes:
        """Return a copy of this range's bytes.

        The copy is owned by the part task and passed to boto3 as the request
        Body, so the file is held in memory twice while parts are in flight.
        """
        return data[self.offset:self.end]


@dataclass
class PartUploadResult:
    """Outcome of uploading a single part."""
    part_number: int
    success: bool
    etag: Optional[str] = None
    error: Optional[str] = None
    attempts: int = 0

    @classmethod
    def succeeded(cls, part_number: int, etag: str, attempts: int = 1) -> "PartUploadResult":
        return cls(part_number=part_number, success=True, etag=etag, attempts=attempts)

    @classmethod
    def failed(cls, part_number: int, error: str, attempts: int = 0) -> "PartUploadResult":
        return cls(part_number=part_number, success=False, error=error, attempts=attempts)


@dataclass
class CompletedPartSet:
    """Successful part results keyed by part number."""
    _parts: Dict[int, PartUploadResult] = field(default_factory=dict)

    def add(self, result: PartUploadResult) -> None:
        """Record a successful part.

        Args:
            result: Successful PartUploadResult

        Raises:
            ValueError: If the result is a failure or its part number was already added
        """
        if not result.success:
            raise ValueError(f"part {result.part_number} did not succeed")
        if result.part_number in self._parts:
            raise ValueError(f"part {result.part_number} already completed")
        self._parts[result.part_number] = result

    def __len__(self) -> int:
        return len(self._parts)

    def __contains__(self, part_number: int) -> bool:
        return part_number in self._parts

    def ordered(self) -> List[PartUploadResult]:
        """Return the completed parts sorted by ascending part number."""
        return [self._parts[n] for n in sorted(self._parts)]

    def as_parts(self) -> List[Dict[str, Any]]:
        """Return the ordered parts in the shape the store expects for a commit."""
        return [
            {'PartNumber': result.part_number, 'ETag': result.etag}
            for result in self.ordered()
        ]


@dataclass(frozen=True)
class Outcome:
    """Terminal state of an upload run."""
    completed: bool
    location: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def completed_at(cls, location: Optional[str]) -> "Outcome":
        return cls(completed=True, location=location)

    @classmethod
    def aborted(cls, reason: str) -> "Outcome":
        return cls(completed=False, reason=reason)

    @property
    def subject(self) -> str:
        return SUCCESS_SUBJECT if self.completed else FAILURE_SUBJECT

    @property
    def message(self) -> str:
        if self.completed:
            message = "Multipart upload completed successfully."
            if self.location:
                message += f" Location: {self.location}"
            return message
        return f"Error: {self.reason}"
