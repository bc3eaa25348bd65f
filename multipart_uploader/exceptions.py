"""
Error types raised by the multipart uploader.
"""


class UploadError(Exception):
    """Base class for all multipart uploader errors."""


class InvalidInput(UploadError, ValueError):
    """Raised for bad planning parameters such as an empty file or a non-positive part size."""


class TransientPartError(UploadError):
    """A single part upload attempt failed and may be retried."""

    def __init__(self, part_number: int, message: str):
        super().__init__(message)
        self.part_number = part_number


class SessionCreationError(UploadError):
    """The store refused to create a multipart upload session."""


class AbortError(UploadError):
    """The store failed to abort a multipart upload session.

    The remote session is left orphaned when this is raised.
    """


class CompleteError(UploadError):
    """The store failed to commit the uploaded parts."""


class NotificationError(UploadError):
    """Publishing a notification failed."""
