from .coordinator import UploadCoordinator
from .models import CompletedPartSet, Outcome, PartRange, PartUploadResult, UploadConfig, UploadSession
from .notifier import Notifier, SnsPublisher
from .planner import plan_parts
from .store import S3ObjectStore
from .uploader import PartUploader

__version__ = "0.1.0"

__all__ = [
    "UploadCoordinator",
    "UploadConfig",
    "UploadSession",
    "PartRange",
    "PartUploadResult",
    "CompletedPartSet",
    "Outcome",
    "Notifier",
    "SnsPublisher",
    "S3ObjectStore",
    "PartUploader",
    "plan_parts",
]
