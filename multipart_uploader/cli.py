"""
Command-line interface for the multipart uploader.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .coordinator import UploadCoordinator
from .exceptions import UploadError
from .models import (
    DEFAULT_EXPIRY_DAYS,
    DEFAULT_PART_SIZE,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    UploadConfig,
)

logger = logging.getLogger(__name__)

EXIT_COMPLETED = 0
EXIT_FATAL = 1
EXIT_ABORTED = 2


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Whether to enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_config(config_file: Optional[Path] = None) -> dict:
    """Load configuration from a JSON file.

    Args:
        config_file: Path to config file

    Returns:
        Dictionary of configuration values
    """
    if not config_file:
        return {}

    try:
        with open(config_file) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading config file: {e}")
        return {}


def build_config(args: argparse.Namespace) -> UploadConfig:
    """Merge command line arguments over the config file.

    Args:
        args: Command line arguments

    Returns:
        Validated UploadConfig

    Raises:
        ValueError: If a required value is missing or invalid
    """
    config = load_config(args.config)

    def pick(name: str, default=None):
        value = getattr(args, name, None)
        if value is not None:
            return value
        value = config.get(name)
        return default if value is None else value

    file_path = Path(args.file)
    return UploadConfig(
        bucket=pick('bucket', ''),
        key=pick('key') or file_path.name,
        file_path=file_path,
        region=pick('region'),
        endpoint_url=pick('endpoint_url'),
        part_size=int(pick('part_size', DEFAULT_PART_SIZE)),
        retries=int(pick('retries', DEFAULT_RETRIES)),
        retry_delay=float(pick('retry_delay', DEFAULT_RETRY_DELAY)),
        topic_arn=pick('topic_arn'),
        expiry_days=int(pick('expiry_days', DEFAULT_EXPIRY_DAYS))
    )


def handle_upload(args: argparse.Namespace) -> int:
    """Run one upload and return the process exit status.

    Args:
        args: Command line arguments
    """
    try:
        config = build_config(args)
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_FATAL

    coordinator = UploadCoordinator.from_config(config)

    try:
        outcome = coordinator.upload_file(config.file_path, key=config.key)
    except (UploadError, OSError) as e:
        logger.error(f"Upload of {config.file_path} failed: {e}")
        return EXIT_FATAL

    return EXIT_COMPLETED if outcome.completed else EXIT_ABORTED


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="S3 multipart upload CLI")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose logging")
    parser.add_argument('-c', '--config', type=Path,
                        help="Path to config file")
    parser.add_argument('file', type=str,
                        help="Local file to upload")
    parser.add_argument('-b', '--bucket', type=str,
                        help="Destination S3 bucket")
    parser.add_argument('-k', '--key', type=str,
                        help="Object key, defaults to the file name")
    parser.add_argument('-r', '--region', type=str,
                        help="AWS region")
    parser.add_argument('--endpoint-url', type=str,
                        help="Endpoint of an S3-compatible store")
    parser.add_argument('-s', '--part-size', type=int,
                        help=f"Part size in bytes (default {DEFAULT_PART_SIZE})")
    parser.add_argument('--retries', type=int,
                        help=f"Retries per part (default {DEFAULT_RETRIES})")
    parser.add_argument('--retry-delay', type=float,
                        help=f"Seconds between part retries (default {DEFAULT_RETRY_DELAY:g})")
    parser.add_argument('-t', '--topic-arn', type=str,
                        help="SNS topic for outcome notifications")
    parser.add_argument('--expiry-days', type=int,
                        help=f"Days until the object expires (default {DEFAULT_EXPIRY_DAYS})")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose)
    sys.exit(handle_upload(args))


if __name__ == '__main__':
    main()
