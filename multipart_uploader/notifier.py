"""
Module for publishing upload outcome notifications.
"""
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import NotificationError
from .models import Outcome

logger = logging.getLogger(__name__)


class SnsPublisher:
    """Publishes messages to an SNS topic."""

    def __init__(self, topic_arn: str, region: Optional[str] = None, client: Any = None):
        self.topic_arn = topic_arn
        self.sns_client = client or boto3.client('sns', region_name=region)

    def publish(self, subject: str, message: str) -> None:
        """Publish a message to the topic.

        Raises:
            NotificationError: If SNS rejects the message
        """
        try:
            self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=subject,
                Message=message
            )
        except (ClientError, BotoCoreError) as e:
            raise NotificationError(f"Error sending SNS notification: {e}") from e


class Notifier:
    """Best-effort delivery of terminal upload notifications."""

    def __init__(self, publisher: Optional[Any] = None):
        """Initialize the notifier.

        Args:
            publisher: Object with a publish(subject, message) method. When
                None, notifications are only logged.
        """
        self.publisher = publisher

    def notify(self, subject: str, message: str) -> bool:
        """Publish a single notification.

        Failures are logged and never raised.

        Args:
            subject: Notification subject
            message: Notification body

        Returns:
            True if the notification was delivered, False otherwise
        """
        if self.publisher is None:
            logger.info(f"Notification (no publisher configured): {subject}: {message}")
            return False

        try:
            self.publisher.publish(subject, message)
        except Exception as e:
            logger.error(f"Error sending notification '{subject}': {e}")
            return False

        logger.info(f"Sent notification: {subject}")
        return True

    def notify_outcome(self, outcome: Outcome) -> bool:
        return self.notify(outcome.subject, outcome.message)
