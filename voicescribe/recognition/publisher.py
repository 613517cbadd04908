"""Session publisher module for pub/sub event publishing."""

import logging
from pubsub import pub

from ..models.recognition import Notification, SessionSnapshot

logger = logging.getLogger(__name__)


class SessionPublisher:
    """Publishes live session state and notifications using pubsub.pub."""

    def __init__(self, topic: str):
        """Initialize session publisher.

        Args:
            topic: Root topic; messages go to '<topic>.state' and '<topic>.notification'
        """
        self.topic = topic
        self.state_topic = f"{topic}.state"
        self.notification_topic = f"{topic}.notification"
        logger.info(f"SessionPublisher initialized with topic: {topic}")

    def publish_state(self, snapshot: SessionSnapshot) -> None:
        """Publish a session snapshot.

        Args:
            snapshot: Current session state
        """
        pub.sendMessage(self.state_topic, snapshot=snapshot)

    def publish_notification(self, notification: Notification) -> None:
        """Publish a user notification.

        Args:
            notification: Message to show the user
        """
        pub.sendMessage(self.notification_topic, notification=notification)
        logger.debug(f"Published notification: {notification.title}")
