"""Transcript update publisher for pub/sub consumers."""

import logging
from typing import Callable
from pubsub import pub

from ..models.capture import TranscriptUpdate

logger = logging.getLogger(__name__)

TRANSCRIPT_TOPIC = "transcript_updates"


class TranscriptPublisher:
    """Publishes capture session transcript updates using pubsub.pub."""

    def __init__(self, topic: str = TRANSCRIPT_TOPIC):
        """Initialize transcript publisher.

        Args:
            topic: Pub/sub topic name for transcript updates
        """
        self.topic = topic
        logger.info(f"TranscriptPublisher initialized with topic: {topic}")

    def publish_update(self, update: TranscriptUpdate) -> None:
        """Publish a transcript update to the pub/sub topic."""
        pub.sendMessage(self.topic, update=update)

    def get_callback(self) -> Callable[[TranscriptUpdate], None]:
        """Get callback function for CaptureSession to use as on_update."""
        return self.publish_update
