"""Recorder event publisher for pub/sub notifications."""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

from pubsub import pub

from ..models.events import EVENT_TYPES, RecorderEvent

logger = logging.getLogger(__name__)

Listener = Callable[[RecorderEvent], None]


class RecorderEventPublisher:
    """Publishes recorder state notifications.

    Every event goes to the listeners registered with `add_listener` and is
    also sent on the pubsub subtopic `<topic>.<event_type>`. Other components
    can `pub.subscribe` to one event (`recorder.data`) or to the root topic for
    all of them, with a listener taking an `event` argument.
    """

    def __init__(self, topic: str = "recorder"):
        """Initialize recorder event publisher.

        Args:
            topic: Root pub/sub topic; each event type is a subtopic of it
        """
        self.topic = topic
        self.listeners: Dict[str, List[Listener]] = defaultdict(list)
        logger.info(f"RecorderEventPublisher initialized with topic: {topic}")

    def add_listener(self, event_type: str, listener: Listener) -> None:
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type '{event_type}'")
        self.listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        if listener in self.listeners[event_type]:
            self.listeners[event_type].remove(listener)

    def publish(self, event_type: str, payload: Any = None) -> RecorderEvent:
        """Notify listeners and the pubsub topic of one event."""
        event = RecorderEvent(event_type=event_type, payload=payload)
        for listener in list(self.listeners[event_type]):
            listener(event)
        pub.sendMessage(f"{self.topic}.{event_type}", event=event)
        if event_type != "audioprocess":
            logger.debug(f"Published recorder event: {event_type}")
        return event
