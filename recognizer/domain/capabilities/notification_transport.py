from abc import ABC, abstractmethod


class NotificationTransport(ABC):
    """Capability interface - publishes decision messages to a named channel"""

    @abstractmethod
    async def publish(self, topic: str, payload: str) -> bool:
        """Publish payload to topic. Returns True when the message was delivered."""
        pass

    async def close(self) -> None:
        """Release any connection kept between publishes"""
        return None
