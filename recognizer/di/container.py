# Standard library imports
import logging
from typing import Any, Dict, Optional, Type

# Local application imports
from ..core.config import Settings, get_settings
from ..domain.capabilities.notification_transport import NotificationTransport
from .base_container import BaseContainer
from .providers import (
    InfrastructureProvider,
    RecognitionProvider,
)

logger = logging.getLogger(__name__)


class RecognizerContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.

    Registration order is important:
    1. Settings (validated)
    2. Policy and adapters (InfrastructureProvider) - depend on settings
    3. Pipeline and use cases (RecognitionProvider) - depend on adapters
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        overrides: Optional[Dict[Type[Any], Any]] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or get_settings()
        for interface, instance in (overrides or {}).items():
            self.register_singleton(interface, instance)
        self.setup()

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: settings → infrastructure → use cases

        Raises:
            ConfigurationError: if settings, label thresholds or reference images are invalid
        """
        self.settings.validate()
        self.register_singleton(Settings, self.settings)

        InfrastructureProvider.register(self)
        RecognitionProvider.register(self)

    async def close(self) -> None:
        """Release connections held by adapters"""
        await self.get(NotificationTransport).close()


# Global container instance (singleton pattern)
_container: Optional[RecognizerContainer] = None


def get_container() -> RecognizerContainer:
    """
    Get the global DI container instance (singleton pattern)

    Returns:
        RecognizerContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = RecognizerContainer()
    return _container


async def reset_container() -> None:
    """Close and drop the global container; the next get_container() builds a fresh one."""
    global _container
    if _container is not None:
        container, _container = _container, None
        await container.close()
        logger.info("Recognizer container reset")
