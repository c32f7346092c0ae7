from typing import TYPE_CHECKING

from ...application.services.comparison_fanout import ComparisonFanOutEngine
from ...application.use_cases.recognition.process_image import ProcessImageUseCase
from ...application.use_cases.recognition.recognize_stream import RecognizeStreamUseCase
from ...core.config import Settings
from ...domain.capabilities.diagnostic_sink import DiagnosticSink
from ...domain.capabilities.notification_transport import NotificationTransport
from ...domain.capabilities.recognition_capability import RecognitionCapability
from ...domain.models.recognition_policy import RecognitionPolicy
from ...infrastructure.sources.frame_grabber import FrameGrabber
from ...infrastructure.watcher.file_watcher import FileWatcher

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RecognitionProvider:
    """Recognition use case provider - registers the pipeline and its front ends"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the fan-out engine and use cases.
        The pipeline is a singleton: its policy is fixed for the process lifetime.
        """
        settings = container.get(Settings)

        fan_out_engine = ComparisonFanOutEngine(
            capability=container.get(RecognitionCapability),
            call_timeout=settings.capability_timeout_seconds,
        )
        container.register_singleton(ComparisonFanOutEngine, fan_out_engine)

        process_image_use_case = ProcessImageUseCase(
            capability=container.get(RecognitionCapability),
            fan_out_engine=fan_out_engine,
            notifier=container.get(NotificationTransport),
            policy=container.get(RecognitionPolicy),
            diagnostic_sink=container.get(DiagnosticSink),
            call_timeout=settings.capability_timeout_seconds,
        )
        container.register_singleton(ProcessImageUseCase, process_image_use_case)

        # Register RecognizeStreamUseCase
        container.register_factory(
            RecognizeStreamUseCase,
            lambda: RecognizeStreamUseCase(
                frame_grabber=container.get(FrameGrabber),
                process_image_use_case=container.get(ProcessImageUseCase),
            )
        )

        # Register FileWatcher (only meaningful in file_watcher run mode)
        if settings.target_image_path:
            container.register_factory(
                FileWatcher,
                lambda: FileWatcher(
                    target_path=settings.target_image_path,
                    process_image_use_case=container.get(ProcessImageUseCase),
                    poll_interval_seconds=settings.target_image_verify_every_milliseconds / 1000.0,
                )
            )
