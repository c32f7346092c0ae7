from typing import TYPE_CHECKING

from ...core.config import Settings
from ...domain.capabilities.diagnostic_sink import DiagnosticSink
from ...domain.capabilities.notification_transport import NotificationTransport
from ...domain.capabilities.recognition_capability import RecognitionCapability
from ...domain.models.label_policy import LabelPolicy
from ...domain.models.recognition_policy import RecognitionPolicy
from ...domain.models.reference import ReferenceSet
from ...infrastructure.diagnostics import FileDiagnosticSink, LoggingDiagnosticSink
from ...infrastructure.external.rekognition_client import RekognitionClient
from ...infrastructure.messaging.mqtt_publisher import MqttNotificationPublisher
from ...infrastructure.sources.frame_grabber import FrameGrabber
from ...infrastructure.sources.reference_loader import load_reference_set

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class InfrastructureProvider:
    """Registers settings-derived policy and the external adapters"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the recognition policy bundle and adapters as singletons.
        Everything here is built eagerly so configuration errors surface at startup.
        """
        settings = container.get(Settings)

        # Policy (validated, immutable)
        label_policy = LabelPolicy.from_strings(
            settings.confidences_not_less_than,
            settings.confidences_not_more_than,
        )
        reference_set = load_reference_set(settings.sample_images, settings.similarity_threshold)
        container.register_singleton(LabelPolicy, label_policy)
        container.register_singleton(ReferenceSet, reference_set)
        container.register_singleton(
            RecognitionPolicy,
            RecognitionPolicy(
                reference_set=reference_set,
                label_policy=label_policy,
                discovery_mode=settings.discovery_mode,
                notification_topic=settings.mqtt_topic,
                recognized_message=settings.mqtt_recognized_message,
                not_recognized_message=settings.mqtt_not_recognized_message,
            ),
        )

        # Adapters, only registered if not provided already (tests inject fakes)
        if not container.is_registered(RecognitionCapability):
            container.register_singleton(
                RecognitionCapability,
                RekognitionClient(
                    region_name=settings.aws_region or None,
                    timeout=settings.capability_timeout_seconds,
                    max_retries=settings.capability_max_retries,
                ),
            )

        if not container.is_registered(NotificationTransport):
            container.register_singleton(
                NotificationTransport,
                MqttNotificationPublisher(
                    broker=settings.mqtt_broker,
                    port=settings.mqtt_port,
                    client_id=settings.mqtt_client_id,
                    username=settings.mqtt_username,
                    password=settings.mqtt_password,
                    persistent=settings.mqtt_persistent_connection,
                    publish_timeout=settings.mqtt_publish_timeout_seconds,
                ),
            )

        if not container.is_registered(DiagnosticSink):
            if settings.discovery_labels_file_output:
                sink: DiagnosticSink = FileDiagnosticSink(settings.discovery_labels_file_output)
            else:
                sink = LoggingDiagnosticSink()
            container.register_singleton(DiagnosticSink, sink)

        if not container.is_registered(FrameGrabber):
            container.register_singleton(FrameGrabber, FrameGrabber())
