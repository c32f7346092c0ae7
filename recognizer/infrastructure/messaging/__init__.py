"""Messaging infrastructure for publishing recognition decisions"""

from .mqtt_publisher import MqttNotificationPublisher

__all__ = [
    "MqttNotificationPublisher",
]
