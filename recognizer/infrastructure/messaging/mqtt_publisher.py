"""MQTT Notification Publisher

Publishes recognition decisions to an MQTT topic.
"""

import asyncio
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import paho.mqtt.client as mqtt

from ...domain.capabilities.notification_transport import NotificationTransport

logger = logging.getLogger(__name__)


class MqttNotificationPublisher(NotificationTransport):
    """
    MQTT implementation of the notification transport.

    By default every publish runs inside a scoped connection that is always
    closed afterwards. With persistent=True one connection is opened on first
    use, reused by later publishes, and closed by close().

    Connection and publish failures are logged and reported as False.
    """

    def __init__(
        self,
        broker: str,
        port: int = 1883,
        client_id: str = "",
        username: str = "",
        password: str = "",
        persistent: bool = False,
        publish_timeout: float = 5.0,
        connect_timeout: float = 5.0,
    ):
        self.broker = broker
        self.port = port
        self.client_id = client_id
        self.username = username
        self.password = password
        self.persistent = persistent
        self.publish_timeout = publish_timeout
        self.connect_timeout = connect_timeout
        self._persistent_client: Optional[mqtt.Client] = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Connection handling
    # -------------------------------------------------------------------------

    def _create_client(self) -> mqtt.Client:
        client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=self.client_id)
        if self.username:
            client.username_pw_set(self.username, self.password or None)
        return client

    def _connect(self) -> mqtt.Client:
        client = self._create_client()
        connected = threading.Event()

        def on_connect(client, userdata, flags, reason_code, properties):
            if reason_code == 0:
                logger.info(f"Connected to MQTT broker {self.broker}:{self.port}")
                connected.set()
            else:
                logger.error(f"MQTT broker {self.broker}:{self.port} refused connection: {reason_code}")

        def on_disconnect(client, userdata, flags, reason_code, properties):
            if reason_code != 0:
                logger.warning(f"Connection to MQTT broker lost: {reason_code}")

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect
        client.connect(self.broker, self.port)
        client.loop_start()
        if not connected.wait(self.connect_timeout):
            self._disconnect(client)
            raise ConnectionError(
                f"Failed to connect to MQTT broker {self.broker}:{self.port} within {self.connect_timeout:g}s"
            )
        return client

    @staticmethod
    def _disconnect(client: mqtt.Client) -> None:
        try:
            client.disconnect()
        finally:
            client.loop_stop()

    @contextmanager
    def connection(self) -> Iterator[mqtt.Client]:
        """
        Yield a connected client.

        Scoped mode connects on entry and always disconnects on exit.
        Persistent mode reuses one client and drops it if a publish fails,
        so the next publish reconnects.
        """
        if not self.persistent:
            client = self._connect()
            try:
                yield client
            finally:
                self._disconnect(client)
            return

        with self._lock:
            if self._persistent_client is None or not self._persistent_client.is_connected():
                if self._persistent_client is not None:
                    self._disconnect(self._persistent_client)
                self._persistent_client = self._connect()
            client = self._persistent_client
        try:
            yield client
        except Exception:
            with self._lock:
                if self._persistent_client is client:
                    self._persistent_client = None
            self._disconnect(client)
            raise

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    def _publish_blocking(self, topic: str, payload: str) -> bool:
        try:
            with self.connection() as client:
                info = client.publish(topic, payload, qos=0, retain=False)
                info.wait_for_publish(timeout=self.publish_timeout)
                if info.rc != mqtt.MQTT_ERR_SUCCESS or not info.is_published():
                    raise RuntimeError(f"publish returned {mqtt.error_string(info.rc)}")
        except (OSError, RuntimeError, ValueError) as e:
            logger.error(f"Failed to publish message to MQTT topic {topic}: {e}")
            return False

        logger.info(f"Published message ({payload}) to MQTT topic {topic}")
        return True

    async def publish(self, topic: str, payload: str) -> bool:
        return await asyncio.to_thread(self._publish_blocking, topic, payload)

    def _close_blocking(self) -> None:
        with self._lock:
            client, self._persistent_client = self._persistent_client, None
        if client is not None:
            self._disconnect(client)
            logger.info("Closed persistent MQTT connection")

    async def close(self) -> None:
        await asyncio.to_thread(self._close_blocking)
