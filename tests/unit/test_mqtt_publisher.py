"""
Unit tests for the MQTT notification publisher.
"""
from unittest.mock import MagicMock, patch

import paho.mqtt.client as mqtt
import pytest

from recognizer.infrastructure.messaging.mqtt_publisher import MqttNotificationPublisher


def _fake_client(connect_code=0, publish_rc=0, published=True):
    client = MagicMock()

    def connect(host, port):
        client.on_connect(client, None, None, connect_code, None)

    client.connect.side_effect = connect
    client.is_connected.return_value = True
    info = MagicMock()
    info.rc = publish_rc
    info.is_published.return_value = published
    client.publish.return_value = info
    return client


@pytest.fixture
def client_class():
    with patch("recognizer.infrastructure.messaging.mqtt_publisher.mqtt.Client") as client_class:
        yield client_class


class TestMqttNotificationPublisher:
    """Tests for MqttNotificationPublisher"""

    @pytest.mark.asyncio
    async def test_publish_with_scoped_connection(self, client_class):
        client = _fake_client()
        client_class.return_value = client
        publisher = MqttNotificationPublisher("broker", 1883, client_id="door", username="user", password="pw")

        delivered = await publisher.publish("entrance/recognizer", '{"message": "recognized"}')

        assert delivered is True
        client_class.assert_called_once_with(mqtt.CallbackAPIVersion.VERSION2, client_id="door")
        client.username_pw_set.assert_called_once_with("user", "pw")
        client.connect.assert_called_once_with("broker", 1883)
        client.publish.assert_called_once_with(
            "entrance/recognizer", '{"message": "recognized"}', qos=0, retain=False
        )
        client.disconnect.assert_called_once()
        client.loop_stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_credentials_skips_login(self, client_class):
        client = _fake_client()
        client_class.return_value = client

        await MqttNotificationPublisher("broker").publish("topic", "payload")

        client.username_pw_set.assert_not_called()

    @pytest.mark.asyncio
    async def test_each_scoped_publish_reconnects(self, client_class):
        client_class.side_effect = lambda *args, **kwargs: _fake_client()
        publisher = MqttNotificationPublisher("broker")

        await publisher.publish("topic", "one")
        await publisher.publish("topic", "two")

        assert client_class.call_count == 2

    @pytest.mark.asyncio
    async def test_refused_connection_returns_false(self, client_class):
        client = _fake_client(connect_code=5)
        client_class.return_value = client
        publisher = MqttNotificationPublisher("broker", connect_timeout=0.01)

        assert await publisher.publish("topic", "payload") is False
        client.publish.assert_not_called()
        client.loop_stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_unreachable_broker_returns_false(self, client_class):
        client = _fake_client()
        client.connect.side_effect = ConnectionRefusedError("refused")
        client_class.return_value = client

        assert await MqttNotificationPublisher("broker").publish("topic", "payload") is False

    @pytest.mark.asyncio
    async def test_unacknowledged_publish_returns_false(self, client_class):
        client = _fake_client(published=False)
        client_class.return_value = client

        assert await MqttNotificationPublisher("broker").publish("topic", "payload") is False
        client.disconnect.assert_called_once()

    @pytest.mark.asyncio
    async def test_persistent_connection_is_reused_until_closed(self, client_class):
        client = _fake_client()
        client_class.return_value = client
        publisher = MqttNotificationPublisher("broker", persistent=True)

        assert await publisher.publish("topic", "one") is True
        assert await publisher.publish("topic", "two") is True

        assert client_class.call_count == 1
        assert client.publish.call_count == 2
        client.disconnect.assert_not_called()

        await publisher.close()
        client.disconnect.assert_called_once()

    @pytest.mark.asyncio
    async def test_persistent_connection_reconnects_after_failure(self, client_class):
        broken = _fake_client(published=False)
        healthy = _fake_client()
        client_class.side_effect = [broken, healthy]
        publisher = MqttNotificationPublisher("broker", persistent=True)

        assert await publisher.publish("topic", "one") is False
        assert await publisher.publish("topic", "two") is True

        broken.disconnect.assert_called_once()
        assert client_class.call_count == 2

    @pytest.mark.asyncio
    async def test_close_without_connection(self, client_class):
        publisher = MqttNotificationPublisher("broker", persistent=True)

        await publisher.close()

        client_class.assert_not_called()
