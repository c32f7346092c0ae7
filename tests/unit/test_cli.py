"""
Unit tests for the command line entry point.
"""
from unittest.mock import Mock, patch

from recognizer import cli
from recognizer.core.config import get_settings


class TestCli:
    def test_parser_defaults(self):
        args = cli.build_parser().parse_args([])

        assert args.config_file is None
        assert args.run_mode is None

    def test_invalid_configuration_exits_with_2(self, clean_env):
        with patch.object(cli, "run_api") as run_api:
            assert cli.main([]) == 2
        run_api.assert_not_called()

    def test_api_mode_starts_server(self, mock_env, monkeypatch):
        monkeypatch.setenv("RUN_MODE", "file_watcher")
        with patch.object(cli, "run_api") as run_api:
            assert cli.main(["--run-mode", "api"]) == 0
        run_api.assert_called_once_with("0.0.0.0", 8082, "INFO")

    def test_file_watcher_mode(self, mock_env, monkeypatch):
        monkeypatch.setenv("RUN_MODE", "api")
        run_file_watcher = Mock()
        with patch.object(cli, "asyncio") as asyncio_mock, patch.object(cli, "run_file_watcher", run_file_watcher):
            assert cli.main(["--run-mode", "file_watcher"]) == 0
        asyncio_mock.run.assert_called_once_with(run_file_watcher.return_value)

    def test_flags_override_environment(self, mock_env, monkeypatch, tmp_path):
        monkeypatch.setenv("MQTT_TOPIC", "from/env")
        carol = tmp_path / "carol.jpg"
        carol.write_bytes(b"carol-bytes")

        with patch.object(cli, "run_api"):
            assert cli.main([
                "--mqtt-broker", "flag-broker",
                "--mqtt-topic", "from/flag",
                "--similarity-threshold", "80",
                "--confidences-not-more-than", "Weapon:50",
                "--discovery-mode",
                "--sample-image-paths", str(carol),
            ]) == 0

        settings = get_settings()
        assert settings.mqtt_broker == "flag-broker"
        assert settings.mqtt_topic == "from/flag"
        assert settings.similarity_threshold == 80.0
        assert settings.confidences_not_more_than == "Weapon:50"
        assert settings.discovery_mode is True
        assert settings.sample_image_paths == [str(carol)]
        # Not given as a flag, so still taken from the environment
        assert settings.mqtt_client_id == "recognizer-test"

    def test_boolean_flag_can_be_turned_off(self, mock_env, monkeypatch):
        monkeypatch.setenv("DISCOVERY_MODE", "true")

        with patch.object(cli, "run_api"):
            assert cli.main(["--discovery-mode=false"]) == 0

        assert get_settings().discovery_mode is False

    def test_repeated_sample_image_paths_are_joined(self):
        args = cli.build_parser().parse_args(["--sample-image-paths", "a.jpg,b.jpg", "--sample-image-paths", "c.jpg"])

        assert cli.settings_overrides(args) == {"sample_image_paths": "a.jpg,b.jpg,c.jpg"}

    def test_invalid_flag_value_exits_with_2(self, mock_env):
        with patch.object(cli, "run_api") as run_api:
            assert cli.main(["--mqtt-port", "not-a-port"]) == 2
        run_api.assert_not_called()
