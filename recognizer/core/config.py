# Standard library imports
import json
import os
from pathlib import Path
from typing import Any, Dict, Final, List, Optional, Union

# External package imports
import yaml

# Local application imports
from .exceptions import ConfigurationError


DEFAULT_CONFIG_FILE = "config.yaml"
CONFIG_SEARCH_PATHS = (".", "./configs")
RUN_MODES = ("api", "file_watcher")

_TRUE_VALUES = ("1", "true", "yes", "on")


def _normalize_key(key: str) -> str:
    return str(key).strip().replace("-", "_").lower()


def find_config_file(config_file: str) -> Optional[Path]:
    """
    Locate the YAML config file.

    The path is tried as given first, then by file name inside each of
    CONFIG_SEARCH_PATHS. Returns None when no file exists.
    """
    candidate = Path(config_file)
    if candidate.is_file():
        return candidate
    for search_path in CONFIG_SEARCH_PATHS:
        candidate = Path(search_path) / Path(config_file).name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(config_file: str) -> Dict[str, Any]:
    """
    Load the YAML config file into a dict with snake_case keys.

    A missing file yields an empty dict; a file that cannot be parsed
    raises ConfigurationError.
    """
    path = find_config_file(config_file)
    if path is None:
        return {}
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
    return {_normalize_key(key): value for key, value in raw.items()}


class Settings:
    """
    Application settings.

    Values come from command line overrides first, then environment variables,
    then the optional YAML config file (kebab-case or snake_case keys), then
    the defaults below.
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._overrides: Dict[str, Any] = {
            _normalize_key(key): value for key, value in (overrides or {}).items() if value is not None
        }
        self.config_file: Final[str] = config_file or os.getenv("CONFIG_FILE", DEFAULT_CONFIG_FILE)
        self._file_values: Dict[str, Any] = load_config_file(self.config_file)

        # Process
        self.run_mode: Final[str] = self._get_str("run_mode", "api").lower()
        self.api_host: Final[str] = self._get_str("api_host", "0.0.0.0")
        self.api_port: Final[int] = self._get_int("api_port", 8082)
        self.log_level: Final[str] = self._get_str("log_level", "INFO").upper()

        # Discovery
        self.discovery_mode: Final[bool] = self._get_bool("discovery_mode", False)
        self.discovery_labels_file_output: Final[str] = self._get_str("discovery_labels_file_output", "")

        # MQTT Configuration
        self.mqtt_topic: Final[str] = self._get_str("mqtt_topic", "entrance/recognizer")
        self.mqtt_broker: Final[str] = self._get_str("mqtt_broker", "")
        self.mqtt_port: Final[int] = self._get_int("mqtt_port", 1883)
        self.mqtt_client_id: Final[str] = self._get_str("mqtt_client_id", "")
        self.mqtt_username: Final[str] = self._get_str("mqtt_username", "")
        self.mqtt_password: Final[str] = self._get_str("mqtt_password", "")
        self.mqtt_recognized_message: Final[str] = self._get_message(
            "mqtt_recognized_message", '{"message": "recognized"}'
        )
        self.mqtt_not_recognized_message: Final[str] = self._get_message(
            "mqtt_not_recognized_message", '{"message": "not_recognized"}'
        )
        self.mqtt_persistent_connection: Final[bool] = self._get_bool("mqtt_persistent_connection", False)
        self.mqtt_publish_timeout_seconds: Final[float] = self._get_float("mqtt_publish_timeout_seconds", 5.0)

        # Images
        self.target_image_path: Final[str] = self._get_str("target_image_path", "")
        self.target_image_verify_every_milliseconds: Final[int] = self._get_int(
            "target_image_verify_every_milliseconds", 500
        )
        self.sample_images: Final[List[Dict[str, Any]]] = self._get_sample_images()
        self.similarity_threshold: Final[float] = self._get_float("similarity_threshold", 95.0)

        # Label confidence gates, "Label:threshold,Other Label:threshold"
        self.confidences_not_less_than: Final[str] = self._get_str("confidences_not_less_than", "")
        self.confidences_not_more_than: Final[str] = self._get_str("confidences_not_more_than", "")

        # Recognition capability (AWS Rekognition)
        self.aws_region: Final[str] = self._get_str("aws_region", "")
        self.capability_timeout_seconds: Final[float] = self._get_float("capability_timeout_seconds", 10.0)
        self.capability_max_retries: Final[int] = self._get_int("capability_max_retries", 2)

    # -------------------------------------------------------------------------
    # Raw lookups
    # -------------------------------------------------------------------------

    def _raw(self, key: str) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        env_value = os.getenv(key.upper())
        if env_value is not None:
            return env_value
        return self._file_values.get(key)

    def _get_str(self, key: str, default: str) -> str:
        value = self._raw(key)
        if value is None:
            return default
        if isinstance(value, (dict, list)):
            raise ConfigurationError(
                f"{key} must be a single value, got a {type(value).__name__}; quote it in the config file"
            )
        return str(value).strip()

    def _get_message(self, key: str, default: str) -> str:
        """MQTT payload; a mapping in the YAML file is serialized as JSON."""
        value = self._raw(key)
        if isinstance(value, dict):
            return json.dumps(value)
        return self._get_str(key, default)

    def _get_int(self, key: str, default: int) -> int:
        value = self._raw(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")

    def _get_float(self, key: str, default: float) -> float:
        value = self._raw(key)
        if value is None or value == "":
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be a number, got {value!r}")

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._raw(key)
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_VALUES

    def _get_sample_images(self) -> List[Dict[str, Any]]:
        """
        Reference image entries as dicts with "path" and optional "similarity_threshold".

        The environment provides a comma-separated list of paths; the YAML file
        may also give a list whose items are paths or mappings.
        """
        value: Union[str, List[Any], None] = self._raw("sample_image_paths")
        if value is None:
            return []
        if isinstance(value, str):
            return [{"path": path.strip()} for path in value.split(",") if path.strip()]
        if not isinstance(value, list):
            raise ConfigurationError("sample_image_paths must be a list or a comma-separated string")

        entries: List[Dict[str, Any]] = []
        for item in value:
            if isinstance(item, str):
                entries.append({"path": item.strip()})
            elif isinstance(item, dict) and item.get("path"):
                entry = {_normalize_key(k): v for k, v in item.items()}
                entry["path"] = str(entry["path"]).strip()
                entries.append(entry)
            else:
                raise ConfigurationError(f"Invalid sample_image_paths entry: {item!r}")
        return entries

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @property
    def sample_image_paths(self) -> List[str]:
        return [entry["path"] for entry in self.sample_images]

    def validate(self) -> "Settings":
        """
        Check required fields and value ranges.

        Raises:
            ConfigurationError: listing every problem found
        """
        problems: List[str] = []

        if self.run_mode not in RUN_MODES:
            problems.append(f"run_mode must be one of {', '.join(RUN_MODES)}, got {self.run_mode!r}")

        required = {
            "mqtt_topic": self.mqtt_topic,
            "mqtt_broker": self.mqtt_broker,
            "mqtt_client_id": self.mqtt_client_id,
        }
        if self.run_mode == "file_watcher":
            required["target_image_path"] = self.target_image_path
        missing = [name for name, value in required.items() if not value]
        if not self.sample_images:
            missing.append("sample_image_paths")
        if missing:
            problems.append(f"missing required attributes: {', '.join(missing)}")

        if not 0 <= self.similarity_threshold <= 100:
            problems.append(f"similarity_threshold must be within [0, 100], got {self.similarity_threshold}")
        if self.target_image_verify_every_milliseconds <= 0:
            problems.append("target_image_verify_every_milliseconds must be positive")
        if self.capability_timeout_seconds <= 0:
            problems.append("capability_timeout_seconds must be positive")
        if self.capability_max_retries < 0:
            problems.append("capability_max_retries must not be negative")
        if not 0 < self.mqtt_port < 65536:
            problems.append(f"mqtt_port out of range: {self.mqtt_port}")

        if problems:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(problems),
                details={"problems": problems},
            )
        return self


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_settings(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """
    Replace the global settings, e.g. with a config file and values chosen on the command line.
    """
    global _settings
    _settings = Settings(config_file=config_file, overrides=overrides)
    return _settings
