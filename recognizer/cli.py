"""
Command line entry point.

Usage:
    recognizer [--config-file config.yaml] [--run-mode api|file_watcher] [--mqtt-broker HOST] ...

Every setting can be given as a flag; flags win over environment variables,
which win over the config file.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .core.config import RUN_MODES, configure_settings
from .core.exceptions import ConfigurationError
from .core.logging_config import configure_logging

logger = logging.getLogger(__name__)

# (setting, help) for flags taking one value
VALUE_FLAGS = (
    ("api_host", "HTTP API bind address"),
    ("api_port", "HTTP API port"),
    ("log_level", "Log level (DEBUG, INFO, WARNING, ERROR)"),
    ("discovery_labels_file_output", "File that discovery output is appended to"),
    ("mqtt_topic", "MQTT topic decisions are published to"),
    ("mqtt_broker", "MQTT broker host"),
    ("mqtt_port", "MQTT broker port"),
    ("mqtt_client_id", "MQTT client ID"),
    ("mqtt_username", "MQTT username"),
    ("mqtt_password", "MQTT password"),
    ("mqtt_recognized_message", "MQTT payload for a recognized caller"),
    ("mqtt_not_recognized_message", "MQTT payload for an unrecognized caller"),
    ("mqtt_publish_timeout_seconds", "Seconds to wait for a publish to complete"),
    ("target_image_path", "Image path watched in file_watcher mode"),
    ("target_image_verify_every_milliseconds", "Poll interval for the target image"),
    ("similarity_threshold", "Minimal face similarity for a match"),
    (
        "confidences_not_less_than",
        "Labels whose confidence must not be less than a threshold, e.g. \"Photography:98.0,Fisheye:60.0\"",
    ),
    (
        "confidences_not_more_than",
        "Labels whose confidence must not be more than a threshold, e.g. \"Electronics:90.0,Phone:40.0\"",
    ),
    ("aws_region", "AWS region of the Rekognition endpoint"),
    ("capability_timeout_seconds", "Deadline for each Rekognition call"),
    ("capability_max_retries", "Retries for throttled Rekognition calls"),
)

# Boolean settings; "--flag" alone means true, "--flag=false" turns it off
BOOLEAN_FLAGS = (
    ("discovery_mode", "Only log and capture detection output, never publish"),
    ("mqtt_persistent_connection", "Keep one MQTT connection open between publishes"),
)


def _flag(setting: str) -> str:
    return "--" + setting.replace("_", "-")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recognizer",
        description="Recognize known faces in still images and publish the decision over MQTT.",
    )
    parser.add_argument("--config-file", default=None, help="YAML config file (default: $CONFIG_FILE or config.yaml)")
    parser.add_argument("--run-mode", choices=RUN_MODES, default=None, help="Overrides RUN_MODE")
    for setting, help_text in VALUE_FLAGS:
        parser.add_argument(_flag(setting), dest=setting, default=None, help=help_text)
    for setting, help_text in BOOLEAN_FLAGS:
        parser.add_argument(_flag(setting), dest=setting, nargs="?", const="true", default=None, help=help_text)
    parser.add_argument(
        "--sample-image-paths",
        dest="sample_image_paths",
        action="append",
        default=None,
        help="Reference image paths, comma-separated or repeated",
    )
    return parser


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings given on the command line, keyed by setting name."""
    overrides: Dict[str, Any] = {"run_mode": args.run_mode}
    for setting, _ in VALUE_FLAGS + BOOLEAN_FLAGS:
        overrides[setting] = getattr(args, setting)
    if args.sample_image_paths:
        overrides["sample_image_paths"] = ",".join(args.sample_image_paths)
    return {key: value for key, value in overrides.items() if value is not None}


async def run_file_watcher() -> None:
    from .di.container import get_container, reset_container
    from .infrastructure.watcher.file_watcher import FileWatcher

    container = get_container()
    watcher = container.get(FileWatcher)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, watcher.stop)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            pass

    try:
        await watcher.run()
    finally:
        await reset_container()


def run_api(host: str, port: int, log_level: str) -> None:
    import uvicorn

    from .main import app

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()

    try:
        settings = configure_settings(args.config_file, settings_overrides(args))
        configure_logging(settings.log_level)
        settings.validate()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Could not load the configuration: {e}")
        return 2

    logger.info(f"Starting recognizer in {settings.run_mode} mode")
    try:
        if settings.run_mode == "file_watcher":
            asyncio.run(run_file_watcher())
        else:
            run_api(settings.api_host, settings.api_port, settings.log_level)
    except ConfigurationError as e:
        logger.error(f"Could not start the recognizer: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
