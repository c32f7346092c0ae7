"""
File Watcher
------------

Front end that waits for an image file to appear at a fixed path, reads it,
deletes it, and runs the recognition pipeline on its bytes.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from ...application.use_cases.recognition.process_image import ProcessImageUseCase
from ...core.exceptions import RecognizerError
from ...domain.models.decision import Decision

logger = logging.getLogger(__name__)


class FileWatcher:
    """Polls target_path and feeds every file that shows up to the pipeline."""

    def __init__(
        self,
        target_path: str,
        process_image_use_case: ProcessImageUseCase,
        poll_interval_seconds: float = 0.5,
    ):
        self.target_path = Path(target_path)
        self.process_image_use_case = process_image_use_case
        self.poll_interval_seconds = poll_interval_seconds
        self._stop_event = asyncio.Event()

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    async def wait_for_file(self) -> bool:
        """Sleep until the target file exists. Returns False if stopped first."""
        while not self.stopped:
            if self.target_path.is_file():
                return True
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval_seconds)
            except asyncio.TimeoutError:
                pass
        return False

    def _remove_file(self) -> None:
        os.remove(self.target_path)
        logger.info(f"Removed file {self.target_path}")

    def _take_file(self) -> Optional[bytes]:
        """Read the target file and delete it. Returns None if it could not be read."""
        try:
            image = self.target_path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading file {self.target_path}: {e}")
            try:
                self._remove_file()
            except OSError as remove_error:
                logger.error(f"Error removing file {self.target_path}: {remove_error}")
            return None

        try:
            self._remove_file()
        except OSError as e:
            logger.error(f"Error removing file {self.target_path}: {e}")
            return None
        return image

    async def run_once(self) -> Optional[Decision]:
        """
        Wait for one file and process it.

        Pipeline errors are logged, never raised, so the watch loop keeps going.

        Returns:
            The Decision, or None if the file could not be taken or the pipeline raised
        """
        if not await self.wait_for_file():
            return None

        image = await asyncio.to_thread(self._take_file)
        if image is None:
            return None

        try:
            return await self.process_image_use_case.execute(image, source=str(self.target_path))
        except RecognizerError as e:
            logger.error(f"Recognition of {self.target_path} failed: {e}")
        except Exception as e:
            logger.error(f"Unexpected error processing {self.target_path}: {e}", exc_info=True)
        return None

    async def run(self) -> None:
        """Process files until stop() is called."""
        logger.info(f"Starting recognizer file watcher on {self.target_path}")
        while not self.stopped:
            await self.run_once()
        logger.info("File watcher stopped")
