"""
Frame Grabber
-------------

Opens a live video source with OpenCV, reads a single frame and encodes it
as JPEG bytes for the recognition pipeline.
"""

import asyncio
import logging

import cv2  # type: ignore

from ...core.exceptions import FrameCaptureError

logger = logging.getLogger(__name__)


class FrameGrabber:
    """Grabs one JPEG-encoded still frame from a video source."""

    def __init__(self, jpeg_quality: int = 90):
        self.jpeg_quality = jpeg_quality

    async def grab_jpeg(self, stream_url: str) -> bytes:
        """
        Read one frame from stream_url without blocking the event loop.

        Raises:
            FrameCaptureError: if the source cannot be opened, read, or encoded
        """
        return await asyncio.to_thread(self._grab_jpeg_blocking, stream_url)

    def _grab_jpeg_blocking(self, stream_url: str) -> bytes:
        capture = cv2.VideoCapture(stream_url)
        try:
            if not capture.isOpened():
                raise FrameCaptureError(f"Error opening video capture device: {stream_url}")

            ok, frame = capture.read()
            if not ok:
                raise FrameCaptureError(f"Cannot read device {stream_url}")
            if frame is None or frame.size == 0:
                raise FrameCaptureError(f"No image on device {stream_url}")

            encoded, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
            if not encoded:
                raise FrameCaptureError("Cannot encode frame as JPEG")
            image = buffer.tobytes()
            logger.info(f"Grabbed {frame.shape[1]}x{frame.shape[0]} frame from {stream_url} ({len(image)} bytes)")
            return image
        finally:
            capture.release()
