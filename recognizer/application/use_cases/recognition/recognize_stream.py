# Standard library imports
import logging

# Local application imports
from ....domain.models.decision import Decision
from ....infrastructure.sources.frame_grabber import FrameGrabber
from .process_image import ProcessImageUseCase

logger = logging.getLogger(__name__)


class RecognizeStreamUseCase:
    """Use case for grabbing one frame from a video source and recognizing it"""

    def __init__(
        self,
        frame_grabber: FrameGrabber,
        process_image_use_case: ProcessImageUseCase,
    ) -> None:
        self.frame_grabber = frame_grabber
        self.process_image_use_case = process_image_use_case

    async def execute(self, stream_url: str) -> Decision:
        """
        Grab a frame from stream_url and run the recognition pipeline on it.

        Raises:
            FrameCaptureError: if no frame could be read or encoded
            RecognizerError: anything the pipeline raises
        """
        logger.info(f"Grabbing frame from {stream_url}")
        image = await self.frame_grabber.grab_jpeg(stream_url)
        return await self.process_image_use_case.execute(image, source=stream_url)
