# Standard library imports
import logging

# External package imports
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

# Local application imports
from ...application.dto.recognition_dto import RecognizeRequest, RecognizeResponse
from ...application.use_cases.recognition.recognize_stream import RecognizeStreamUseCase
from ...core.exceptions import RecognizerError
from ...di.container import get_container

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recognition"])


def _respond(status_code: int, response: RecognizeResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump(exclude_none=True))


@router.post("/recognize", response_model=RecognizeResponse)
async def recognize(request: Request) -> JSONResponse:
    """
    Grab one frame from a video source and run recognition on it.

    Args:
        request: JSON body {"webrtc_url": "<video source>"}

    Returns:
        200 with a success message, or 400 with the error message when the
        payload is invalid, no frame could be grabbed, or recognition failed
    """
    logger.info("Received API request to recognize")
    try:
        recognize_request = RecognizeRequest.model_validate(await request.json())
    except ValueError:
        message = "Invalid request payload"
        logger.error(message)
        return _respond(status.HTTP_400_BAD_REQUEST, RecognizeResponse(message=message))

    container = get_container()
    recognize_stream_use_case = container.get(RecognizeStreamUseCase)

    try:
        decision = await recognize_stream_use_case.execute(recognize_request.webrtc_url)
    except RecognizerError as exception:
        logger.error(exception)
        return _respond(
            status.HTTP_400_BAD_REQUEST,
            RecognizeResponse(
                message=exception.message,
                decision=exception.decision.kind.value if exception.decision else None,
            ),
        )

    return _respond(
        status.HTTP_200_OK,
        RecognizeResponse(
            message="Processed image successfully",
            decision=decision.kind.value,
            matched_reference=decision.matched_reference,
        ),
    )
