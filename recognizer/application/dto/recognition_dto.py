from typing import Optional
from pydantic import BaseModel, Field


class RecognizeRequest(BaseModel):
    """DTO for a recognize request"""
    webrtc_url: str = Field(..., min_length=1)


class RecognizeResponse(BaseModel):
    """DTO for recognize responses, success and error alike"""
    message: str
    decision: Optional[str] = None
    matched_reference: Optional[str] = None
