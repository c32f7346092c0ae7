from .frame_grabber import FrameGrabber
from .reference_loader import load_reference_set

__all__ = [
    "FrameGrabber",
    "load_reference_set",
]
