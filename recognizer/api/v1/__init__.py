from .recognize_controller import router as recognize_router


__all__ = ["recognize_router"]
