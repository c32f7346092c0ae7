from .retry_utils import async_retry_on_exception

__all__ = [
    "async_retry_on_exception",
]
