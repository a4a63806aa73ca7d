"""Fixed-delay bounded retry for filesystem operations."""
import logging
import time
from typing import Callable, Tuple, Type, TypeVar

from .exceptions import FilesystemError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 5
DEFAULT_DELAY = 1.0


def retry_call(
    operation: Callable[[], T],
    attempts: int = DEFAULT_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    retry_on: Tuple[Type[BaseException], ...] = (OSError,),
    description: str = "operation",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run an operation, retrying on transient errors.
    
    File handles held by another process (an index rebuild scanning the tree,
    a virus scanner, ...) are released with some latency, so deletes and moves
    get a few tries before giving up.
    
    Args:
        operation: Zero-argument callable to run
        attempts: Total number of tries (at least 1)
        delay: Seconds to wait between tries
        retry_on: Exception types that trigger another try
        description: Human-readable name used in logs and errors
        sleep: Sleep function (injectable for tests)
        
    Returns:
        Whatever the operation returns
        
    Raises:
        FilesystemError: If every attempt failed
    """
    attempts = max(1, attempts)
    last_error = None
    
    for attempt in range(attempts):
        try:
            return operation()
        except retry_on as e:
            last_error = e
            if attempt < attempts - 1:
                logger.debug(
                    f"{description} failed (attempt {attempt + 1}/{attempts}): {e}"
                )
                sleep(delay)
    
    logger.error(f"{description} failed after {attempts} attempts: {last_error}")
    raise FilesystemError(
        f"{description} failed after {attempts} attempts: {last_error}"
    ) from last_error
