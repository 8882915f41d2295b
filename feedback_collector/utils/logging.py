"""Logging setup and helpers that attach request context to errors."""

import logging
import traceback
from typing import Optional, Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Get the main logger
logger = logging.getLogger("FeedbackCollector")

_debug = False


def configure_logging(debug: bool = False) -> None:
    """Configure root logging once for the process."""
    global _debug
    _debug = debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def debug_log(message: str, *args, **kwargs) -> None:
    """
    Log a debug message only if debug mode is enabled.
    
    Args:
        message: Log message (supports % formatting)
        *args: Positional arguments for message formatting
        **kwargs: Keyword arguments (level, exc_info, etc.)
    """
    if _debug:
        level = kwargs.pop("level", logging.DEBUG)
        logger.log(level, message, *args, **kwargs)


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """
    Error logging with context and traceback.
    
    Args:
        message: Error message
        exc: Optional exception object
        context: Optional dictionary with additional context (request info, user, etc.)
    """
    parts = [message]
    
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        parts.append(f"Context: {context_str}")
    
    if exc:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        
        # Include full traceback in debug mode
        if _debug:
            parts.append(f"Traceback:\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}")
    
    full_message = " | ".join(parts)
    
    if exc:
        logger.error(full_message, exc_info=exc)
    else:
        logger.error(full_message)


def log_request_error(
    request: Any,
    exc: Exception,
    message: Optional[str] = None
) -> None:
    """
    Log an error with request context.
    
    Args:
        request: Request object (should have url, method, etc.)
        exc: The exception
        message: Optional custom message
    """
    context = {}
    
    url = getattr(request, "url", None)
    if url is not None:
        context["path"] = getattr(url, "path", str(url))
    method = getattr(request, "method", None)
    if method:
        context["method"] = method
    headers = getattr(request, "headers", None)
    if headers is not None:
        context["user_agent"] = headers.get("user-agent", "unknown")
    
    error_log(message or f"Unhandled exception: {type(exc).__name__}", exc=exc, context=context)
