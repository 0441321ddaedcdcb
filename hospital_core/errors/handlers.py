# =============================================================================
# hospital_core/errors/handlers.py
# Error Handling Utilities for the Hospital Registry
# =============================================================================

from __future__ import annotations
import functools
import traceback
from typing import Optional, Callable, TypeVar, Any
import streamlit as st

from hospital_core.logging import get_logger
from .exceptions import HospitalRegistryError

logger = get_logger(__name__)

T = TypeVar("T")


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        show_user_message: Whether to display error to user via st.error
        log_error: Whether to log the error
        user_message: Custom message to show user (uses error message if None)
    """
    if isinstance(error, HospitalRegistryError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=error,
        )

    if show_user_message:
        if recoverable:
            st.error(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Please contact support.")

        if details and st.session_state.get("debug_mode", False):
            with st.expander("Error Details", expanded=False):
                st.json(details)


class ErrorContext:
    """
    Context manager for error handling with automatic logging and user feedback.

    Usage:
        with ErrorContext("Deleting hospital", recoverable=True):
            binding.delete_hospital(hospital_id, year)
    """

    def __init__(
        self,
        operation: str,
        recoverable: bool = True,
        show_success: bool = False,
        success_message: Optional[str] = None,
    ):
        self.operation = operation
        self.recoverable = recoverable
        self.show_success = show_success
        self.success_message = success_message

    def __enter__(self) -> ErrorContext:
        logger.info(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            if isinstance(exc_val, HospitalRegistryError):
                handle_error(exc_val)
            else:
                handle_error(
                    exc_val,
                    user_message=f"Error during: {self.operation}",
                )

            # Suppress exception if recoverable
            return self.recoverable

        logger.info(f"Completed: {self.operation}")
        if self.show_success:
            st.success(self.success_message or f"{self.operation} completed")

        return False


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
    log: bool = True,
):
    """
    Decorator to wrap functions with error handling.

    Usage:
        @error_boundary(default_return=[], error_message="Could not read CSV")
        def load_rows(path: str) -> List[dict]:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log:
                    logger.error(
                        f"Error in {func.__name__}: {e}",
                        exc_info=True,
                    )
                if error_message:
                    st.error(error_message)
                return default_return

        return wrapper

    return decorator
