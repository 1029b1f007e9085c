"""Consistent error logging helpers for backup walker.

Every failure that is reported rather than raised goes through one of
these so log lines share a ``[CATEGORY] Failed <operation> ...`` shape.
"""

from typing import Optional

from .logger import log


def log_file_error(file_path: str, operation: str, exception: Exception) -> None:
    """Log a file operation error.

    Args:
        file_path: Path to the file that caused the error
        operation: Description of the operation (e.g., "reading", "copying")
        exception: The exception that was raised
    """
    error_type = type(exception).__name__
    log.warning(f"[IO] Failed {operation} {file_path}: {error_type}: {exception}")


def log_diff_error(left_path: str, right_path: str, exception: Exception) -> None:
    """Log a diff engine failure for a pair of files."""
    error_type = type(exception).__name__
    log.error(f"[DIFF] Failed diffing {left_path} against {right_path}: {error_type}: {exception}")


def log_cleanup_error(path: str, exception: Exception) -> None:
    """Log a view that could not be destroyed during session cleanup.

    Cleanup keeps going after these, so they are warnings rather than errors.
    """
    error_type = type(exception).__name__
    log.warning(f"[CLEANUP] Failed closing view of {path}: {error_type}: {exception}")


def log_ui_error(component: str, action: str, exception: Exception) -> None:
    """Log UI component errors.

    Args:
        component: Name of the UI component (e.g., "diff panel", "status bar")
        action: The action being performed (e.g., "rendering", "setting focus")
        exception: The exception that was raised
    """
    error_type = type(exception).__name__
    log.warning(f"[UI] Failed {action} on {component}: {error_type}: {exception}")


def log_watchdog_error(path: str, operation: str, exception: Exception) -> None:
    error_type = type(exception).__name__
    log.warning(f"[WATCHDOG] Failed {operation} for {path}: {error_type}: {exception}")


def log_error_with_context(message: str, exception: Exception, context: Optional[dict] = None) -> None:
    """Log an error with additional context information.

    Args:
        message: Main error message
        exception: The exception that was raised
        context: Optional dictionary of context information
    """
    error_type = type(exception).__name__
    base_msg = f"{message}: {error_type}: {exception}"

    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        log.error(f"{base_msg} (Context: {context_str})")
    else:
        log.error(base_msg)
