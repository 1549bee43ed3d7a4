"""Error logging utilities for data generation and validation."""

import traceback
from typing import Any, Optional, Dict
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    operation: Optional[str] = None,
    entity_name: Optional[str] = None,
    attribute_name: Optional[str] = None,
    log_level: str = "error",
) -> None:
    """
    Log an error with type, message, context, and traceback.

    Args:
        error: The exception that occurred
        context: Additional context dictionary (e.g., {'rows': 1000, 'file': 'User.csv'})
        operation: Description of the operation being performed
        entity_name: Entity where the error occurred
        attribute_name: Attribute where the error occurred
        log_level: Logging level ('error', 'warning', 'critical')
    """
    error_type = type(error).__name__
    error_message = str(error)

    context_parts = []
    if operation:
        context_parts.append(f"Operation: {operation}")
    if entity_name:
        context_parts.append(f"Entity: {entity_name}")
    if attribute_name:
        context_parts.append(f"Attribute: {attribute_name}")
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        context_parts.append(f"Context: {context_str}")

    error_msg = f"[{error_type}] {error_message}"
    if context_parts:
        error_msg += " | " + " | ".join(context_parts)

    if log_level.lower() == "critical":
        logger.critical(error_msg, exc_info=True)
    elif log_level.lower() == "warning":
        logger.warning(error_msg, exc_info=True)
    else:
        logger.error(error_msg, exc_info=True)

    if isinstance(error, FileNotFoundError):
        logger.debug(f"FileNotFoundError details: File not found - {error_message}")
    elif isinstance(error, PermissionError):
        logger.debug(f"PermissionError details: Permission denied - {error_message}")
    elif isinstance(error, KeyError):
        logger.debug(f"KeyError details: Missing key - {error_message}")
    elif isinstance(error, MemoryError):
        logger.critical(f"MemoryError details: Out of memory - {error_message}")

    logger.debug(f"Full traceback for {error_type}:\n{traceback.format_exc()}")


def log_error_with_recovery(
    error: Exception,
    recovery_action: str,
    context: Optional[Dict[str, Any]] = None,
    operation: Optional[str] = None,
    entity_name: Optional[str] = None,
    attribute_name: Optional[str] = None,
) -> None:
    """Log an error at warning level together with the recovery action taken."""
    log_error(
        error=error,
        context=context,
        operation=operation,
        entity_name=entity_name,
        attribute_name=attribute_name,
        log_level="warning",
    )
    logger.warning(f"Recovery action: {recovery_action}")
