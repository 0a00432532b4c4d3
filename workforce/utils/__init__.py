"""Logging helpers shared by the engine modules."""

from workforce.utils.logging import bind_report_context, configure_logging, get_logger

__all__ = ["bind_report_context", "configure_logging", "get_logger"]
