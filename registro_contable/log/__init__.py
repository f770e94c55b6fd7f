"""Structured logging package."""

from registro_contable.log.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
