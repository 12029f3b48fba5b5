"""
Core utilities and configuration for Telloom.

This package provides core functionality including logging configuration,
domain errors, the database layer, shared models and the signed URL cache.
"""

from telloom.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
