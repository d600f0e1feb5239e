"""
Core utilities and configuration for the traffic index ETL.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Async engine creation for a single run
    exceptions: Custom exception hierarchy with per-stage exit codes
    logging: Logging configuration and utilities

Usage:
    from core.config import load_settings
    from core.database import create_engine
    from core.exceptions import NetworkError, InsertError
    from core.logging import setup_logging

Example:
    settings = load_settings()
    setup_logging(settings.LOG_LEVEL)
    engine = create_engine(settings.database_url)
"""

__all__ = [
    "load_settings",
    "Settings",
    "TrafficEndpoint",
    "create_engine",
    "setup_logging",
    "mask_url",
    # Exceptions
    "ETLException",
    "ConfigurationError",
    "RunLockError",
    "ExtractionError",
    "APIExtractionError",
    "NetworkError",
    "HTTPStatusError",
    "ResponseReadError",
    "SnapshotWriteError",
    "TransformationError",
    "DataFormatError",
    "SchemaValidationError",
    "LoadError",
    "DatabaseConnectionError",
    "TransactionError",
    "DatabaseError",
    "InsertError",
]
