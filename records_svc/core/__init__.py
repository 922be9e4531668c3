"""
Core module for application configuration, logging, errors and dependency injection.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency injection: FastAPI Depends() functions for services and repositories
- Exceptions: Domain-specific exception classes carrying NOT_FOUND/INTERNAL codes
- Logging: Structured JSON logging with request id propagation
"""
