"""
RowCoach - a rowing session stopwatch and split-timing service.

This package contains the complete application:
- core: Framework-agnostic timing engine and performance analysis
- infrastructure: External service integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
