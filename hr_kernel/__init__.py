"""
HR Kernel

Shared foundation for the HR calculation core:
- Structured JSON logging with request-scoped context
- Typed, coded exception hierarchy
- Injectable clock
- SQLAlchemy declarative base and session management
"""

__version__ = "0.1.0"
