"""
Observability package: tracing and logging setup.
"""

from .config import setup_observability, setup_structured_logging

__all__ = ["setup_observability", "setup_structured_logging"]
