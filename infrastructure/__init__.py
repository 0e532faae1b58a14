"""
Infrastructure Layer

This module provides the foundational services: the fault catalog, fault
logging and file storage.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
