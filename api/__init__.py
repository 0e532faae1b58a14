"""
Storage Gateway API Layer

This module provides the FastAPI-based REST API layer and the recovery
boundaries for HTTP and gRPC handlers.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
