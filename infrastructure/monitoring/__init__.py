"""
Monitoring Module

Structured fault logging on top of loguru.
"""

from .loguru_logger import (
    FaultLogger,
    get_fault_logger,
    root_cause,
)

__all__ = [
    "FaultLogger",
    "get_fault_logger",
    "root_cause",
]
