"""
API异常模型
"""

from .error_models import ErrorResponse

__all__ = ["ErrorResponse"]
