"""
故障恢复中间件模块
包含HTTP请求管线与gRPC处理函数两种恢复边界
"""

from .error_handling import PanicErrorMiddleware, setup_panic_error_handler
from .grpc_error_handling import GRPCErrorGuard, grpc_error_handler

__all__ = [
    "PanicErrorMiddleware",
    "setup_panic_error_handler",
    "GRPCErrorGuard",
    "grpc_error_handler",
]
