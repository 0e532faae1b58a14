"""
gRPC错误处理
在gRPC处理函数退出时恢复故障，上报日志并写入gRPC状态
"""
import functools
import inspect
from typing import Any, Callable, Optional

import grpc

from infrastructure.errors import (
    UNKNOWN_ERROR_MESSAGE,
    UNKNOWN_GRPC_STATUS,
    GRPCStatusError,
    recover,
    wrap_message,
)
from infrastructure.monitoring.loguru_logger import FaultLogger, get_fault_logger


class GRPCErrorGuard:
    """
    gRPC故障守卫
    作为上下文管理器包裹处理函数，无论成功失败都会在退出时执行，
    只在失败时写入 error（以及可选的 ServicerContext）

    用法:
        with GRPCErrorGuard("system", "handler failed", context) as guard:
            ...
        return guard.error
    """

    def __init__(
        self,
        system: str,
        prefix: str = "",
        context: Optional[grpc.ServicerContext] = None,
        fault_logger: Optional[FaultLogger] = None,
    ):
        """
        初始化gRPC故障守卫

        Args:
            system: 绑定到故障上的系统标签
            prefix: 日志消息及gRPC状态描述的前缀
            context: gRPC服务上下文，提供时写入状态码与描述
            fault_logger: 故障日志记录器，默认使用进程级记录器
        """
        self.system = system
        self.prefix = prefix
        self.context = context
        self.fault_logger = fault_logger or get_fault_logger()
        self.error: Optional[GRPCStatusError] = None

    def __enter__(self) -> "GRPCErrorGuard":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_value is None or not isinstance(exc_value, Exception):
            return False
        self.error = self._handle_exception(exc_value)
        return True

    async def __aenter__(self) -> "GRPCErrorGuard":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> bool:
        return self.__exit__(exc_type, exc_value, traceback)

    def _handle_exception(self, exception: Exception) -> GRPCStatusError:
        """
        上报故障并生成gRPC状态

        Args:
            exception: 恢复到的异常

        Returns:
            GRPCStatusError: 故障映射的状态，未知异常返回 INTERNAL
        """
        fault, known = recover(exception)
        fault.set_system(self.system)
        fault.report(self.prefix, self.fault_logger)

        if known:
            return fault.grpc_report(self.prefix, self.context)

        status = GRPCStatusError(UNKNOWN_GRPC_STATUS, wrap_message(self.prefix, UNKNOWN_ERROR_MESSAGE))
        if self.context is not None:
            status.apply(self.context)
        return status


def grpc_error_handler(
    system: str,
    prefix: str = "",
    fault_logger: Optional[FaultLogger] = None,
) -> Callable:
    """
    gRPC服务方法装饰器
    被装饰的方法签名为 (self, request, context)，失败时状态写入 context 并返回 None；
    服务端流式方法（同步或异步生成器）失败时写入状态后结束流

    Args:
        system: 系统标签
        prefix: 日志消息及gRPC状态描述的前缀
        fault_logger: 故障日志记录器
    """

    def decorator(method: Callable) -> Callable:
        # 流式方法：故障发生时写入状态并结束流
        if inspect.isasyncgenfunction(method):
            @functools.wraps(method)
            async def async_stream_wrapper(self, request: Any, context: grpc.ServicerContext):
                async with GRPCErrorGuard(system, prefix, context, fault_logger):
                    async for response in method(self, request, context):
                        yield response

            return async_stream_wrapper

        if inspect.isgeneratorfunction(method):
            @functools.wraps(method)
            def stream_wrapper(self, request: Any, context: grpc.ServicerContext):
                with GRPCErrorGuard(system, prefix, context, fault_logger):
                    yield from method(self, request, context)

            return stream_wrapper

        if inspect.iscoroutinefunction(method):
            @functools.wraps(method)
            async def async_wrapper(self, request: Any, context: grpc.ServicerContext):
                async with GRPCErrorGuard(system, prefix, context, fault_logger):
                    return await method(self, request, context)
                return None

            return async_wrapper

        @functools.wraps(method)
        def wrapper(self, request: Any, context: grpc.ServicerContext):
            with GRPCErrorGuard(system, prefix, context, fault_logger):
                return method(self, request, context)
            return None

        return wrapper

    return decorator


__all__ = ["GRPCErrorGuard", "grpc_error_handler"]
