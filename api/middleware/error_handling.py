"""
错误处理中间件
拦截请求处理过程中抛出的故障，上报日志并转换为HTTP响应
"""
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from api.exceptions.error_models import ErrorResponse
from infrastructure.errors import (
    UNKNOWN_ERROR_MESSAGE,
    UNKNOWN_HTTP_STATUS,
    recover,
)
from infrastructure.monitoring.loguru_logger import FaultLogger, get_fault_logger


class PanicErrorMiddleware(BaseHTTPMiddleware):
    """
    故障恢复中间件
    每个请求只经过一次：故障按目录映射为状态码，其他异常统一返回500，从不向外抛出
    """

    def __init__(
        self,
        app: ASGIApp,
        system: str,
        log_message: str = "",
        fault_logger: Optional[FaultLogger] = None,
    ):
        """
        初始化故障恢复中间件

        Args:
            app: 下游ASGI应用
            system: 绑定到故障上的系统标签
            log_message: 故障日志的消息前缀
            fault_logger: 故障日志记录器，默认使用进程级记录器
        """
        super().__init__(app)
        self.system = system
        self.log_message = log_message
        self.fault_logger = fault_logger or get_fault_logger()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        处理HTTP请求并恢复故障

        Args:
            request: HTTP请求对象
            call_next: 下一个中间件或路由处理器

        Returns:
            Response: 正常响应或故障对应的错误响应
        """
        try:
            return await call_next(request)
        except Exception as e:
            return self._handle_exception(e)

    def _handle_exception(self, exception: Exception) -> JSONResponse:
        """
        上报故障并生成响应

        Args:
            exception: 恢复到的异常

        Returns:
            JSONResponse: 故障映射的响应，未知异常返回500
        """
        fault, known = recover(exception)
        fault.set_system(self.system)
        fault.report(self.log_message, self.fault_logger)

        if known:
            return fault.http_report()

        # 未知异常不暴露内部细节
        return JSONResponse(
            status_code=UNKNOWN_HTTP_STATUS,
            content=ErrorResponse(error=UNKNOWN_ERROR_MESSAGE, code=fault.get_name().value).model_dump(),
        )


def setup_panic_error_handler(
    app: FastAPI,
    system: str,
    log_message: str = "",
    fault_logger: Optional[FaultLogger] = None,
) -> None:
    """
    在应用上安装故障恢复中间件

    Args:
        app: FastAPI应用实例
        system: 系统标签
        log_message: 故障日志的消息前缀
        fault_logger: 故障日志记录器
    """
    app.add_middleware(
        PanicErrorMiddleware,
        system=system,
        log_message=log_message,
        fault_logger=fault_logger,
    )


__all__ = ["PanicErrorMiddleware", "setup_panic_error_handler"]
