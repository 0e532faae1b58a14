"""
FastAPI主应用入口
文件存储网关：所有请求经过故障恢复中间件，故障统一转换为HTTP响应
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from api.middleware import setup_panic_error_handler
from api.routers.storage import register_storage_routes
from config.loguru_config import get_logger, setup_logging
from config.settings import CoreSettings, get_core_settings
from infrastructure.monitoring.loguru_logger import FaultLogger
from infrastructure.storage import driver
from infrastructure.storage.implementations import register_minio_storage

logger = get_logger("api.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    启动时注册存储驱动（已注册时跳过），关闭时释放连接
    """
    logger.info("FastAPI应用正在启动...")
    startup_time = time.time()

    if not driver.is_registered():
        register_minio_storage(app.state.core_settings)

    startup_duration = time.time() - startup_time
    logger.info(f"FastAPI应用启动完成，耗时: {startup_duration:.2f}秒")

    yield

    logger.info("FastAPI应用正在关闭...")
    if driver.is_registered():
        _, close_fn = driver.load()
        close_fn()
        driver.unload()


def create_fastapi_app(
    core: Optional[CoreSettings] = None,
    fault_logger: Optional[FaultLogger] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    创建并配置FastAPI应用实例

    Args:
        core: 核心配置，默认从环境变量读取
        fault_logger: 故障日志记录器，默认使用进程级记录器
        configure_logging: 是否初始化进程日志

    Returns:
        FastAPI: 配置完成的FastAPI应用实例
    """
    core = core or get_core_settings()

    if configure_logging:
        setup_logging(
            environment=core.environment,
            system=core.system_name,
            log_dir=core.log_dir,
            level=core.log_level,
        )

    app = FastAPI(
        title="Storage Gateway API",
        description="文件存储网关，提供上传、公开、删除与列表功能",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.core_settings = core

    # 故障恢复中间件
    setup_panic_error_handler(
        app,
        system=core.system_name,
        log_message=core.log_message,
        fault_logger=fault_logger,
    )

    @app.get("/ping", response_class=PlainTextResponse, include_in_schema=False)
    async def ping():
        """存活检查"""
        return "ok"

    register_storage_routes(app, core.storage_prefix)

    logger.info("FastAPI应用创建完成")
    return app
