"""
基础设施层的Loguru日志配置
为故障上报提供统一的结构化日志记录器
"""

from functools import lru_cache
from typing import Any, Optional

from config.loguru_config import get_logger
from config.settings import get_core_settings

# 创建基础设施层的日志记录器
logger = get_logger(__name__)


def root_cause(error: BaseException) -> BaseException:
    """沿 __cause__ 链找到最底层的原始异常"""
    seen = set()
    while getattr(error, "__cause__", None) is not None and id(error) not in seen:
        seen.add(id(error))
        error = error.__cause__
    return error


class FaultLogger:
    """
    故障日志记录器
    绑定 system 字段的 loguru 记录器，故障上报只通过它写日志
    """

    def __init__(self, system: str = "", base_logger: Any = None):
        """
        初始化故障日志记录器

        Args:
            system: 默认的系统标签
            base_logger: 底层 loguru 记录器，默认使用全局 logger
        """
        self.system = system
        self._logger = (base_logger or logger).bind(system=system)

    def warn(self, message: str, error: BaseException, system: Optional[str] = None, **fields: Any) -> None:
        """
        记录一条 warning 级别的故障日志

        Args:
            message: 日志消息（允许为空字符串）
            error: 原始错误
            system: 故障自身绑定的系统标签，为空时使用默认标签
            **fields: 其他结构化字段
        """
        bound = self._logger.bind(error=error, root_cause=root_cause(error), **fields)
        if system:
            bound = bound.bind(system=system)
        bound.warning(message)


@lru_cache()
def get_fault_logger() -> FaultLogger:
    """获取进程级默认故障日志记录器（带缓存）"""
    return FaultLogger(system=get_core_settings().system_name)
