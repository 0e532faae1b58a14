"""
测试配置文件
定义pytest的配置和共享fixtures
"""
import os
import uuid
from typing import Any, Dict, Generator, List

import pytest
from loguru import logger

# 设置测试环境
os.environ["ENVIRONMENT"] = "testing"
os.environ["SYSTEM_NAME"] = "Mock system"

from infrastructure.monitoring.loguru_logger import FaultLogger  # noqa: E402
from infrastructure.storage import driver  # noqa: E402


class ObservedLogs:
    """收集某个故障日志记录器写出的日志记录"""

    def __init__(self, fault_logger: FaultLogger):
        self.fault_logger = fault_logger
        self.records: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self.records)

    def all(self) -> List[Dict[str, Any]]:
        return list(self.records)


@pytest.fixture
def observed_logs() -> Generator[ObservedLogs, None, None]:
    """
    隔离的日志观察器
    只收集绑定了本次 capture 标识的记录，测试结束时移除处理器
    """
    capture_id = uuid.uuid4().hex
    observed = ObservedLogs(FaultLogger(system="Mock system", base_logger=logger.bind(capture=capture_id)))

    def sink(message):
        record = message.record
        observed.records.append({
            "level": record["level"].name,
            "message": record["message"],
            "extra": dict(record["extra"]),
        })

    handler_id = logger.add(
        sink,
        level="WARNING",
        filter=lambda record: record["extra"].get("capture") == capture_id,
    )
    yield observed
    logger.remove(handler_id)


@pytest.fixture
def clean_driver() -> Generator[None, None, None]:
    """每个测试前后清空存储驱动注册表"""
    driver.unload()
    yield
    driver.unload()
