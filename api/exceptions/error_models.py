"""
错误响应数据模型
定义故障恢复中间件返回的标准化错误响应格式
"""
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """标准错误响应模型"""
    error: str = Field(..., description="错误原因")
    code: str = Field(..., description="故障类型标识，如 errDBDisConnection")
