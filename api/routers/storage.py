"""
文件存储API路由
提供文件上传、公开、删除与列表功能

处理过程中的失败统一包装为故障抛出，由故障恢复中间件转换为HTTP响应
"""
import json
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, ValidationError
from starlette.datastructures import UploadFile

from api.exceptions.error_models import ErrorResponse
from infrastructure.errors import (
    DataNotFoundFault,
    DBExecuteFault,
    DBRowNotFoundFault,
    DriveNotExistError,
    ExecuteFault,
    FileNotExistError,
    GetFileError,
    JSONUnmarshalFault,
    SentinelError,
    VariableFault,
)
from infrastructure.monitoring.loguru_logger import logger
from infrastructure.storage import (
    FileQuery,
    FileStorageInterface,
    StoredFile,
    driver,
    with_file_delimiter,
    with_file_prefix,
)

DEFAULT_PREFIX = "/storage"

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


class PathRequest(BaseModel):
    """文件路径请求模型"""
    path: str = Field(..., min_length=1, description="对象路径")


class UploadResponse(BaseModel):
    """上传响应模型"""
    path: str


class URLResponse(BaseModel):
    """公开链接响应模型"""
    url: str


def get_file_storage() -> FileStorageInterface:
    """获取已注册的文件存储"""
    try:
        storage, _ = driver.load()
    except DriveNotExistError as e:
        raise ExecuteFault(e) from e
    return storage


async def _read_path_request(request: Request) -> PathRequest:
    """解析并校验 {"path": ...} 请求体"""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JSONUnmarshalFault(e) from e
    try:
        return PathRequest.model_validate(body)
    except ValidationError as e:
        raise VariableFault(e) from e


@router.post("", response_model=UploadResponse, summary="上传文件")
async def upload(request: Request, storage: FileStorageInterface = Depends(get_file_storage)):
    """
    上传文件

    表单字段 file 为文件内容，prefix 为可选的子路径
    """
    try:
        form = await request.form()
    except Exception as e:
        raise ExecuteFault(e) from e

    file = form.get("file")
    if not isinstance(file, UploadFile):
        raise ExecuteFault(ValueError("no such file"))

    prefix = form.get("prefix")
    prefix = prefix if isinstance(prefix, str) else ""
    content_type = file.content_type or "application/octet-stream"

    try:
        path = await storage.upload(prefix, file.file, content_type=content_type)
    except SentinelError as e:
        raise DBExecuteFault(e) from e

    logger.info(f"文件上传成功: {path}")
    return UploadResponse(path=path)


@router.put("", response_model=URLResponse, summary="公开文件")
async def publicize(request: Request, storage: FileStorageInterface = Depends(get_file_storage)):
    """公开文件并返回公开链接"""
    req = await _read_path_request(request)
    try:
        url = await storage.get_url(req.path)
    except FileNotExistError as e:
        raise DataNotFoundFault(e) from e
    except SentinelError as e:
        raise DBExecuteFault(e) from e
    return URLResponse(url=url)


@router.delete("", response_class=PlainTextResponse, summary="删除文件")
async def remove(request: Request, storage: FileStorageInterface = Depends(get_file_storage)):
    """删除文件"""
    req = await _read_path_request(request)
    try:
        await storage.remove(req.path)
    except SentinelError as e:
        raise DBExecuteFault(e) from e
    return PlainTextResponse("ok")


@router.get("", summary="文件列表")
async def list_files(
    delimiter: Optional[str] = None,
    prefix: Optional[str] = None,
    storage: FileStorageInterface = Depends(get_file_storage),
):
    """按前缀与分隔符列出文件和目录"""
    query = FileQuery()
    if delimiter:
        query = with_file_delimiter(query, delimiter)
    if prefix:
        query = with_file_prefix(query, prefix)

    files: List[StoredFile] = []
    try:
        await storage.list(query, files.append)
    except GetFileError as e:
        raise DBRowNotFoundFault(e) from e
    except (SentinelError, ValueError) as e:
        raise DBExecuteFault(e) from e

    return JSONResponse(content=[item.to_dict() for item in files])


def register_storage_routes(app: FastAPI, prefix: str = DEFAULT_PREFIX) -> None:
    """
    注册文件存储路由

    Args:
        app: FastAPI应用实例
        prefix: 路由前缀
    """
    app.include_router(router, prefix=prefix or DEFAULT_PREFIX, tags=["文件存储"])
