"""
MinIO文件存储测试
使用模拟的MinIO客户端测试路径校验、上传、公开、删除与列表
"""
import io
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from minio.error import S3Error

from config.settings import MediaSettings
from infrastructure.errors import (
    FailCloseSessionError,
    FileNotExistError,
    FileRemoveError,
    FileUpdateError,
    FileUploadError,
    GetFileError,
)
from infrastructure.storage import (
    FileQuery,
    Projection,
    StoredFile,
    with_file_delimiter,
    with_file_end_offset,
    with_file_prefix,
    with_file_projection,
    with_file_start_offset,
    with_file_versions,
)
from infrastructure.storage.implementations.minio_client import (
    MinIOFileStorage,
    join_path,
    object_key,
    public_url,
    to_list_options,
    verify_path,
)


def s3_error(code: str) -> S3Error:
    """构造MinIO错误"""
    return S3Error(
        code=code,
        message=code,
        resource="/bucket/object",
        request_id="request",
        host_id="host",
        response=Mock(),
    )


def minio_object(name, is_dir=False, size=0, content_type=None):
    """构造MinIO列表项"""
    return SimpleNamespace(
        object_name=name,
        is_dir=is_dir,
        size=size,
        content_type=content_type,
        etag=None if is_dir else "etag",
        last_modified=None if is_dir else datetime(2024, 1, 1, 12, 0, 0),
        metadata=None,
    )


@pytest.fixture
def media():
    """媒体配置"""
    return MediaSettings(storage_domain="https://cdn.example.com", bucket_name="media", prefix_path="uploads")


@pytest.fixture
def client():
    """模拟的MinIO客户端"""
    return Mock()


@pytest.fixture
def storage(media, client):
    """MinIO文件存储"""
    return MinIOFileStorage(media, client)


class TestPathHelpers:
    """路径辅助函数测试"""

    @pytest.mark.parametrize("path", [
        "a.txt",
        "/uploads/2024/report (1).pdf",
        "folder/sub_folder/file-name.tar.gz",
        "weird $%& name",
    ])
    def test_valid_paths(self, path):
        """测试合法路径"""
        verify_path(path)

    @pytest.mark.parametrize("path", [
        "",
        ".",
        "..",
        "folder/",
        "a" * 1025,
        ".well-known/acme-challenge/token",
        "bad\npath",
        "中文.txt",
        "a?b",
    ])
    def test_invalid_paths(self, path):
        """测试非法路径"""
        with pytest.raises(ValueError):
            verify_path(path)

    def test_join_path(self):
        """测试路径拼接"""
        assert join_path("uploads", "", "abc") == "uploads/abc"
        assert join_path("/uploads/", "/img/", "abc") == "/uploads/img/abc"
        assert join_path("", "") == ""

    def test_object_key(self):
        """测试对象名去掉开头的斜杠"""
        assert object_key("/uploads/abc") == "uploads/abc"
        assert object_key("uploads/abc") == "uploads/abc"

    def test_public_url(self):
        """测试公开链接"""
        assert public_url("https://cdn.example.com/", "media", "/a/b.txt") == "https://cdn.example.com/media/a/b.txt"
        assert public_url("https://cdn.example.com", "media", "a/b.txt") == "https://cdn.example.com/media/a/b.txt"


class TestListOptions:
    """列表查询子句测试"""

    def test_empty_query(self):
        """测试空查询递归列出全部对象"""
        options = to_list_options(FileQuery())
        assert options.recursive is True
        assert options.prefix is None

    def test_delimiter_lists_one_level(self):
        """测试分隔符只列出一层"""
        query = with_file_prefix(with_file_delimiter(FileQuery(), "/"), "/uploads")
        options = to_list_options(query)

        assert options.recursive is False
        assert options.prefix == "uploads/"

    def test_prefix_only(self):
        """测试只按前缀过滤"""
        options = to_list_options(with_file_prefix(FileQuery(), "/uploads/img"))
        assert options.prefix == "uploads/img"
        assert options.recursive is True

    def test_other_clauses(self):
        """测试版本、偏移与投影子句"""
        query = FileQuery()
        query = with_file_versions(query, True)
        query = with_file_start_offset(query, "/a")
        query = with_file_end_offset(query, "/m")
        query = with_file_projection(query, Projection.FULL)

        options = to_list_options(query)

        assert options.include_version is True
        assert options.start_after is None
        assert options.start_offset == "a"
        assert options.end_offset == "m"
        assert options.include_user_meta is True
        assert "end_offset" not in options.to_kwargs()
        assert "start_offset" not in options.to_kwargs()

    @pytest.mark.parametrize("query", [
        with_file_delimiter(FileQuery(), ""),
        with_file_prefix(FileQuery(), ""),
        with_file_start_offset(FileQuery(), ""),
        with_file_end_offset(FileQuery(), ""),
        with_file_delimiter(FileQuery(), ","),
    ])
    def test_invalid_clause(self, query):
        """测试缺少取值的子句"""
        with pytest.raises(ValueError):
            to_list_options(query)

    def test_query_is_immutable(self):
        """测试查询构建不修改原查询"""
        base = FileQuery()
        derived = with_file_prefix(base, "a")
        assert base.fields == ()
        assert derived.prefix == "a"


class TestMinIOUpload:
    """上传测试"""

    @pytest.mark.asyncio
    async def test_upload(self, storage, client):
        """测试上传返回带前缀的对象路径"""
        stream = io.BytesIO(b"content")

        path = await storage.upload("img", stream, content_type="image/png")

        assert path.startswith("uploads/img/")
        kwargs = client.put_object.call_args.kwargs
        assert kwargs["bucket_name"] == "media"
        assert kwargs["object_name"] == path
        assert kwargs["length"] == -1
        assert kwargs["content_type"] == "image/png"
        assert stream.closed

    @pytest.mark.asyncio
    async def test_upload_failure(self, storage, client):
        """测试写入失败"""
        client.put_object.side_effect = s3_error("AccessDenied")

        with pytest.raises(FileUploadError):
            await storage.upload("img", io.BytesIO(b"content"))

    @pytest.mark.asyncio
    async def test_upload_invalid_prefix(self, storage, client):
        """测试非法前缀"""
        with pytest.raises(FileUploadError):
            await storage.upload("bad?prefix", io.BytesIO(b"content"))
        client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_failure(self, storage):
        """测试源流关闭失败"""
        stream = Mock()
        stream.close.side_effect = OSError("closed twice")

        with pytest.raises(FailCloseSessionError):
            await storage.upload("img", stream)


class TestMinIOPublicize:
    """公开文件测试"""

    @pytest.mark.asyncio
    async def test_get_url(self, storage, client):
        """测试公开对象并返回链接"""
        url = await storage.get_url("/uploads/a.txt")

        assert url == "https://cdn.example.com/media/uploads/a.txt"
        client.stat_object.assert_called_once_with(bucket_name="media", object_name="uploads/a.txt")
        tags = client.set_object_tags.call_args.kwargs["tags"]
        assert tags["visibility"] == "public"

    @pytest.mark.asyncio
    async def test_missing_object(self, storage, client):
        """测试对象不存在"""
        client.stat_object.side_effect = s3_error("NoSuchKey")

        with pytest.raises(FileNotExistError):
            await storage.get_url("uploads/missing.txt")
        client.set_object_tags.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_failure(self, storage, client):
        """测试其他失败"""
        client.set_object_tags.side_effect = s3_error("AccessDenied")

        with pytest.raises(FileUpdateError):
            await storage.get_url("uploads/a.txt")

    @pytest.mark.asyncio
    async def test_invalid_path(self, storage, client):
        """测试非法路径"""
        with pytest.raises(FileUpdateError):
            await storage.get_url("..")
        client.stat_object.assert_not_called()


class TestMinIORemove:
    """删除文件测试"""

    @pytest.mark.asyncio
    async def test_remove(self, storage, client):
        """测试删除对象"""
        await storage.remove("/uploads/a.txt")
        client.remove_object.assert_called_once_with(bucket_name="media", object_name="uploads/a.txt")

    @pytest.mark.asyncio
    async def test_remove_missing(self, storage, client):
        """测试删除不存在的对象"""
        client.stat_object.side_effect = s3_error("NoSuchKey")

        with pytest.raises(FileRemoveError):
            await storage.remove("uploads/a.txt")
        client.remove_object.assert_not_called()


class TestMinIOList:
    """文件列表测试"""

    @pytest.mark.asyncio
    async def test_list_files_and_folders(self, storage, client):
        """测试列出文件与目录"""
        client.list_objects.return_value = iter([
            minio_object("uploads/img/", is_dir=True),
            minio_object("uploads/a.txt", size=7, content_type="text/plain"),
        ])
        query = with_file_prefix(with_file_delimiter(FileQuery(), "/"), "uploads")

        files = await storage.collect(query)

        assert client.list_objects.call_args.kwargs["prefix"] == "uploads/"
        assert client.list_objects.call_args.kwargs["recursive"] is False

        folder, file = files
        assert folder.folder_info() == ("img", "uploads/img/", True)
        assert file.folder_info() == ("", "", False)
        assert file.name == "a.txt"
        assert file.public_url == "https://cdn.example.com/media/uploads/a.txt"
        assert file.size == 7

    @pytest.mark.asyncio
    async def test_end_offset_stops_listing(self, storage, client):
        """测试结束偏移之后的对象不返回"""
        client.list_objects.return_value = iter([
            minio_object("a.txt"),
            minio_object("b.txt"),
            minio_object("c.txt"),
        ])

        files = await storage.collect(with_file_end_offset(FileQuery(), "c.txt"))

        assert [f.path for f in files] == ["a.txt", "b.txt"]

    @pytest.mark.asyncio
    async def test_start_offset_is_inclusive(self, storage, client):
        """测试起始偏移处的对象包含在列表中"""
        client.list_objects.return_value = iter([
            minio_object("b.tx0"),
            minio_object("b.txt"),
            minio_object("c.txt"),
        ])

        files = await storage.collect(with_file_start_offset(FileQuery(), "/b.txt"))

        assert client.list_objects.call_args.kwargs["start_after"] == "b.tx"
        assert [f.path for f in files] == ["b.txt", "c.txt"]

    @pytest.mark.asyncio
    async def test_list_failure(self, storage, client):
        """测试列表失败"""
        client.list_objects.side_effect = s3_error("NoSuchBucket")

        with pytest.raises(GetFileError):
            await storage.collect(FileQuery())

    @pytest.mark.asyncio
    async def test_handler_failure(self, storage, client):
        """测试回调失败"""
        client.list_objects.return_value = iter([minio_object("a.txt")])

        def handler(item):
            raise RuntimeError("stop")

        with pytest.raises(GetFileError):
            await storage.list(FileQuery(), handler)

    @pytest.mark.asyncio
    async def test_invalid_query(self, storage, client):
        """测试非法查询"""
        with pytest.raises(ValueError):
            await storage.collect(with_file_prefix(FileQuery(), ""))
        client.list_objects.assert_not_called()


class TestStoredFile:
    """文件模型测试"""

    def test_to_dict_drops_empty_values(self):
        """测试序列化时省略空值"""
        data = StoredFile(path="a/b.txt", size=3).to_dict()
        assert data == {"path": "a/b.txt", "size": 3}
