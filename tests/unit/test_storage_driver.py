"""
存储驱动注册表测试
"""
from unittest.mock import Mock

import pytest

from infrastructure.errors import DriveNotExistError
from infrastructure.storage import driver


@pytest.mark.usefixtures("clean_driver")
class TestStorageDriver:
    """存储驱动注册表测试"""

    def test_load_without_registration(self):
        """测试未注册时加载失败"""
        assert driver.is_registered() is False
        with pytest.raises(DriveNotExistError):
            driver.load()

    def test_register_and_load(self):
        """测试注册后可以加载"""
        storage = Mock()
        close_fn = Mock()

        driver.register(storage, close_fn)

        assert driver.is_registered() is True
        assert driver.load() == (storage, close_fn)

    def test_register_replaces_previous(self):
        """测试重复注册覆盖旧驱动"""
        driver.register(Mock(), Mock())
        storage = Mock()
        driver.register(storage, Mock())

        assert driver.load()[0] is storage

    def test_unload(self):
        """测试卸载驱动"""
        driver.register(Mock(), Mock())
        driver.unload()

        assert driver.is_registered() is False
        with pytest.raises(DriveNotExistError):
            driver.load()
