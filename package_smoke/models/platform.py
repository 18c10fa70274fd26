"""
平台描述 - 决定安装包格式、解包方式与可执行文件路径

运行开始时识别一次，整个运行期间不变。
"""

from __future__ import annotations

import sys
from enum import Enum

from ..interfaces import UnsupportedPlatformError


class Platform(str, Enum):
    """目标平台枚举"""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @classmethod
    def detect(cls, sys_platform: str | None = None) -> Platform:
        """根据 sys.platform 识别宿主平台"""
        value = sys_platform if sys_platform is not None else sys.platform
        if value == "win32":
            return cls.WINDOWS
        if value == "darwin":
            return cls.MACOS
        if value.startswith("linux"):
            return cls.LINUX
        raise UnsupportedPlatformError(f"不支持的平台: {value}")

    @property
    def artifact_suffix(self) -> str:
        """安装包后缀"""
        return _ARTIFACT_SUFFIX[self]

    @property
    def app_dir_suffix(self) -> str:
        """解包后应用目录后缀（macOS 为 .app 包）"""
        return ".app" if self is Platform.MACOS else ""


_ARTIFACT_SUFFIX = {
    Platform.WINDOWS: ".zip",
    Platform.MACOS: ".dmg",
    Platform.LINUX: ".tgz",
}
