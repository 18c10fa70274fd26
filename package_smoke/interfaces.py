"""
模块接口契约 - 定义各阶段的抽象接口

设计原则：
1. 阶段间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from package_smoke.interfaces import IArtifactExtractor

    class MyExtractor(IArtifactExtractor):
        def extract(self, platform: Platform, workspace: Path) -> ExtractedApp:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import (
        ExtractedApp,
        LaunchCommand,
        LaunchResult,
        PackagingResult,
        Platform,
    )


# ============================================================================
# 流水线阶段接口
# ============================================================================

class IPackagerRunner(ABC):
    """打包命令调用接口"""

    @abstractmethod
    def run(self, source_dir: str | None = None) -> PackagingResult:
        """
        执行 `<packager> package <source_dir>`

        Args:
            source_dir: 待打包的应用目录（默认取配置）

        Returns:
            打包结果（退出码为0且无stderr）

        Raises:
            PackagingError: 退出码非0或出现stderr输出
        """
        ...


class IDiskImageTool(ABC):
    """磁盘映像工具接口（仅macOS）"""

    @abstractmethod
    def attach(self, image: Path, mountpoint: Path) -> int:
        """挂载映像，返回退出码"""
        ...

    @abstractmethod
    def detach(self, mountpoint: Path) -> int:
        """卸载映像，返回退出码"""
        ...


class IArtifactExtractor(ABC):
    """安装包解包接口"""

    @abstractmethod
    def extract(self, platform: Platform, workspace: Path) -> ExtractedApp:
        """
        定位平台对应的安装包并解包到临时工作区

        Args:
            platform: 目标平台
            workspace: 临时工作区目录

        Returns:
            解包后的应用信息

        Raises:
            ExtractionError: 安装包缺失或损坏
            MountError: 磁盘映像挂载/卸载失败
        """
        ...


class IAppLauncher(ABC):
    """应用启动接口"""

    @abstractmethod
    def resolve(self, platform: Platform, app_dir: Path) -> LaunchCommand:
        """根据平台计算可执行文件路径与参数"""
        ...

    @abstractmethod
    def launch(self, command: LaunchCommand) -> LaunchResult:
        """
        启动应用并收集输出

        Args:
            command: 启动命令

        Returns:
            累积的stdout、退出码与信号

        Raises:
            LaunchError: 进程无法启动
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class PackageSmokeError(Exception):
    """基础异常"""
    pass


class UnsupportedPlatformError(PackageSmokeError):
    """不支持的平台"""
    pass


class PackagingError(PackageSmokeError):
    """打包命令失败"""
    pass


class ExtractionError(PackageSmokeError):
    """解包失败"""
    pass


class MountError(PackageSmokeError):
    """磁盘映像挂载/卸载失败"""
    pass


class LaunchError(PackageSmokeError):
    """应用启动失败"""
    pass


class VerificationError(PackageSmokeError):
    """输出校验失败"""
    pass
