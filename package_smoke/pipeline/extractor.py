"""
安装包解包器 - 按平台定位安装包并解包到临时工作区

职责：
1. windows: 解压 dist/<app>.zip
2. macos: 挂载 dist/<app>.dmg，复制 <app>.app，卸载
3. linux: 解压 dist/<app>.tgz
4. 校验应用目录已就位

测试要点：
- test_extract_zip: ZIP解压（保留权限位）
- test_extract_tgz: TGZ解压
- test_extract_dmg: 挂载/复制/卸载
- test_mount_failure: 挂载失败
- test_missing_artifact: 安装包不存在
- test_unsafe_member_rejected: TGZ成员越界
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import zipfile
from pathlib import Path

from ..config import SmokeConfig, get_config
from ..interfaces import ExtractionError, IArtifactExtractor, IDiskImageTool, MountError
from ..models import ExtractedApp, Platform
from .disk_image import HdiutilTool

logger = logging.getLogger(__name__)


class ArtifactExtractor(IArtifactExtractor):
    """安装包解包器实现"""

    def __init__(
        self,
        config: SmokeConfig | None = None,
        disk_image_tool: IDiskImageTool | None = None,
    ):
        self.config = config or get_config()
        self.disk_image_tool = disk_image_tool or HdiutilTool(self.config)

    def artifact_path(self, platform: Platform) -> Path:
        """安装包路径"""
        name = f"{self.config.artifacts.app_name}{platform.artifact_suffix}"
        return self.config.get_dist_dir() / name

    def app_dir(self, platform: Platform, workspace: Path) -> Path:
        """解包后的应用目录"""
        return workspace / f"{self.config.artifacts.app_name}{platform.app_dir_suffix}"

    def extract(self, platform: Platform, workspace: Path) -> ExtractedApp:
        """解包安装包"""
        artifact = self.artifact_path(platform)
        if not artifact.exists():
            raise ExtractionError(f"安装包不存在: {artifact}")

        app_dir = self.app_dir(platform, workspace)
        logger.info(f"解包安装包: {artifact} -> {workspace}")

        if platform is Platform.WINDOWS:
            self._extract_zip(artifact, workspace)
        elif platform is Platform.MACOS:
            self._copy_from_dmg(artifact, workspace, app_dir)
        elif platform is Platform.LINUX:
            self._extract_tgz(artifact, workspace)
        else:
            raise ExtractionError(f"未知平台: {platform}")

        if not app_dir.is_dir():
            raise ExtractionError(f"解包后应用目录不存在: {app_dir}")

        return ExtractedApp(platform=platform, artifact=artifact, app_dir=app_dir)

    @staticmethod
    def _extract_zip(artifact: Path, destination: Path) -> None:
        try:
            with zipfile.ZipFile(artifact) as zf:
                for info in zf.infolist():
                    extracted = Path(zf.extract(info, destination))
                    # 恢复Unix权限位（高16位）
                    mode = (info.external_attr >> 16) & 0o777
                    if mode and not info.is_dir():
                        extracted.chmod(mode)
        except (zipfile.BadZipFile, OSError) as e:
            raise ExtractionError(f"ZIP解压失败: {artifact}: {e}") from e

    @staticmethod
    def _extract_tgz(artifact: Path, destination: Path) -> None:
        try:
            with tarfile.open(artifact, "r:gz") as tf:
                if hasattr(tarfile, "data_filter"):
                    tf.extractall(destination, filter="data")
                else:
                    # 旧版解释器无 extraction filter，先自行校验成员路径
                    _check_tar_members(tf, destination)
                    tf.extractall(destination)
        except (tarfile.TarError, OSError) as e:
            raise ExtractionError(f"TGZ解压失败: {artifact}: {e}") from e

    def _copy_from_dmg(self, artifact: Path, workspace: Path, app_dir: Path) -> None:
        mountpoint = workspace / self.config.disk_image.mount_dir_name

        code = self.disk_image_tool.attach(artifact, mountpoint)
        if code != 0:
            raise MountError(f"磁盘映像挂载失败: {artifact} (exit={code})")

        source = mountpoint / app_dir.name
        try:
            shutil.copytree(source, app_dir, symlinks=True)
        except OSError as e:
            # 不做卸载恢复，磁盘映像保持挂载
            logger.error(f"复制应用失败，磁盘映像仍挂载于 {mountpoint}，需手动卸载")
            raise ExtractionError(
                f"复制应用失败: {source}: {e} (磁盘映像仍挂载于 {mountpoint})"
            ) from e

        code = self.disk_image_tool.detach(mountpoint)
        if code != 0:
            raise MountError(f"磁盘映像卸载失败: {mountpoint} (exit={code})")


def _check_tar_members(tf: tarfile.TarFile, destination: Path) -> None:
    """拒绝解包到目标目录之外的成员（绝对路径、..、越界链接、设备文件）"""
    root = destination.resolve()
    for member in tf.getmembers():
        target = (root / member.name).resolve()
        if not target.is_relative_to(root):
            raise ExtractionError(f"TGZ成员路径越界: {member.name}")
        if member.issym():
            link = (target.parent / member.linkname).resolve()
        elif member.islnk():
            link = (root / member.linkname).resolve()
        else:
            link = None
        if link is not None and not link.is_relative_to(root):
            raise ExtractionError(f"TGZ链接指向目标目录之外: {member.name} -> {member.linkname}")
        if member.isdev():
            raise ExtractionError(f"TGZ包含设备文件: {member.name}")
