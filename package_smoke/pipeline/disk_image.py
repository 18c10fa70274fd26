"""
磁盘映像工具 - hdiutil attach/detach 封装（仅macOS）

依赖：
- hdiutil 可执行文件（路径由运行期配置指定）
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..config import SmokeConfig, get_config
from ..interfaces import IDiskImageTool, MountError
from ..process import run_streaming

logger = logging.getLogger(__name__)


class HdiutilTool(IDiskImageTool):
    """hdiutil 封装"""

    def __init__(self, config: SmokeConfig | None = None):
        config = config or get_config()
        self.exe_path = config.disk_image.exe_path
        self.timeout = config.timeouts.disk_image_sec

    def attach(self, image: Path, mountpoint: Path) -> int:
        """挂载映像（不弹出访达窗口）"""
        return self._run(["attach", str(image), "-mountpoint", str(mountpoint), "-nobrowse"])

    def detach(self, mountpoint: Path) -> int:
        """卸载映像"""
        return self._run(["detach", str(mountpoint)])

    def _run(self, args: list[str]) -> int:
        cmd = [self.exe_path, *args]
        logger.info(f"执行: {' '.join(cmd)}")
        try:
            outcome = run_streaming(
                cmd,
                on_stdout=lambda text: logger.info(text.rstrip()),
                on_stderr=lambda text: logger.warning(text.rstrip()),
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise MountError(f"{self.exe_path} {args[0]} 超时") from e
        except OSError as e:
            raise MountError(f"{self.exe_path} 无法启动: {e}") from e
        return outcome.exit_code if outcome.exit_code is not None else -1
