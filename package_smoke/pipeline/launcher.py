"""
应用启动器 - 按平台计算可执行文件并运行

职责：
1. windows: 运行时二进制 + --app <application.ini绝对路径> --new-instance，经命令行外壳启动
2. macos: <app>.app/Contents/MacOS/<app>
3. linux: <app>/<app>
4. 累积 stdout 用于校验，stderr 仅记录日志（平台噪声，不判定失败）

测试要点：
- test_resolve_per_platform: 各平台启动命令
- test_launch_collects_stdout: stdout 累积
- test_launch_missing_executable: 可执行文件不存在
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from ..config import SmokeConfig, get_config
from ..interfaces import IAppLauncher, LaunchError
from ..models import LaunchCommand, LaunchResult, Platform
from ..process import run_streaming

logger = logging.getLogger(__name__)


class AppLauncher(IAppLauncher):
    """应用启动器实现"""

    def __init__(self, config: SmokeConfig | None = None):
        self.config = config or get_config()
        self.timeout = self.config.timeouts.launch_sec

    def resolve(self, platform: Platform, app_dir: Path) -> LaunchCommand:
        """计算启动命令"""
        launch = self.config.launch
        app_name = self.config.artifacts.app_name

        if platform is Platform.WINDOWS:
            # TODO: 改为调用启动器而不是直接调用运行时
            app_ini = os.path.abspath(app_dir / launch.windows_app_ini)
            return LaunchCommand(
                executable=app_dir / launch.windows_runtime,
                args=["--app", app_ini, "--new-instance"],
                shell=True,
            )
        if platform is Platform.MACOS:
            return LaunchCommand(executable=app_dir / "Contents" / "MacOS" / app_name)
        if platform is Platform.LINUX:
            return LaunchCommand(executable=app_dir / app_name)
        raise LaunchError(f"未知平台: {platform}")

    def launch(self, command: LaunchCommand) -> LaunchResult:
        """启动应用并等待退出"""
        stdout_chunks: list[str] = []

        def _on_stdout(text: str) -> None:
            stdout_chunks.append(text)
            logger.info(text.strip())

        def _on_stderr(text: str) -> None:
            logger.warning(text.strip())

        logger.info(f"启动应用: {' '.join(command.argv())}")
        try:
            outcome = run_streaming(
                command.argv(),
                on_stdout=_on_stdout,
                on_stderr=_on_stderr,
                shell=command.shell,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise LaunchError(f"应用运行超时: {command.executable}") from e
        except OSError as e:
            raise LaunchError(f"应用无法启动: {command.executable}: {e}") from e

        return LaunchResult(
            stdout="".join(stdout_chunks),
            exit_code=outcome.exit_code,
            signal=outcome.signal,
        )
