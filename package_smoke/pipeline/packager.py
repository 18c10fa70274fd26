"""
打包命令调用 - 执行 `<packager> package <source_dir>`

职责：
1. 在项目目录下执行打包命令
2. stdout 逐行写入日志
3. 出现任何 stderr 输出即判定失败并终止进程
4. 退出码必须为0

测试要点：
- test_package_success: 正常打包
- test_package_nonzero_exit: 退出码非0
- test_package_stderr: stderr 输出判定失败
"""

from __future__ import annotations

import logging
import subprocess

from ..config import SmokeConfig, get_config
from ..interfaces import IPackagerRunner, PackagingError
from ..models import PackagingResult
from ..process import run_streaming

logger = logging.getLogger(__name__)


class PackagerRunner(IPackagerRunner):
    """打包命令封装"""

    def __init__(self, config: SmokeConfig | None = None):
        self.config = config or get_config()
        self.timeout = self.config.timeouts.packager_sec

    def run(self, source_dir: str | None = None) -> PackagingResult:
        """执行打包命令"""
        cmd = self.config.get_packager_cmd(source_dir)
        stdout_lines: list[str] = []
        stderr_chunks: list[str] = []

        def _on_stdout(text: str) -> None:
            line = text.rstrip("\r\n")
            stdout_lines.append(line)
            logger.info(line)
            # TODO: 打包命令的输出格式确定后，在此校验输出内容

        def _on_stderr(text: str) -> None:
            stderr_chunks.append(text)
            logger.error(text.rstrip())

        logger.info(f"执行打包命令: {' '.join(cmd)}")
        try:
            outcome = run_streaming(
                cmd,
                on_stdout=_on_stdout,
                on_stderr=_on_stderr,
                cwd=self.config.project_dir,
                timeout=self.timeout,
                stop_on_stderr=True,
            )
        except subprocess.TimeoutExpired as e:
            raise PackagingError(f"打包命令超时: {cmd[0]}") from e
        except OSError as e:
            raise PackagingError(f"打包命令无法启动: {e}") from e

        result = PackagingResult(
            exit_code=outcome.exit_code,
            signal=outcome.signal,
            stdout_lines=stdout_lines,
            stderr="".join(stderr_chunks),
        )

        if not result.succeeded:
            if result.stderr:
                raise PackagingError(f"打包命令输出错误信息: {result.stderr.strip()}")
            raise PackagingError(
                f"打包命令退出码非0: {result.exit_code} (signal={result.signal})"
            )
        return result
