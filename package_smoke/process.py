"""
子进程执行器 - 启动外部命令并流式读取输出

职责：
1. 后台线程读取 stdout/stderr，逐行回调（读取与进程执行并行）
2. 进程退出后返回退出码与终止信号
3. 可选：首次出现 stderr 即终止进程
4. 可选超时（默认一直等待）
5. 子进程在独立进程组中启动，终止时连同其后代一并杀死

测试要点：
- test_stdout_stderr_callbacks: 输出回调
- test_stop_on_stderr: stderr 触发终止
- test_signal_reported: 信号终止
- test_timeout_kills_process_group: 后代进程持有管道时超时仍能返回
"""

from __future__ import annotations

import codecs
import logging
import os
import shlex
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Sequence

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]

# 进程退出后等待读取线程的最长秒数（后代进程可能仍持有管道）
READER_JOIN_TIMEOUT = 5.0


@dataclass
class ProcessOutcome:
    """进程退出状态"""
    exit_code: int | None  # 被信号终止时为 None
    signal: str | None = None


def run_streaming(
    cmd: Sequence[str | Path],
    *,
    on_stdout: OutputCallback | None = None,
    on_stderr: OutputCallback | None = None,
    shell: bool = False,
    cwd: Path | None = None,
    timeout: float | None = None,
    stop_on_stderr: bool = False,
) -> ProcessOutcome:
    """
    执行命令并等待退出

    Args:
        cmd: 命令及参数
        on_stdout: stdout 回调（每次一行，已解码）
        on_stderr: stderr 回调
        shell: 是否通过命令行外壳启动
        cwd: 工作目录
        timeout: 超时秒数，None 表示一直等待
        stop_on_stderr: 首次出现 stderr 时终止进程

    Returns:
        退出码与信号

    Raises:
        OSError: 命令无法启动
        subprocess.TimeoutExpired: 超时（整个进程组已被杀死）
    """
    args = [str(c) for c in cmd]
    popen_cmd: str | list[str] = args
    if shell:
        popen_cmd = subprocess.list2cmdline(args) if os.name == "nt" else shlex.join(args)

    logger.debug(f"启动进程: {popen_cmd}")
    proc = subprocess.Popen(
        popen_cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        shell=shell,
        cwd=str(cwd) if cwd else None,
        **_group_kwargs(),
    )
    stopping = threading.Event()

    def _on_stderr(text: str) -> None:
        if on_stderr:
            on_stderr(text)
        if stop_on_stderr and not stopping.is_set():
            stopping.set()
            _kill_group(proc, force=False)

    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, on_stdout), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, _on_stderr), daemon=True),
    ]
    for reader in readers:
        reader.start()

    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(proc, force=True)
        proc.wait()
        raise
    finally:
        _join_readers(readers)

    return _outcome(proc.returncode)


def _pump(stream: IO[bytes], callback: OutputCallback | None) -> None:
    """逐行读取输出流直到 EOF"""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    with stream:
        for chunk in iter(stream.readline, b""):
            text = decoder.decode(chunk)
            if text and callback:
                callback(text)
        tail = decoder.decode(b"", final=True)
        if tail and callback:
            callback(tail)


def _outcome(returncode: int) -> ProcessOutcome:
    # POSIX 下负数退出码表示被信号终止
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return ProcessOutcome(exit_code=None, signal=name)
    return ProcessOutcome(exit_code=returncode)


def _group_kwargs() -> dict:
    """让子进程成为新进程组的组长"""
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _kill_group(proc: subprocess.Popen, *, force: bool) -> None:
    """终止子进程及其所在进程组的全部后代"""
    if os.name == "nt":
        # taskkill /T 连同子进程树一起结束
        subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(proc.pid)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
        return
    sig = signal.SIGKILL if force else signal.SIGTERM
    try:
        os.killpg(proc.pid, sig)
    except (ProcessLookupError, PermissionError):
        # 进程组已全部退出（macOS 下仅剩僵尸进程时返回 EPERM）
        pass


def _join_readers(readers: list[threading.Thread]) -> None:
    deadline = time.monotonic() + READER_JOIN_TIMEOUT
    for reader in readers:
        reader.join(max(0.0, deadline - time.monotonic()))
    if any(reader.is_alive() for reader in readers):
        logger.warning(f"进程已退出，但输出管道仍被后代进程占用，{READER_JOIN_TIMEOUT}s 后停止等待")
