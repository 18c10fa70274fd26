"""
运行记录模型 - 单次冒烟测试的状态与生命周期

整条流水线只传递这一份结果，最终在入口处转换为进程退出码。
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .platform import Platform
from .results import ExtractedApp, LaunchResult, PackagingResult


class RunStatus(str, Enum):
    """运行状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SmokeRun(BaseModel):
    """冒烟测试运行实体"""
    run_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    platform: Platform | None = None

    # 状态
    status: RunStatus = RunStatus.QUEUED
    stage: str = "INIT"

    # 工作区（运行时设置）
    workspace: Path | None = None
    workspace_removed: bool = False

    # 各阶段结果
    packaging: PackagingResult | None = None
    extracted: ExtractedApp | None = None
    launch: LaunchResult | None = None

    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self, stage: str = "PACKAGE") -> None:
        """标记为运行中"""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now()
        self.stage = stage

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = RunStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = RunStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    @property
    def exit_code(self) -> int:
        """进程退出码：全部通过为0，否则为1"""
        return 0 if self.status == RunStatus.SUCCEEDED else 1
