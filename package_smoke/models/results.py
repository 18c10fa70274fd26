"""
阶段结果模型 - 打包/解包/启动各阶段的输出
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .platform import Platform


class PackagingResult(BaseModel):
    """打包命令结果"""
    exit_code: int | None
    signal: str | None = None
    stdout_lines: list[str] = Field(default_factory=list)
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.stderr


class ExtractedApp(BaseModel):
    """解包后的应用"""
    platform: Platform
    artifact: Path
    app_dir: Path


class LaunchCommand(BaseModel):
    """应用启动命令"""
    executable: Path
    args: list[str] = Field(default_factory=list)
    shell: bool = False

    def argv(self) -> list[str]:
        return [str(self.executable), *self.args]


class LaunchResult(BaseModel):
    """应用运行结果"""
    stdout: str = ""
    exit_code: int | None = None
    signal: str | None = None  # 被信号终止时的信号名

    @property
    def trimmed_output(self) -> str:
        return self.stdout.strip()
