"""
流水线模块 - 冒烟测试编排与执行

子模块：
- stages: 流水线各阶段定义
- packager: 打包命令调用
- extractor: 安装包解包（disk_image: macOS 磁盘映像）
- launcher: 应用启动
- verifier: 输出校验
- workspace: 临时工作区
- executor: 流水线执行器
"""

from .disk_image import HdiutilTool
from .executor import SmokeTestExecutor
from .extractor import ArtifactExtractor
from .launcher import AppLauncher
from .packager import PackagerRunner
from .stages import SMOKE_STAGES, PipelineStage, StageEnum
from .verifier import LaunchVerifier
from .workspace import TempWorkspace

__all__ = [
    "PipelineStage",
    "StageEnum",
    "SMOKE_STAGES",
    "PackagerRunner",
    "HdiutilTool",
    "ArtifactExtractor",
    "AppLauncher",
    "LaunchVerifier",
    "TempWorkspace",
    "SmokeTestExecutor",
]
