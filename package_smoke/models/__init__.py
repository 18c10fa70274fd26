"""
数据模型层 - 定义流水线核心数据结构

各阶段通过这些模型交互，实现解耦：
- Platform: 平台描述
- PackagingResult / ExtractedApp / LaunchResult: 各阶段结果
- SmokeRun: 单次运行记录
"""

from .platform import Platform
from .results import ExtractedApp, LaunchCommand, LaunchResult, PackagingResult
from .run import RunStatus, SmokeRun

__all__ = [
    "Platform",
    "PackagingResult",
    "ExtractedApp",
    "LaunchCommand",
    "LaunchResult",
    "SmokeRun",
    "RunStatus",
]
