"""
流水线阶段定义

职责：
1. 定义各阶段的名称与执行顺序
2. 阶段严格串行，前一阶段成功才进入下一阶段

测试要点：
- test_stage_order: 阶段顺序
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    PACKAGE = "PACKAGE"
    EXTRACT = "EXTRACT"
    LAUNCH = "LAUNCH"
    VERIFY = "VERIFY"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    description: str


# 冒烟测试流水线各阶段配置（清理在执行器的 finally 中完成）
SMOKE_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.PACKAGE.value, "执行打包命令"),
    PipelineStage(StageEnum.EXTRACT.value, "解包安装包"),
    PipelineStage(StageEnum.LAUNCH.value, "启动应用"),
    PipelineStage(StageEnum.VERIFY.value, "校验输出"),
]
