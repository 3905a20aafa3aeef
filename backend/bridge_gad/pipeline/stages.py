"""
流水线阶段定义

各阶段名称与进度区间；阶段逻辑由 PipelineExecutor 按名称分派

测试要点：
- test_stage_order: 阶段顺序与进度区间衔接
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    PARSE_INPUT = "PARSE_INPUT"
    EMIT_COMMANDS = "EMIT_COMMANDS"
    ENCODE_DXF = "ENCODE_DXF"
    WRITE_SNAPSHOT = "WRITE_SNAPSHOT"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 出图流水线各阶段配置
DRAWING_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.PARSE_INPUT.value, 0, 20),
    PipelineStage(StageEnum.EMIT_COMMANDS.value, 20, 70),
    PipelineStage(StageEnum.ENCODE_DXF.value, 70, 95),
    PipelineStage(StageEnum.WRITE_SNAPSHOT.value, 95, 100),
]
