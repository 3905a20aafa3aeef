"""
流水线模块 - 任务编排与执行

子模块：
- job_manager: 任务创建/查询/持久化
- executor: 流水线执行器
- stages: 阶段定义
"""

from .executor import PipelineExecutor
from .job_manager import JobManager
from .stages import DRAWING_STAGES, PipelineStage, StageEnum

__all__ = [
    "JobManager",
    "PipelineExecutor",
    "PipelineStage",
    "StageEnum",
    "DRAWING_STAGES",
]
