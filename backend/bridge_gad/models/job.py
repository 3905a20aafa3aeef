"""
出图任务模型 - 参数快照 + DXF产物，按任务ID持久化

一个任务 = 一个输入文件 → 一个参数集快照 → 一个DXF文件。
参数集以 JSON 快照保存，读取时经 ParameterSet.build 重新校验。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .parameters import ParameterSet


class JobStatus(str, Enum):
    """任务状态"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED})


class JobProgress(BaseModel):
    """当前阶段与进度（0-100）"""
    stage: str = ""
    percent: int = 0
    message: str = ""


class JobArtifacts(BaseModel):
    dxf_path: Path | None = None
    parameters_json: Path | None = None


class DrawingJob(BaseModel):
    """出图任务"""
    job_id: str
    name: str = ""
    input_file: Path | None = None
    options: dict[str, Any] = Field(default_factory=dict, description="发射选项覆盖")

    parameters: dict[str, Any] | None = Field(None, description="参数集JSON快照")

    status: JobStatus = JobStatus.QUEUED
    progress: JobProgress = Field(default_factory=JobProgress)
    artifacts: JobArtifacts = Field(default_factory=JobArtifacts)

    flags: list[str] = Field(default_factory=list, description="告警标记（不中断）")
    errors: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def has_parameters(self) -> bool:
        return self.parameters is not None

    def record_parameters(self, params: ParameterSet) -> None:
        """保存参数集快照"""
        self.parameters = params.model_dump(mode="json")

    def parameter_set(self) -> ParameterSet | None:
        """由快照重建参数集（重新校验）"""
        if self.parameters is None:
            return None
        return ParameterSet.build(self.parameters, fill_defaults=False)

    def start(self, stage: str) -> None:
        self.status = JobStatus.RUNNING
        self.progress.stage = stage

    def finish(self, status: JobStatus, error: str | None = None) -> None:
        """进入终止状态"""
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"非终止状态: {status}")
        self.status = status
        self.finished_at = datetime.now()
        if status == JobStatus.SUCCEEDED:
            self.progress.percent = 100
        if error:
            self.errors.append(error)

    def add_flag(self, flag: str) -> None:
        if flag not in self.flags:
            self.flags.append(flag)
