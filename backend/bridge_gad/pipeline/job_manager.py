"""
任务存储 - 按任务ID保存/取回参数集快照与DXF产物

目录结构：
    storage/jobs/<job_id>/job.json        任务记录（含参数集快照）
    storage/jobs/<job_id>/output/*.dxf    出图产物

测试要点：
- test_get_job_from_disk: 新实例可从磁盘取回任务
- test_get_parameters: 快照重建参数集
- test_get_artifact: 仅成功任务返回DXF路径
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import RuntimeConfig, get_config
from ..interfaces import IJobManager
from ..models import DrawingJob, JobStatus, ParameterSet

logger = logging.getLogger(__name__)

JOB_FILE = "job.json"


class JobManager(IJobManager):
    """基于文件目录的任务存储"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()
        self._cache: dict[str, DrawingJob] = {}

    @property
    def jobs_dir(self) -> Path:
        return self.config.storage_dir / "jobs"

    def output_dir(self, job_id: str) -> Path:
        return self.config.get_job_dir(job_id) / "output"

    # === 任务记录 ===

    def create_job(
        self,
        name: str,
        input_file: Path,
        options: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> DrawingJob:
        job = DrawingJob(
            job_id=uuid.uuid4().hex,
            name=name,
            input_file=Path(input_file),
            options={**(options or {}), **kwargs},
        )
        self.update_job(job)
        logger.info(f"任务已创建: {job.job_id} ({name})")
        return job

    def get_job(self, job_id: str) -> DrawingJob | None:
        job = self._cache.get(job_id)
        if job is None:
            job = self._read(self.config.get_job_dir(job_id) / JOB_FILE)
            if job is not None:
                self._cache[job_id] = job
        return job

    def update_job(self, job: DrawingJob) -> None:
        """写回任务记录"""
        self._cache[job.job_id] = job
        job_dir = self.config.get_job_dir(job.job_id)
        job_dir.mkdir(parents=True, exist_ok=True)
        (job_dir / JOB_FILE).write_text(job.model_dump_json(indent=2), encoding="utf-8")

    def cancel_job(self, job_id: str) -> bool:
        """取消未终止的任务"""
        job = self.get_job(job_id)
        if job is None or job.is_terminal:
            return False
        job.finish(JobStatus.CANCELLED)
        self.update_job(job)
        return True

    def list_jobs(self, status: JobStatus | None = None, limit: int = 100) -> list[DrawingJob]:
        """磁盘上的全部任务（新建在前）"""
        if self.jobs_dir.exists():
            for job_file in self.jobs_dir.glob(f"*/{JOB_FILE}"):
                self.get_job(job_file.parent.name)

        jobs = [j for j in self._cache.values() if status is None or j.status == status]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    # === 参数集与产物 ===

    def get_parameters(self, job_id: str) -> ParameterSet | None:
        """取回任务的参数集（由快照重新构造并校验）"""
        job = self.get_job(job_id)
        if job is None:
            return None
        return job.parameter_set()

    def get_artifact(self, job_id: str) -> Path | None:
        """取回成功任务的DXF文件"""
        job = self.get_job(job_id)
        if job is None or job.status != JobStatus.SUCCEEDED:
            return None
        path = job.artifacts.dxf_path
        if path is None or not path.exists():
            logger.warning(f"任务 {job_id} 的DXF产物缺失: {path}")
            return None
        return path

    def _read(self, job_file: Path) -> DrawingJob | None:
        if not job_file.exists():
            return None
        try:
            return DrawingJob.model_validate_json(job_file.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.warning(f"任务记录损坏，忽略: {job_file}: {e}")
            return None
