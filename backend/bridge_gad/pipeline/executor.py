"""
流水线执行器 - 编排出图各阶段

职责：
1. 按顺序执行各阶段（解析 → 发射 → 编码 → 快照）
2. 更新任务进度并持久化
3. 失败时记录日志、标记任务失败后重新抛出

测试要点：
- test_run_returns_sealed_sequence: 纯计算入口
- test_execute_full_pipeline: 完整流水线执行
- test_stage_failure_handling: 阶段失败处理
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..config import RuntimeConfig, StructuralCatalog, get_config, load_catalog
from ..drawing import DrawingCommandEmitter, DrawingOptions, DxfEncoder
from ..ingest import get_parser
from ..interfaces import ValidationError
from ..models import CommandSequence, JobStatus, ParameterSet
from .job_manager import JobManager
from .stages import DRAWING_STAGES, PipelineStage, StageEnum

if TYPE_CHECKING:
    from ..models import DrawingJob

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """流水线执行器"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        catalog: StructuralCatalog | None = None,
        job_manager: JobManager | None = None,
    ):
        self.config = config or get_config()
        self.catalog = catalog or load_catalog(self.config.catalog_path)
        self.job_manager = job_manager or JobManager(self.config)
        self.encoder = DxfEncoder(self.catalog, self.config.drawing.dxf_version)

    def build_options(self, overrides: dict[str, Any] | None = None) -> DrawingOptions:
        """运行期配置 + 任务选项 → 发射选项"""
        known = set(DrawingOptions.model_fields)
        extra = {k: v for k, v in (overrides or {}).items() if k in known}
        return DrawingOptions.from_config(self.config.drawing, **extra)

    def run(self, params: ParameterSet, options: DrawingOptions | None = None) -> CommandSequence:
        """纯计算入口：参数集 → 已封闭的命令序列"""
        emitter = DrawingCommandEmitter(self.catalog, options or self.build_options())
        return emitter.emit(params)

    def execute(self, job: DrawingJob) -> None:
        """执行流水线"""
        job.start(StageEnum.PARSE_INPUT.value)
        self._update_progress(job, message="任务开始")

        try:
            # 阶段间数据
            context: dict[str, Any] = {}

            for stage in DRAWING_STAGES:
                self._execute_stage(job, stage, context)

            job.finish(JobStatus.SUCCEEDED)
            self._update_progress(job, message="任务完成")

        except Exception as e:
            logger.exception(f"流水线执行失败: {job.job_id}")
            job.finish(JobStatus.FAILED, str(e))
            self._update_progress(job, message=f"任务失败: {e}")
            raise

    def _execute_stage(self, job: DrawingJob, stage: PipelineStage, context: dict) -> None:
        """执行单个阶段"""
        job.progress.stage = stage.name
        job.progress.percent = stage.progress_start
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")
        self._update_progress(job, message=f"开始阶段: {stage.name}")

        try:
            if stage.name == StageEnum.PARSE_INPUT.value:
                self._stage_parse(job, context)

            elif stage.name == StageEnum.EMIT_COMMANDS.value:
                self._stage_emit(job, context)

            elif stage.name == StageEnum.ENCODE_DXF.value:
                self._stage_encode(job, context)

            elif stage.name == StageEnum.WRITE_SNAPSHOT.value:
                self._stage_snapshot(job, context)

        except Exception as e:
            logger.error(f"[{job.job_id}] 阶段失败 {stage.name}: {e}")
            job.add_flag(f"阶段失败:{stage.name}")
            raise

        job.progress.percent = stage.progress_end
        self._update_progress(job, message=f"完成阶段: {stage.name}")

    def _stage_parse(self, job: DrawingJob, context: dict) -> None:
        """解析输入"""
        if job.input_file is None:
            raise ValidationError("input_file", None, "任务未指定输入文件")

        path = Path(job.input_file)
        limits = self.config.input_limits
        if path.suffix.lower() not in limits.allowed_exts:
            raise ValidationError("input_file", path.name, f"不支持的文件类型: {path.suffix}")

        parser = get_parser(path, limits.max_input_mb * 1024 * 1024)
        params = parser.parse(path)

        if params.has_cross_section and len(params.cross_section) != params.chainage_count:
            job.add_flag("地面线点数与noch不一致")

        context["params"] = params
        job.record_parameters(params)

    def _stage_emit(self, job: DrawingJob, context: dict) -> None:
        """生成命令序列"""
        options = self.build_options(job.options)
        context["sequence"] = self.run(context["params"], options)

    def _stage_encode(self, job: DrawingJob, context: dict) -> None:
        """编码DXF"""
        output_dir = self.job_manager.output_dir(job.job_id)
        stem = Path(job.input_file).stem if job.input_file else job.job_id
        dxf_path = self.encoder.save(context["sequence"], output_dir / f"{stem}.dxf")
        job.artifacts.dxf_path = dxf_path

    def _stage_snapshot(self, job: DrawingJob, context: dict) -> None:
        """写出参数快照"""
        snapshot = self.job_manager.output_dir(job.job_id) / "parameters.json"
        snapshot.parent.mkdir(parents=True, exist_ok=True)
        with open(snapshot, "w", encoding="utf-8") as f:
            json.dump(job.parameters, f, ensure_ascii=False, indent=2)
        job.artifacts.parameters_json = snapshot

    def _update_progress(self, job: DrawingJob, *, message: str | None = None) -> None:
        if message is not None:
            job.progress.message = message
        self.job_manager.update_job(job)
