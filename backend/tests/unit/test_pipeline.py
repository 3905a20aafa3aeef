"""
流水线与任务管理单元测试

每个模块完成后必须运行：pytest tests/unit/test_pipeline.py -v
"""

import json
from pathlib import Path

import ezdxf
import pytest

from bridge_gad.cli import main
from bridge_gad.config import RuntimeConfig, StructuralCatalog
from bridge_gad.drawing import DrawingOptions
from bridge_gad.interfaces import ValidationError
from bridge_gad.models import CommandKind, JobStatus, ParameterSet, RenderMode
from bridge_gad.pipeline import DRAWING_STAGES, JobManager, PipelineExecutor, StageEnum


@pytest.fixture
def job_manager(runtime_config: RuntimeConfig) -> JobManager:
    return JobManager(runtime_config)


@pytest.fixture
def executor(
    runtime_config: RuntimeConfig, catalog: StructuralCatalog, job_manager: JobManager
) -> PipelineExecutor:
    return PipelineExecutor(runtime_config, catalog, job_manager)


@pytest.fixture
def input_file(temp_dir: Path, sample_text_input: str) -> Path:
    path = temp_dir / "bridge.txt"
    path.write_text(sample_text_input, encoding="utf-8")
    return path


class TestStages:
    """阶段定义测试"""

    def test_stage_order(self):
        """测试阶段顺序与进度区间"""
        names = [s.name for s in DRAWING_STAGES]
        assert names == [e.value for e in StageEnum]
        assert DRAWING_STAGES[0].progress_start == 0
        assert DRAWING_STAGES[-1].progress_end == 100
        for prev, cur in zip(DRAWING_STAGES, DRAWING_STAGES[1:]):
            assert prev.progress_end == cur.progress_start


class TestJobManager:
    """任务管理器测试"""

    def test_create_job(self, job_manager: JobManager, runtime_config: RuntimeConfig, input_file: Path):
        """测试创建任务并持久化"""
        job = job_manager.create_job("demo", input_file, {"render_mode": "detailed"})
        assert job.status == JobStatus.QUEUED
        assert job.options["render_mode"] == "detailed"
        assert (runtime_config.get_job_dir(job.job_id) / "job.json").exists()

    def test_get_job_from_disk(self, runtime_config: RuntimeConfig, input_file: Path):
        """测试从磁盘加载任务"""
        job = JobManager(runtime_config).create_job("demo", input_file)
        loaded = JobManager(runtime_config).get_job(job.job_id)
        assert loaded is not None
        assert loaded.job_id == job.job_id
        assert loaded.input_file == input_file

    def test_get_missing_job(self, job_manager: JobManager):
        """测试获取不存在的任务"""
        assert job_manager.get_job("missing") is None

    def test_cancel_job(self, job_manager: JobManager, input_file: Path):
        """测试取消任务"""
        job = job_manager.create_job("demo", input_file)
        assert job_manager.cancel_job(job.job_id)
        assert job_manager.get_job(job.job_id).status == JobStatus.CANCELLED
        # 已终止的任务不能再取消
        assert not job_manager.cancel_job(job.job_id)

    def test_list_jobs(self, job_manager: JobManager, input_file: Path):
        """测试按状态列出"""
        a = job_manager.create_job("a", input_file)
        job_manager.create_job("b", input_file)
        job_manager.cancel_job(a.job_id)
        assert len(job_manager.list_jobs()) == 2
        assert [j.name for j in job_manager.list_jobs(JobStatus.CANCELLED)] == ["a"]

    def test_list_jobs_from_disk(self, runtime_config: RuntimeConfig, input_file: Path):
        """测试新实例列出磁盘上的任务"""
        JobManager(runtime_config).create_job("a", input_file)
        assert [j.name for j in JobManager(runtime_config).list_jobs()] == ["a"]

    def test_corrupt_job_file_ignored(self, job_manager: JobManager, runtime_config: RuntimeConfig):
        """测试损坏的任务记录返回None"""
        job_dir = runtime_config.get_job_dir("broken")
        job_dir.mkdir(parents=True)
        (job_dir / "job.json").write_text("{not json", encoding="utf-8")
        assert job_manager.get_job("broken") is None

    def test_parameters_before_parse(self, job_manager: JobManager, input_file: Path):
        """测试未解析的任务没有参数集和产物"""
        job = job_manager.create_job("demo", input_file)
        assert job_manager.get_parameters(job.job_id) is None
        assert job_manager.get_artifact(job.job_id) is None
        assert job_manager.get_parameters("missing") is None


class TestPipelineExecutor:
    """流水线执行器测试"""

    def test_run_returns_sealed_sequence(self, executor: PipelineExecutor, sample_params: ParameterSet):
        """测试纯计算入口"""
        sequence = executor.run(sample_params)
        assert sequence.sealed
        assert sequence.commands[0].kind == CommandKind.SECTION_START
        assert sequence.commands[-1].kind == CommandKind.TERMINATOR

    def test_build_options_overrides(self, executor: PipelineExecutor):
        """测试任务选项覆盖配置（未知键忽略）"""
        options = executor.build_options({"render_mode": "detailed", "unknown": 1})
        assert isinstance(options, DrawingOptions)
        assert options.render_mode == RenderMode.DETAILED
        assert options.include_grid is True

    def test_execute_full_pipeline(self, executor: PipelineExecutor, job_manager: JobManager, input_file: Path):
        """测试完整流水线执行"""
        job = job_manager.create_job("demo", input_file, {"render_mode": "detailed"})
        executor.execute(job)

        assert job.status == JobStatus.SUCCEEDED
        assert job.progress.percent == 100
        assert job.artifacts.dxf_path.exists()
        assert job.parameters["right_chainage"] == 100

        doc = ezdxf.readfile(str(job.artifacts.dxf_path))
        assert len(doc.modelspace().query("LINE")) > 0

        snapshot = json.loads(job.artifacts.parameters_json.read_text(encoding="utf-8"))
        assert snapshot["top_level"] == 20

        persisted = JobManager(executor.config).get_job(job.job_id)
        assert persisted.status == JobStatus.SUCCEEDED

    def test_store_returns_parameters_and_artifact(
        self, executor: PipelineExecutor, job_manager: JobManager, input_file: Path
    ):
        """测试按任务ID取回参数集与DXF"""
        job = job_manager.create_job("demo", input_file)
        executor.execute(job)

        store = JobManager(executor.config)
        params = store.get_parameters(job.job_id)
        assert isinstance(params, ParameterSet)
        assert params.bridge_length == 100
        assert [(p.chainage, p.level) for p in params.cross_section] == [(15, 3.2), (40, 2.5)]
        assert store.get_artifact(job.job_id) == job.artifacts.dxf_path

    def test_missing_artifact(self, executor: PipelineExecutor, job_manager: JobManager, input_file: Path):
        """测试DXF被删除后不再返回产物"""
        job = job_manager.create_job("demo", input_file)
        executor.execute(job)
        job.artifacts.dxf_path.unlink()
        assert job_manager.get_artifact(job.job_id) is None

    def test_noch_mismatch_flagged(self, executor: PipelineExecutor, job_manager: JobManager, temp_dir: Path):
        """测试地面线点数与noch不一致时告警但继续"""
        path = temp_dir / "mismatch.txt"
        path.write_text("100\n50\n0\n0\n20\n0\n100\n10\n2\n5\n15\n3.2\n", encoding="utf-8")
        job = job_manager.create_job("demo", path)
        executor.execute(job)
        assert job.status == JobStatus.SUCCEEDED
        assert "地面线点数与noch不一致" in job.flags

    def test_stage_failure_handling(self, executor: PipelineExecutor, job_manager: JobManager, temp_dir: Path):
        """测试阶段失败：任务标记失败并重新抛出"""
        path = temp_dir / "bad.txt"
        path.write_text("100\n50\n0\n0\n20\n100\n50\n10\n2\n10\n", encoding="utf-8")
        job = job_manager.create_job("bad", path)

        with pytest.raises(ValidationError):
            executor.execute(job)

        assert job.status == JobStatus.FAILED
        assert f"阶段失败:{StageEnum.PARSE_INPUT.value}" in job.flags
        assert job.artifacts.dxf_path is None
        assert job.errors
        assert job_manager.get_artifact(job.job_id) is None

    def test_unsupported_extension(self, executor: PipelineExecutor, job_manager: JobManager, temp_dir: Path):
        """测试不支持的文件类型"""
        path = temp_dir / "bridge.csv"
        path.write_text("1", encoding="utf-8")
        job = job_manager.create_job("csv", path)
        with pytest.raises(ValidationError):
            executor.execute(job)


class TestCli:
    """命令行测试"""

    def test_main_writes_dxf(self, temp_dir: Path, input_file: Path):
        """测试命令行输出DXF"""
        output = temp_dir / "cli.dxf"
        code = main([str(input_file), "-o", str(output), "--mode", "detailed", "--plan",
                     "--config", str(temp_dir / "none.yaml")])
        assert code == 0
        assert output.exists()

    def test_main_reports_validation_error(self, temp_dir: Path, capsys):
        """测试参数错误返回1"""
        path = temp_dir / "bad.txt"
        path.write_text("100\n50\n0\n0\n-5\n0\n100\n10\n2\n10\n", encoding="utf-8")
        code = main([str(path), "--config", str(temp_dir / "none.yaml")])
        assert code == 1
        assert "top_level" in capsys.readouterr().err
