"""
数据模型单元测试

每个模块完成后必须运行：pytest tests/unit/test_models.py -v
"""

import math

import pytest

from bridge_gad.interfaces import EncodingError, ValidationError
from bridge_gad.models import (
    BBox,
    CommandKind,
    CommandSequence,
    DimensionSpec,
    DrawingCommand,
    DrawingJob,
    JobStatus,
    LayerTag,
    ParameterSet,
    PolygonEntity,
    resolve_defaults,
)


class TestBBox:
    """边界框测试"""

    def test_from_points(self):
        """测试点集外包框"""
        bbox = BBox.from_points([(1, 5), (-2, 3), (4, -1)])
        assert (bbox.xmin, bbox.ymin, bbox.xmax, bbox.ymax) == (-2, -1, 4, 5)
        assert BBox.from_points([]) is None


class TestParameterSet:
    """参数集测试"""

    def test_build_with_legacy_names(self, sample_params: ParameterSet):
        """测试旧短名映射"""
        assert sample_params.top_level == 20
        assert sample_params.right_chainage == 100
        assert sample_params.chainage_count == 10
        assert sample_params.bridge_length == 100

    def test_defaults_filled_once(self):
        """测试缺省值补齐"""
        params = ParameterSet.build({"right": 90})
        assert params.scale1 == 100
        assert params.right_chainage == 90

    def test_resolve_defaults_skips_none(self):
        """测试None不覆盖缺省值"""
        values = resolve_defaults({"DATUM": None, "XINCR": 5})
        assert values["datum"] == 0.0
        assert values["x_increment"] == 5

    def test_missing_field_without_defaults(self):
        """测试不补缺省值时缺字段"""
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build({"scale1": 100}, fill_defaults=False)
        assert exc.value.field == "scale2"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("scale1", 0),
            ("scale2", -1),
            ("xincr", 0),
            ("yincr", -2),
            ("noch", 0),
        ],
    )
    def test_non_positive_rejected(self, sample_values: dict, field: str, value):
        """测试比例/间距/桩号数必须为正"""
        sample_values[field] = value
        with pytest.raises(ValidationError):
            ParameterSet.build(sample_values)

    def test_right_not_after_left(self, sample_values: dict):
        """测试终点桩号不大于起点"""
        sample_values["right"] = 0
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build(sample_values)
        assert exc.value.field == "right_chainage"
        assert exc.value.value == 0

    def test_top_level_not_above_datum(self, sample_values: dict):
        """测试顶标高不高于基准"""
        sample_values["toprl"] = -1
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build(sample_values)
        assert exc.value.field == "top_level"

    def test_non_integer_noch(self, sample_values: dict):
        """测试noch非整数"""
        sample_values["noch"] = 2.5
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build(sample_values)
        assert exc.value.field == "chainage_count"

    def test_non_numeric_value(self, sample_values: dict):
        """测试非数值"""
        sample_values["datum"] = "abc"
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build(sample_values)
        assert exc.value.field == "datum"

    def test_cross_section_out_of_range(self, sample_values: dict):
        """测试地面线点越界"""
        sample_values["cross_section"] = [(10, 1), (120, 2)]
        with pytest.raises(ValidationError) as exc:
            ParameterSet.build(sample_values)
        assert exc.value.field == "cross_section[1].chainage"
        assert exc.value.value == 120

    def test_cross_section_sorted(self, sample_values: dict):
        """测试地面线点按桩号排序"""
        sample_values["cross_section"] = [(50, 2), (10, 1), (30, 3)]
        params = ParameterSet.build(sample_values)
        assert [p.chainage for p in params.cross_section] == [10, 30, 50]

    def test_with_changes_recomputes_constants(self, sample_params: ParameterSet):
        """测试参数变化后派生常量重新计算"""
        changed = sample_params.with_changes(skew=30)
        assert sample_params.derive_constants().skew_sin == 0.0
        assert changed.derive_constants().skew_sin == pytest.approx(0.5)
        assert changed.skew_degrees == 30

    def test_with_changes_revalidates(self, sample_params: ParameterSet):
        """测试修改参数重新校验"""
        with pytest.raises(ValidationError):
            sample_params.with_changes(right=-5)

    def test_frozen(self, sample_params: ParameterSet):
        """测试参数集不可变"""
        with pytest.raises(Exception):
            sample_params.datum = 5

    def test_derived_constants(self, sample_params: ParameterSet):
        """测试派生常量"""
        c = sample_params.derive_constants(1000.0)
        assert c.horizontal_scale_factor == 1000.0
        assert c.vertical_scale_factor == 1000.0
        assert c.skew_cos == 1.0
        assert c.scale_ratio == 2.0
        assert c.skew_radians == 0.0

    def test_validation_error_message(self):
        """测试错误信息携带字段名和值"""
        err = ValidationError("scale1", -1, "比例必须为正数")
        assert "scale1" in str(err)
        assert "-1" in str(err)


class TestDimensionSpec:
    """尺寸标注模型测试"""

    def test_horizontal_offset_up(self):
        """测试水平标注正偏移向上"""
        dim = DimensionSpec(start=(0, 10), end=(30, 10), label="30", offset=3.0)
        (x1, y1), (x2, y2) = dim.dimension_line()
        assert (x1, x2) == pytest.approx((0, 30))
        assert y1 == pytest.approx(13.0)
        assert y2 == pytest.approx(13.0)
        assert not dim.is_vertical

    def test_vertical_offset_left(self):
        """测试竖向标注正偏移向左"""
        dim = DimensionSpec(start=(0, 0), end=(0, 18.5), label="18.5", offset=2.0, angle=90)
        (x1, _), (x2, _) = dim.dimension_line()
        assert x1 == pytest.approx(-2.0)
        assert x2 == pytest.approx(-2.0)
        assert dim.is_vertical
        assert dim.measurement == pytest.approx(18.5)


class TestPolygonEntity:
    """多边形实体测试"""

    def test_closed_edges(self):
        """测试闭合多边形边数"""
        poly = PolygonEntity(layer=LayerTag.PIER, vertices=((0, 0), (1, 0), (1, 1), (0, 1)))
        edges = poly.edges()
        assert len(edges) == 4
        assert edges[-1] == ((0, 1), (0, 0))


class TestCommandSequence:
    """命令序列测试"""

    def _line(self) -> DrawingCommand:
        return DrawingCommand(kind=CommandKind.LINE, start=(0, 0), end=(10, 5))

    def test_starts_with_section(self):
        """测试以段开始标记开头"""
        seq = CommandSequence()
        assert seq.commands[0].kind == CommandKind.SECTION_START

    def test_seal_appends_terminator(self):
        """测试封闭后以结束标记结尾"""
        seq = CommandSequence()
        seq.append(self._line())
        seq.seal()
        kinds = [c.kind for c in seq]
        assert kinds[-2:] == [CommandKind.SECTION_END, CommandKind.TERMINATOR]
        assert len(seq) == 4

    def test_append_after_seal(self):
        """测试封闭后不可追加"""
        seq = CommandSequence()
        seq.seal()
        with pytest.raises(EncodingError):
            seq.append(self._line())

    def test_marker_append_rejected(self):
        """测试不能直接追加标记命令"""
        seq = CommandSequence()
        with pytest.raises(EncodingError):
            seq.append(DrawingCommand(kind=CommandKind.TERMINATOR))

    def test_consume_once(self):
        """测试只能消费一次"""
        seq = CommandSequence()
        seq.seal()
        assert len(seq.consume()) == 3
        assert seq.consumed
        with pytest.raises(EncodingError):
            seq.consume()

    def test_consume_unsealed(self):
        """测试未封闭不能消费"""
        with pytest.raises(EncodingError):
            CommandSequence().consume()

    def test_extents(self):
        """测试命令外包框"""
        seq = CommandSequence()
        seq.append(self._line())
        seq.append(DrawingCommand(kind=CommandKind.TEXT, position=(-5, 2), text="A", height=1))
        bbox = seq.extents()
        assert (bbox.xmin, bbox.ymin, bbox.xmax, bbox.ymax) == (-5, 0, 10, 5)


class TestDrawingJob:
    """任务模型测试"""

    def test_lifecycle(self):
        """测试状态流转"""
        job = DrawingJob(job_id="j1", name="demo")
        assert job.status == JobStatus.QUEUED
        job.start("PARSE_INPUT")
        assert job.status == JobStatus.RUNNING
        assert job.progress.stage == "PARSE_INPUT"
        assert not job.is_terminal
        job.finish(JobStatus.SUCCEEDED)
        assert job.progress.percent == 100
        assert job.finished_at is not None
        assert job.is_terminal

    def test_finish_failed(self):
        """测试失败记录错误"""
        job = DrawingJob(job_id="j2")
        job.finish(JobStatus.FAILED, "boom")
        assert job.status == JobStatus.FAILED
        assert job.errors == ["boom"]

    def test_finish_requires_terminal_status(self):
        """测试非终止状态不能结束任务"""
        with pytest.raises(ValueError):
            DrawingJob(job_id="j3").finish(JobStatus.RUNNING)

    def test_parameter_snapshot(self, sample_params: ParameterSet):
        """测试参数快照经JSON往返后重建"""
        job = DrawingJob(job_id="j4")
        assert job.parameter_set() is None
        job.record_parameters(sample_params)
        restored = DrawingJob.model_validate_json(job.model_dump_json())
        assert restored.has_parameters
        assert restored.parameter_set() == sample_params

    def test_invalid_snapshot_rejected(self):
        """测试快照被改坏时重建报错"""
        job = DrawingJob(job_id="j5")
        job.record_parameters(ParameterSet.build({}))
        job.parameters["right_chainage"] = -1
        with pytest.raises(ValidationError):
            job.parameter_set()

    def test_add_flag_dedup(self):
        """测试告警去重"""
        job = DrawingJob(job_id="j6")
        job.add_flag("x")
        job.add_flag("x")
        assert job.flags == ["x"]


def test_constants_use_radians():
    """斜交角换算为弧度"""
    params = ParameterSet.build({"skew": 90})
    c = params.derive_constants()
    assert c.skew_radians == pytest.approx(math.pi / 2)
