"""
尺寸标注单元测试

每个模块完成后必须运行：pytest tests/unit/test_annotator.py -v
"""

import pytest

from bridge_gad.config import StructuralCatalog
from bridge_gad.geometry import (
    CoordinateTransformer,
    DimensionAnnotator,
    GeometrySynthesizer,
    StructuralLayoutDeriver,
    format_length,
)
from bridge_gad.models import LayerTag, ParameterSet, RenderMode, TextEntity


@pytest.fixture
def annotator(transformer: CoordinateTransformer, catalog: StructuralCatalog) -> DimensionAnnotator:
    return DimensionAnnotator(transformer, catalog)


def _geometry(params: ParameterSet, catalog: StructuralCatalog, mode: RenderMode):
    layout = StructuralLayoutDeriver(catalog).derive(params.left_chainage, params.right_chainage)
    return GeometrySynthesizer(params, catalog=catalog).synthesize(layout, mode)


class TestFormatLength:
    """数值格式测试"""

    @pytest.mark.parametrize(
        "value, text",
        [(100.0, "100"), (100 / 3, "33.33"), (18.5, "18.5"), (2.0, "2"), (-0.001, "0")],
    )
    def test_trailing_zeros_trimmed(self, value: float, text: str):
        """测试去掉末尾0"""
        assert format_length(value) == text


class TestDimensionAnnotator:
    """尺寸标注测试"""

    def test_overall_label(
        self, annotator: DimensionAnnotator, sample_params: ParameterSet, catalog: StructuralCatalog
    ):
        """测试总长标注"""
        dims = annotator.annotate(_geometry(sample_params, catalog, RenderMode.SIMPLE))
        overall = dims[0]
        assert overall.label == "L = 100 m"
        assert overall.start == (0, 18.5)
        assert overall.end == (100, 18.5)
        assert overall.dimension_line()[0][1] == pytest.approx(21.5)

    def test_span_dimensions(
        self, annotator: DimensionAnnotator, sample_params: ParameterSet, catalog: StructuralCatalog
    ):
        """测试逐跨标注"""
        dims = annotator.annotate(_geometry(sample_params, catalog, RenderMode.SIMPLE))
        spans = [d for d in dims if not d.is_vertical][1:]
        assert [d.label for d in spans] == ["33.33", "33.33", "33.33"]
        assert spans[0].start[0] == 0
        assert spans[-1].end[0] == 100
        assert all(d.offset == pytest.approx(1.5) for d in spans)

    def test_simple_verticals(
        self, annotator: DimensionAnnotator, sample_params: ParameterSet, catalog: StructuralCatalog
    ):
        """测试简化模式竖向标注：桥面高度 + 总高"""
        dims = annotator.annotate(_geometry(sample_params, catalog, RenderMode.SIMPLE))
        verticals = [d for d in dims if d.is_vertical]
        assert [d.label for d in verticals] == ["18.5", "H = 23.5 m"]
        # 偏移在左桥台外缘左侧
        assert verticals[0].dimension_line()[0][0] == pytest.approx(-2.5 - 2.0)

    def test_detailed_member_depths(
        self, annotator: DimensionAnnotator, sample_params: ParameterSet, catalog: StructuralCatalog
    ):
        """测试详细模式首墩盖梁/墩身/承台标注"""
        dims = annotator.annotate(_geometry(sample_params, catalog, RenderMode.DETAILED))
        labels = [d.label for d in dims if d.is_vertical]
        assert labels[2:] == ["0.5", "20.2", "2.5"]
        # 标注在墩右侧（负偏移）
        member_dims = [d for d in dims if d.is_vertical][2:]
        assert all(d.offset < 0 for d in member_dims)

    def test_to_entities(
        self, annotator: DimensionAnnotator, sample_params: ParameterSet, catalog: StructuralCatalog
    ):
        """测试标注图元：尺寸线+2界线+2短线+文字"""
        dim = annotator.annotate(_geometry(sample_params, catalog, RenderMode.SIMPLE))[0]
        entities = annotator.to_entities(dim)
        assert len(entities) == 6
        assert all(e.layer == LayerTag.DIMENSIONS for e in entities)
        label = entities[-1]
        assert isinstance(label, TextEntity)
        assert label.text == "L = 100 m"
        assert label.position[0] == pytest.approx(50.0)
        assert label.position[1] > 21.5
