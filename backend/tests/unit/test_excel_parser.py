"""
Excel参数解析单元测试

每个模块完成后必须运行：pytest tests/unit/test_excel_parser.py -v
"""

from pathlib import Path

import pytest
from openpyxl import Workbook

from bridge_gad.ingest import ExcelInputParser
from bridge_gad.interfaces import InputFormatError, ValidationError


def _write_workbook(
    path: Path,
    variables: list[tuple[str, object]],
    profile: list[tuple[object, object]] | None = None,
) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws.append(["Variable", "Value"])
    for row in variables:
        ws.append(list(row))
    if profile is not None:
        ws2 = wb.create_sheet("Sheet2")
        ws2.append(["Chainage", "RL"])
        for row in profile:
            ws2.append(list(row))
    wb.save(path)
    return path


class TestExcelInputParser:
    """Excel解析器测试"""

    @pytest.fixture
    def parser(self) -> ExcelInputParser:
        return ExcelInputParser()

    def test_parse_variables(self, parser: ExcelInputParser, temp_dir: Path):
        """测试变量表（大小写不敏感）"""
        path = _write_workbook(
            temp_dir / "bridge.xlsx",
            [("SCALE1", 200), ("TOPRL", 25.5), ("Right", 90), ("NOCH", 5)],
        )
        params = parser.parse(path)
        assert params.scale1 == 200
        assert params.top_level == 25.5
        assert params.right_chainage == 90
        assert params.chainage_count == 5

    def test_defaults_for_missing(self, parser: ExcelInputParser, temp_dir: Path):
        """测试缺省参数"""
        path = _write_workbook(temp_dir / "empty.xlsx", [])
        params = parser.parse(path)
        assert (params.scale1, params.scale2, params.skew_degrees) == (100, 50, 0)
        assert (params.datum, params.top_level) == (0, 20)
        assert (params.left_chainage, params.right_chainage) == (0, 100)
        assert (params.x_increment, params.y_increment, params.chainage_count) == (10, 2, 10)

    def test_profile_sheet(self, parser: ExcelInputParser, temp_dir: Path):
        """测试Sheet2地面线"""
        path = _write_workbook(
            temp_dir / "profile.xlsx",
            [("left", 0), ("right", 100)],
            [(50, 2.5), (10, 3.0), (None, None), (80, 2.0)],
        )
        params = parser.parse(path)
        assert [(p.chainage, p.level) for p in params.cross_section] == [
            (10, 3.0),
            (50, 2.5),
            (80, 2.0),
        ]

    def test_invalid_profile_value(self, parser: ExcelInputParser, temp_dir: Path):
        """测试地面线非数值"""
        path = _write_workbook(temp_dir / "bad.xlsx", [], [(10, 1.0), ("x", 2.0)])
        with pytest.raises(InputFormatError):
            parser.parse(path)

    def test_invalid_variable_value(self, parser: ExcelInputParser, temp_dir: Path):
        """测试变量非数值"""
        path = _write_workbook(temp_dir / "bad2.xlsx", [("datum", "abc")])
        with pytest.raises(ValidationError) as exc:
            parser.parse(path)
        assert exc.value.field == "datum"

    def test_range_validation(self, parser: ExcelInputParser, temp_dir: Path):
        """测试范围校验"""
        path = _write_workbook(temp_dir / "bad3.xlsx", [("left", 100), ("right", 50)])
        with pytest.raises(ValidationError):
            parser.parse(path)

    def test_missing_file(self, parser: ExcelInputParser, temp_dir: Path):
        """测试文件不存在"""
        with pytest.raises(InputFormatError):
            parser.parse(temp_dir / "none.xlsx")
