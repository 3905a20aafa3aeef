"""
Excel参数解析器

工作簿格式：
- Sheet1: Variable | Value（变量名不区分大小写，兼容旧短名）
- Sheet2: Chainage | RL（地面线点，可缺省）

未给出的参数取缺省值（100, 50, 0, 0, 20, 0, 100, 10, 2, 10）。

依赖：
- openpyxl: 读取xlsx
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from openpyxl import load_workbook

from ..interfaces import InputFormatError, IParameterParser
from ..models import ParameterSet

logger = logging.getLogger(__name__)

PARAMETER_SHEET = "Sheet1"
PROFILE_SHEET = "Sheet2"


class ExcelInputParser(IParameterParser):
    """Excel参数解析实现"""

    def __init__(self, max_bytes: int = 10 * 1024 * 1024):
        self.max_bytes = max_bytes

    def parse(self, source: str | Path) -> ParameterSet:
        path = Path(source)
        if not path.is_file():
            raise InputFormatError("input_file", str(path), "文件不存在")
        size = path.stat().st_size
        if size > self.max_bytes:
            raise InputFormatError("input_file", size, f"文件超过大小限制 {self.max_bytes} 字节")

        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            raw = self._read_parameters(wb)
            points = self._read_profile(wb)
        finally:
            wb.close()

        if points:
            raw["cross_section"] = points

        params = ParameterSet.build(raw)
        logger.info(
            f"Excel参数解析完成: {path.name}, 参数={len(raw)}, 地面线点={len(params.cross_section)}"
        )
        return params

    def _read_parameters(self, wb) -> dict[str, Any]:
        if PARAMETER_SHEET in wb.sheetnames:
            ws = wb[PARAMETER_SHEET]
        else:
            ws = wb.worksheets[0]

        raw: dict[str, Any] = {}
        for row in ws.iter_rows(values_only=True):
            if not row or row[0] is None:
                continue
            name = str(row[0]).strip()
            value = row[1] if len(row) > 1 else None
            if not name or name.lower() == "variable":
                continue
            raw[name] = value
        return raw

    def _read_profile(self, wb) -> list[tuple[float, float]]:
        if PROFILE_SHEET not in wb.sheetnames:
            return []

        points: list[tuple[float, float]] = []
        for row_idx, row in enumerate(wb[PROFILE_SHEET].iter_rows(values_only=True), start=1):
            if not row or len(row) < 2 or row[0] is None or row[1] is None:
                continue
            try:
                points.append((float(row[0]), float(row[1])))
            except (TypeError, ValueError) as e:
                # 表头行
                if row_idx == 1:
                    continue
                raise InputFormatError(f"{PROFILE_SHEET}!A{row_idx}", row[:2], "地面线点不是有效数值") from e
        return points
