"""
文本参数解析器 - 10行标量 + 可选 (桩号, 标高) 行对

格式：
    前10个非空行依次为 scale1, scale2, skew, datum, toprl, left, right,
    xincr, yincr, noch；其后每两行为一个地面线点（桩号、标高），
    末尾落单的一行忽略。

测试要点：
- test_parse_minimal: 仅10行
- test_parse_with_profile: 含地面线点（乱序输入按桩号排序）
- test_non_numeric: 非数值行 → InputFormatError
- test_size_limit: 超过大小限制
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path

from ..interfaces import InputFormatError, IParameterParser, ValidationError
from ..models import INPUT_FIELD_ORDER, ParameterSet

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class TextInputParser(IParameterParser):
    """文本参数解析实现"""

    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES):
        self.max_bytes = max_bytes

    def parse(self, source: str | os.PathLike) -> ParameterSet:
        """
        解析文件路径或文本内容

        路径对象按文件读取；字符串含换行时按文本内容解析，
        单行字符串视为文件路径（合法内容至少10行）
        """
        if isinstance(source, os.PathLike):
            return self.parse_file(Path(source))
        if "\n" not in source and "\r" not in source:
            return self.parse_file(Path(source))
        return self.parse_text(source)

    def parse_file(self, path: Path) -> ParameterSet:
        path = Path(path)
        if not path.is_file():
            raise InputFormatError("input_file", str(path), "文件不存在")
        size = path.stat().st_size
        if size > self.max_bytes:
            raise InputFormatError("input_file", size, f"文件超过大小限制 {self.max_bytes} 字节")
        return self.parse_text(path.read_text(encoding="utf-8-sig"))

    def parse_text(self, content: str) -> ParameterSet:
        size = len(content.encode("utf-8"))
        if size > self.max_bytes:
            raise InputFormatError("input", size, f"输入超过大小限制 {self.max_bytes} 字节")

        lines = [line.strip() for line in content.splitlines() if line.strip()]
        if len(lines) < len(INPUT_FIELD_ORDER):
            raise InputFormatError(
                "input", len(lines), f"至少需要 {len(INPUT_FIELD_ORDER)} 行参数"
            )

        values: dict[str, float | int] = {}
        for name, line in zip(INPUT_FIELD_ORDER, lines):
            values[name] = _to_float(name, line)

        noch = values["chainage_count"]
        if not float(noch).is_integer() or noch <= 0:
            raise ValidationError("chainage_count", noch, "桩号数量必须为正整数")
        values["chainage_count"] = int(noch)

        rest = lines[len(INPUT_FIELD_ORDER):]
        if len(rest) % 2:
            logger.warning(f"地面线数据末尾落单一行已忽略: {rest[-1]!r}")
            rest = rest[:-1]

        points = []
        for i in range(0, len(rest), 2):
            index = i // 2
            chainage = _to_float(f"cross_section[{index}].chainage", rest[i])
            level = _to_float(f"cross_section[{index}].level", rest[i + 1])
            points.append((chainage, level))

        if points and len(points) != values["chainage_count"]:
            logger.warning(
                f"地面线点数({len(points)})与noch({values['chainage_count']})不一致，按实际点数处理"
            )

        params = ParameterSet.build({**values, "cross_section": points}, fill_defaults=False)
        logger.info(
            f"文本参数解析完成: L={params.bridge_length}, 地面线点={len(params.cross_section)}"
        )
        return params


def _to_float(field: str, text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise InputFormatError(field, text, "不是有效数值") from e
    if not math.isfinite(value):
        raise InputFormatError(field, text, "必须为有限数值")
    return value
