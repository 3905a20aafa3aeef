"""
输入模块 - 文本/Excel参数解析

子模块：
- text_parser: 10行标量 + 地面线行对
- excel_parser: Sheet1 变量表 + Sheet2 地面线
"""

from pathlib import Path

from .excel_parser import ExcelInputParser
from .text_parser import TextInputParser


def get_parser(path: Path, max_bytes: int = 10 * 1024 * 1024):
    """按扩展名选择解析器"""
    if Path(path).suffix.lower() in (".xlsx", ".xlsm"):
        return ExcelInputParser(max_bytes)
    return TextInputParser(max_bytes)


__all__ = [
    "TextInputParser",
    "ExcelInputParser",
    "get_parser",
]
