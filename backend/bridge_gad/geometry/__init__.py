"""
几何模块 - 坐标变换/布跨推导/构件合成/尺寸标注/断面投影

子模块：
- transformer: 工程坐标 → 图纸坐标
- layout_deriver: 桥墩/桥台位置推导
- members: 桥面/桥墩/桥台构件生成
- grid: 坐标轴与网格
- synthesizer: 立面/平面几何合成
- annotator: 尺寸标注
- cross_section: 地面线断面投影
"""

from .annotator import DimensionAnnotator, format_length
from .cross_section import CrossSectionProjector
from .grid import GridBuilder, format_chainage, format_level, is_grid_aligned
from .layout_deriver import StructuralLayoutDeriver
from .synthesizer import GeometrySynthesizer
from .transformer import CoordinateTransformer

__all__ = [
    "CoordinateTransformer",
    "StructuralLayoutDeriver",
    "GeometrySynthesizer",
    "GridBuilder",
    "DimensionAnnotator",
    "CrossSectionProjector",
    "format_chainage",
    "format_level",
    "format_length",
    "is_grid_aligned",
]
