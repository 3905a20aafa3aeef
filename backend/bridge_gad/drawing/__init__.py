"""
绘图模块 - 命令发射与DXF编码

子模块：
- emitter: 几何/标注/断面 → 有序命令序列
- dxf_encoder: 命令序列 → DXF（ezdxf）
"""

from .dxf_encoder import DxfEncoder, to_dxf_lineweight
from .emitter import DrawingCommandEmitter, DrawingOptions

__all__ = [
    "DrawingCommandEmitter",
    "DrawingOptions",
    "DxfEncoder",
    "to_dxf_lineweight",
]
