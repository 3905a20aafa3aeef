"""
尺寸标注模型

start/end 为被测点（工程坐标），offset 为尺寸线相对被测点的固定偏移（m），
偏移方向为尺寸方向逆时针旋转90°：水平标注正值向上，竖向标注正值向左。
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from .geometry import LayerTag, Point


class DimensionSpec(BaseModel):
    """尺寸标注"""
    start: Point
    end: Point
    label: str
    offset: float = 0.0
    angle: float = 0.0          # 0=水平, 90=竖向
    layer: LayerTag = LayerTag.DIMENSIONS

    model_config = {"frozen": True}

    @property
    def is_vertical(self) -> bool:
        return abs(self.angle - 90.0) < 1e-9

    @property
    def measurement(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    def normal(self) -> Point:
        """尺寸线偏移方向单位向量"""
        rad = math.radians(self.angle)
        return (-math.sin(rad), math.cos(rad))

    def dimension_line(self) -> tuple[Point, Point]:
        """偏移后的尺寸线端点"""
        nx, ny = self.normal()
        return (
            (self.start[0] + nx * self.offset, self.start[1] + ny * self.offset),
            (self.end[0] + nx * self.offset, self.end[1] + ny * self.offset),
        )

    def label_anchor(self) -> Point:
        """标注文字位置（尺寸线中点）"""
        (x1, y1), (x2, y2) = self.dimension_line()
        return ((x1 + x2) / 2, (y1 + y2) / 2)
