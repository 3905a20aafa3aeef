"""
坐标变换器 - 工程坐标 (桩号, 标高) → 图纸坐标

职责：
1. 原点平移：桩号减起点桩号，标高减基准标高
2. 比例缩放：scale × 水平/竖向比例因子（模型空间单位为mm）
3. 斜交旋转：相对原点的偏移先旋转再缩放

约定：
- 所有发射到命令流的点都经过 transform，不允许其他缩放路径
- 斜交角为0时走快速路径，结果必须与 θ=0 的通用旋转逐位相同

测试要点：
- test_origin_maps_to_zero: hpos(left)==0, vpos(datum)==0
- test_zero_skew_matches_general_rotation: 快速路径与通用路径一致
- test_skew_rotation: 斜交旋转
"""

from __future__ import annotations

from ..models import DerivedConstants, ParameterSet, Point


class CoordinateTransformer:
    """无状态坐标变换（每个参数集一个实例）"""

    def __init__(
        self,
        params: ParameterSet,
        *,
        units_per_metre: float = 1000.0,
        scale: float = 1.0,
    ):
        self.params = params
        self.constants: DerivedConstants = params.derive_constants(units_per_metre)
        self.scale = scale
        self.left = params.left_chainage
        self.datum = params.datum

    @property
    def has_skew(self) -> bool:
        return self.constants.skew_sin != 0.0

    # === 单轴换算 ===

    def hpos(self, chainage: float) -> float:
        """桩号 → 图纸X"""
        return (chainage - self.left) * self.scale * self.constants.horizontal_scale_factor

    def vpos(self, level: float) -> float:
        """标高 → 图纸Y"""
        return (level - self.datum) * self.scale * self.constants.vertical_scale_factor

    # === 点变换 ===

    def transform(self, point: Point) -> Point:
        """工程坐标点 → 图纸坐标点"""
        if not self.has_skew:
            return (self.hpos(point[0]), self.vpos(point[1]))
        return self.rotate_and_scale(point)

    def rotate_and_scale(self, point: Point) -> Point:
        """通用路径：相对原点偏移 → 旋转 → 缩放"""
        c = self.constants
        dx = point[0] - self.left
        dy = point[1] - self.datum
        rx = dx * c.skew_cos - dy * c.skew_sin
        ry = dx * c.skew_sin + dy * c.skew_cos
        return (
            (rx * self.scale) * c.horizontal_scale_factor,
            (ry * self.scale) * c.vertical_scale_factor,
        )

    def text_rotation(self, rotation: float = 0.0) -> float:
        """文字旋转角 = 标注旋转角 + 斜交角"""
        return rotation + self.params.skew_degrees

    # === 图纸mm换算 ===

    def paper_to_metres(self, mm: float) -> float:
        """图纸mm → 工程m（按scale1出图）"""
        return mm * self.params.scale1 / 1000.0

    def paper_to_drawing(self, mm: float) -> float:
        """图纸mm → 模型空间单位"""
        return self.paper_to_metres(mm) * self.scale * self.constants.vertical_scale_factor
