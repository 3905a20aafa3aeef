"""
几何模型 - 绘图实体（工程坐标）与构件几何汇总

实体坐标均为工程坐标 (桩号, 标高)，只有命令发射阶段才换算到图纸坐标；
文字高度为图纸mm，旋转角为度（不含斜交角）。
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .layout import LayoutResult

Point = tuple[float, float]


class LayerTag(str, Enum):
    """图层标签"""
    DECK = "DECK"
    PIER = "PIER"
    FOUNDATION = "FOUNDATION"
    ABUTMENT = "ABUTMENT"
    PARAPET = "PARAPET"
    GRID = "GRID"
    DIMENSIONS = "DIMENSIONS"
    TEXT = "TEXT"
    CROSS_SECTION_GRID = "CROSS_SECTION_GRID"
    CROSS_SECTION_PROFILE = "CROSS_SECTION_PROFILE"


class RenderMode(str, Enum):
    """构件绘制模式"""
    SIMPLE = "simple"        # 矩形墩台
    DETAILED = "detailed"    # 盖梁+放坡墩身+承台 / 台阶式桥台


class BBox(BaseModel):
    """边界框"""
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_points(cls, points: list[Point]) -> BBox | None:
        if not points:
            return None
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(xmin=min(xs), ymin=min(ys), xmax=max(xs), ymax=max(ys))


class _EntityBase(BaseModel):
    layer: LayerTag
    color: int = 7
    lineweight: float = 0.25

    model_config = {"frozen": True}


class LineEntity(_EntityBase):
    """直线"""
    kind: Literal["LINE"] = "LINE"
    p1: Point
    p2: Point

    def points(self) -> list[Point]:
        return [self.p1, self.p2]


class PolygonEntity(_EntityBase):
    """多边形（发射为首尾相接的直线）"""
    kind: Literal["POLYGON"] = "POLYGON"
    vertices: tuple[Point, ...]
    closed: bool = True

    def points(self) -> list[Point]:
        return list(self.vertices)

    def edges(self) -> list[tuple[Point, Point]]:
        v = self.vertices
        pairs = [(v[i], v[i + 1]) for i in range(len(v) - 1)]
        if self.closed and len(v) > 2:
            pairs.append((v[-1], v[0]))
        return pairs


class TextEntity(_EntityBase):
    """文字"""
    kind: Literal["TEXT"] = "TEXT"
    position: Point
    text: str
    height: float = Field(2.5, description="文字高度(图纸mm)")
    rotation: float = 0.0

    def points(self) -> list[Point]:
        return [self.position]


GeometryEntity = Annotated[
    Union[LineEntity, PolygonEntity, TextEntity], Field(discriminator="kind")
]


class StructuralLevels(BaseModel):
    """控制标高（m）"""
    datum: float
    top_level: float
    deck_level: float          # 桥面顶
    soffit_level: float        # 梁底
    parapet_level: float       # 栏杆顶
    foundation_level: float    # 桥墩基础顶

    model_config = {"frozen": True}


class PierMember(BaseModel):
    """单个桥墩的几何汇总（供尺寸标注使用）"""
    index: int
    chainage: float
    top_level: float
    footing_top_level: float
    footing_bottom_level: float
    half_width: float                   # 墩身（底部）半宽
    footing_half_width: float
    cap_bottom_level: float | None = None   # 仅详细模式

    @property
    def cap_depth(self) -> float | None:
        if self.cap_bottom_level is None:
            return None
        return self.top_level - self.cap_bottom_level

    @property
    def stem_height(self) -> float:
        top = self.cap_bottom_level if self.cap_bottom_level is not None else self.top_level
        return top - self.footing_top_level

    @property
    def footing_thickness(self) -> float:
        return self.footing_top_level - self.footing_bottom_level


class AbutmentMember(BaseModel):
    """单个桥台的几何汇总"""
    side: Literal["LEFT", "RIGHT"]
    chainage: float
    top_level: float
    base_level: float
    outer_chainage: float               # 远离桥跨一侧的外缘桩号


class BridgeGeometry(BaseModel):
    """桥梁几何模型（立面+平面）"""
    mode: RenderMode
    levels: StructuralLevels
    layout: LayoutResult
    elevation: list[GeometryEntity] = Field(default_factory=list)
    plan: list[GeometryEntity] = Field(default_factory=list)
    piers: list[PierMember] = Field(default_factory=list)
    abutments: list[AbutmentMember] = Field(default_factory=list)
    plan_pier_chainages: list[float] = Field(default_factory=list)

    @property
    def elevation_pier_chainages(self) -> list[float]:
        return [p.chainage for p in self.piers]

    def entities(self, layer: LayerTag | None = None) -> list[GeometryEntity]:
        """立面+平面全部实体（可按图层过滤）"""
        items = [*self.elevation, *self.plan]
        if layer is None:
            return items
        return [e for e in items if e.layer == layer]
