"""
坐标轴/网格生成器

布置（工程坐标，图纸mm按 scale1 换算为m）：
- 基准线（datum）与其下两条表格线（间距 band_spacing_mm），
  上行为 BED LEVEL，下行为 CHAINAGE
- 左侧竖轴：下表格线 → 顶标高
- 竖向网格线：left + k·x_increment，CHAINAGE 行标注 k+mmm
- 水平网格线：datum + k·y_increment，左侧标注 %.3f

与网格对齐的地面线点由本模块在 BED LEVEL 行标注标高，
断面投影时不再重复标注。
"""

from __future__ import annotations

import math

from ..models import CrossSectionPoint, GeometryEntity, LayerTag, ParameterSet
from .members import EntityFactory
from .transformer import CoordinateTransformer


def format_chainage(chainage: float) -> str:
    """桩号格式 k+mmm（如 0+015, 1+250）"""
    km, metres = divmod(int(round(chainage)), 1000)
    return f"{km}+{metres:03d}"


def format_level(level: float) -> str:
    return f"{level:.3f}"


def is_grid_aligned(chainage: float, left: float, increment: float, epsilon: float) -> bool:
    """桩号是否落在网格线上（两侧容差 epsilon）"""
    remainder = abs(math.fmod(chainage - left, increment))
    return min(remainder, increment - remainder) <= epsilon


def grid_chainages(left: float, right: float, increment: float, epsilon: float = 1e-9) -> list[float]:
    """left 起每隔 increment 一条，至 right 为止"""
    count = int(math.floor((right - left) / increment + epsilon))
    return [left + increment * k for k in range(count + 1)]


class GridBuilder:
    """坐标轴/网格生成器"""

    def __init__(
        self,
        params: ParameterSet,
        transformer: CoordinateTransformer,
        factory: EntityFactory,
    ):
        self.params = params
        self.transformer = transformer
        self.factory = factory
        self.config = factory.catalog.grid
        self.epsilon = factory.catalog.cross_section.grid_epsilon

    @property
    def band_spacing(self) -> float:
        """表格行距（m）"""
        return self.transformer.paper_to_metres(self.config.band_spacing_mm)

    @property
    def bed_level_row(self) -> float:
        return self.params.datum - self.band_spacing

    @property
    def chainage_row(self) -> float:
        return self.params.datum - 2 * self.band_spacing

    def build(self) -> list[GeometryEntity]:
        entities: list[GeometryEntity] = []
        entities.extend(self._axes())
        entities.extend(self._vertical_lines())
        entities.extend(self._horizontal_lines())
        return entities

    def _axes(self) -> list[GeometryEntity]:
        p = self.params
        f = self.factory
        t = self.transformer
        left, right = p.left_chainage, p.right_chainage
        d = self.band_spacing
        title_x = left - t.paper_to_metres(self.config.title_offset_mm)
        height = self.config.label_height_mm
        return [
            f.line((left, p.datum), (right, p.datum), LayerTag.GRID),
            f.line((left, self.bed_level_row), (right, self.bed_level_row), LayerTag.GRID),
            f.line((left, self.chainage_row), (right, self.chainage_row), LayerTag.GRID),
            f.line((left, self.chainage_row), (left, p.top_level), LayerTag.GRID),
            f.text((title_x, p.datum - 0.5 * d), "BED LEVEL", LayerTag.TEXT, height),
            f.text((title_x, p.datum - 1.5 * d), "CHAINAGE", LayerTag.TEXT, height),
        ]

    def _vertical_lines(self) -> list[GeometryEntity]:
        p = self.params
        f = self.factory
        gap = self.transformer.paper_to_metres(1.0)
        top = p.top_level + self.config.overshoot_above
        height = self.config.label_height_mm
        aligned = self._aligned_profile_levels()

        entities: list[GeometryEntity] = []
        for ch in grid_chainages(p.left_chainage, p.right_chainage, p.x_increment):
            entities.append(f.line((ch, p.datum), (ch, top), LayerTag.GRID))
            entities.append(
                f.text((ch, self.chainage_row + gap), format_chainage(ch), LayerTag.TEXT, height, 90.0)
            )
            level = self._lookup(aligned, ch)
            if level is not None:
                entities.append(
                    f.text((ch, self.bed_level_row + gap), format_level(level), LayerTag.TEXT, height, 90.0)
                )
        return entities

    def _horizontal_lines(self) -> list[GeometryEntity]:
        p = self.params
        f = self.factory
        label_x = p.left_chainage - self.transformer.paper_to_metres(self.config.level_label_offset_mm)
        height = self.config.label_height_mm

        entities: list[GeometryEntity] = []
        count = int(math.floor((p.top_level - p.datum) / p.y_increment + 1e-9))
        for k in range(1, count + 1):
            level = p.datum + p.y_increment * k
            entities.append(f.line((p.left_chainage, level), (p.right_chainage, level), LayerTag.GRID))
            entities.append(f.text((label_x, level), format_level(level), LayerTag.TEXT, height, 90.0))
        return entities

    def _aligned_profile_levels(self) -> list[CrossSectionPoint]:
        p = self.params
        return [
            pt
            for pt in p.cross_section
            if is_grid_aligned(pt.chainage, p.left_chainage, p.x_increment, self.epsilon)
        ]

    def _lookup(self, points: list[CrossSectionPoint], chainage: float) -> float | None:
        for pt in points:
            if abs(pt.chainage - chainage) <= self.epsilon:
                return pt.level
        return None
