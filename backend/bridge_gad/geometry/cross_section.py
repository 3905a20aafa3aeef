"""
地面线断面投影 - (桩号, 标高) 折线 → 叠加实体

逐点：
1. 基准线下方短线至基准线
2. 不在网格线上的点：BED LEVEL / CHAINAGE 行标注（旋转90°）及表格线短线
   （网格线上的点已由网格标注，此处跳过）
3. 基准线下方至该点标高的竖线
相邻点以地面线段连接。
"""

from __future__ import annotations

from ..config import StructuralCatalog, load_catalog
from ..interfaces import ICrossSectionProjector, OverlayError
from ..models import CrossSectionPoint, GeometryEntity, LayerTag, ParameterSet
from .grid import GridBuilder, format_chainage, format_level, is_grid_aligned
from .members import EntityFactory
from .transformer import CoordinateTransformer


class CrossSectionProjector(ICrossSectionProjector):
    """地面线断面投影实现"""

    def __init__(
        self,
        params: ParameterSet,
        transformer: CoordinateTransformer | None = None,
        catalog: StructuralCatalog | None = None,
    ):
        self.params = params
        self.catalog = catalog or load_catalog()
        self.transformer = transformer or CoordinateTransformer(params)
        self.config = self.catalog.cross_section
        self.factory = EntityFactory(self.catalog)
        self.grid = GridBuilder(params, self.transformer, self.factory)

    def is_aligned(self, chainage: float) -> bool:
        p = self.params
        return is_grid_aligned(chainage, p.left_chainage, p.x_increment, self.config.grid_epsilon)

    def project(self, points: tuple[CrossSectionPoint, ...] | None = None) -> list[GeometryEntity]:
        p = self.params
        f = self.factory
        t = self.transformer
        if points is None:
            points = p.cross_section

        for i, pt in enumerate(points):
            if pt.chainage < p.left_chainage or pt.chainage > p.right_chainage:
                raise OverlayError(
                    f"断面点[{i}]桩号 {pt.chainage} 超出范围 [{p.left_chainage}, {p.right_chainage}]"
                )

        below = p.datum - t.paper_to_metres(self.config.tick_depth_mm)
        band_tick = t.paper_to_metres(self.config.band_tick_mm)
        gap = t.paper_to_metres(1.0)
        height = self.config.label_height_mm
        rows = (self.grid.bed_level_row, self.grid.chainage_row)

        entities: list[GeometryEntity] = []
        for pt in points:
            ch = pt.chainage
            entities.append(f.line((ch, below), (ch, p.datum), LayerTag.CROSS_SECTION_GRID))

            if not self.is_aligned(ch):
                entities.append(
                    f.text((ch, rows[0] + gap), format_level(pt.level), LayerTag.TEXT, height, 90.0)
                )
                entities.append(
                    f.text((ch, rows[1] + gap), format_chainage(ch), LayerTag.TEXT, height, 90.0)
                )
                for row in rows:
                    entities.append(
                        f.line((ch, row), (ch, row + band_tick), LayerTag.CROSS_SECTION_GRID)
                    )

            entities.append(f.line((ch, below), (ch, pt.level), LayerTag.CROSS_SECTION_GRID))

        for a, b in zip(points, points[1:]):
            entities.append(
                f.line((a.chainage, a.level), (b.chainage, b.level), LayerTag.CROSS_SECTION_PROFILE)
            )
        return entities
