"""
尺寸标注生成器

标注内容：
1. 总长：桥面顶 + overall_offset，标注 "L = {长度} m"
2. 分跨：桥面顶 + span_offset，相邻跨界之间逐跨标注
3. 竖向：左桥台外缘左侧标注桥面高度、总高 "H = … m"；
   详细模式下在首个桥墩右侧标注盖梁厚、墩身高、承台厚

数值保留两位小数并去掉末尾的0（100, 33.33）。
"""

from __future__ import annotations

import logging

from ..config import StructuralCatalog, load_catalog
from ..interfaces import IDimensionAnnotator
from ..models import BridgeGeometry, DimensionSpec, GeometryEntity, Point, RenderMode
from .members import EntityFactory
from .transformer import CoordinateTransformer

logger = logging.getLogger(__name__)


def format_length(value: float, decimals: int = 2) -> str:
    """保留 decimals 位小数并去掉末尾0"""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


class DimensionAnnotator(IDimensionAnnotator):
    """尺寸标注实现"""

    def __init__(
        self,
        transformer: CoordinateTransformer,
        catalog: StructuralCatalog | None = None,
    ):
        self.transformer = transformer
        self.catalog = catalog or load_catalog()
        self.config = self.catalog.annotation
        self.factory = EntityFactory(self.catalog)

    def fmt(self, value: float) -> str:
        return format_length(value, self.config.decimals)

    def annotate(self, geometry: BridgeGeometry) -> list[DimensionSpec]:
        dims: list[DimensionSpec] = []
        dims.extend(self.overall(geometry))
        dims.extend(self.spans(geometry))
        dims.extend(self.verticals(geometry))
        logger.debug(f"尺寸标注生成: {len(dims)} 条")
        return dims

    def overall(self, geometry: BridgeGeometry) -> list[DimensionSpec]:
        layout = geometry.layout
        deck = geometry.levels.deck_level
        return [
            DimensionSpec(
                start=(layout.left, deck),
                end=(layout.right, deck),
                label=f"L = {self.fmt(layout.bridge_length)} m",
                offset=self.config.overall_offset,
            )
        ]

    def spans(self, geometry: BridgeGeometry) -> list[DimensionSpec]:
        deck = geometry.levels.deck_level
        return [
            DimensionSpec(
                start=(a, deck),
                end=(b, deck),
                label=self.fmt(b - a),
                offset=self.config.span_offset,
            )
            for a, b in geometry.layout.iter_spans()
        ]

    def verticals(self, geometry: BridgeGeometry) -> list[DimensionSpec]:
        levels = geometry.levels
        cfg = self.config

        edges = [a.outer_chainage for a in geometry.abutments] or [geometry.layout.left]
        edge = min(edges)
        bases = [a.base_level for a in geometry.abutments]
        bases.extend(p.footing_bottom_level for p in geometry.piers)
        lowest = min(bases) if bases else levels.datum

        dims = [
            DimensionSpec(
                start=(edge, levels.datum),
                end=(edge, levels.deck_level),
                label=self.fmt(levels.deck_level - levels.datum),
                offset=cfg.vertical_offset,
                angle=90.0,
            ),
            DimensionSpec(
                start=(edge, lowest),
                end=(edge, levels.deck_level),
                label=f"H = {self.fmt(levels.deck_level - lowest)} m",
                offset=cfg.vertical_offset + cfg.vertical_step,
                angle=90.0,
            ),
        ]

        if geometry.mode == RenderMode.DETAILED and geometry.piers:
            pier = geometry.piers[0]
            x = pier.chainage + pier.footing_half_width
            # 负偏移：标注在墩右侧
            offset = -cfg.vertical_offset
            if pier.cap_bottom_level is not None:
                dims.append(
                    DimensionSpec(
                        start=(x, pier.cap_bottom_level),
                        end=(x, pier.top_level),
                        label=self.fmt(pier.cap_depth),
                        offset=offset,
                        angle=90.0,
                    )
                )
            dims.append(
                DimensionSpec(
                    start=(x, pier.footing_top_level),
                    end=(x, pier.cap_bottom_level if pier.cap_bottom_level is not None else pier.top_level),
                    label=self.fmt(pier.stem_height),
                    offset=offset,
                    angle=90.0,
                )
            )
            dims.append(
                DimensionSpec(
                    start=(x, pier.footing_bottom_level),
                    end=(x, pier.footing_top_level),
                    label=self.fmt(pier.footing_thickness),
                    offset=offset,
                    angle=90.0,
                )
            )
        return dims

    # === 标注图元 ===

    def to_entities(self, dim: DimensionSpec) -> list[GeometryEntity]:
        """尺寸线 + 尺寸界线 + 端部斜短线 + 居中文字"""
        f = self.factory
        t = self.transformer
        cfg = self.config
        layer = dim.layer

        nx, ny = dim.normal()
        p1, p2 = dim.dimension_line()
        overshoot = t.paper_to_metres(cfg.extension_overshoot_mm)
        sign = 1.0 if dim.offset >= 0 else -1.0

        def shift(p: Point, d: float) -> Point:
            return (p[0] + nx * d, p[1] + ny * d)

        tick = t.paper_to_metres(cfg.tick_size_mm) / 2
        # 斜短线方向：尺寸方向与法向的合成（45°）
        dx, dy = p2[0] - p1[0], p2[1] - p1[1]
        length = (dx * dx + dy * dy) ** 0.5 or 1.0
        ux, uy = dx / length, dy / length
        tx, ty = (ux + nx) * tick, (uy + ny) * tick

        entities: list[GeometryEntity] = [
            f.line(p1, p2, layer),
            f.line(dim.start, shift(p1, sign * overshoot), layer),
            f.line(dim.end, shift(p2, sign * overshoot), layer),
        ]
        for p in (p1, p2):
            entities.append(f.line((p[0] - tx, p[1] - ty), (p[0] + tx, p[1] + ty), layer))

        gap = t.paper_to_metres(cfg.text_gap_mm)
        entities.append(
            f.text(
                shift(dim.label_anchor(), sign * gap),
                dim.label,
                layer,
                cfg.text_height_mm,
                dim.angle,
            )
        )
        return entities
