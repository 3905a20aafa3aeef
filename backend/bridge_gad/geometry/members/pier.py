"""
桥墩生成器

简化模式：矩形墩身（基础顶 → 梁底）+ 矩形基础
详细模式：盖梁（梁底下）+ 梯形墩身（盖梁底 → 承台顶，每侧按 h/batter_ratio 放坡）
          + 承台（墩底居中，宽度不小于 footing_min_width）

测试要点：
- test_simple_pier_box: 简化墩身尺寸
- test_detailed_stem_batter: 墩身放坡量
- test_detailed_footing_min_width: 承台最小宽度
"""

from __future__ import annotations

from ...interfaces import GeometryError
from ...models import GeometryEntity, LayerTag, PierMember, PierPosition, StructuralLevels
from .base import EntityFactory


class PierBuilder:
    """桥墩生成器"""

    def __init__(self, factory: EntityFactory):
        self.factory = factory
        self.config = factory.catalog.pier

    def simple(
        self, pier: PierPosition, levels: StructuralLevels
    ) -> tuple[list[GeometryEntity], PierMember]:
        f = self.factory
        cfg = self.config.simple
        ch = pier.chainage
        top = levels.soffit_level
        base = levels.foundation_level
        if top - base <= 0:
            raise GeometryError(f"桥墩{pier.index}高度非正: top={top}, base={base}")

        half = cfg.width / 2
        footing_half = (cfg.width + cfg.footing_extra_width) / 2
        footing_bottom = base - cfg.footing_depth

        entities: list[GeometryEntity] = [
            f.rectangle(ch - half, base, ch + half, top, LayerTag.PIER),
            f.rectangle(ch - footing_half, footing_bottom, ch + footing_half, base, LayerTag.FOUNDATION),
        ]
        member = PierMember(
            index=pier.index,
            chainage=ch,
            top_level=top,
            footing_top_level=base,
            footing_bottom_level=footing_bottom,
            half_width=half,
            footing_half_width=footing_half,
        )
        return entities, member

    def detailed(
        self, pier: PierPosition, levels: StructuralLevels
    ) -> tuple[list[GeometryEntity], PierMember]:
        f = self.factory
        cfg = self.config.detailed
        ch = pier.chainage

        cap_top = levels.soffit_level
        cap_bottom = cap_top - cfg.cap_depth
        footing_top = levels.foundation_level
        stem_height = cap_bottom - footing_top
        if stem_height <= 0:
            raise GeometryError(f"桥墩{pier.index}墩身高度非正: {stem_height}")
        if cfg.batter_ratio <= 0:
            raise GeometryError(f"放坡比必须为正: {cfg.batter_ratio}")

        # 顶角相对底角内收 h / batter_ratio
        top_half = cfg.stem_top_width / 2
        bottom_half = top_half + stem_height / cfg.batter_ratio

        footing_width = max(cfg.footing_min_width, 2 * bottom_half + 2 * cfg.footing_projection)
        footing_half = footing_width / 2
        footing_bottom = footing_top - cfg.footing_depth

        cap_half = cfg.cap_width / 2
        stem = [
            (ch - bottom_half, footing_top),
            (ch + bottom_half, footing_top),
            (ch + top_half, cap_bottom),
            (ch - top_half, cap_bottom),
        ]
        entities: list[GeometryEntity] = [
            f.rectangle(ch - cap_half, cap_bottom, ch + cap_half, cap_top, LayerTag.PIER),
            f.polygon(stem, LayerTag.PIER),
            f.rectangle(
                ch - footing_half, footing_bottom, ch + footing_half, footing_top, LayerTag.FOUNDATION
            ),
        ]
        member = PierMember(
            index=pier.index,
            chainage=ch,
            top_level=cap_top,
            footing_top_level=footing_top,
            footing_bottom_level=footing_bottom,
            half_width=bottom_half,
            footing_half_width=footing_half,
            cap_bottom_level=cap_bottom,
        )
        return entities, member

    def plan_half_width(self, detailed: bool) -> float:
        """平面顺桥向半宽（与立面墩顶宽度一致）"""
        if detailed:
            return self.config.detailed.cap_width / 2
        return self.config.simple.width / 2

    def plan(self, chainage: float, centre: float, detailed: bool) -> list[GeometryEntity]:
        """平面：墩顶矩形（横桥向长 plan_length）"""
        half_x = self.plan_half_width(detailed)
        half_y = self.config.plan_length / 2
        return [
            self.factory.rectangle(
                chainage - half_x, centre - half_y, chainage + half_x, centre + half_y, LayerTag.PIER
            )
        ]
