"""
构件几何合成器 - 布跨结果 → 立面/平面实体（工程坐标）

职责：
1. 计算控制标高（桥面顶/梁底/栏杆顶/墩基础顶）
2. 按绘制模式生成桥面、桥墩、桥台（简化或详细，二选一）
3. 生成平面图（桥墩桩号与立面共用同一布跨结果）
4. 生成坐标轴/网格

依赖：
- structural_catalog.yaml: 全部构件尺寸经验值

测试要点：
- test_levels: 控制标高
- test_simple_vs_detailed: 模式切换
- test_plan_matches_elevation: 平面/立面墩位一致
"""

from __future__ import annotations

import logging

from ..config import StructuralCatalog, load_catalog
from ..interfaces import IGeometrySynthesizer
from ..models import (
    BridgeGeometry,
    GeometryEntity,
    LayoutResult,
    ParameterSet,
    RenderMode,
    StructuralLevels,
)
from .grid import GridBuilder
from .members import AbutmentBuilder, DeckBuilder, EntityFactory, PierBuilder
from .transformer import CoordinateTransformer

logger = logging.getLogger(__name__)


class GeometrySynthesizer(IGeometrySynthesizer):
    """构件几何合成实现"""

    def __init__(
        self,
        params: ParameterSet,
        transformer: CoordinateTransformer | None = None,
        catalog: StructuralCatalog | None = None,
        *,
        include_plan: bool = False,
    ):
        self.params = params
        self.catalog = catalog or load_catalog()
        self.transformer = transformer or CoordinateTransformer(params)
        self.include_plan = include_plan

        self.factory = EntityFactory(self.catalog)
        self.deck = DeckBuilder(self.factory)
        self.piers = PierBuilder(self.factory)
        self.abutments = AbutmentBuilder(self.factory)
        self.grid = GridBuilder(params, self.transformer, self.factory)

    def compute_levels(self) -> StructuralLevels:
        p = self.params
        deck_cfg = self.catalog.deck
        deck_level = p.top_level - deck_cfg.level_below_top
        return StructuralLevels(
            datum=p.datum,
            top_level=p.top_level,
            deck_level=deck_level,
            soffit_level=deck_level - deck_cfg.thickness,
            parapet_level=deck_level + deck_cfg.parapet_height,
            foundation_level=p.datum - self.catalog.pier.foundation_offset,
        )

    def synthesize(self, layout: LayoutResult, mode: RenderMode) -> BridgeGeometry:
        mode = RenderMode(mode)
        levels = self.compute_levels()
        detailed = mode == RenderMode.DETAILED

        elevation: list[GeometryEntity] = list(self.deck.elevation(layout, levels))

        pier_members = []
        for pier in layout.piers:
            if detailed:
                entities, member = self.piers.detailed(pier, levels)
            else:
                entities, member = self.piers.simple(pier, levels)
            elevation.extend(entities)
            pier_members.append(member)

        abutment_members = []
        for abutment in layout.abutments:
            if detailed:
                entities, member = self.abutments.detailed(abutment, levels)
            else:
                entities, member = self.abutments.simple(abutment, levels)
            elevation.extend(entities)
            abutment_members.append(member)

        geometry = BridgeGeometry(
            mode=mode,
            levels=levels,
            layout=layout,
            elevation=elevation,
            piers=pier_members,
            abutments=abutment_members,
        )

        if self.include_plan:
            plan, plan_chainages = self._plan(layout, geometry)
            geometry.plan = plan
            geometry.plan_pier_chainages = plan_chainages

        logger.debug(
            f"几何合成完成: mode={mode.value}, 桥墩={len(pier_members)}, "
            f"立面实体={len(geometry.elevation)}, 平面实体={len(geometry.plan)}"
        )
        return geometry

    def synthesize_grid(self) -> list[GeometryEntity]:
        """坐标轴/网格实体"""
        return self.grid.build()

    def plan_centre(self) -> float:
        """平面图中心线标高位置（基准线以下）"""
        offset = self.transformer.paper_to_metres(self.catalog.plan.offset_below_datum_mm)
        return self.params.datum - offset - self.catalog.deck.width / 2

    def _plan(
        self, layout: LayoutResult, geometry: BridgeGeometry
    ) -> tuple[list[GeometryEntity], list[float]]:
        centre = self.plan_centre()
        detailed = geometry.mode == RenderMode.DETAILED

        plan: list[GeometryEntity] = list(self.deck.plan(layout, centre))
        chainages = layout.pier_chainages
        for ch in chainages:
            plan.extend(self.piers.plan(ch, centre, detailed))

        half_width = self.catalog.deck.width / 2
        for member in geometry.abutments:
            plan.extend(self.abutments.plan(member, centre, half_width))

        return plan, chainages
