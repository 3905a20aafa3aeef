"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- ParameterSet: 输入参数集（+派生常量）
- LayoutResult: 布跨推导结果
- BridgeGeometry / GeometryEntity: 构件几何（工程坐标）
- DimensionSpec: 尺寸标注
- CommandSequence: 绘图命令流（图纸坐标）
- DrawingJob: 出图任务状态
"""

from .commands import CommandKind, CommandSequence, DrawingCommand
from .dimension import DimensionSpec
from .geometry import (
    AbutmentMember,
    BBox,
    BridgeGeometry,
    GeometryEntity,
    LayerTag,
    LineEntity,
    PierMember,
    Point,
    PolygonEntity,
    RenderMode,
    StructuralLevels,
    TextEntity,
)
from .job import DrawingJob, JobArtifacts, JobProgress, JobStatus
from .layout import AbutmentPosition, LayoutResult, PierPosition
from .parameters import (
    DEFAULT_PARAMETERS,
    INPUT_FIELD_ORDER,
    CrossSectionPoint,
    DerivedConstants,
    ParameterSet,
    resolve_defaults,
    validate_parameters,
)

__all__ = [
    "ParameterSet",
    "CrossSectionPoint",
    "DerivedConstants",
    "DEFAULT_PARAMETERS",
    "INPUT_FIELD_ORDER",
    "resolve_defaults",
    "validate_parameters",
    "LayoutResult",
    "PierPosition",
    "AbutmentPosition",
    "LayerTag",
    "RenderMode",
    "Point",
    "BBox",
    "LineEntity",
    "PolygonEntity",
    "TextEntity",
    "GeometryEntity",
    "StructuralLevels",
    "PierMember",
    "AbutmentMember",
    "BridgeGeometry",
    "DimensionSpec",
    "CommandKind",
    "DrawingCommand",
    "CommandSequence",
    "DrawingJob",
    "JobStatus",
    "JobProgress",
    "JobArtifacts",
]
