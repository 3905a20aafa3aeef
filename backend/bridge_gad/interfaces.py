"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from bridge_gad.interfaces import IGeometrySynthesizer

    class MySynthesizer(IGeometrySynthesizer):
        def synthesize(self, layout: LayoutResult, mode: RenderMode) -> BridgeGeometry:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import (
        BridgeGeometry,
        CommandSequence,
        CrossSectionPoint,
        DimensionSpec,
        DrawingJob,
        GeometryEntity,
        LayoutResult,
        ParameterSet,
        RenderMode,
    )


# ============================================================================
# 输入模块接口
# ============================================================================

class IParameterParser(ABC):
    """参数解析器接口 - 原始输入 → ParameterSet"""

    @abstractmethod
    def parse(self, source: Any) -> ParameterSet:
        """
        解析输入并构造参数集

        Args:
            source: 原始输入（文件路径，或多行文本内容）

        Returns:
            已校验的参数集

        Raises:
            ValidationError: 字段缺失/越界/格式错误
        """
        ...


# ============================================================================
# 几何模块接口
# ============================================================================

class ILayoutDeriver(ABC):
    """布跨推导接口 - 桥长 → 桥墩/桥台位置"""

    @abstractmethod
    def derive(self, left: float, right: float) -> LayoutResult:
        """
        推导布跨

        Args:
            left: 起点桩号
            right: 终点桩号

        Returns:
            桥墩/桥台/跨界位置（有序）
        """
        ...


class IGeometrySynthesizer(ABC):
    """构件几何合成接口"""

    @abstractmethod
    def synthesize(self, layout: LayoutResult, mode: RenderMode) -> BridgeGeometry:
        """
        生成立面/平面构件几何（工程坐标）

        Args:
            layout: 布跨推导结果
            mode: 简化/详细绘制模式

        Returns:
            桥梁几何模型
        """
        ...


class IDimensionAnnotator(ABC):
    """尺寸标注接口"""

    @abstractmethod
    def annotate(self, geometry: BridgeGeometry) -> list[DimensionSpec]:
        """
        根据构件几何推导尺寸标注

        Returns:
            尺寸标注列表（在几何之后发射）
        """
        ...


class ICrossSectionProjector(ABC):
    """地面线断面投影接口"""

    @abstractmethod
    def project(self, points: tuple[CrossSectionPoint, ...]) -> list[GeometryEntity]:
        """
        将地面线投影为绘图实体

        Raises:
            OverlayError: 断面点桩号越界
        """
        ...


# ============================================================================
# 绘图模块接口
# ============================================================================

class ICommandEmitter(ABC):
    """绘图命令发射器接口"""

    @abstractmethod
    def emit(self, params: ParameterSet) -> CommandSequence:
        """
        生成完整有序的绘图命令序列

        序列以段开始标记开头、以结束标记结尾
        """
        ...


class IDrawingEncoder(ABC):
    """绘图编码器接口 - CommandSequence → 矢量图文件"""

    @abstractmethod
    def save(self, sequence: CommandSequence, output_path: Path) -> Path:
        """
        编码并写出文件

        Args:
            sequence: 已封闭的命令序列（只能消费一次）
            output_path: 输出路径

        Returns:
            写出的文件路径

        Raises:
            EncodingError: 序列未封闭或已被消费
        """
        ...


# ============================================================================
# 流水线与任务管理接口
# ============================================================================

class IJobManager(ABC):
    """任务管理器接口（项目存储协作方）"""

    @abstractmethod
    def create_job(self, name: str, input_file: Path, **kwargs: Any) -> DrawingJob:
        """创建任务"""
        ...

    @abstractmethod
    def get_job(self, job_id: str) -> DrawingJob | None:
        """获取任务"""
        ...

    @abstractmethod
    def update_job(self, job: DrawingJob) -> None:
        """更新任务状态"""
        ...

    @abstractmethod
    def cancel_job(self, job_id: str) -> bool:
        """取消任务"""
        ...

    @abstractmethod
    def get_parameters(self, job_id: str) -> ParameterSet | None:
        """按任务ID取回参数集"""
        ...

    @abstractmethod
    def get_artifact(self, job_id: str) -> Path | None:
        """按任务ID取回DXF产物"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class BridgeGadError(Exception):
    """基础异常"""
    pass


class ValidationError(BridgeGadError):
    """参数校验错误（在几何合成之前抛出，不产生部分输出）"""

    def __init__(self, field: str, value: Any, message: str = "") -> None:
        self.field = field
        self.value = value
        self.message = message or "参数不合法"
        super().__init__(f"{field}={value!r}: {self.message}")


class InputFormatError(ValidationError):
    """输入格式错误（无法解析为数值/行数不足）"""
    pass


class GeometryError(BridgeGadError):
    """几何推导错误（内部不变量被破坏，不可恢复）"""
    pass


class OverlayError(BridgeGadError):
    """断面叠加错误（断面点越界）"""
    pass


class EncodingError(BridgeGadError):
    """编码错误（命令序列状态不合法/写出失败）"""
    pass
