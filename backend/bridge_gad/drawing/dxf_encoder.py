"""
DXF编码器 - CommandSequence → DXF文件

职责：
1. 按目录图层表建立图层（颜色/线宽）
2. STYLE命令 → 文字样式 + 标注样式
3. LINE/TEXT命令 → 模型空间实体
4. 写出文件或字符串

依赖：
- ezdxf: DXF文档构建与写出

测试要点：
- test_save_roundtrip: 写出后用ezdxf读回，实体数量与图层一致
- test_consume_once: 同一序列不能编码两次
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import ezdxf
from ezdxf.lldxf.const import VALID_DXF_LINEWEIGHTS

from ..config import StructuralCatalog, load_catalog
from ..interfaces import EncodingError, IDrawingEncoder
from ..models import CommandKind, CommandSequence, DrawingCommand

logger = logging.getLogger(__name__)


def to_dxf_lineweight(mm: float) -> int:
    """线宽mm → DXF线宽（1/100 mm，取最近的合法值）"""
    value = int(round(mm * 100))
    return min(VALID_DXF_LINEWEIGHTS, key=lambda v: abs(v - value))


class DxfEncoder(IDrawingEncoder):
    """DXF编码器实现"""

    def __init__(
        self,
        catalog: StructuralCatalog | None = None,
        dxf_version: str = "R2010",
    ):
        self.catalog = catalog or load_catalog()
        self.dxf_version = dxf_version

    def encode(self, sequence: CommandSequence):
        """消费命令序列，返回 ezdxf 文档"""
        commands = sequence.consume()
        self._check_markers(commands)

        doc = ezdxf.new(dxfversion=self.dxf_version)
        self._setup_layers(doc)
        msp = doc.modelspace()
        text_style = "Standard"

        counts = {CommandKind.LINE: 0, CommandKind.TEXT: 0}
        for command in commands:
            if command.kind == CommandKind.STYLE:
                text_style = self._setup_style(doc, command)
            elif command.kind == CommandKind.LINE:
                self._add_line(msp, command)
                counts[CommandKind.LINE] += 1
            elif command.kind == CommandKind.TEXT:
                self._add_text(msp, command, text_style)
                counts[CommandKind.TEXT] += 1

        extents = sequence.extents()
        if extents is not None:
            doc.header["$EXTMIN"] = (extents.xmin, extents.ymin, 0)
            doc.header["$EXTMAX"] = (extents.xmax, extents.ymax, 0)

        logger.debug(
            f"DXF编码: LINE={counts[CommandKind.LINE]}, TEXT={counts[CommandKind.TEXT]}"
        )
        return doc

    def save(self, sequence: CommandSequence, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        doc = self.encode(sequence)
        try:
            doc.saveas(str(output_path))
        except OSError as e:
            raise EncodingError(f"DXF写出失败: {output_path}: {e}") from e
        logger.info(f"DXF已写出: {output_path}")
        return output_path

    def to_string(self, sequence: CommandSequence) -> str:
        """编码为DXF文本"""
        doc = self.encode(sequence)
        stream = io.StringIO()
        doc.write(stream)
        return stream.getvalue()

    # === 内部方法 ===

    @staticmethod
    def _check_markers(commands: tuple[DrawingCommand, ...]) -> None:
        if not commands or commands[0].kind != CommandKind.SECTION_START:
            raise EncodingError("命令序列缺少段开始标记")
        if commands[-1].kind != CommandKind.TERMINATOR:
            raise EncodingError("命令序列缺少结束标记")

    def _setup_layers(self, doc) -> None:
        for style in self.catalog.iter_layer_styles():
            if style.name in doc.layers:
                layer = doc.layers.get(style.name)
                layer.color = style.color
                layer.dxf.lineweight = to_dxf_lineweight(style.lineweight)
                continue
            doc.layers.add(
                style.name,
                color=style.color,
                lineweight=to_dxf_lineweight(style.lineweight),
            )

    def _setup_style(self, doc, command: DrawingCommand) -> str:
        name = command.name or "Standard"
        settings = command.settings
        if not doc.styles.has_entry(name):
            doc.styles.new(name, dxfattribs={"font": settings.get("font", "arial.ttf")})

        dimstyle = settings.get("dimstyle")
        if dimstyle and not doc.dimstyles.has_entry(dimstyle):
            doc.dimstyles.new(
                dimstyle,
                dxfattribs={
                    "dimtxsty": name,
                    "dimtxt": settings.get("text_height", 2.5),
                    "dimasz": settings.get("arrow_size", 2.5),
                    "dimexe": settings.get("extension", 1.25),
                    "dimexo": settings.get("extension_offset", 0.625),
                },
            )
        return name

    @staticmethod
    def _add_line(msp, command: DrawingCommand) -> None:
        msp.add_line(
            command.start,
            command.end,
            dxfattribs={
                "layer": command.layer,
                "color": command.color,
                "lineweight": to_dxf_lineweight(command.lineweight),
            },
        )

    @staticmethod
    def _add_text(msp, command: DrawingCommand, style: str) -> None:
        msp.add_text(
            command.text or "",
            dxfattribs={
                "layer": command.layer,
                "color": command.color,
                "style": style,
                "height": command.height or 2.5,
                "rotation": command.rotation,
                "insert": command.position,
            },
        )
