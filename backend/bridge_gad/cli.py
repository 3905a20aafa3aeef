"""
命令行入口 - 参数文件 → DXF

用法：
    bridge-gad input.txt -o out.dxf --mode detailed --plan
    bridge-gad input.xlsx --job          # 走任务流水线，产物在 storage/jobs/<id>/output
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import RuntimeConfig, load_catalog, reload_config
from .config.runtime_config import DEFAULT_RUNTIME_PATH
from .drawing import DxfEncoder
from .ingest import get_parser
from .interfaces import BridgeGadError
from .pipeline import JobManager, PipelineExecutor

logger = logging.getLogger("bridge_gad")


def setup_logging(config: RuntimeConfig) -> None:
    """按 LoggingConfig 配置根日志"""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.logging.log_to_file:
        config.ensure_dirs()
        handlers.append(logging.FileHandler(config.storage_dir / "bridge_gad.log", encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, config.logging.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bridge-gad",
        description="Generate a bridge general arrangement drawing (DXF) from a parameter file.",
    )
    parser.add_argument("input", help="参数文件（.txt 或 .xlsx）")
    parser.add_argument("-o", "--output", default="", help="输出DXF路径（默认：与输入同名）")
    parser.add_argument(
        "--mode",
        choices=["simple", "detailed"],
        default=None,
        help="构件绘制模式（默认取 runtime.yaml）",
    )
    parser.add_argument("--plan", action="store_true", default=None, help="同时绘制平面图")
    parser.add_argument("--no-grid", action="store_true", help="不绘制网格")
    parser.add_argument("--no-dimensions", action="store_true", help="不绘制尺寸标注")
    parser.add_argument("--no-cross-section", action="store_true", help="不绘制地面线")
    parser.add_argument(
        "--config",
        default=str(DEFAULT_RUNTIME_PATH),
        help="运行期配置文件（默认：documents/runtime.yaml）",
    )
    parser.add_argument("--job", action="store_true", help="以任务方式执行并持久化")
    return parser


def _options(args: argparse.Namespace) -> dict:
    options: dict = {}
    if args.mode:
        options["render_mode"] = args.mode
    if args.plan:
        options["include_plan"] = True
    if args.no_grid:
        options["include_grid"] = False
    if args.no_dimensions:
        options["include_dimensions"] = False
    if args.no_cross_section:
        options["include_cross_section"] = False
    return options


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = reload_config(args.config)
    setup_logging(config)

    input_path = Path(args.input)
    options = _options(args)

    try:
        catalog = load_catalog(config.catalog_path)
        executor = PipelineExecutor(config, catalog, JobManager(config))

        if args.job:
            job = executor.job_manager.create_job(input_path.stem, input_path, options)
            executor.execute(job)
            print(job.artifacts.dxf_path)
            for flag in job.flags:
                logger.warning(f"告警: {flag}")
            return 0

        parser = get_parser(input_path, config.input_limits.max_input_mb * 1024 * 1024)
        params = parser.parse(input_path)
        sequence = executor.run(params, executor.build_options(options))

        output = Path(args.output) if args.output else input_path.with_suffix(".dxf")
        DxfEncoder(catalog, config.drawing.dxf_version).save(sequence, output)
        print(output)
        return 0

    except BridgeGadError as e:
        print(f"错误: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
