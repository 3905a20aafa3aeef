"""
运行期配置 - 读取 documents/runtime.yaml

职责：
- 加载绘图选项/输入限制/存储路径/日志等运行参数
- 提供环境变量覆盖机制（BRIDGE_GAD_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DrawingConfig(BaseModel):
    """绘图配置"""

    units_per_metre: float = 1000.0   # 模型空间单位为mm
    dxf_version: str = "R2010"
    render_mode: str = "simple"       # simple | detailed
    include_style: bool = True
    include_grid: bool = True
    include_dimensions: bool = True
    include_plan: bool = False
    include_cross_section: bool = True


class InputLimitsConfig(BaseModel):
    """输入限制"""

    max_input_mb: int = 10
    allowed_exts: list[str] = Field(default_factory=lambda: [".txt", ".xlsx"])


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 基础路径
    base_dir: Path = Path(".")
    storage_dir: Path = Path("storage")
    catalog_path: Path | None = None

    # 各子配置
    drawing: DrawingConfig = Field(default_factory=DrawingConfig)
    input_limits: InputLimitsConfig = Field(default_factory=InputLimitsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "BRIDGE_GAD_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})
        paths = cls._extract(runtime_opts, "paths")

        config = cls(
            drawing=DrawingConfig(**cls._extract(runtime_opts, "drawing")),
            input_limits=InputLimitsConfig(**cls._extract(runtime_opts, "input_limits")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
            **paths,
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.storage_dir.is_absolute():
            self.storage_dir = (base_dir / self.storage_dir).resolve()
        if self.catalog_path and not self.catalog_path.is_absolute():
            self.catalog_path = (base_dir / self.catalog_path).resolve()

    def get_job_dir(self, job_id: str) -> Path:
        """获取任务工作目录"""
        return self.storage_dir / "jobs" / job_id

    def ensure_dirs(self) -> None:
        """确保必要目录存在"""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        (self.storage_dir / "jobs").mkdir(exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_RUNTIME_PATH = Path("documents/runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_RUNTIME_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_RUNTIME_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
