"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(sample_params, catalog):
        assert sample_params.bridge_length == 100
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from bridge_gad.config import RuntimeConfig, StructuralCatalog, load_catalog
from bridge_gad.geometry import CoordinateTransformer
from bridge_gad.models import ParameterSet


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def catalog() -> StructuralCatalog:
    """结构构造参数目录（会话级别缓存）"""
    return load_catalog()


@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（存储目录指向临时目录）"""
    return RuntimeConfig(storage_dir=temp_dir / "storage")


# ============================================================================
# 参数集 Fixtures
# ============================================================================

SAMPLE_VALUES = {
    "scale1": 100,
    "scale2": 50,
    "skew": 0,
    "datum": 0,
    "toprl": 20,
    "left": 0,
    "right": 100,
    "xincr": 10,
    "yincr": 2,
    "noch": 10,
}


@pytest.fixture
def sample_values() -> dict:
    """示例原始参数（旧短名）"""
    return dict(SAMPLE_VALUES)


@pytest.fixture
def sample_params() -> ParameterSet:
    """示例参数集：L=100，无地面线"""
    return ParameterSet.build(SAMPLE_VALUES)


@pytest.fixture
def profile_params() -> ParameterSet:
    """示例参数集：含地面线（20.0 在网格上，25.0 不在）"""
    return ParameterSet.build(
        {
            **SAMPLE_VALUES,
            "cross_section": [(0.0, 5.0), (20.0, 3.5), (25.0, 2.8), (60.0, 4.1), (100.0, 5.2)],
        }
    )


@pytest.fixture
def transformer(sample_params: ParameterSet) -> CoordinateTransformer:
    """示例坐标变换器"""
    return CoordinateTransformer(sample_params)


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_text_input() -> str:
    """示例文本输入（10行参数 + 2个地面线点）"""
    lines = ["100", "50", "0", "0", "20", "0", "100", "10", "2", "2", "15", "3.2", "40", "2.5"]
    return "\n".join(lines) + "\n"
