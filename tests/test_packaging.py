from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


def test_wheel_discovery_includes_directories_without_init() -> None:
    tomllib = pytest.importorskip("tomllib")
    setuptools = pytest.importorskip("setuptools")

    config = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    find = config["tool"]["setuptools"]["packages"]["find"]
    assert find["namespaces"] is True

    packages = set(setuptools.find_namespace_packages(where=str(ROOT / find["where"][0])))
    for name in (
        "quote_engine.api.routes",
        "quote_engine.data",
        "quote_engine.models",
        "quote_engine.persistence",
        "quote_engine.schemas",
        "quote_engine.services.distance",
        "quote_engine.services.quotes",
        "quote_engine.services.scheduling",
    ):
        assert name in packages
