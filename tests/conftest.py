from pathlib import Path
from typing import List

import pytest

from apisidebar.schemas import Operation


@pytest.fixture(scope='session')
def fixtures_dir() -> Path:
    """Directory holding the sample API description and its golden sidebar"""
    return Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(scope='session')
def docudevs_api_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "docudevs.yaml"


@pytest.fixture(scope='session')
def docudevs_sidebar_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "docudevs_sidebar.ts"


@pytest.fixture
def case_operations() -> List[Operation]:
    """A small operation list spanning two tags, a collision and a deprecation"""
    return [
        Operation(operation_id="listCases", method="GET", label="listCases", tag="cases"),
        Operation(operation_id="createBatch", method="POST", label="createBatch", tag="batch"),
        Operation(operation_id="createCase", method="POST", label="createCase", tag="cases"),
        Operation(operation_id="uploadLegacy", method="POST", label="uploadLegacy", tag="cases", deprecated=True),
        Operation(operation_id="resolve", method="GET", label="resolve", tag="Internal LLM"),
        Operation(operation_id="resolve", method="GET", label="resolve"),
    ]
