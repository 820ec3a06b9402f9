from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from culebra_ref.runtime import Environment, root_environment


@pytest.fixture
def env() -> Environment:
    """Fresh root scope with the prelude installed."""
    return root_environment()


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario tables are keyed by pytest.param ids; reject clashes."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        if item.nodeid in seen:
            duplicates.append(item.nodeid)
        seen[item.nodeid] = seen.get(item.nodeid, 0) + 1

    if duplicates:
        lines = "\n".join(f"- {nodeid} (x{seen[nodeid]})" for nodeid in sorted(set(duplicates)))
        raise pytest.UsageError(f"Duplicate scenario ids:\n{lines}")
