import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _is_e2e_test(request: pytest.FixtureRequest) -> bool:
    return "tests/e2e/" in str(request.node.fspath).replace("\\", "/")


@pytest.fixture(autouse=True)
def isolated_engine_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHRONICLES_DATABASE_URL",
        "CHRONICLES_RNG_SEED",
        "CHRONICLES_MINI_EVENTS",
        "CHRONICLES_MINI_EVENT_CHANCE",
        "CHRONICLES_DB_CONNECT_PROBE_TIMEOUT_S",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def e2e_fast_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if not _is_e2e_test(request):
        return

    monkeypatch.setenv("CHRONICLES_RNG_SEED", "7")
    monkeypatch.setenv("CHRONICLES_MINI_EVENTS", "0")
