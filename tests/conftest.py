import sys
from pathlib import Path

import pytest

# Make the repo root importable so tests can import `websearch` without installing it
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

ENV_VARS = (
    "WEB_SEARCH_ENGINES",
    "WEB_SEARCH_ENCODING",
    "WEB_SEARCH_KERNEL",
    "WEB_SEARCH_VERBOSE",
    "BROWSER",
    "OSTYPE",
)


class FakeLauncher:
    def __init__(self):
        self.calls = []

    def launch(self, argv, shell=False):
        self.calls.append((list(argv), shell))


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
