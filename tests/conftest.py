"""Shared fixtures for relapse and relapseviz tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def survival_grammar_path() -> Path:
    """Grammar file exercising most pattern and expression variants."""
    return FIXTURES_DIR / "survival.relapse"


@pytest.fixture
def survival_grammar(survival_grammar_path: Path) -> str:
    return survival_grammar_path.read_text(encoding="utf-8")


@pytest.fixture
def conjunction_source() -> str:
    return "(.A == 1 & .B == 2)"


@pytest.fixture
def declarations_source() -> str:
    return "@first\n#first = *\n#second = <empty>\n#third = .Name == \"x\"\n"


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory so no stray .relapseviz.json is found."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
