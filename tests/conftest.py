import pytest

from dprforge.codex.weapons import default_weapons
from dprforge.models.build import AbilityScores, BuildConfiguration


@pytest.fixture(autouse=True)
def _lenient_catalog(monkeypatch):
    # Tests that need strict lookups opt in explicitly.
    monkeypatch.delenv("DPRFORGE_STRICT_CATALOG", raising=False)
    monkeypatch.delenv("DPRFORGE_ABILITY_EDITOR", raising=False)


@pytest.fixture
def weapons():
    return default_weapons()


@pytest.fixture
def make_build():
    def _make(weapon_id="longsword", str_=16, dex=14, **kw):
        return BuildConfiguration(
            abilities=AbilityScores(str=str_, dex=dex),
            weapon_id=weapon_id,
            **kw,
        )

    return _make
