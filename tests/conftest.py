"""
Shared fixtures for the roll tree tests.
"""

import pytest

from rolltree.core.settings import SettingsStore
from rolltree.rolls.context import RollContext, Stat
from rolltree.rolls.modifier import CalculatedModifier, Modifier


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts from a fresh settings singleton."""
    SettingsStore.reset()
    yield
    SettingsStore.reset()


@pytest.fixture
def bless():
    return Modifier(name="Bless", modifier="1d4")


@pytest.fixture
def inspire():
    return Modifier(name="Inspire Courage", modifier="1")


@pytest.fixture
def athletics():
    return Stat(
        value=4,
        label="Athletics",
        rolled_mods=[Modifier(name="Weapon Focus", modifier="1d6")],
        calculated_mods=[
            CalculatedModifier(bonus=Modifier(name="Heroism", modifier="2")),
        ],
    )


@pytest.fixture
def context(bless, inspire, athletics):
    return RollContext(
        contexts={
            "actor": {
                "abilities": {"str": {"mod": 3}, "dex": {"mod": 2}},
                "bab": 5,
                "mods": {"bless": bless, "inspire": inspire},
                "attack": "@abilities.str.mod + @bab",
                "skills": {"athletics": athletics},
            },
            "item": {"damage": {"bonus": 1}},
        },
        main_context="actor",
        labels={"abilities.str.mod": "Strength", "bab": "BAB"},
    )
