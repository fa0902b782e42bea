from __future__ import annotations

import pytest

EASY = "53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79"
EASY_SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"

# (1,8) can only take 9, which then leaves no value for (1,9)
DEADLOCK = (
    "1234567.."
    "........."
    "........."
    ".......8."
    "........."
    "........."
    "........8"
    "........."
    "........."
)


@pytest.fixture
def easy() -> str:
    return EASY


@pytest.fixture
def easy_solution() -> str:
    return EASY_SOLUTION


@pytest.fixture
def deadlock() -> str:
    return DEADLOCK
