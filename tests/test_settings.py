import logging

import pytest

from sudokusolver.settings import Settings, configure_logging, load_settings


def test_defaults():
    assert load_settings({}) == Settings(box_size=3, max_activations=None, log_level="WARNING")


def test_reads_environment():
    env = {"SUDOKU_BOX_SIZE": "2", "SUDOKU_MAX_ACTIVATIONS": "1000", "SUDOKU_LOG_LEVEL": "debug"}
    assert load_settings(env) == Settings(box_size=2, max_activations=1000, log_level="DEBUG")


def test_blank_budget_means_unlimited():
    assert load_settings({"SUDOKU_MAX_ACTIVATIONS": "  "}).max_activations is None


@pytest.mark.parametrize(
    "env",
    [
        {"SUDOKU_BOX_SIZE": "three"},
        {"SUDOKU_BOX_SIZE": "0"},
        {"SUDOKU_MAX_ACTIVATIONS": "-5"},
        {"SUDOKU_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_settings(env)


def test_configure_logging_applies_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    configure_logging(Settings(log_level="INFO"))
    assert calls["level"] == "INFO"


def test_box_size_above_supported_maximum():
    assert load_settings({"SUDOKU_BOX_SIZE": "5"}).box_size == 5
    with pytest.raises(ValueError):
        load_settings({"SUDOKU_BOX_SIZE": "6"})
