"""
tests/unit/test_config.py

Config is read from the environment on every call:
- unset / blank / non-integer values fall back to defaults
- integer values override the defaults
"""
import pytest

from cvfit import config


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in ("CVFIT_AUTO_APPLY_MIN_SCORE", "CVFIT_MAX_APPLICATIONS_PER_DAY", "CVFIT_TOP_K"):
        monkeypatch.delenv(name, raising=False)


# ------------------------------------------------------------------
# _env_int
# ------------------------------------------------------------------

def test_env_int_default_when_unset():
    assert config._env_int("CVFIT_TOP_K", 3) == 3


@pytest.mark.parametrize("raw", ["", "   ", "ten", "7.5"])
def test_env_int_default_when_blank_or_invalid(monkeypatch, raw):
    monkeypatch.setenv("CVFIT_TOP_K", raw)
    assert config._env_int("CVFIT_TOP_K", 3) == 3


def test_env_int_parses_integers(monkeypatch):
    monkeypatch.setenv("CVFIT_TOP_K", "25")
    assert config._env_int("CVFIT_TOP_K", 3) == 25


# ------------------------------------------------------------------
# Loaders
# ------------------------------------------------------------------

def test_auto_apply_defaults():
    cfg = config.load_auto_apply_config()
    assert cfg.min_score == 70
    assert cfg.max_applications == 5


def test_auto_apply_overrides(monkeypatch):
    monkeypatch.setenv("CVFIT_AUTO_APPLY_MIN_SCORE", "60")
    monkeypatch.setenv("CVFIT_MAX_APPLICATIONS_PER_DAY", "12")
    cfg = config.load_auto_apply_config()
    assert (cfg.min_score, cfg.max_applications) == (60, 12)


def test_default_top_k(monkeypatch):
    assert config.default_top_k() == 10
    monkeypatch.setenv("CVFIT_TOP_K", "3")
    assert config.default_top_k() == 3
