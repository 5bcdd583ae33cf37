"""Tests for the console logger."""

import pytest

from core import logger


@pytest.fixture
def debug_level():
    logger.set_log_level(logger.LogLevel.DEBUG)
    yield
    logger.set_log_level(logger.LogLevel.INFO)


def test_messages_go_to_current_stdout(capsys):
    logger.info("building snark.epub")
    logger.error("cover missing")
    out = capsys.readouterr().out
    assert "building snark.epub" in out
    assert "❌ cover missing" in out


def test_debug_hidden_by_default(capsys):
    logger.debug("entry appended")
    assert "entry appended" not in capsys.readouterr().out


def test_debug_shown_after_level_change(capsys, debug_level):
    logger.debug("entry appended")
    assert "entry appended" in capsys.readouterr().out


def test_section_prints_heading(capsys):
    logger.section("Packaging")
    lines = capsys.readouterr().out.splitlines()
    assert lines[-2:] == ["-" * 30, "★Packaging"]
