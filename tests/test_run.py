"""Tests for the command-line entry point."""

import argparse
import sys

import pytest

import run


class TestPositiveInt:

    def test_accepts_positive(self):
        assert run.positive_int("7") == 7

    @pytest.mark.parametrize("value", ["0", "-3", "wide"])
    def test_rejects_others(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            run.positive_int(value)

    @pytest.mark.parametrize("flag", ["--width", "--height"])
    def test_play_rejects_empty_board(self, flag, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run.py", "play", flag, "0"])

        with pytest.raises(SystemExit) as exc_info:
            run.main()

        assert exc_info.value.code == 2
        assert "must be at least 1" in capsys.readouterr().err
