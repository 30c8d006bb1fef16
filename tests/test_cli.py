"""Tests for the kmaps command-line tool."""

import json

import pytest

from kmaps.cli import format_table, main
from kmaps.config import get_settings

STARTING = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
# A White pawn on its back rank, accepted only without strict validation
PAWN_ON_BACK_RANK = "4k3/8/8/8/8/8/8/P3K3 w - - 0 1"


class TestFormatTable:
    def test_row_layout(self):
        out = format_table([{"metric": "Material", "White": 0.5, "Black": 0.5}])
        assert out == "Material        | White: 0.500 | Black: 0.500"


class TestMain:
    @pytest.fixture(autouse=True)
    def _fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_table_output(self, capsys):
        assert main([STARTING, "--no-cache"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 5
        assert out[0].startswith("Material")
        assert out[4].startswith("Space")

    def test_json_output(self, capsys):
        assert main([STARTING, "--json"]) == 0
        results = json.loads(capsys.readouterr().out)
        assert [r["metric"] for r in results][0] == "Material"
        assert len(results) == 5

    def test_invalid_fen(self, capsys):
        assert main(["invalid-fen"]) == 1
        assert "invalid FEN" in capsys.readouterr().err

    def test_strict_flag(self, capsys):
        assert main([PAWN_ON_BACK_RANK, "--strict"]) == 1

    def test_strict_default_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("KMAPS_STRICT_VALIDATION", "true")
        assert main([PAWN_ON_BACK_RANK]) == 1

    def test_no_strict_overrides_environment(self, monkeypatch, capsys):
        """--no-strict turns off strict validation enabled through KMAPS_STRICT_VALIDATION."""
        monkeypatch.setenv("KMAPS_STRICT_VALIDATION", "true")
        assert main([PAWN_ON_BACK_RANK, "--no-strict"]) == 0
        assert capsys.readouterr().out.startswith("Material")
