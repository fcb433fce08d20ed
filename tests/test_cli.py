"""Tests for the classic-snake CLI."""

import pytest

from classic_snake.cli import _build_parser, main
from classic_snake.config import GameConfig
from classic_snake.grid import WallMode


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        parser = _build_parser()
        args = parser.parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.games == 100
        assert args.max_ticks == 1000
        assert args.config is None
        assert args.wall_mode is None

    def test_simulate_with_flags(self):
        parser = _build_parser()
        args = parser.parse_args([
            "simulate",
            "--games", "5",
            "--grid-width", "15",
            "--grid-height", "12",
            "--wall-mode", "wrap",
            "--seed", "4",
        ])
        assert args.games == 5
        assert args.grid_width == 15
        assert args.grid_height == 12
        assert args.wall_mode == "wrap"
        assert args.seed == 4


class TestCLISimulate:
    def test_simulate_runs(self, capsys):
        result = main([
            "simulate",
            "--games", "3",
            "--grid-width", "10",
            "--grid-height", "10",
            "--max-ticks", "20",
            "--seed", "1",
        ])
        assert result == 0
        captured = capsys.readouterr()
        assert "Simulation:" in captured.out
        assert "ticks/s" in captured.out

    def test_simulate_games_must_be_positive(self):
        with pytest.raises(SystemExit, match="2"):
            main(["simulate", "--games", "0"])

    def test_simulate_invalid_grid(self):
        with pytest.raises(SystemExit, match="2"):
            main(["simulate", "--grid-width", "0"])


class TestCLIConfig:
    def test_writes_default_config(self, tmp_path):
        out = tmp_path / "game.json"
        assert main(["config", str(out)]) == 0
        assert GameConfig.load(out) == GameConfig()

    def test_flags_override_config_file(self, tmp_path):
        base = tmp_path / "base.json"
        GameConfig(grid_width=20, grid_height=20).save(base)
        out = tmp_path / "out.json"
        assert main([
            "config", "--config", str(base), "--wall-mode", "wrap",
            "--food-reward", "5", str(out),
        ]) == 0
        cfg = GameConfig.load(out)
        assert cfg.grid_width == 20
        assert cfg.wall_mode == WallMode.WRAP
        assert cfg.food_reward == 5

    def test_wall_mode_flag_restores_walls(self, tmp_path):
        base = tmp_path / "base.json"
        GameConfig(wall_mode=WallMode.WRAP).save(base)
        out = tmp_path / "out.json"
        assert main([
            "config", "--config", str(base), "--wall-mode", "death", str(out),
        ]) == 0
        assert GameConfig.load(out).wall_mode == WallMode.DEATH

    def test_unknown_wall_mode_rejected(self, tmp_path):
        with pytest.raises(SystemExit, match="2"):
            main(["config", "--wall-mode", "bounce", str(tmp_path / "x.json")])
