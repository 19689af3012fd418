"""Tests for the command line entry point."""

import pytest

from main import main


class TestMain:
    """Tests for main()."""

    def test_default_emits_table(self, capsys):
        assert main(["--seed", "42"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "t,S,I,R,new_infections,new_recoveries"
        assert lines[1] == "0,99,1,0,1,0"
        assert len(lines) == 1002

    def test_seed_is_reproducible(self, capsys):
        main(["--seed", "7", "--T", "20"])
        first = capsys.readouterr().out
        main(["--seed", "7", "--T", "20"])
        second = capsys.readouterr().out
        assert first == second

    def test_overrides(self, capsys):
        assert main(["--N", "50", "--I0", "2", "--R0", "3", "--T", "1", "--seed", "0"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[1] == "0,45,2,3,2,3"
        assert len(lines) == 12

    def test_deterministic(self, capsys):
        assert main(["--deterministic", "--T", "10"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 102
        t, S, I, R, _, _ = lines[-1].split(",")
        assert float(S) + float(I) + float(R) == pytest.approx(100)

    def test_invalid_configuration(self, capsys):
        assert main(["--dt", "5"]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "dt" in captured.err

    def test_degenerate_probability(self, capsys):
        args = ["--N", "1", "--r0-param", "10", "--d-inf", "0.01", "--dt", "1"]
        assert main(args) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_output_file(self, tmp_path, capsys):
        path = tmp_path / "series.csv"
        assert main(["--seed", "1", "--T", "5", "--output", str(path)]) == 0
        assert capsys.readouterr().out == ""
        assert len(path.read_text(encoding="utf-8").splitlines()) == 52

    def test_replicates(self, capsys):
        assert main(["--seed", "1", "--T", "5", "--replicates", "3"]) == 0
        assert "Replicates: 3" in capsys.readouterr().err

    def test_plot(self, tmp_path, capsys):
        path = tmp_path / "comparison.png"
        assert main(["--seed", "1", "--T", "5", "--plot", str(path)]) == 0
        assert path.exists()

    def test_output_dir(self, tmp_path, capsys):
        args = ["--seed", "1", "--T", "5", "--replicates", "2", "--output-dir", str(tmp_path)]
        assert main(args) == 0

        (run_root,) = list((tmp_path / "default").iterdir())
        assert (run_root / "config.json").exists()
        assert (run_root / "summary.json").exists()
        assert (run_root / "logs" / "stochastic.txt").exists()
        assert (run_root / "logs" / "deterministic.csv").exists()
        assert (run_root / "plots" / "comparison.png").exists()
        assert (run_root / "plots" / "replicates.png").exists()
