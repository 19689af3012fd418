"""Tests for run output directories."""

import json

import pytest

from sirsim.config import get_config
from sirsim.deterministic import DeterministicSIRModel
from sirsim.experiment import RunDirectory
from sirsim.replicates import run_replicates, summarize_replicates
from sirsim.sir import run_stochastic_sir


@pytest.fixture
def config():
    return get_config("default").replace(T=5.0)


@pytest.fixture
def run_dir(config, tmp_path):
    return RunDirectory(config, name="default", base_dir=str(tmp_path), timestamp="2026-01-01_00-00-00")


class TestRunDirectory:
    """Tests for RunDirectory."""

    def test_creates_structure(self, run_dir, tmp_path):
        assert run_dir.root == tmp_path / "default" / "2026-01-01_00-00-00"
        assert run_dir.plots_dir.is_dir()
        assert run_dir.logs_dir.is_dir()

    def test_default_timestamp(self, config, tmp_path):
        run_dir = RunDirectory(config, base_dir=str(tmp_path))
        assert run_dir.root.parent == tmp_path / "sir"
        assert run_dir.root.is_dir()

    def test_save_config(self, run_dir):
        path = run_dir.save_config(seed=42)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["seed"] == 42
        assert data["name"] == "default"
        assert data["config"]["N"] == 100
        assert data["config"]["n_steps"] == 50

    def test_save_summary(self, run_dir, config):
        stochastic = run_stochastic_sir(config, seed=1)
        deterministic = DeterministicSIRModel(config).integrate()
        stats = summarize_replicates(run_replicates(config, 3, seed=1))

        path = run_dir.save_summary([stochastic, deterministic], replicate_stats=stats)
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["num_series"] == 2
        assert [s["label"] for s in data["series"]] == ["Stochastic", "Deterministic"]
        assert data["series"][0]["num_records"] == 51
        assert data["replicates"]["n_runs"] == 3

    def test_summary_without_replicates(self, run_dir, config):
        path = run_dir.save_summary([run_stochastic_sir(config, seed=1)])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert "replicates" not in data

    def test_paths(self, run_dir):
        assert run_dir.get_plot_path("Replicate 0") == run_dir.plots_dir / "replicate_0.png"
        assert run_dir.get_log_path("Stochastic") == run_dir.logs_dir / "stochastic.txt"
        assert run_dir.get_table_path("Deterministic") == run_dir.logs_dir / "deterministic.csv"
