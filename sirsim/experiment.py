"""
Output directory management for simulation runs.

Creates runs/{name}/{timestamp}/ holding config.json, summary.json and the
plots/ and logs/ subdirectories, and hands out consistent paths for them.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import SimulationConfig
from .sir import TimeSeries

logger = logging.getLogger(__name__)


class RunDirectory:
    """
    Manages the directory of one simulation run.

    Attributes:
        config: SimulationConfig the run used.
        name: Run name (first directory level).
        timestamp: Second directory level, defaults to the creation time.
        root: Directory of this run.
        plots_dir: Directory for figures.
        logs_dir: Directory for text logs and CSV tables.
    """

    def __init__(
        self,
        config: SimulationConfig,
        name: str = "sir",
        base_dir: str = "runs",
        timestamp: Optional[str] = None,
    ):
        self.config = config
        self.name = name
        self.timestamp = timestamp or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.base_dir = Path(base_dir)

        self.root = self.base_dir / self.name / self.timestamp
        self.plots_dir = self.root / "plots"
        self.logs_dir = self.root / "logs"

        for dir_path in [self.plots_dir, self.logs_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    def save_config(self, seed: Optional[int] = None) -> Path:
        """Save the run configuration (and seed, if any) to config.json."""
        config_path = self.root / "config.json"
        data = {
            "name": self.name,
            "timestamp": self.timestamp,
            "seed": seed,
            "config": self.config.to_dict(),
        }
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info("Run config saved to: %s", config_path)
        return config_path

    def save_summary(
        self,
        results: List[TimeSeries],
        replicate_stats: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """
        Save key metrics of each trajectory to summary.json.

        Args:
            results: Trajectories to summarise (e.g. stochastic and deterministic).
            replicate_stats: Optional output of summarize_replicates().
        """
        summary_path = self.root / "summary.json"

        summary_data = {
            "name": self.name,
            "timestamp": self.timestamp,
            "num_series": len(results),
            "series": [],
        }

        for result in results:
            summary_data["series"].append(
                {
                    "label": result.label,
                    "num_records": len(result),
                    "peak_infected": float(result.peak_infected),
                    "peak_time": float(result.peak_time),
                    "total_infected": float(result.total_infected),
                    "final_size": float(result.final_size),
                    "epidemic_duration": float(result.epidemic_duration),
                }
            )

        if replicate_stats is not None:
            summary_data["replicates"] = replicate_stats

        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False)
        logger.info("Run summary saved to: %s", summary_path)
        return summary_path

    @staticmethod
    def _safe_name(name: str) -> str:
        return name.lower().replace(" ", "_").replace("-", "_")

    def get_plot_path(self, name: str) -> Path:
        return self.plots_dir / f"{self._safe_name(name)}.png"

    def get_log_path(self, name: str) -> Path:
        return self.logs_dir / f"{self._safe_name(name)}.txt"

    def get_table_path(self, name: str) -> Path:
        return self.logs_dir / f"{self._safe_name(name)}.csv"
