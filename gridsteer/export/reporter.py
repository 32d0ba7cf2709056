"""Summary report generation for gridsteer runs."""

import math
from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

from ..pathfinding.util import path_length

if TYPE_CHECKING:
    from ..model.state import PathResult, SimulationState


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: str, seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.step_metrics: List[Dict] = []
        self.peak_speed = 0.0
        self.speed_sum = 0.0
        self.stalled_steps = 0

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per step."""
        self.step_metrics.append(state.metrics.copy())
        self.peak_speed = max(self.peak_speed,
                              state.metrics.get('max_speed', 0.0))
        self.speed_sum += state.metrics.get('mean_speed', 0.0)
        if state.agents and state.metrics.get('active_agents', 0) == 0:
            self.stalled_steps += 1

    @property
    def average_speed(self) -> float:
        if not self.step_metrics:
            return 0.0
        return self.speed_sum / len(self.step_metrics)

    def _path_lines(self, path_result: Optional["PathResult"]) -> List[str]:
        if path_result is None:
            return ["Query:                 (none configured)"]
        cost = (f"{path_result.cost:.3f}" if math.isfinite(path_result.cost)
                else "n/a")
        return [
            f"Algorithm:             {path_result.algorithm}",
            f"Path Found:            {'yes' if path_result.found else 'no'}",
            f"Path Length:           {len(path_result.path)} nodes",
            f"Path Distance:         {path_length(path_result.path):.3f} cells",
            f"Path Cost:             {cost}",
            f"Nodes Visited:         {path_result.nodes_visited}",
            f"Search Time:           {path_result.elapsed * 1000:.2f} ms",
        ]

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool,
                         path_result: Optional["PathResult"] = None) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics

        lines = [
            "",
            "=" * 80,
            "                    GRIDSTEER SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "PATHFINDING",
            "-" * 40,
        ]
        lines.extend(self._path_lines(path_result))
        lines.extend([
            "",
            "STEERING METRICS",
            "-" * 40,
            f"Total Steps:           {final_state.step}",
            f"Simulated Time:        {final_state.time:.2f} s",
            f"Agents:                {int(metrics.get('total_agents', 0))}",
            f"Moving Agents:         {int(metrics.get('active_agents', 0))}",
            f"Final Mean Speed:      {metrics.get('mean_speed', 0.0):.2f}",
            f"Average Mean Speed:    {self.average_speed:.2f}",
            f"Peak Speed:            {self.peak_speed:.2f}",
            f"Stalled Steps:         {self.stalled_steps}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ])

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'trajectories.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
