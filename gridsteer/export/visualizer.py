"""Rendering of grid, path and agents to PNG and GIF."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import Circle
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING
from PIL import Image
import io

if TYPE_CHECKING:
    from ..model.state import SimulationState
    from ..steering.environment import CircleObstacle, WallSegment


class Visualizer:
    """
    Draws the world in world units: each grid cell spans `cell_size`.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    COLORS = {
        'wall': '#2C3E50',
        'floor': '#ECF0F1',
        'heavy': '#D5B895',     # weighted terrain
        'path': '#F39C12',
        'obstacle': '#7F8C8D',
        'segment': '#C0392B',
        'agent': '#3498DB',
        'velocity': '#1F618D',
    }

    def __init__(self, walkable: np.ndarray, cell_size: float = 1.0,
                 weights: Optional[np.ndarray] = None,
                 path: Sequence[Tuple[int, int]] = (),
                 obstacles: Sequence["CircleObstacle"] = (),
                 walls: Sequence["WallSegment"] = ()):
        self.walkable = np.asarray(walkable, dtype=bool)
        self.height, self.width = self.walkable.shape
        self.cell_size = cell_size
        self.weights = weights
        self.path = list(path)
        self.obstacles = list(obstacles)
        self.walls = list(walls)
        self.frames: List[Image.Image] = []

    def _base_image(self) -> np.ndarray:
        base = np.ones((self.height, self.width, 3))
        base[:, :] = to_rgb(self.COLORS['floor'])
        if self.weights is not None and np.max(self.weights) > 1.0:
            # Tint heavier cells toward the terrain color
            excess = (self.weights - 1.0) / (np.max(self.weights) - 1.0)
            heavy = np.array(to_rgb(self.COLORS['heavy']))
            base = base * (1 - excess[..., None]) + heavy * excess[..., None]
        base[~self.walkable] = to_rgb(self.COLORS['wall'])
        return base

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        extent_x = self.width * self.cell_size
        extent_y = self.height * self.cell_size
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(8, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        ax.imshow(self._base_image(), origin='lower', aspect='equal',
                  extent=[0, extent_x, 0, extent_y])

        if self.path:
            xs = [(x + 0.5) * self.cell_size for x, _ in self.path]
            ys = [(y + 0.5) * self.cell_size for _, y in self.path]
            ax.plot(xs, ys, '-', color=self.COLORS['path'], linewidth=2,
                    alpha=0.8)
            ax.plot(xs[0], ys[0], 's', color=self.COLORS['path'],
                    markeredgecolor='black', markersize=8)
            ax.plot(xs[-1], ys[-1], '*', color=self.COLORS['path'],
                    markeredgecolor='black', markersize=12)

        for obstacle in self.obstacles:
            ax.add_patch(Circle((obstacle.center.x, obstacle.center.y),
                                obstacle.radius,
                                color=self.COLORS['obstacle'], alpha=0.6))

        for wall in self.walls:
            ax.plot([wall.start.x, wall.end.x], [wall.start.y, wall.end.y],
                    '-', color=self.COLORS['segment'], linewidth=2)

        for agent in state.agents:
            ax.add_patch(Circle((agent.x, agent.y), agent.radius,
                                color=self.COLORS['agent'], alpha=0.9))
            if agent.speed > 0:
                scale = agent.radius * 2 / agent.speed
                ax.plot([agent.x, agent.x + agent.vx * scale],
                        [agent.y, agent.y + agent.vy * scale], '-',
                        color=self.COLORS['velocity'], linewidth=1)

        ax.set_title(f'Step {state.step} | t = {state.time:.2f}s | '
                     f'Agents: {len(state.agents)} | '
                     f'Mean speed: {state.metrics.get("mean_speed", 0):.1f}')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_xlim(0, extent_x)
        ax.set_ylim(0, extent_y)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
