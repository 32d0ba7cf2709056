#!/usr/bin/env python3
"""
Grid Pathfinding and Steering Simulation

Runs one pathfinding query over a weighted grid, then animates steering
agents that follow the result.

Usage:
    gridsteer --config configs/demo.yaml [options]

Examples:
    gridsteer --config configs/demo.yaml
    gridsteer --config configs/demo.yaml --algorithm jps --gif --out-dir results/
    gridsteer --config configs/demo.yaml --no-csv --no-snapshot --quiet
    gridsteer --config configs/demo.yaml --seed 42 --steps 300
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import GridSteerError
from .model.engine import SimulationEngine
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter
from .pathfinding.registry import available_algorithms


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Grid Pathfinding and Steering Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Algorithms:
    {', '.join(available_algorithms())}

Examples:
    gridsteer --config configs/demo.yaml
    gridsteer --config configs/demo.yaml --algorithm jps --gif --out-dir results/
    gridsteer --config configs/demo.yaml --no-csv --no-snapshot --quiet
    gridsteer --config configs/demo.yaml --seed 42 --steps 300
        """
    )

    # Required arguments
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max simulation steps')
    parser.add_argument('--dt', type=float, default=None,
                        help='Override the tick length in seconds')
    parser.add_argument('--algorithm', type=str, default=None,
                        help='Override the pathfinding algorithm')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')
    parser.add_argument('--csv-every', type=int, default=1, metavar='N',
                        help='Log only every N-th step to CSV (default: 1)')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except GridSteerError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.steps is not None:
        config.max_steps = args.steps
    if args.dt is not None:
        config.dt = args.dt
    if args.algorithm is not None:
        config.pathfinding.algorithm = args.algorithm
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {config.grid.width}x{config.grid.height} "
              f"(cell size {config.grid.cell_size:g})")
        print(f"  Algorithm: {config.pathfinding.algorithm}")
        print(f"  Max steps: {config.max_steps}, dt: {config.dt:g}s")

    try:
        engine = SimulationEngine(config)
    except GridSteerError as e:
        print(f"Error building simulation: {e}", file=sys.stderr)
        return 1

    if not config.quiet:
        result = engine.path_result
        if result is not None:
            status = (f"{len(result.path)} nodes, cost {result.cost:.2f}"
                      if result.found else "no path")
            print(f"  Path ({result.algorithm}): {status}, "
                  f"{result.nodes_visited} nodes visited in "
                  f"{result.elapsed * 1000:.2f} ms")
        print(f"  Spawned: {len(engine.agents)} agents")

    # Initialize exporters
    csv_path = config.out_dir / 'trajectories.csv'
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(csv_path, every=max(1, args.csv_every))

    path = engine.path_result.path if engine.path_result is not None else ()
    visualizer = Visualizer(
        engine.grid.walkable_matrix(), config.grid.cell_size,
        weights=engine.grid.weight_matrix(), path=path,
        obstacles=engine.world.obstacles, walls=engine.world.walls
    )

    reporter = Reporter(str(args.config), config.seed)

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    final_state = engine.world.state()
    if csv_writer:
        csv_writer.open()
    try:
        while not engine.is_finished():
            state = engine.step()
            final_state = state

            if csv_writer:
                csv_writer.append(state)

            # Buffer GIF frame (every N steps to reduce memory)
            if config.gif_enabled:
                if state.step % 5 == 0 or engine.is_finished():
                    visualizer.buffer_frame(state)

            reporter.update(state)

            if not config.quiet and state.step % 100 == 0:
                moving = int(state.metrics.get('active_agents', 0))
                mean_speed = state.metrics.get('mean_speed', 0.0)
                print(f"  Step {state.step}: {moving} moving, "
                      f"mean speed {mean_speed:.1f}")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")
    finally:
        if csv_writer:
            csv_writer.close()

    # Final exports
    if csv_writer and not config.quiet:
        print(f"\nCSV saved: {csv_path}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if not config.quiet:
        report = reporter.generate_summary(
            final_state,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled,
            path_result=engine.path_result
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
