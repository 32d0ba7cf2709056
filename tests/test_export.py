"""Tests for the CSV writer, visualizer, reporter and the CLI entry point."""

import csv

import pytest

from gridsteer import SteeringWorld, create_agent, new_grid
from gridsteer.export import CSVWriter, Reporter, Visualizer
from gridsteer.export.csv_writer import FIELDNAMES
from gridsteer.main import main
from gridsteer.model.engine import SimulationEngine
from gridsteer.model.state import PathResult

CONFIG = """
grid:
  width: 8
  height: 6
  cell_size: 10
  walls:
    - {type: rectangle, x: 4, y: 0, width: 1, height: 5}
pathfinding:
  algorithm: jps
  start: [0, 0]
  goal: [7, 0]
agents:
  - id: 1
    position: [5, 5]
    behaviors:
      - kind: path_following
simulation:
  max_steps: 10
  seed: 1
"""


def _run_world(steps=3):
    world = SteeringWorld()
    world.add_agent(create_agent((0, 0), agent_id=1, velocity=(10, 0)))
    world.add_agent(create_agent((20, 20), agent_id=2, velocity=(0, 5)))
    return [world.tick(0.1) for _ in range(steps)]


def test_csv_writer(tmp_path):
    path = tmp_path / "out" / "trajectories.csv"
    with CSVWriter(path) as writer:
        for state in _run_world():
            writer.append(state)
    assert writer.rows_written == 6

    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == FIELDNAMES
    assert len(rows) == 6
    assert rows[0]['step'] == '1'
    assert float(rows[0]['x']) == pytest.approx(1.0)
    assert float(rows[-1]['speed']) == pytest.approx(5.0)


def test_visualizer_snapshot_and_gif(tmp_path):
    grid = new_grid(4, 4)
    grid.set_cell(1, 1, walkable=False)
    grid.set_weight(2, 2, 3.0)
    visualizer = Visualizer(grid.walkable_matrix(), cell_size=10,
                            weights=grid.weight_matrix(),
                            path=[(0, 0), (1, 0), (2, 1)])
    states = _run_world()
    visualizer.save_snapshot(states[-1], tmp_path / "final_state.png")
    assert (tmp_path / "final_state.png").stat().st_size > 0

    for state in states:
        visualizer.buffer_frame(state)
    visualizer.generate_gif(tmp_path / "sim.gif", fps=5)
    assert (tmp_path / "sim.gif").exists()
    visualizer.clear_frames()
    assert visualizer.frames == []


def test_reporter_summary(tmp_path):
    reporter = Reporter("sim.yaml", seed=3)
    states = _run_world()
    for state in states:
        reporter.update(state)
    result = PathResult(path=((0, 0), (1, 1)), found=True, nodes_visited=4,
                        elapsed=0.001, cost=1.5, algorithm="AStarFinder")
    report = reporter.generate_summary(states[-1], tmp_path, True, False,
                                       False, path_result=result)
    assert "AStarFinder" in report
    assert "1.500" in report
    assert "Path Distance:         1.414 cells" in report
    assert "Snapshot:   (disabled)" in report
    assert reporter.average_speed == pytest.approx(7.5)
    assert reporter.peak_speed == pytest.approx(10.0)


def test_cli_writes_csv(tmp_path, capsys):
    config = tmp_path / "sim.yaml"
    config.write_text(CONFIG)
    out_dir = tmp_path / "results"
    code = main(["--config", str(config), "--out-dir", str(out_dir),
                 "--no-snapshot", "--steps", "4"])
    assert code == 0
    with open(out_dir / "trajectories.csv", newline='') as f:
        rows = list(csv.DictReader(f))
    assert [row['step'] for row in rows] == ['1', '2', '3', '4']
    assert not (out_dir / "final_state.png").exists()
    assert "GRIDSTEER SIMULATION REPORT" in capsys.readouterr().out


def test_cli_reports_bad_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1
    bad = tmp_path / "bad.yaml"
    bad.write_text("grid: {width: 2}\n")
    assert main(["--config", str(bad), "--quiet"]) == 1
    assert "Error" in capsys.readouterr().err


def test_cli_unknown_algorithm(tmp_path):
    config = tmp_path / "sim.yaml"
    config.write_text(CONFIG)
    code = main(["--config", str(config), "--algorithm", "teleport",
                 "--out-dir", str(tmp_path), "--no-snapshot", "--no-csv",
                 "--quiet"])
    assert code == 1


def test_csv_writer_keeps_every_nth_step(tmp_path):
    writer = CSVWriter(tmp_path / "sparse.csv", every=2)
    writer.extend(_run_world(steps=5))
    writer.close()
    with open(tmp_path / "sparse.csv", newline='') as f:
        steps = [row['step'] for row in csv.DictReader(f)]
    assert steps == ['2', '2', '4', '4']
    assert writer.rows_written == 4
    with pytest.raises(ValueError):
        CSVWriter(tmp_path / "x.csv", every=0)


def test_cli_closes_csv_when_step_fails(tmp_path, monkeypatch):
    writers = []

    class TrackingWriter(CSVWriter):
        def open(self):
            writers.append(self)
            super().open()

    def failing_step(self):
        raise RuntimeError("step failed")

    monkeypatch.setattr("gridsteer.main.CSVWriter", TrackingWriter)
    monkeypatch.setattr(SimulationEngine, "step", failing_step)
    config = tmp_path / "sim.yaml"
    config.write_text(CONFIG)
    with pytest.raises(RuntimeError):
        main(["--config", str(config), "--out-dir", str(tmp_path / "out"),
              "--no-snapshot", "--quiet"])
    assert len(writers) == 1
    assert not writers[0].is_open
