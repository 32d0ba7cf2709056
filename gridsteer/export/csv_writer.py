"""CSV export of agent trajectories."""

import csv
from pathlib import Path
from typing import IO, Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import SimulationState

FIELDNAMES = ['step', 'time', 'agent_id', 'x', 'y', 'vx', 'vy', 'speed']


class CSVWriter:
    """
    Streams one row per agent per tick.

    Output format:
        step,time,agent_id,x,y,vx,vy,speed
        1,0.033333,1,103.3,200.0,100.0,0.0,100.0
        ...

    `every` keeps only every n-th step, which keeps long runs small.
    """

    def __init__(self, output_path: Path, every: int = 1):
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.output_path = Path(output_path)
        self.every = every
        self._file: Optional[IO[str]] = None
        self._writer: Optional[csv.DictWriter] = None
        self.rows_written = 0

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, 'w', newline='')
        self._writer = csv.DictWriter(self._file, fieldnames=FIELDNAMES)
        self._writer.writeheader()

    def append(self, state: "SimulationState") -> int:
        """Write the agents of `state`; returns the number of rows written."""
        if state.step % self.every:
            return 0
        if not self.is_open:
            self.open()
        rows = state.to_csv_rows()
        self._writer.writerows(rows)
        self._file.flush()
        self.rows_written += len(rows)
        return len(rows)

    def extend(self, states: Iterable["SimulationState"]) -> None:
        for state in states:
            self.append(state)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None

    def __enter__(self) -> "CSVWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
