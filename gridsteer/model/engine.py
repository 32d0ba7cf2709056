"""Steering world and the config-driven simulation engine."""

import logging
import math
import numpy as np
from typing import List, Dict, Optional, TYPE_CHECKING

from ..errors import ConfigError, InvalidParameter
from ..pathfinding.registry import create_finder
from ..steering.environment import (BoundingBox, CircleObstacle, SteeringPath,
                                    WallSegment)
from ..steering.paths import FlowFieldFollowing, PathFollowing
from ..steering.registry import create_behavior
from .agent import SteeringAgent
from .flow_field import FlowField, build_flow_field
from .grid import Grid
from .spatial_hash import SpatialHash
from .state import PathResult, SimulationState
from .vector import Vector2

if TYPE_CHECKING:
    from ..config import SimulationConfig

logger = logging.getLogger(__name__)

# Behaviors whose `target` names another agent, and the keyword it maps to
AGENT_TARGET_PARAMS = {
    'PURSUIT': 'target',
    'EVADE': 'target',
    'OFFSET_PURSUIT': 'leader',
    'LEADER_FOLLOWING': 'leader',
}


class SteeringWorld:
    """
    Container stepping every agent with a two-phase update.

    Phase 1 refreshes the spatial hash and computes all steering forces from
    the same snapshot of positions and velocities; phase 2 integrates them.
    Agents therefore never see a neighbor that has already moved this tick.
    """

    def __init__(self, cell_size: float = 50.0, dt: float = 1.0 / 30.0,
                 seed: Optional[int] = None,
                 bounds: Optional[BoundingBox] = None,
                 obstacles: Optional[List[CircleObstacle]] = None,
                 walls: Optional[List[WallSegment]] = None):
        if not (math.isfinite(dt) and dt > 0):
            raise InvalidParameter(f"dt must be positive, got {dt!r}")
        self.dt = float(dt)
        self.rng = np.random.default_rng(seed)
        self.spatial_hash = SpatialHash(cell_size)
        self.bounds = bounds
        self.obstacles: List[CircleObstacle] = obstacles if obstacles is not None else []
        self.walls: List[WallSegment] = walls if walls is not None else []
        self.agents: List[SteeringAgent] = []
        self._by_id: Dict[int, SteeringAgent] = {}
        self.current_step = 0
        self.time = 0.0

    def add_agent(self, agent: SteeringAgent) -> SteeringAgent:
        if agent.id in self._by_id:
            raise InvalidParameter(f"duplicate agent id {agent.id}")
        self.agents.append(agent)
        self._by_id[agent.id] = agent
        self.spatial_hash.insert(agent)
        return agent

    def remove_agent(self, agent: SteeringAgent) -> None:
        self.agents.remove(agent)
        del self._by_id[agent.id]
        self.spatial_hash.remove(agent)

    def get_agent(self, agent_id: int) -> SteeringAgent:
        return self._by_id[agent_id]

    def neighbors(self, agent: SteeringAgent,
                  radius: float) -> List[SteeringAgent]:
        """Other agents within `radius` of `agent`."""
        return [other for other in
                self.spatial_hash.query_radius(agent.position, radius)
                if other is not agent]

    def tick(self, dt: Optional[float] = None) -> SimulationState:
        """Advance every agent by `dt` (default: the world's dt)."""
        if dt is None:
            dt = self.dt
        if not (isinstance(dt, (int, float)) and math.isfinite(dt) and dt > 0):
            raise InvalidParameter(f"dt must be positive, got {dt!r}")
        self.dt = float(dt)

        for agent in self.agents:
            self.spatial_hash.update(agent)

        forces = [agent.compute_steering(self) for agent in self.agents]
        for agent, force in zip(self.agents, forces):
            agent.integrate(force, dt)

        self.current_step += 1
        self.time += dt
        return self._create_state_snapshot()

    def _create_state_snapshot(self) -> SimulationState:
        """Create immutable snapshot of current world state."""
        snapshots = [agent.snapshot() for agent in self.agents]
        speeds = [s.speed for s in snapshots]
        metrics = {
            'total_agents': len(snapshots),
            'active_agents': sum(1 for s in speeds if s > 1e-6),
            'mean_speed': float(np.mean(speeds)) if speeds else 0.0,
            'max_speed': float(np.max(speeds)) if speeds else 0.0,
        }
        return SimulationState(step=self.current_step, time=self.time,
                               agents=snapshots, metrics=metrics)

    def state(self) -> SimulationState:
        return self._create_state_snapshot()


class SimulationEngine:
    """
    Builds a grid, a path query and a steering world from configuration,
    then runs the world tick by tick.

    Implements:
    1. Grid setup (walls and weighted terrain)
    2. One pathfinding query from pathfinding.start to pathfinding.goal
    3. Optional flow field toward world.flow_field_goal
    4. Agent spawning with their configured behaviors
    """

    def __init__(self, config: "SimulationConfig"):
        self.config = config
        self.grid = Grid(config.grid.width, config.grid.height,
                         config.grid.default_weight)
        self._setup_grid()

        self.path_result: Optional[PathResult] = None
        self.steering_path: Optional[SteeringPath] = None
        self._run_path_query()

        self.flow_field: Optional[FlowField] = None
        if config.world.flow_field_goal is not None:
            self.flow_field = build_flow_field(
                self.grid, config.world.flow_field_goal,
                cell_size=config.grid.cell_size)

        self.world = SteeringWorld(
            cell_size=config.world.spatial_cell_size,
            dt=config.dt,
            seed=config.seed,
            bounds=self._build_bounds(),
            obstacles=[CircleObstacle(Vector2(o.x, o.y), o.radius)
                       for o in config.world.obstacles],
            walls=[WallSegment(Vector2.of(s.start), Vector2.of(s.end))
                   for s in config.world.walls],
        )
        self._spawn_agents()

    @property
    def current_step(self) -> int:
        return self.world.current_step

    @property
    def agents(self) -> List[SteeringAgent]:
        return self.world.agents

    def _setup_grid(self) -> None:
        """Configure walls and terrain weights from config."""
        for wall_spec in self.config.grid.walls:
            if wall_spec.wall_type == "rectangle":
                self.grid.add_wall_rectangle(
                    wall_spec.data['x'], wall_spec.data['y'],
                    wall_spec.data['width'], wall_spec.data['height']
                )
            elif wall_spec.wall_type == "points":
                self.grid.add_wall_points(wall_spec.data['coords'])
        for w in self.config.grid.weights:
            self.grid.fill_weight_rectangle(w.x, w.y, w.width, w.height,
                                            w.weight)

    def _run_path_query(self) -> None:
        pf = self.config.pathfinding
        if pf.start is None or pf.goal is None:
            return
        finder = create_finder(pf.algorithm, fallback=pf.fallback,
                               **pf.finder_options())
        self.path_result = finder.find_path(pf.start[0], pf.start[1],
                                            pf.goal[0], pf.goal[1], self.grid)
        if self.path_result.found:
            radius = self.config.world.path_radius
            self.steering_path = SteeringPath.from_cells(
                self.path_result.path, self.config.grid.cell_size,
                radius=radius)
            self.steering_path.looped = self.config.world.path_looped
        else:
            logger.warning("No path from %s to %s with %s", pf.start,
                           pf.goal, self.path_result.algorithm)

    def _build_bounds(self) -> Optional[BoundingBox]:
        bounds = self.config.world.bounds
        if bounds is None:
            return None
        x0, y0, x1, y1 = bounds
        return BoundingBox(Vector2(x0, y0), Vector2(x1, y1))

    def _spawn_agents(self) -> None:
        """Create agents for every configured group.

        Explicit ids are reserved up front; generated ids count up from 1
        and skip them.
        """
        reserved = set()
        for group in self.config.agents:
            if group.agent_id is None:
                continue
            if group.count != 1:
                raise ConfigError(f"agent id {group.agent_id} given for a "
                                  f"group of {group.count}")
            if group.agent_id in reserved:
                raise ConfigError(f"duplicate agent id {group.agent_id}")
            reserved.add(group.agent_id)

        next_id = 1
        pending = []
        rng = self.world.rng
        for group in self.config.agents:
            for i in range(group.count):
                if group.agent_id is not None:
                    agent_id = int(group.agent_id)
                else:
                    while next_id in reserved:
                        next_id += 1
                    agent_id = next_id
                    next_id += 1

                position = Vector2.of(group.position)
                if group.spread > 0:
                    angle = rng.uniform(0.0, 2 * math.pi)
                    distance = group.spread * math.sqrt(rng.random())
                    position += Vector2.from_angle(angle, distance)
                agent = SteeringAgent(agent_id, position,
                                      velocity=Vector2.of(group.velocity),
                                      mass=group.mass,
                                      max_force=group.max_force,
                                      max_speed=group.max_speed,
                                      radius=group.radius)
                self.world.add_agent(agent)
                pending.append((agent, group.behaviors))

        # Behaviors may reference any agent, so attach after spawning all
        for agent, specs in pending:
            for spec in specs:
                agent.attach_behavior(self._build_behavior(spec), spec.weight)

    def _build_behavior(self, spec):
        params = dict(spec.params)
        key = AGENT_TARGET_PARAMS.get(spec.kind.name)
        if key is not None:
            if spec.target is None:
                raise ConfigError(f"{spec.kind.value} needs a target agent id")
            try:
                params[key] = self.world.get_agent(spec.target)
            except KeyError:
                raise ConfigError(
                    f"{spec.kind.value} targets unknown agent {spec.target}")

        if spec.kind is PathFollowing.kind:
            radius = params.pop('path_radius', 20.0)
            if 'path' in params:
                params['path'] = SteeringPath(params['path'], radius)
            elif self.steering_path is None:
                raise ConfigError("path following needs a found path")
            else:
                params['path'] = self.steering_path
        if spec.kind is FlowFieldFollowing.kind:
            if self.flow_field is None:
                raise ConfigError(
                    "flow field following needs world.flow_field_goal")
            params['field'] = self.flow_field
        return create_behavior(spec.kind, **params)

    def step(self) -> SimulationState:
        return self.world.tick(self.config.dt)

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return self.world.current_step >= self.config.max_steps

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        state = self.world.state()
        summary = {
            'total_steps': self.world.current_step,
            'simulated_time': self.world.time,
            'agents_total': len(self.world.agents),
            'mean_speed': state.metrics['mean_speed'],
            'max_speed': state.metrics['max_speed'],
        }
        if self.path_result is not None:
            summary.update({
                'algorithm': self.path_result.algorithm,
                'path_found': self.path_result.found,
                'path_length': len(self.path_result.path),
                'path_cost': self.path_result.cost,
                'nodes_visited': self.path_result.nodes_visited,
                'search_time': self.path_result.elapsed,
            })
        return summary
