"""Configuration dataclasses and YAML loader for gridsteer simulations."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml

from .errors import ConfigError
from .steering.base import BehaviorKind


@dataclass
class WallSpec:
    wall_type: str  # "rectangle" or "points"
    data: Dict[str, Any]


@dataclass
class WeightSpec:
    x: int
    y: int
    width: int
    height: int
    weight: float


@dataclass
class GridConfig:
    width: int
    height: int
    cell_size: float = 20.0   # world units per cell
    default_weight: float = 1.0
    walls: List[WallSpec] = field(default_factory=list)
    weights: List[WeightSpec] = field(default_factory=list)


@dataclass
class PathfindingConfig:
    algorithm: str = "AStarFinder"
    allow_diagonal: bool = True
    dont_cross_corners: bool = True
    heuristic: Optional[str] = None   # default: octile or manhattan
    weight: float = 1.0
    start: Optional[Tuple[int, int]] = None
    goal: Optional[Tuple[int, int]] = None
    max_iterations: Optional[int] = None
    time_limit: Optional[float] = None   # seconds
    fallback: bool = False

    def finder_options(self) -> Dict[str, Any]:
        """Keyword arguments for the finder constructor."""
        return {
            'allow_diagonal': self.allow_diagonal,
            'dont_cross_corners': self.dont_cross_corners,
            'heuristic': self.heuristic,
            'weight': self.weight,
            'max_iterations': self.max_iterations,
            'time_limit': self.time_limit,
        }


@dataclass
class BehaviorSpec:
    kind: BehaviorKind
    weight: float = 1.0
    params: Dict[str, Any] = field(default_factory=dict)
    target: Optional[int] = None  # agent id for pursuit-style behaviors


@dataclass
class AgentConfig:
    position: Tuple[float, float]
    velocity: Tuple[float, float] = (0.0, 0.0)
    count: int = 1
    spread: float = 0.0   # random scatter radius when count > 1
    max_speed: float = 100.0
    max_force: float = 100.0
    mass: float = 1.0
    radius: float = 5.0
    agent_id: Optional[int] = None
    behaviors: List[BehaviorSpec] = field(default_factory=list)


@dataclass
class ObstacleSpec:
    x: float
    y: float
    radius: float


@dataclass
class SegmentSpec:
    start: Tuple[float, float]
    end: Tuple[float, float]


@dataclass
class WorldConfig:
    spatial_cell_size: float = 50.0
    bounds: Optional[Tuple[float, float, float, float]] = None  # x0, y0, x1, y1
    obstacles: List[ObstacleSpec] = field(default_factory=list)
    walls: List[SegmentSpec] = field(default_factory=list)
    path_radius: Optional[float] = None
    path_looped: bool = False
    flow_field_goal: Optional[Tuple[int, int]] = None


@dataclass
class SimulationConfig:
    grid: GridConfig
    max_steps: int
    dt: float = 1.0 / 30.0
    pathfinding: PathfindingConfig = field(default_factory=PathfindingConfig)
    world: WorldConfig = field(default_factory=WorldConfig)
    agents: List[AgentConfig] = field(default_factory=list)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _pair(value, name: str, cast=float) -> Tuple:
    try:
        x, y = value
        return (cast(x), cast(y))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a pair of numbers, got {value!r}") from e


def _optional_pair(value, name: str, cast=float) -> Optional[Tuple]:
    if value is None:
        return None
    return _pair(value, name, cast)


def _parse_walls(walls_raw: List[Dict]) -> List[WallSpec]:
    """Parse wall specifications from raw YAML data."""
    walls = []
    for w in walls_raw:
        wall_type = w.get('type', 'rectangle')
        if wall_type == 'rectangle':
            data = {
                'x': int(w['x']),
                'y': int(w['y']),
                'width': int(w['width']),
                'height': int(w['height'])
            }
        elif wall_type == 'points':
            data = {'coords': [_pair(c, 'wall point', int) for c in w['coords']]}
        else:
            raise ConfigError(f"Unknown wall type: {wall_type}")
        walls.append(WallSpec(wall_type=wall_type, data=data))
    return walls


def _parse_weights(weights_raw: List[Dict]) -> List[WeightSpec]:
    """Parse weighted terrain rectangles from raw YAML data."""
    return [
        WeightSpec(
            x=int(w['x']),
            y=int(w['y']),
            width=int(w.get('width', 1)),
            height=int(w.get('height', 1)),
            weight=float(w['weight'])
        )
        for w in weights_raw
    ]


def _parse_grid(grid_raw: Dict) -> GridConfig:
    return GridConfig(
        width=grid_raw['width'],
        height=grid_raw['height'],
        cell_size=float(grid_raw.get('cell_size', 20.0)),
        default_weight=float(grid_raw.get('default_weight', 1.0)),
        walls=_parse_walls(grid_raw.get('walls', [])),
        weights=_parse_weights(grid_raw.get('weights', []))
    )


def _parse_pathfinding(pf_raw: Dict) -> PathfindingConfig:
    return PathfindingConfig(
        algorithm=str(pf_raw.get('algorithm', 'AStarFinder')),
        allow_diagonal=bool(pf_raw.get('allow_diagonal', True)),
        dont_cross_corners=bool(pf_raw.get('dont_cross_corners', True)),
        heuristic=pf_raw.get('heuristic'),
        weight=float(pf_raw.get('weight', 1.0)),
        start=_optional_pair(pf_raw.get('start'), 'pathfinding.start', int),
        goal=_optional_pair(pf_raw.get('goal'), 'pathfinding.goal', int),
        max_iterations=pf_raw.get('max_iterations'),
        time_limit=pf_raw.get('time_limit'),
        fallback=bool(pf_raw.get('fallback', False))
    )


def _parse_behaviors(behaviors_raw: List[Dict]) -> List[BehaviorSpec]:
    specs = []
    for b in behaviors_raw:
        try:
            kind = BehaviorKind.parse(b['kind'])
        except ValueError as e:
            raise ConfigError(str(e)) from e
        params = dict(b.get('params', {}))
        specs.append(BehaviorSpec(
            kind=kind,
            weight=float(b.get('weight', 1.0)),
            params=params,
            target=b.get('target')
        ))
    return specs


def _parse_agents(agents_raw: List[Dict]) -> List[AgentConfig]:
    """Parse agent groups from raw YAML data.

    An explicit `id` is only allowed on a single-agent group and must be
    unique across the file.
    """
    agents = []
    seen_ids = set()
    for a in agents_raw:
        count = int(a.get('count', 1))
        agent_id = a.get('id')
        if agent_id is not None:
            agent_id = int(agent_id)
            if count != 1:
                raise ConfigError(
                    f"agent id {agent_id} given for a group of {count}")
            if agent_id in seen_ids:
                raise ConfigError(f"duplicate agent id {agent_id}")
            seen_ids.add(agent_id)
        agents.append(AgentConfig(
            position=_pair(a['position'], 'agent position'),
            velocity=_pair(a.get('velocity', (0.0, 0.0)), 'agent velocity'),
            count=count,
            spread=float(a.get('spread', 0.0)),
            max_speed=float(a.get('max_speed', 100.0)),
            max_force=float(a.get('max_force', 100.0)),
            mass=float(a.get('mass', 1.0)),
            radius=float(a.get('radius', 5.0)),
            agent_id=agent_id,
            behaviors=_parse_behaviors(a.get('behaviors', []))
        ))
    return agents


def _parse_world(world_raw: Dict) -> WorldConfig:
    bounds = world_raw.get('bounds')
    if bounds is not None:
        bounds = _pair(bounds['min'], 'bounds.min') + \
            _pair(bounds['max'], 'bounds.max')
    return WorldConfig(
        spatial_cell_size=float(world_raw.get('spatial_cell_size', 50.0)),
        bounds=bounds,
        obstacles=[
            ObstacleSpec(x=float(o['x']), y=float(o['y']),
                         radius=float(o['radius']))
            for o in world_raw.get('obstacles', [])
        ],
        walls=[
            SegmentSpec(start=_pair(s['start'], 'wall start'),
                        end=_pair(s['end'], 'wall end'))
            for s in world_raw.get('walls', [])
        ],
        path_radius=world_raw.get('path_radius'),
        path_looped=bool(world_raw.get('path_looped', False)),
        flow_field_goal=_optional_pair(world_raw.get('flow_field_goal'),
                                       'world.flow_field_goal', int)
    )


def parse_config(raw: Dict) -> SimulationConfig:
    """Build a SimulationConfig from already-loaded YAML data."""
    if not isinstance(raw, dict):
        raise ConfigError("configuration root must be a mapping")
    try:
        sim_raw = raw.get('simulation', {})
        export_raw = raw.get('export', {})
        config = SimulationConfig(
            grid=_parse_grid(raw['grid']),
            max_steps=int(sim_raw.get('max_steps', 500)),
            dt=float(sim_raw.get('dt', 1.0 / 30.0)),
            pathfinding=_parse_pathfinding(raw.get('pathfinding', {})),
            world=_parse_world(raw.get('world', {})),
            agents=_parse_agents(raw.get('agents', [])),
            csv_enabled=export_raw.get('csv', True),
            snapshot_enabled=export_raw.get('snapshot', True),
            gif_enabled=export_raw.get('gif', False),
            seed=sim_raw.get('seed')
        )
    except KeyError as e:
        raise ConfigError(f"missing required key {e.args[0]!r}") from e
    except (TypeError, ValueError, AttributeError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"malformed configuration: {e}") from e

    if config.max_steps < 0:
        raise ConfigError("simulation.max_steps must be >= 0")
    if not config.dt > 0:
        raise ConfigError("simulation.dt must be positive")
    return config


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
    return parse_config(raw)
