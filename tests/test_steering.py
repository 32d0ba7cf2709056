"""Tests for the individual steering behaviors and their registry."""

import math

import pytest

from gridsteer import InvalidParameter, Vector2, create_agent, new_grid
from gridsteer.model.engine import SteeringWorld
from gridsteer.model.flow_field import build_flow_field
from gridsteer.steering import (BEHAVIORS, Alignment, Arrival, BehaviorKind,
                                BoundingBox, CircleObstacle, Cohesion,
                                Containment, Evade, Flee, FlowFieldFollowing,
                                LeaderFollowing, ObstacleAvoidance,
                                OffsetPursuit, PathFollowing, Pursuit, Seek,
                                Separation, SteeringPath,
                                UnalignedCollisionAvoidance, WallFollowing,
                                WallSegment, Wander, create_behavior)


def make_world(*agents, **kwargs):
    world = SteeringWorld(**kwargs)
    for agent in agents:
        world.add_agent(agent)
    return world


def agent_at(x, y, agent_id=1, velocity=None, **kwargs):
    return create_agent((x, y), agent_id=agent_id, velocity=velocity,
                        **kwargs)


def test_separation_pushes_directly_away():
    a = agent_at(0, 0, 1)
    b = agent_at(1, 0, 2)
    world = make_world(a, b)
    force = Separation(neighbor_radius=10).compute_force(a, world)
    assert force.x < 0
    assert force.y == pytest.approx(0.0)
    assert force.length() > 0

    lonely = Separation(neighbor_radius=0.5).compute_force(a, world)
    assert lonely.is_zero()


def test_seek_is_truncated_to_max_force():
    agent = agent_at(0, 0, max_force=50)
    world = make_world(agent)
    force = Seek((10, 0)).compute_force(agent, world)
    assert force.x == pytest.approx(50.0)
    assert force.y == pytest.approx(0.0)
    assert Seek((0, 0)).compute_force(agent, world).is_zero()


def test_flee_respects_panic_distance():
    agent = agent_at(0, 0)
    world = make_world(agent)
    assert Flee((10, 0), panic_distance=5).compute_force(agent, world) \
        .is_zero()
    force = Flee((10, 0), panic_distance=20).compute_force(agent, world)
    assert force.x < 0
    assert Flee((10, 0)).compute_force(agent, world).x < 0


def test_arrival_brakes_inside_slowing_radius():
    agent = agent_at(0, 0, velocity=(100, 0))
    world = make_world(agent)
    force = Arrival((10, 0), slowing_radius=100).compute_force(agent, world)
    # desired speed 10, current 100
    assert force.x == pytest.approx(-90.0)

    parked = agent_at(10, 0, velocity=(5, 0))
    force = Arrival((10, 0)).compute_force(parked, make_world(parked))
    assert force.x == pytest.approx(-5.0)
    assert force.y == pytest.approx(0.0)


def test_wander_is_reproducible_under_seed():
    def run(seed):
        agent = agent_at(0, 0, velocity=(10, 0))
        world = make_world(agent, seed=seed)
        wander = Wander()
        forces = [wander.compute_force(agent, world).to_tuple()
                  for _ in range(10)]
        return forces, wander.angle

    first, angle = run(3)
    second, _ = run(3)
    assert first == second
    assert angle != 0.0
    for fx, fy in first:
        assert math.hypot(fx, fy) <= 100.0 + 1e-9


def test_pursuit_leads_a_moving_target():
    target = agent_at(100, 0, 2, velocity=(0, 50))
    hunter = agent_at(0, 0, 1)
    world = make_world(hunter, target)
    force = Pursuit(target).compute_force(hunter, world)
    # One second to close the gap, so aim at (100, 50)
    direction = force.normalized()
    assert direction.x == pytest.approx(2 / math.sqrt(5))
    assert direction.y == pytest.approx(1 / math.sqrt(5))
    assert Pursuit(hunter).compute_force(hunter, world).is_zero()


def test_evade_and_panic_distance():
    threat = agent_at(50, 0, 2, velocity=(-10, 0))
    prey = agent_at(0, 0, 1)
    world = make_world(prey, threat)
    assert Evade(threat).compute_force(prey, world).x < 0
    assert Evade(threat, panic_distance=10).compute_force(prey, world) \
        .is_zero()
    with pytest.raises(InvalidParameter):
        Evade(None)


def test_offset_pursuit_world_offset():
    leader = agent_at(100, 0, 1, velocity=(10, 0))
    follower = agent_at(0, 0, 2)
    world = make_world(leader, follower)
    behind = OffsetPursuit(leader, (-30, 0))
    assert behind.world_offset().to_tuple() == pytest.approx((70.0, 0.0))
    left = OffsetPursuit(leader, (0, 20))
    assert left.world_offset().to_tuple() == pytest.approx((100.0, 20.0))
    force = behind.compute_force(follower, world)
    assert force.x > 0
    assert force.length() <= follower.max_force + 1e-9


def test_obstacle_avoidance_pushes_sideways():
    agent = agent_at(0, 0, velocity=(10, 0))
    world = make_world(agent, obstacles=[CircleObstacle(Vector2(40, 5), 10)])
    force = ObstacleAvoidance().compute_force(agent, world)
    assert force.y < 0
    assert force.x == pytest.approx(0.0)

    behind = [CircleObstacle(Vector2(-40, 0), 10)]
    assert ObstacleAvoidance(obstacles=behind).compute_force(agent, world) \
        .is_zero()


def test_wall_following_keeps_distance():
    agent = agent_at(0, 0, velocity=(10, 0))
    wall = WallSegment(Vector2(-100, 10), Vector2(100, 10))
    world = make_world(agent, walls=[wall])
    force = WallFollowing(desired_distance=20).compute_force(agent, world)
    # Too close to the wall above, so push down
    assert force.y < 0
    far = agent_at(0, -200, 2, velocity=(10, 0))
    assert WallFollowing().compute_force(far, world).is_zero()


def test_containment_steers_back_inside():
    bounds = BoundingBox(Vector2(0, 0), Vector2(100, 100))
    agent = agent_at(90, 50, velocity=(10, 0))
    world = make_world(agent, bounds=bounds)
    force = Containment().compute_force(agent, world)
    assert force.x == pytest.approx(-80.0)
    assert force.y == pytest.approx(0.0)

    centered = agent_at(50, 50, 2, velocity=(10, 0))
    assert Containment().compute_force(centered, world).is_zero()


def test_cohesion_and_alignment():
    agent = agent_at(0, 0, 1)
    world = make_world(agent, agent_at(10, 0, 2, velocity=(0, 10)),
                       agent_at(0, 10, 3, velocity=(0, 10)))
    cohesion = Cohesion().compute_force(agent, world).normalized()
    assert cohesion.x == pytest.approx(math.sqrt(0.5))
    assert cohesion.y == pytest.approx(math.sqrt(0.5))

    alignment = Alignment().compute_force(agent, world)
    assert alignment.x == pytest.approx(0.0)
    assert alignment.y == pytest.approx(100.0)

    assert Cohesion(neighbor_radius=1).compute_force(agent, world).is_zero()


def test_leader_following():
    leader = agent_at(100, 0, 1, velocity=(10, 0))
    follower = agent_at(0, 0, 2)
    world = make_world(leader, follower)
    behavior = LeaderFollowing(leader)
    assert behavior.compute_force(follower, world).x > 0
    assert not behavior.in_sight(follower)
    assert behavior.in_sight(agent_at(120, 0, 3))
    assert behavior.compute_force(leader, world).is_zero()


def test_path_following_seeks_the_path():
    path = SteeringPath([(0, 0), (100, 0), (100, 100)], radius=5)
    agent = agent_at(10, 20, velocity=(10, 0))
    world = make_world(agent)
    behavior = PathFollowing(path)
    force = behavior.compute_force(agent, world)
    assert force.y < 0
    assert behavior.current_segment == 0


def test_path_following_arrives_at_the_end():
    path = SteeringPath([(0, 0), (100, 0), (100, 100)], radius=5)
    agent = agent_at(100, 98, velocity=(0, 10))
    world = make_world(agent)
    behavior = PathFollowing(path)
    force = behavior.compute_force(agent, world)
    assert behavior.current_segment == 1
    assert force.x == pytest.approx(0.0)
    assert force.y == pytest.approx(-6.0)
    behavior.reset()
    assert behavior.current_segment == 0


def test_steering_path_from_cells():
    path = SteeringPath.from_cells([(0, 0), (1, 0), (1, 1)], cell_size=10)
    assert [p.to_tuple() for p in path.points] == \
        [(5.0, 5.0), (15.0, 5.0), (15.0, 15.0)]
    assert path.radius == 5.0
    assert path.segment_count == 2
    with pytest.raises(InvalidParameter):
        SteeringPath([(0, 0)])


def test_flow_field_following():
    grid = new_grid(5, 1)
    field = build_flow_field(grid, (4, 0), cell_size=10)
    behavior = FlowFieldFollowing(field)

    start = agent_at(5, 5)
    force = behavior.compute_force(start, make_world(start))
    assert force.x > 0
    assert force.y == pytest.approx(0.0)

    at_goal = agent_at(45, 5, velocity=(3, 0))
    force = behavior.compute_force(at_goal, make_world(at_goal))
    assert force.x == pytest.approx(-3.0)

    blended = FlowFieldFollowing(field, interpolate=True)
    assert blended.compute_force(start, make_world(start)).x > 0


def test_flow_field_following_settles_in_goal_cell():
    field = build_flow_field(new_grid(7, 7), (3, 0))
    agent = agent_at(3.5, 5.5, max_speed=1, max_force=1)
    agent.attach_behavior(FlowFieldFollowing(field))
    world = make_world(agent)
    for _ in range(300):
        world.tick(0.1)
    assert field.cell_for(agent.position) == (3, 0)
    assert agent.velocity.length() < 0.01


def test_flow_field_following_returns_to_grid():
    field = build_flow_field(new_grid(7, 7), (3, 0))
    behavior = FlowFieldFollowing(field)
    outside = agent_at(3.5, -3, max_speed=1, max_force=1)
    force = behavior.compute_force(outside, make_world(outside))
    assert force.x == pytest.approx(0.0)
    assert force.y > 0

    grid = new_grid(3, 1)
    grid.set_cell(2, 0, walkable=False)
    blocked = build_flow_field(grid, (2, 0))
    lost = agent_at(0.5, 0.5)
    assert FlowFieldFollowing(blocked).compute_force(
        lost, make_world(lost)).is_zero()


def test_unaligned_collision_avoidance_sidesteps():
    a = agent_at(0, 0, 1, velocity=(10, 0))
    b = agent_at(50, 2, 2, velocity=(-10, 0))
    world = make_world(a, b)
    force = UnalignedCollisionAvoidance(max_prediction_time=5) \
        .compute_force(a, world)
    assert force.x == pytest.approx(0.0)
    assert force.y == pytest.approx(-100.0)
    # Closest approach is 2.5 s away
    assert UnalignedCollisionAvoidance(max_prediction_time=2) \
        .compute_force(a, world).is_zero()


def test_configure_rolls_back_on_invalid_value():
    behavior = Arrival((0, 0), slowing_radius=50)
    with pytest.raises(InvalidParameter):
        behavior.configure(slowing_radius=20, tolerance=-1)
    assert behavior.slowing_radius == 50
    assert behavior.tolerance == 0.5

    behavior.configure(slowing_radius=20)
    assert behavior.slowing_radius == 20
    with pytest.raises(InvalidParameter):
        behavior.configure(speed=3)


@pytest.mark.parametrize("factory", [
    lambda: Separation(neighbor_radius=0),
    lambda: Arrival((0, 0), slowing_radius=-1),
    lambda: Wander(wander_radius=float('nan')),
    lambda: ObstacleAvoidance(feeler_length=0),
    lambda: Containment(predict_distance=0),
    lambda: PathFollowing("not a path"),
])
def test_invalid_parameters_rejected_at_construction(factory):
    with pytest.raises(InvalidParameter):
        factory()


def test_behavior_kind_parse():
    kind = BehaviorKind.FLOW_FIELD_FOLLOWING
    assert BehaviorKind.parse(kind) is kind
    assert BehaviorKind.parse("Flow Field Following") is kind
    assert BehaviorKind.parse("FLOW_FIELD_FOLLOWING") is kind
    assert BehaviorKind.parse("flow_field_following") is kind
    with pytest.raises(InvalidParameter):
        BehaviorKind.parse("teleport")


def test_create_behavior():
    assert set(BEHAVIORS) == set(BehaviorKind)
    seek = create_behavior("seek", target=(1, 2))
    assert isinstance(seek, Seek)
    assert seek.target.to_tuple() == (1.0, 2.0)
    with pytest.raises(InvalidParameter):
        create_behavior("seek", destination=(1, 2))
    with pytest.raises(InvalidParameter):
        create_behavior("Separation", neighbor_radius=-3)
