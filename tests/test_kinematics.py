"""Tests for agent integration, the behavior registry and the world tick."""

import random

import pytest

from gridsteer import (InvalidParameter, SteeringWorld, Vector2,
                       attach_behavior, create_agent, tick)
from gridsteer.steering import (BehaviorKind, Flee, OffsetPursuit, Pursuit,
                                Seek, Wander)


def test_integrate_applies_force_over_mass():
    agent = create_agent((0, 0), mass=2.0)
    agent.integrate(Vector2(10, 0), 1.0)
    assert agent.velocity.to_tuple() == pytest.approx((5.0, 0.0))
    assert agent.position.to_tuple() == pytest.approx((5.0, 0.0))
    assert agent.heading.to_tuple() == pytest.approx((1.0, 0.0))


def test_speed_never_exceeds_max_speed():
    rng = random.Random(11)
    world = SteeringWorld(seed=11)
    for i in range(10):
        agent = create_agent((rng.uniform(-100, 100), rng.uniform(-100, 100)),
                             max_speed=rng.uniform(5, 50),
                             max_force=rng.uniform(10, 500),
                             mass=rng.uniform(0.1, 5), agent_id=i)
        agent.attach_behavior(Wander())
        agent.attach_behavior(Seek((0, 0)), weight=rng.uniform(0, 3))
        world.add_agent(agent)
    for _ in range(200):
        world.tick(rng.uniform(0.001, 0.5))
        for agent in world.agents:
            assert agent.speed <= agent.max_speed + 1e-9
            assert agent.last_force.length() <= agent.max_force + 1e-9


def test_heading_is_kept_while_stopped():
    agent = create_agent((0, 0), velocity=(0, 5))
    agent.integrate(Vector2(0, -5), 1.0)
    assert agent.velocity.is_zero()
    assert agent.heading.to_tuple() == pytest.approx((0.0, 1.0))


@pytest.mark.parametrize("dt", [0, -0.1, float('nan'), float('inf')])
def test_invalid_dt_rejected(dt):
    agent = create_agent((0, 0))
    with pytest.raises(InvalidParameter):
        agent.integrate(Vector2(1, 0), dt)
    with pytest.raises(InvalidParameter):
        SteeringWorld().tick(dt)


@pytest.mark.parametrize("name", ["mass", "max_speed", "max_force", "radius"])
def test_non_positive_agent_parameters_rejected(name):
    with pytest.raises(InvalidParameter):
        create_agent((0, 0), **{name: 0})


def test_behavior_registry_one_per_kind():
    agent = create_agent((0, 0))
    first_seek = Seek((10, 0))
    flee = Flee((5, 5))
    attach_behavior(agent, first_seek, 1.0)
    attach_behavior(agent, flee, 2.0)
    second_seek = Seek((0, 10))
    attach_behavior(agent, second_seek, 3.0)

    kinds = [b.kind for b, _ in agent.behaviors]
    assert kinds == [BehaviorKind.SEEK, BehaviorKind.FLEE]
    assert agent.get_behavior("seek") is second_seek
    assert agent.behavior_weight(BehaviorKind.SEEK) == 3.0

    agent.set_weight(BehaviorKind.FLEE, 0.5)
    assert agent.behavior_weight("Flee") == 0.5
    assert agent.detach_behavior(BehaviorKind.FLEE) is flee
    assert agent.detach_behavior(BehaviorKind.FLEE) is None
    with pytest.raises(KeyError):
        agent.set_weight(BehaviorKind.FLEE, 1.0)
    with pytest.raises(InvalidParameter):
        agent.attach_behavior(flee, -1.0)


def test_compute_steering_blends_weights():
    agent = create_agent((0, 0), max_force=100)
    agent.attach_behavior(Seek((10, 0)), 0.5)
    world = SteeringWorld()
    force = agent.compute_steering(world)
    assert force.to_tuple() == pytest.approx((50.0, 0.0))

    agent.attach_behavior(Flee((0, -10)), 0.0)
    assert agent.compute_steering(world).to_tuple() == \
        pytest.approx((50.0, 0.0))


def test_world_tick_uses_pre_tick_state():
    a = create_agent((-30, 0), agent_id=1, velocity=(5, 0))
    b = create_agent((30, 10), agent_id=2, velocity=(0, -5))
    a.attach_behavior(OffsetPursuit(b, (0, 0), slowing_radius=80))
    b.attach_behavior(Pursuit(a))
    world = SteeringWorld()
    world.add_agent(a)
    world.add_agent(b)

    dt = 0.1
    expected = []
    for agent in world.agents:
        force = agent.compute_steering(world)
        velocity = (agent.velocity + force * (dt / agent.mass)) \
            .truncate(agent.max_speed)
        expected.append((agent.position + velocity * dt).to_tuple())

    state = world.tick(dt)
    assert [agent.position.to_tuple() for agent in world.agents] == \
        [pytest.approx(p) for p in expected]
    assert state.step == 1
    assert state.time == pytest.approx(dt)


def test_world_metrics():
    world = SteeringWorld()
    world.add_agent(create_agent((0, 0), agent_id=1, velocity=(3, 4)))
    world.add_agent(create_agent((50, 50), agent_id=2))
    state = world.tick(0.5)
    assert state.metrics['total_agents'] == 2
    assert state.metrics['active_agents'] == 1
    assert state.metrics['mean_speed'] == pytest.approx(2.5)
    assert state.metrics['max_speed'] == pytest.approx(5.0)
    assert world.current_step == 1
    rows = state.to_csv_rows()
    assert [r['agent_id'] for r in rows] == [1, 2]
    assert rows[0]['x'] == pytest.approx(1.5)


def test_world_agent_bookkeeping():
    world = SteeringWorld()
    a = world.add_agent(create_agent((0, 0), agent_id=1))
    b = world.add_agent(create_agent((3, 0), agent_id=2))
    with pytest.raises(InvalidParameter):
        world.add_agent(create_agent((1, 1), agent_id=1))
    assert world.neighbors(a, 10) == [b]
    assert world.get_agent(2) is b
    world.remove_agent(b)
    assert world.neighbors(a, 10) == []
    with pytest.raises(KeyError):
        world.get_agent(2)


def test_tick_returns_copies():
    agent = create_agent((0, 0), velocity=(10, 0))
    position, velocity = tick(agent, SteeringWorld(), 0.5)
    assert position.to_tuple() == pytest.approx((5.0, 0.0))
    assert velocity.to_tuple() == pytest.approx((10.0, 0.0))
    position.set(99, 99)
    assert agent.position.x == pytest.approx(5.0)
