"""Tests for the spatial hash."""

import random

import pytest

from gridsteer import InvalidParameter
from gridsteer.model.spatial_hash import SpatialHash
from gridsteer.model.vector import Vector2


class Dot:
    def __init__(self, agent_id, x, y):
        self.id = agent_id
        self.position = Vector2(x, y)


def brute_force(agents, center, radius):
    return {a.id for a in agents
            if a.position.distance_squared_to(center) <= radius * radius}


def test_query_matches_brute_force():
    rng = random.Random(5)
    for cell_size in (5.0, 17.0, 100.0):
        spatial = SpatialHash(cell_size)
        agents = [Dot(i, rng.uniform(-200, 200), rng.uniform(-200, 200))
                  for i in range(300)]
        for agent in agents:
            spatial.insert(agent)
        for _ in range(50):
            center = Vector2(rng.uniform(-250, 250), rng.uniform(-250, 250))
            radius = rng.uniform(0, 120)
            found = {a.id for a in spatial.query_radius(center, radius)}
            assert found == brute_force(agents, center, radius)


def test_update_tracks_moving_agents():
    rng = random.Random(8)
    spatial = SpatialHash(10.0)
    agents = [Dot(i, rng.uniform(0, 100), rng.uniform(0, 100))
              for i in range(100)]
    spatial.rebuild(agents)
    for _ in range(10):
        for agent in agents:
            agent.position += Vector2(rng.uniform(-15, 15),
                                      rng.uniform(-15, 15))
            spatial.update(agent)
        center = Vector2(50, 50)
        found = {a.id for a in spatial.query_radius(center, 40)}
        assert found == brute_force(agents, center, 40)
    assert len(spatial) == 100


def test_update_is_noop_within_cell():
    spatial = SpatialHash(10.0)
    agent = Dot(1, 1, 1)
    spatial.insert(agent)
    agent.position.set(9, 9)
    assert spatial.update(agent) is False
    agent.position.set(11, 9)
    assert spatial.update(agent) is True
    assert spatial.agent_to_cell[1] == (1, 0)


def test_remove_and_clear():
    spatial = SpatialHash(10.0)
    a, b = Dot(1, 0, 0), Dot(2, 5, 5)
    spatial.insert(a)
    spatial.insert(b)
    spatial.remove(a)
    assert a not in spatial
    assert b in spatial
    assert spatial.query_radius(Vector2(0, 0), 100) == [b]
    spatial.clear()
    assert len(spatial) == 0


def test_negative_radius_and_bad_cell_size():
    spatial = SpatialHash(10.0)
    spatial.insert(Dot(1, 0, 0))
    assert spatial.query_radius(Vector2(0, 0), -1) == []
    with pytest.raises(InvalidParameter):
        SpatialHash(0)


def test_negative_coordinates_use_floor():
    spatial = SpatialHash(10.0)
    assert spatial.cell_of(Vector2(-0.5, 0.5)) == (-1, 0)
    assert spatial.cell_of(Vector2(-10.0, -10.1)) == (-1, -2)


def test_huge_and_non_finite_radius():
    spatial = SpatialHash(1.0)
    far = Dot(1, 1e6, -1e6)
    near = Dot(2, 0.5, 0.5)
    spatial.insert(far)
    spatial.insert(near)
    found = spatial.query_radius(Vector2(), 1e12)
    assert {a.id for a in found} == {1, 2}
    assert [a.id for a in spatial.query_radius(Vector2(), 1.0)] == [2]
    for radius in (float('inf'), float('nan')):
        with pytest.raises(InvalidParameter):
            spatial.query_radius(Vector2(), radius)
