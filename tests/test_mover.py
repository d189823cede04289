"""
Unit tests for the batched Numba integrator
"""

import logging

import pytest
import numpy as np
from kinesim.mover import integrate_particles, integrate_packed
from kinesim.particles import Particle, pack_particles
from kinesim.vector import Vector3


def random_particles(n, seed=0):
    """Movable particles with random state and damping in [0.5, 1]."""
    rng = np.random.default_rng(seed)
    particles = []
    for _ in range(n):
        particle = Particle(
            position=Vector3(*rng.uniform(-10, 10, 3)),
            velocity=Vector3(*rng.uniform(-5, 5, 3)),
            acceleration=Vector3(*rng.uniform(-10, 10, 3)),
            damping=rng.uniform(0.5, 1.0),
        )
        particle.set_mass(rng.uniform(0.1, 10.0))
        particles.append(particle)
    return particles


class TestBatchIntegration:
    """Kernel applies the same rule as Particle.integrate()."""

    def test_matches_scalar_integrate(self):
        particles = random_particles(50, seed=1)
        dt = 1.0 / 60.0
        n_steps = 30

        x, v = integrate_packed(particles, dt, n_steps=n_steps)

        for particle in particles:
            for _ in range(n_steps):
                particle.integrate(dt)

        x_ref = np.array([p.position().to_array() for p in particles])
        v_ref = np.array([p.velocity().to_array() for p in particles])

        np.testing.assert_allclose(x, x_ref, atol=1e-4)
        np.testing.assert_allclose(v, v_ref, atol=1e-4)

    def test_reference_step(self):
        """Single 60 Hz step with damping and acceleration."""
        dt = np.float32(1.0 / 60.0)
        particle = Particle(
            velocity=Vector3(1.0, 1.0, 1.0),
            acceleration=Vector3(0.5, 0.0, -0.5),
            damping=0.999,
        )
        particle.set_mass(2.0)

        x, v = integrate_packed([particle], dt)

        damping_factor = np.float32(0.999) ** dt
        expected_v = np.array([1.0 + 0.5 * dt, 1.0, 1.0 - 0.5 * dt]) * damping_factor

        np.testing.assert_allclose(x[0], [dt, dt, dt], atol=1e-6)
        np.testing.assert_allclose(v[0], expected_v, atol=1e-6)

    def test_immovable_skipped(self):
        movable = Particle(velocity=Vector3(1.0, 0.0, 0.0), damping=1.0, inverse_mass=1.0)
        immovable = Particle(velocity=Vector3(1.0, 0.0, 0.0), damping=1.0, inverse_mass=0.0)

        x, v = integrate_packed([movable, immovable], 1.0)

        np.testing.assert_array_equal(x[0], [1.0, 0.0, 0.0])
        np.testing.assert_array_equal(x[1], [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(v[1], [1.0, 0.0, 0.0])

    @pytest.mark.parametrize("dt", [0.0, -0.5])
    def test_non_positive_dt_is_noop(self, dt):
        particles = random_particles(10, seed=2)
        x, v, a, damping, inverse_mass = pack_particles(particles)
        x_initial = x.copy()
        v_initial = v.copy()

        integrate_particles(x, v, a, damping, inverse_mass, np.float32(dt), len(particles))

        np.testing.assert_array_equal(x, x_initial)
        np.testing.assert_array_equal(v, v_initial)

    def test_only_first_n_particles(self):
        particles = random_particles(10, seed=3)
        x, v, a, damping, inverse_mass = pack_particles(particles)
        x_initial = x.copy()

        integrate_particles(x, v, a, damping, inverse_mass, np.float32(0.1), 4)

        assert not np.allclose(x[:4], x_initial[:4])
        np.testing.assert_array_equal(x[4:], x_initial[4:])

    def test_particles_not_mutated(self):
        particles = random_particles(5, seed=4)
        before = [(p.position(), p.velocity()) for p in particles]

        integrate_packed(particles, 0.1, n_steps=10)

        for p, (position, velocity) in zip(particles, before):
            assert p.position() == position
            assert p.velocity() == velocity

    def test_straight_line_many_particles(self):
        """Undamped, unaccelerated particles move in straight lines."""
        n_particles = 10_000
        dt = np.float32(1e-3)
        n_steps = 100

        rng = np.random.default_rng(5)
        x = np.zeros((n_particles, 3), dtype=np.float32)
        v = rng.uniform(-1, 1, (n_particles, 3)).astype(np.float32)
        a = np.zeros((n_particles, 3), dtype=np.float32)
        damping = np.ones(n_particles, dtype=np.float32)
        inverse_mass = np.ones(n_particles, dtype=np.float32)
        v_initial = v.copy()

        for _ in range(n_steps):
            integrate_particles(x, v, a, damping, inverse_mass, dt, n_particles)

        np.testing.assert_allclose(x, v_initial * 0.1, atol=1e-5)
        np.testing.assert_array_equal(v, v_initial)

    def test_debug_logging(self, caplog):
        particles = random_particles(3, seed=6)

        with caplog.at_level(logging.DEBUG, logger="kinesim.mover"):
            integrate_packed(particles, 0.1, n_steps=2)

        assert "Integrating 3 particles for 2 steps" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
