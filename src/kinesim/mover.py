"""
Batched Particle Integration (Numba)

Applies the same symplectic-Euler step as Particle.integrate() to many
particles at once, over Structure-of-Arrays state from pack_particles().
"""

import logging

from numba import njit, prange

from .constants import REAL
from .particles import pack_particles

logger = logging.getLogger(__name__)


@njit(parallel=True)
def integrate_particles(x, v, a, damping, inverse_mass, dt, n_particles):
    """
    Integrate particles in place by one timestep.

    Per particle:
        x += v * dt
        v += a * dt
        v *= damping ** dt

    Args:
        x: Position array, shape (n_max, 3)
        v: Velocity array, shape (n_max, 3)
        a: Acceleration array, shape (n_max, 3)
        damping: Damping factors, shape (n_max,)
        inverse_mass: Inverse masses, shape (n_max,)
        dt: Timestep [s]
        n_particles: Number of particles to integrate

    Note:
        Arrays are modified in-place. Immovable particles (inverse_mass <= 0)
        are skipped; dt <= 0 leaves every particle untouched.
    """
    if dt <= 0.0:
        return

    for i in prange(n_particles):
        if inverse_mass[i] <= 0.0:
            continue

        # Position uses velocity from before this step
        x[i, 0] += v[i, 0] * dt
        x[i, 1] += v[i, 1] * dt
        x[i, 2] += v[i, 2] * dt

        v[i, 0] += a[i, 0] * dt
        v[i, 1] += a[i, 1] * dt
        v[i, 2] += a[i, 2] * dt

        drag = damping[i] ** dt
        v[i, 0] *= drag
        v[i, 1] *= drag
        v[i, 2] *= drag


def integrate_packed(particles, dt, n_steps=1):
    """
    Integrate a snapshot of particles with the compiled kernel.

    The particles themselves are not modified.

    Args:
        particles: Sequence of Particle
        dt: Timestep [s]
        n_steps: Number of timesteps (default 1)

    Returns:
        x: Final positions, shape (n, 3)
        v: Final velocities, shape (n, 3)
    """
    x, v, a, damping, inverse_mass = pack_particles(particles)
    n_particles = len(particles)

    logger.debug("Integrating %d particles for %d steps (dt=%g)", n_particles, n_steps, dt)

    dt = REAL(dt)
    for _ in range(n_steps):
        integrate_particles(x, v, a, damping, inverse_mass, dt, n_particles)

    return x, v
