"""
Point-Mass Particle

A particle carries linear kinematic state and advances it with one
symplectic-Euler step per call to integrate(). Mass is stored as its
inverse so that an immovable (infinite-mass) particle is simply
inverse_mass == 0.
"""

import numpy as np

from .constants import REAL
from .vector import Vector3


class Particle:
    """
    Point mass with position, velocity, acceleration, damping and inverse mass.

    A default-constructed particle has all-zero state, so it is immovable
    (inverse_mass = 0) until set_mass() is called.

    No method raises on degenerate input. Non-positive timesteps and
    immovable particles make integrate() a no-op; set_mass(0) and mass() on
    an immovable particle yield infinity. Test inverse_mass() (or
    is_immovable()) rather than mass() to detect immovable particles.

    Attributes are private; vectors passed in or handed out are copies, so
    a particle never shares state with its caller.
    """

    __slots__ = ("_position", "_velocity", "_acceleration", "_damping", "_inverse_mass")

    def __init__(
        self,
        position: Vector3 = None,
        velocity: Vector3 = None,
        acceleration: Vector3 = None,
        damping: float = 0.0,
        inverse_mass: float = 0.0,
    ):
        """
        Initialize particle state.

        Args:
            position: World-space position (default origin)
            velocity: World-space velocity (default zero)
            acceleration: Constant acceleration, e.g. gravity (default zero)
            damping: Fraction of velocity retained per unit time, in (0, 1]
            inverse_mass: 1/mass; 0 means immovable
        """
        self._position = Vector3() if position is None else position.copy()
        self._velocity = Vector3() if velocity is None else velocity.copy()
        self._acceleration = Vector3() if acceleration is None else acceleration.copy()
        self._damping = REAL(damping)
        self._inverse_mass = REAL(inverse_mass)

    def integrate(self, dt: float):
        """
        Advance position and velocity by one timestep.

        Order matters:
            1. position += velocity * dt      (velocity from before this step)
            2. velocity += acceleration * dt
            3. velocity *= damping ** dt      (exponential decay over dt)

        Args:
            dt: Elapsed time [s]. No-op if dt <= 0.

        Note:
            No-op for immovable particles (inverse_mass <= 0).
        """
        if self._inverse_mass <= 0.0:
            return

        if dt <= 0.0:
            return

        dt = REAL(dt)

        self._position = self._position.add_scaled(self._velocity, dt)
        self._velocity = self._velocity.add_scaled(self._acceleration, dt)
        self._velocity = self._velocity * (self._damping ** dt)

    # ==================== ACCESSORS ====================

    def set_velocity(self, velocity: Vector3):
        self._velocity = velocity.copy()

    def velocity(self) -> Vector3:
        return self._velocity.copy()

    def position(self) -> Vector3:
        return self._position.copy()

    def acceleration(self) -> Vector3:
        return self._acceleration.copy()

    def damping(self) -> float:
        return float(self._damping)

    def inverse_mass(self) -> float:
        return float(self._inverse_mass)

    def set_mass(self, mass: float):
        """
        Store 1/mass.

        The caller must pass mass != 0. Zero mass stores an infinite inverse
        mass without raising.
        """
        with np.errstate(divide='ignore'):
            self._inverse_mass = REAL(1.0) / REAL(mass)

    def mass(self) -> float:
        """
        Return 1/inverse_mass.

        Infinite for an immovable particle; use is_immovable() to test for that.
        """
        with np.errstate(divide='ignore'):
            return float(REAL(1.0) / self._inverse_mass)

    def is_immovable(self) -> bool:
        """True when inverse mass <= 0 (integrate() will not move the particle)."""
        return bool(self._inverse_mass <= 0.0)

    def __repr__(self):
        """String representation."""
        return (f"Particle(position={self._position!r}, velocity={self._velocity!r}, "
                f"acceleration={self._acceleration!r}, damping={self.damping():.6g}, "
                f"inverse_mass={self.inverse_mass():.6g})")


# ==================== HELPER FUNCTIONS ====================

def pack_particles(particles):
    """
    Snapshot particle state into Structure-of-Arrays form.

    The arrays are copies; writing to them does not affect the particles.

    Args:
        particles: Sequence of Particle

    Returns:
        x: Positions, shape (n, 3), float32
        v: Velocities, shape (n, 3), float32
        a: Accelerations, shape (n, 3), float32
        damping: Damping factors, shape (n,), float32
        inverse_mass: Inverse masses, shape (n,), float32

    Raises:
        ValueError: If particles is empty
    """
    n = len(particles)
    if n == 0:
        raise ValueError("Cannot pack an empty particle sequence")

    x = np.zeros((n, 3), dtype=REAL)
    v = np.zeros((n, 3), dtype=REAL)
    a = np.zeros((n, 3), dtype=REAL)
    damping = np.zeros(n, dtype=REAL)
    inverse_mass = np.zeros(n, dtype=REAL)

    for i, p in enumerate(particles):
        x[i] = p.position().to_array()
        v[i] = p.velocity().to_array()
        a[i] = p.acceleration().to_array()
        damping[i] = p.damping()
        inverse_mass[i] = p.inverse_mass()

    return x, v, a, damping, inverse_mass
