"""
Example 01: Damped Projectile

Demonstrates:
- Building a particle under gravity with damping
- Fixed-step integration at 60 Hz
- Comparing against the continuous-time reference trajectory
- Batch integration of many particles with the Numba kernel
- Tracking, CSV export and plotting
"""

import time

import numpy as np
import matplotlib.pyplot as plt

from kinesim import Vector3, Particle
from kinesim.constants import GRAVITY, DEFAULT_DAMPING, DEFAULT_DT
from kinesim.diagnostics import TrajectoryTracker, reference_trajectory
from kinesim.mover import integrate_packed


def make_projectile():
    particle = Particle(
        velocity=Vector3(4.0, 10.0, 0.0),
        acceleration=Vector3.from_sequence(GRAVITY),
        damping=DEFAULT_DAMPING,
    )
    particle.set_mass(2.0)
    return particle


def example_1_single_projectile():
    """Example 1: Single projectile compared with the reference solution."""
    print("\n" + "="*60)
    print("Example 1: Damped Projectile (60 Hz)")
    print("="*60)

    dt = DEFAULT_DT
    n_steps = 120
    output_interval = 4

    particle = make_projectile()
    t_ref, x_ref, _ = reference_trajectory(make_projectile(), t_end=n_steps * dt, n_samples=200)

    tracker = TrajectoryTracker(n_steps=n_steps, output_interval=output_interval)
    for step in range(n_steps + 1):
        if step % output_interval == 0:
            tracker.record(step, step * dt, particle)
        if step < n_steps:
            particle.integrate(dt)

    tracker.summary()

    error = np.linalg.norm(particle.position().to_array() - x_ref[-1])
    print(f"Final position error vs reference: {error:.4e} m")

    tracker.save_csv('projectile.csv')

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(x_ref[:, 0], x_ref[:, 1], 'k--', linewidth=1, label='Reference (ODE)')
    ax.plot(tracker.position[:tracker.output_idx, 0],
            tracker.position[:tracker.output_idx, 1],
            'o', markersize=4, color='blue', label='Symplectic Euler')
    ax.set_xlabel('x [m]')
    ax.set_ylabel('y [m]')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig('projectile.png', dpi=150)
    print("Plot saved to projectile.png")
    plt.close(fig)


def example_2_batch():
    """Example 2: Batch integration with the Numba kernel."""
    print("\n" + "="*60)
    print("Example 2: Batch Integration")
    print("="*60)

    n_particles = 10_000
    n_steps = 600

    rng = np.random.default_rng(42)
    particles = []
    for _ in range(n_particles):
        particle = Particle(
            velocity=Vector3(*rng.normal(0.0, 5.0, 3)),
            acceleration=Vector3.from_sequence(GRAVITY),
            damping=DEFAULT_DAMPING,
        )
        particle.set_mass(rng.uniform(0.5, 5.0))
        particles.append(particle)

    # Warmup (Numba compilation)
    integrate_packed(particles[:10], DEFAULT_DT)

    start = time.time()
    x, v = integrate_packed(particles, DEFAULT_DT, n_steps=n_steps)
    elapsed = time.time() - start

    print(f"\nResults:")
    print(f"  Particles:     {n_particles:,}")
    print(f"  Timesteps:     {n_steps:,}")
    print(f"  Elapsed time:  {elapsed:.3f} s")
    print(f"  Mean height:   {np.mean(x[:, 1]):.3f} m")
    print(f"  Mean speed:    {np.mean(np.linalg.norm(v, axis=1)):.3f} m/s")


if __name__ == "__main__":
    example_1_single_projectile()
    example_2_batch()
