"""
Diagnostic utilities for particle integration.

This module provides tools for checking and inspecting integrated motion:
- Kinetic energy and momentum (single particle and packed arrays)
- Analytic damping retention
- Continuous-time reference trajectories (SciPy ODE solver)
- Time-series tracking with CSV export and plotting
"""

import csv
import logging
from typing import Optional, Tuple

import numpy as np
from numba import njit
from scipy.integrate import solve_ivp

from .vector import Vector3

logger = logging.getLogger(__name__)


def kinetic_energy(particle) -> float:
    """
    Kinetic energy 0.5 * m * |v|^2.

    Args:
        particle: Particle

    Returns:
        KE: Kinetic energy [J]; 0.0 for immovable particles
    """
    if particle.is_immovable():
        return 0.0

    return 0.5 * particle.velocity().square_magnitude() / particle.inverse_mass()


def momentum(particle) -> Vector3:
    """Linear momentum m * v. Zero vector for immovable particles."""
    if particle.is_immovable():
        return Vector3()

    return particle.velocity() * (1.0 / particle.inverse_mass())


@njit
def compute_kinetic_energy(v, inverse_mass, n_particles):
    """
    Total kinetic energy of packed particles.

    Args:
        v: Velocities (n_particles, 3)
        inverse_mass: Inverse masses (n_particles,)
        n_particles: Number of particles

    Returns:
        KE: Total kinetic energy [J], immovable particles excluded
    """
    total = 0.0

    for i in range(n_particles):
        if inverse_mass[i] <= 0.0:
            continue

        v_sq = v[i, 0]**2 + v[i, 1]**2 + v[i, 2]**2
        total += 0.5 * v_sq / inverse_mass[i]

    return total


@njit
def compute_momentum(v, inverse_mass, n_particles):
    """
    Total momentum of packed particles.

    Args:
        v: Velocities (n_particles, 3)
        inverse_mass: Inverse masses (n_particles,)
        n_particles: Number of particles

    Returns:
        p: Momentum (3,) [kg*m/s], immovable particles excluded
    """
    p = np.zeros(3, dtype=np.float64)

    for i in range(n_particles):
        if inverse_mass[i] <= 0.0:
            continue

        for dim in range(3):
            p[dim] += v[i, dim] / inverse_mass[i]

    return p


def expected_damping_retention(damping: float, dt: float, n_steps: int) -> float:
    """
    Fraction of speed left after n_steps of pure damping.

    damping ** (dt * n_steps). Depends only on elapsed time, so halving dt
    and doubling n_steps gives the same answer.
    """
    return damping ** (dt * n_steps)


def reference_trajectory(particle, t_end: float, n_samples: int = 101):
    """
    Continuous-time solution for a particle's motion.

    Solves
        dx/dt = v
        dv/dt = a + ln(damping) * v
    which is the dt -> 0 limit of Particle.integrate().

    Args:
        particle: Particle (initial state)
        t_end: End time [s]
        n_samples: Number of output samples including t=0

    Returns:
        t: Sample times (n_samples,)
        x: Positions (n_samples, 3)
        v: Velocities (n_samples, 3)

    Raises:
        ValueError: If t_end <= 0, damping <= 0 or the particle is immovable
    """
    if t_end <= 0:
        raise ValueError(f"t_end must be positive, got {t_end}")
    if particle.damping() <= 0:
        raise ValueError(f"Reference trajectory needs damping > 0, got {particle.damping()}")
    if particle.is_immovable():
        raise ValueError("Reference trajectory undefined for an immovable particle")

    a = particle.acceleration().to_array().astype(np.float64)
    decay = np.log(particle.damping())

    def rhs(t, y):
        return np.concatenate((y[3:], a + decay * y[3:]))

    y0 = np.concatenate((
        particle.position().to_array().astype(np.float64),
        particle.velocity().to_array().astype(np.float64),
    ))
    t_eval = np.linspace(0.0, t_end, n_samples)

    sol = solve_ivp(rhs, (0.0, t_end), y0, t_eval=t_eval, rtol=1e-10, atol=1e-12)

    return sol.t, sol.y[:3].T, sol.y[3:].T


class TrajectoryTracker:
    """
    Tracks a particle's state over time.

    Usage:
        tracker = TrajectoryTracker(n_steps=600, output_interval=10)
        for step in range(n_steps + 1):
            if step % output_interval == 0:
                tracker.record(step, step * dt, particle)
            particle.integrate(dt)
        tracker.save_csv('trajectory.csv')
        tracker.plot()
    """

    def __init__(self, n_steps: int, output_interval: int):
        """
        Initialize trajectory tracker.

        Args:
            n_steps: Total number of simulation steps
            output_interval: Record every N steps
        """
        if output_interval <= 0:
            raise ValueError(f"output_interval must be positive, got {output_interval}")

        self.n_outputs = n_steps // output_interval + 1
        self.output_idx = 0

        self.time = np.zeros(self.n_outputs)
        self.step = np.zeros(self.n_outputs, dtype=np.int32)
        self.position = np.zeros((self.n_outputs, 3))
        self.velocity = np.zeros((self.n_outputs, 3))
        self.kinetic_energy = np.zeros(self.n_outputs)

    def record(self, step: int, time: float, particle):
        """
        Record particle state at the current timestep.

        Extra calls beyond n_outputs are ignored.
        """
        if self.output_idx >= self.n_outputs:
            return

        idx = self.output_idx

        self.time[idx] = time
        self.step[idx] = step
        self.position[idx] = particle.position().to_array()
        self.velocity[idx] = particle.velocity().to_array()
        self.kinetic_energy[idx] = kinetic_energy(particle)

        self.output_idx += 1

    def check_energy_dissipation(self, tolerance: float = 1e-6) -> Tuple[float, bool]:
        """
        Check that kinetic energy never grows between samples.

        Meaningful only for motion without acceleration, where damping
        is the sole influence on energy.

        Args:
            tolerance: Allowed relative increase per sample

        Returns:
            max_increase: Largest relative increase between samples
            is_dissipative: True if max_increase <= tolerance
        """
        E = self.kinetic_energy[:self.output_idx]
        if len(E) < 2:
            return 0.0, True

        with np.errstate(divide='ignore', invalid='ignore'):
            rel = np.where(E[:-1] > 0, (E[1:] - E[:-1]) / E[:-1], 0.0)

        max_increase = float(max(np.max(rel), 0.0))
        is_dissipative = max_increase <= tolerance

        if not is_dissipative:
            logger.warning("Kinetic energy grew by %.3e (relative) between samples", max_increase)

        return max_increase, is_dissipative

    def save_csv(self, filename: str):
        """
        Save recorded samples to CSV file.

        Args:
            filename: Output CSV filename
        """
        with open(filename, 'w', newline='') as f:
            writer = csv.writer(f)

            writer.writerow([
                'step', 'time_s', 'x', 'y', 'z', 'vx', 'vy', 'vz', 'kinetic_energy_J'
            ])

            for i in range(self.output_idx):
                writer.writerow([
                    self.step[i],
                    f"{self.time[i]:.6f}",
                    *[f"{c:.6e}" for c in self.position[i]],
                    *[f"{c:.6e}" for c in self.velocity[i]],
                    f"{self.kinetic_energy[i]:.6e}",
                ])

        print(f"Trajectory saved to {filename}")

    def plot(self, show=True, save_filename: Optional[str] = None):
        """
        Plot position, speed and kinetic energy against time.

        Args:
            show: Display plot interactively
            save_filename: Save plot to file (optional)
        """
        import matplotlib.pyplot as plt

        idx = self.output_idx
        t = self.time[:idx]

        fig, axes = plt.subplots(3, 1, figsize=(8, 10), sharex=True)

        for dim, label in enumerate(['x', 'y', 'z']):
            axes[0].plot(t, self.position[:idx, dim], linewidth=2, label=label)
        axes[0].set_ylabel('Position [m]')
        axes[0].legend()
        axes[0].grid(True, alpha=0.3)

        speed = np.linalg.norm(self.velocity[:idx], axis=1)
        axes[1].plot(t, speed, 'b-', linewidth=2)
        axes[1].set_ylabel('Speed [m/s]')
        axes[1].grid(True, alpha=0.3)

        axes[2].plot(t, self.kinetic_energy[:idx], 'r-', linewidth=2)
        axes[2].set_ylabel('Kinetic energy [J]')
        axes[2].set_xlabel('Time [s]')
        axes[2].grid(True, alpha=0.3)

        plt.tight_layout()

        if save_filename:
            plt.savefig(save_filename, dpi=150, bbox_inches='tight')
            print(f"Plot saved to {save_filename}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def summary(self):
        """Print summary of the recorded trajectory."""
        if self.output_idx == 0:
            print("No samples recorded")
            return

        idx = self.output_idx - 1
        p = self.position[idx]
        v = self.velocity[idx]

        print("\n" + "="*60)
        print("TRAJECTORY SUMMARY")
        print("="*60)
        print(f"  Samples:        {self.output_idx}")
        print(f"  Final time:     {self.time[idx]:.4f} s")
        print(f"  Final position: [{p[0]:.4f}, {p[1]:.4f}, {p[2]:.4f}] m")
        print(f"  Final velocity: [{v[0]:.4f}, {v[1]:.4f}, {v[2]:.4f}] m/s")
        print(f"  Kinetic energy: {self.kinetic_energy[0]:.4e} -> {self.kinetic_energy[idx]:.4e} J")
        print("="*60 + "\n")
