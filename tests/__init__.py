"""
kinesim Test Suite

Tests organized by:
- test_vector.py: Vector3 arithmetic, conversion and tolerant equality
- test_particles.py: Particle integration, damping and degenerate mass
- test_mover.py: Batched Numba integrator
- test_diagnostics.py: Energy, reference trajectories and tracking
"""
