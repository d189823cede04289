"""
kinesim: Point-Mass Particle Kinematics

Single-precision 3D vectors and damped point-mass particles integrated
with a symplectic-Euler step, plus a Numba batch integrator and
diagnostics for checking the motion.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "kinesim developers"

# Import key classes for convenient access
from .constants import *
from .vector import Vector3, VectorLengthError
from .particles import Particle, pack_particles

__all__ = [
    "Vector3",
    "VectorLengthError",
    "Particle",
    "pack_particles",
]
