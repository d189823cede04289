"""
Numeric Constants and Simulation Defaults

All quantities in consistent user units (typically SI) unless noted.
"""

import numpy as np

# ==================== NUMERIC REPRESENTATION ====================

# Real-number type for all vector lanes and particle scalars.
# Single precision matches the equality tolerance below.
REAL = np.float32

# Per-component tolerance for Vector3 equality
EPSILON = 1e-4

# Storage width of a Vector3: x, y, z plus one padding lane (always zero)
VECTOR_LANES = 4
PAD_LANE = 3

# ==================== SIMULATION DEFAULTS ====================

# Typical damping: retain 99.9% of velocity per unit time
DEFAULT_DAMPING = 0.999

# Standard gravity, y-up [m/s^2]
GRAVITY = (0.0, -9.81, 0.0)

# Common fixed timestep (60 Hz) [s]
DEFAULT_DT = 1.0 / 60.0
