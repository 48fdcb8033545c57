"""Numerical tools of the reconstruction.

This includes multiple submodules:
- `linalg.py` includes rotation matrices and small quadratic forms
- `kinematics.py` includes the kernels used to scan the neutrino ellipse
- `density.py` includes the binned probability density tables
"""

from . import density, kinematics, linalg
