"""Module which contains all global variables shared across the project."""

import numpy as np

# Mass of the W boson in GeV, as used by the mass-constraint neutrino solver
W_MASS = 80.419

# Masses used by the ellipse neutrino solver in GeV
ELLIPSE_W_MASS = 80.0
ELLIPSE_TOP_MASS = 173.0

# Rank of an interpretation which cannot be evaluated
INVALID_RANK = -np.inf

# Figure of merit returned by the ellipse solver when there is no solution
INVALID_FOM = -1.0

# Number of jets needed to build a semileptonic tt interpretation
NUM_DECAY_JETS = 4

# Number of points used to scan the neutrino ellipse before refining minima
ELLIPSE_SCAN_POINTS = 64

# Relative tolerance on the integral of a probability density table
DENSITY_NORM_TOL = 1e-6
