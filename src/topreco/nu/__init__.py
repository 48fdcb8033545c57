"""Neutrino reconstruction.

Two variants are available:
- `mass.py` solves the W-boson mass constraint for the neutrino pz, with
  the transverse momentum fixed to the missing transverse momentum
- `ellipse.py` uses both the W-boson and the top-quark mass constraints,
  which requires the b-quark jet of the leptonic top quark
"""

from .ellipse import EllipseSolution, EllipseSolver, NeutrinoEllipse
from .factories import nu_solver_factory
from .mass import MassConstraintSolver
