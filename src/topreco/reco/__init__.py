"""Reconstruction of semileptonic tt events.

This includes multiple submodules:
- `search.py` enumerates and ranks the assignments of jets to decay roles
- `chi2.py` ranks interpretations with a chi-square
- `likelihood.py` ranks interpretations with binned likelihoods
- `observables.py` computes the observables of the reconstructed tt system
- `manager.py` drives the reconstruction from a configuration
"""

from .chi2 import Chi2Ranker
from .factories import ranker_factory
from .likelihood import LikelihoodRanker
from .manager import ReconstructionManager
from .observables import tt_observables
from .search import JetAssignmentSearch
