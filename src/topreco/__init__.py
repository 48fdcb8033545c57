"""Top-level module of the semileptonic tt reconstruction."""

from .version import __version__

# Import commonly used data structures
from .data import Event, Jet, Lepton, MissingMomentum, ReconstructionResult

# Import the main reconstruction entry point
from .reco import ReconstructionManager, tt_observables
from .utils.enums import ReconstructionStatus
