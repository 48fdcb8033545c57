"""Base class of all interpretation rankers."""

from abc import ABC, abstractmethod
from copy import copy

from topreco.utils.enums import ReconstructionStatus
from topreco.utils.globals import INVALID_RANK

__all__ = ["RankerBase"]


class RankerBase(ABC):
    """Parent class of all interpretation rankers.

    A ranker scores an assignment of jets to the decay roles of a
    semileptonic tt event. Higher ranks correspond to more plausible
    interpretations and `-inf` flags an interpretation which cannot be
    evaluated.

    While an event is being processed, the ranker keeps track of the best
    rank it returned so far and of the neutrino which was used to obtain it.

    Attributes
    ----------
    name : str
        Name of the ranker, as specified in the configuration
    aliases : Tuple[str]
        Alternative names of the ranker
    nu_solver : NuSolverBase
        Neutrino solver used by the ranker
    """

    # Name of the ranker (as specified in the configuration)
    name = None

    # Alternative allowed names of the ranker
    aliases = ()

    def __init__(self):
        """Initialize the per-event state."""
        self.nu_solver = None
        self.reset()

    def reset(self):
        """Resets the per-event state of the ranker."""
        self._lepton = None
        self._best_rank = INVALID_RANK
        self._best_neutrino = None

    @property
    def lepton(self):
        """Charged lepton of the event being processed."""
        return self._lepton

    @property
    def best_neutrino(self):
        """Neutrino of the best interpretation found so far."""
        return self._best_neutrino

    @property
    def best_rank(self):
        """Rank of the best interpretation found so far."""
        return self._best_rank

    def begin_event(self, event):
        """Prepares the ranker for a new event.

        Parameters
        ----------
        event : Event
            Event about to be processed

        Returns
        -------
        ReconstructionStatus
            Status which aborts the reconstruction of the event, `None` if the
            reconstruction can proceed
        """
        self.reset()
        self._lepton = event.lepton
        if self._lepton is None:
            return ReconstructionStatus.NO_LEPTONS

        return None

    @abstractmethod
    def rank(self, event, assignment):
        """Ranks one interpretation of the event.

        Parameters
        ----------
        event : Event
            Event being processed
        assignment : RoleAssignment
            Assignment of jets to the decay roles

        Returns
        -------
        float
            Rank of the interpretation, `-inf` if it cannot be evaluated
        """
        raise NotImplementedError

    def validate(self):
        """Checks that the ranker is fully configured.

        Raises
        ------
        ConfigError
            If the ranker cannot rank interpretations as configured
        """

    def diagnose(self):
        """Explains why no interpretation of the event could be ranked.

        Returns
        -------
        ReconstructionStatus
            Failure status of the event
        """
        return ReconstructionStatus.NO_VIABLE_INTERPRETATION

    def clone(self):
        """Returns an independent ranker with the same configuration.

        Read-only configuration objects (such as density tables) are shared,
        the neutrino solver and the per-event state are not.

        Returns
        -------
        RankerBase
            Copy of the ranker
        """
        other = copy(self)
        other.nu_solver = copy(self.nu_solver)
        other.reset()

        return other

    def _update_best(self, rank, neutrino):
        """Records the neutrino if the rank improves on the best one so far."""
        if rank > self._best_rank:
            self._best_rank = rank
            self._best_neutrino = neutrino
