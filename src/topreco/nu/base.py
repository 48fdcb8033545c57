"""Base class of all neutrino solvers."""

from abc import ABC, abstractmethod

__all__ = ["NuSolverBase"]


class NuSolverBase(ABC):
    """Parent class of all neutrino solvers.

    A neutrino solver infers the momentum of the neutrino from a leptonic W
    decay given the charged lepton and the missing transverse momentum of the
    event. Some variants also need the b-quark jet from the same top quark.

    Attributes
    ----------
    name : str
        Name of the solver, as specified in the configuration
    aliases : Tuple[str]
        Alternative names of the solver
    """

    # Name of the solver (as specified in the configuration)
    name = None

    # Alternative allowed names of the solver
    aliases = ()

    def __call__(self, *args, **kwargs):
        """Alias of :meth:`solve`."""
        return self.solve(*args, **kwargs)

    @abstractmethod
    def solve(self, lepton_p4, met, *args):
        """Solves for the neutrino momentum.

        Parameters
        ----------
        lepton_p4 : vector.MomentumObject4D
            Four-momentum of the charged lepton
        met : MissingMomentum
            Missing transverse momentum of the event
        *args : list
            Additional inputs of specific solvers
        """
        raise NotImplementedError
