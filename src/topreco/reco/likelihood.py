"""Likelihood ranking of tt interpretations."""

import numpy as np

from topreco.config.errors import ConfigError
from topreco.math.density import density_table_factory
from topreco.nu import EllipseSolver, nu_solver_factory
from topreco.utils.enums import ReconstructionStatus
from topreco.utils.globals import INVALID_RANK

from .base import RankerBase

__all__ = ["LikelihoodRanker"]


def _log_density(value):
    """Logarithm of a density, `-inf` for a null density."""
    return float(np.log(value)) if value > 0.0 else INVALID_RANK


class LikelihoodRanker(RankerBase):
    """Ranks interpretations with a likelihood built from binned densities.

    For each interpretation, the neutrino is reconstructed on the ellipse
    defined by the W-boson and top-quark mass constraints, using the b-quark
    jet assigned to the leptonic top. The rank is the sum of:

    - the log-density of the distance between the best neutrino and the
      measured missing momentum;
    - the log-density of the (W-boson, top-quark) masses on the hadronic side.

    Interpretations which fall outside of the domain of one of the densities
    are rejected. Since consecutive interpretations often share the same
    b-quark jet on the leptonic side, the last neutrino solution is cached.

    Attributes
    ----------
    nu_likelihood : DensityTable1D
        Density of the neutrino distance for correct interpretations
    mass_likelihood : DensityTable2D
        Density of the hadronic (m_W, m_top) for correct interpretations
    use_cache : bool
        Whether to reuse the neutrino solution of the previous interpretation
        when the leptonic b-quark jet did not change
    num_solves : int
        Number of neutrino solver invocations in the current event
    neutrino_solved : bool
        Whether the neutrino could be reconstructed for some interpretation
    neutrino_in_range : bool
        Whether the neutrino distance fell in the density domain for some
        interpretation
    mass_in_range : bool
        Whether the hadronic masses fell in the density domain for some
        interpretation
    """

    # Name of the ranker (as specified in the configuration)
    name = "likelihood"

    # Alternative allowed names of the ranker
    aliases = ("rochester",)

    def __init__(
        self, nu_likelihood=None, mass_likelihood=None, nu_solver=None, use_cache=True
    ):
        """Load the densities and build the neutrino solver.

        Parameters
        ----------
        nu_likelihood : Union[DensityTable1D, dict]
            Density of the neutrino distance (or its configuration)
        mass_likelihood : Union[DensityTable2D, dict]
            Density of the hadronic (m_W, m_top) (or its configuration)
        nu_solver : dict, optional
            Configuration of the ellipse neutrino solver (default masses and
            unit MET resolution if not specified)
        use_cache : bool, default True
            Reuse the neutrino solution when the leptonic b-quark jet does not
            change between consecutive interpretations
        """
        # Initialize the parent class
        super().__init__()

        # Load the densities
        if nu_likelihood is None or mass_likelihood is None:
            raise ConfigError(
                "The likelihood ranker requires both the `nu_likelihood` and "
                "the `mass_likelihood` densities."
            )
        self.nu_likelihood = density_table_factory(nu_likelihood, 1)
        self.mass_likelihood = density_table_factory(mass_likelihood, 2)

        # Initialize the neutrino solver
        if nu_solver is None:
            self.nu_solver = EllipseSolver()
        else:
            self.nu_solver = nu_solver_factory(nu_solver)
            if not isinstance(self.nu_solver, EllipseSolver):
                raise ConfigError(
                    "The likelihood ranker requires a neutrino solver which "
                    f"uses the b-quark jet, got `{self.nu_solver.name}`."
                )

        self.use_cache = use_cache

    def reset(self):
        """Resets the per-event state of the ranker."""
        super().reset()
        self.neutrino_solved = False
        self.neutrino_in_range = False
        self.mass_in_range = False
        self.num_solves = 0
        self._cache_key = None
        self._cache_solution = None

    def solve(self, event, b_index):
        """Reconstructs the neutrino for a given leptonic b-quark jet.

        Parameters
        ----------
        event : Event
            Event being processed
        b_index : int
            Index of the b-quark jet from t -> blv

        Returns
        -------
        EllipseSolution
            Best neutrino and its distance to the measured missing momentum
        """
        if self.use_cache and self._cache_key == b_index:
            return self._cache_solution

        solution = self.nu_solver.solve(
            self.lepton.p4, event.met, event.jets[b_index].p4
        )
        self.num_solves += 1
        if self.use_cache:
            self._cache_key, self._cache_solution = b_index, solution

        return solution

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
            Log-likelihood of the interpretation, `-inf` if it is rejected
        """
        # Reconstruct the neutrino, check its distance is within the density
        solution = self.solve(event, assignment.b_top_lep)
        if not solution.reconstructable:
            return INVALID_RANK
        self.neutrino_solved = True

        nu_density = self.nu_likelihood.density(solution.fom)
        if nu_density is None:
            return INVALID_RANK
        self.neutrino_in_range = True

        # Check the hadronic masses are within the density
        jets = event.jets
        w_had = jets[assignment.q1_top_had].p4 + jets[assignment.q2_top_had].p4
        top_had = jets[assignment.b_top_had].p4 + w_had
        mass_density = self.mass_likelihood.density(w_had.mass, top_had.mass)
        if mass_density is None:
            return INVALID_RANK
        self.mass_in_range = True

        rank = _log_density(nu_density) + _log_density(mass_density)
        self._update_best(rank, solution.p4)

        return rank

    def diagnose(self):
        """Explains why no interpretation of the event could be ranked.

        Returns
        -------
        ReconstructionStatus
            Failure status of the event
        """
        if not self.neutrino_solved:
            return ReconstructionStatus.NEUTRINO_UNRECONSTRUCTABLE
        if not self.neutrino_in_range:
            return ReconstructionStatus.NEUTRINO_LIKELIHOOD_OUT_OF_RANGE
        if not self.mass_in_range:
            return ReconstructionStatus.MASS_LIKELIHOOD_OUT_OF_RANGE

        return ReconstructionStatus.NO_VIABLE_INTERPRETATION
