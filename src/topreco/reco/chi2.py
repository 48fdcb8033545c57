"""Chi-square ranking of tt interpretations."""

import numpy as np

from topreco.config.errors import ConfigError, ConfigValidationError
from topreco.nu import MassConstraintSolver, nu_solver_factory
from topreco.utils.enums import Chi2Expression, ReconstructionStatus, enum_factory
from topreco.utils.globals import INVALID_RANK

from .base import RankerBase

__all__ = ["Chi2Ranker"]


class Chi2Ranker(RankerBase):
    """Ranks interpretations with a chi-square built from kinematic expressions.

    Each term of the chi-square compares one expression evaluated on the
    interpretation to its expected value:

    .. code-block:: text

        chi2 = sum_i ((expression_i - mean_i) / variance_i)^2

    Neutrino candidates are obtained once per event from the W-boson mass
    constraint. The rank of an interpretation is the negative of the smallest
    chi-square over the neutrino candidates.

    Attributes
    ----------
    terms : List[Tuple[Chi2Expression, float, float]]
        List of (expression, mean, variance) terms
    """

    # Name of the ranker (as specified in the configuration)
    name = "chi2"

    # Alternative allowed names of the ranker
    aliases = ("chi_square",)

    def __init__(self, terms=None, nu_solver=None):
        """Store the chi-square terms and build the neutrino solver.

        Parameters
        ----------
        terms : List[dict], optional
            List of terms, each provided as a dictionary with the `expression`,
            `mean` and `variance` keys
        nu_solver : dict, optional
            Configuration of the neutrino solver (W-boson mass constraint
            with default parameters if not specified)
        """
        # Initialize the parent class
        super().__init__()

        # Initialize the neutrino solver
        if nu_solver is None:
            self.nu_solver = MassConstraintSolver()
        else:
            self.nu_solver = nu_solver_factory(nu_solver)
            if not isinstance(self.nu_solver, MassConstraintSolver):
                raise ConfigError(
                    "The chi-square ranker requires a neutrino solver which "
                    f"only uses the lepton and the MET, got `{self.nu_solver.name}`."
                )

        # Store the terms
        self.terms = []
        for term in terms or []:
            if not isinstance(term, dict):
                raise ConfigValidationError(
                    f"A chi-square term must be a dictionary, got {term}."
                )
            self.add_term(**term)

    def add_term(self, expression, mean, variance):
        """Adds a term to the chi-square.

        Parameters
        ----------
        expression : Union[str, Chi2Expression]
            Kinematic expression (or its name)
        mean : float
            Expected value of the expression
        variance : float
            Scale of the deviations of the expression from its mean
        """
        try:
            expression = enum_factory("chi2", expression)
        except ValueError as err:
            raise ConfigValidationError(str(err)) from err

        if variance == 0.0:
            raise ConfigValidationError(
                f"The variance of the {expression.name} chi-square term cannot be 0."
            )

        self.terms.append((expression, float(mean), float(variance)))

    def validate(self):
        """Checks that the chi-square has at least one term.

        Raises
        ------
        ConfigError
            If no term was added to the chi-square
        """
        if not len(self.terms):
            raise ConfigError("Cannot rank interpretations with an empty chi-square.")

    def reset(self):
        """Resets the per-event state of the ranker."""
        super().reset()
        self._neutrinos = []

    def clone(self):
        """Returns an independent ranker with the same configuration.

        Returns
        -------
        Chi2Ranker
            Copy of the ranker, with its own list of terms
        """
        other = super().clone()
        other.terms = list(self.terms)

        return other

    @property
    def neutrinos(self):
        """Neutrino candidates of the event being processed."""
        return self._neutrinos

    def begin_event(self, event):
        """Solves for the neutrino candidates of the event.

        Parameters
        ----------
        event : Event
            Event about to be processed

        Returns
        -------
        ReconstructionStatus
            `NO_LEPTONS` or `NO_NEUTRINO_CANDIDATES` if the event cannot be
            reconstructed, `None` otherwise
        """
        self.validate()
        status = super().begin_event(event)
        if status is not None:
            return status

        self._neutrinos = self.nu_solver.solve(self.lepton.p4, event.met)
        if not len(self._neutrinos):
            return ReconstructionStatus.NO_NEUTRINO_CANDIDATES

        return None

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
            Negative of the smallest chi-square over the neutrino candidates
        """
        # Build the hadronic side, which does not depend on the neutrino
        jets = event.jets
        b_top_lep = jets[assignment.b_top_lep].p4
        w_had = jets[assignment.q1_top_had].p4 + jets[assignment.q2_top_had].p4
        top_had = jets[assignment.b_top_had].p4 + w_had

        # Find the neutrino candidate with the smallest chi-square
        min_chi2, best_neutrino = np.inf, None
        for neutrino in self._neutrinos:
            top_lep = self.lepton.p4 + neutrino + b_top_lep
            chi2 = 0.0
            for expression, mean, variance in self.terms:
                value = self._evaluate(expression, top_lep, top_had, w_had)
                chi2 += ((value - mean) / variance) ** 2

            if chi2 < min_chi2:
                min_chi2, best_neutrino = chi2, neutrino

        if best_neutrino is None:
            return INVALID_RANK

        rank = -min_chi2
        self._update_best(rank, best_neutrino)

        return rank

    @staticmethod
    def _evaluate(expression, top_lep, top_had, w_had):
        """Evaluates one kinematic expression."""
        if expression == Chi2Expression.MASS_TOP_LEP:
            return top_lep.mass
        elif expression == Chi2Expression.MASS_TOP_HAD:
            return top_had.mass
        elif expression == Chi2Expression.MASS_W_HAD:
            return w_had.mass
        elif expression == Chi2Expression.PT_TT:
            return (top_lep + top_had).pt
        else:
            raise ValueError(f"Chi-square expression not recognized: {expression}")
