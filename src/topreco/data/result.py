"""Module with the data classes which describe the outcome of the
reconstruction of one event.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from topreco.errors import ReconstructionError
from topreco.utils.enums import DecayJet, ReconstructionStatus, enum_factory
from topreco.utils.globals import INVALID_RANK

from .physics import Event, Lepton

__all__ = ["RoleAssignment", "Interpretation", "ReconstructionResult"]


@dataclass(frozen=True)
class RoleAssignment:
    """Assignment of four jets of an event to the decay roles.

    The two light-flavour jets are interchangeable, so they are always
    stored in increasing index order.

    Attributes
    ----------
    b_top_lep : int
        Index of the b-quark jet from t -> blv
    b_top_had : int
        Index of the b-quark jet from t -> bqq
    q1_top_had : int
        Index of the first light-flavour jet from t -> bqq
    q2_top_had : int
        Index of the second light-flavour jet from t -> bqq
    """

    b_top_lep: int
    b_top_had: int
    q1_top_had: int
    q2_top_had: int

    def __post_init__(self):
        """Checks the invariants of the assignment."""
        if len(set(self.indexes)) != 4:
            raise ValueError(f"Jet indexes must be distinct, got {self.indexes}.")
        if self.q1_top_had >= self.q2_top_had:
            raise ValueError(
                "Light-flavour jet indexes must be in increasing order, got "
                f"({self.q1_top_had}, {self.q2_top_had})."
            )

    @property
    def indexes(self):
        """Jet indexes, ordered as the :class:`DecayJet` roles."""
        return (self.b_top_lep, self.b_top_had, self.q1_top_had, self.q2_top_had)

    def __getitem__(self, role):
        """Index of the jet assigned to a given role."""
        return self.indexes[DecayJet(role)]


@dataclass
class Interpretation:
    """One candidate interpretation of an event.

    Attributes
    ----------
    assignment : RoleAssignment
        Assignment of the jets to decay roles
    neutrino : vector.MomentumObject4D, optional
        Neutrino four-momentum used in the interpretation
    rank : float
        Figure of merit, higher is better (-inf when not evaluable)
    """

    assignment: RoleAssignment
    neutrino: Optional[object] = None
    rank: float = INVALID_RANK


class ReconstructionResult:
    """Outcome of the reconstruction of one event.

    Jets, lepton and neutrino can only be requested from a successful
    reconstruction; doing otherwise raises a :class:`ReconstructionError`.

    Attributes
    ----------
    event : Event
        Event which was reconstructed
    status : ReconstructionStatus
        Outcome of the reconstruction
    interpretation : Interpretation
        Best interpretation (only set on success)
    num_evaluated : int
        Number of role assignments evaluated
    """

    def __init__(
        self,
        event: Event,
        status: ReconstructionStatus = ReconstructionStatus.SUCCESS,
        interpretation: Optional[Interpretation] = None,
        lepton: Optional[Lepton] = None,
        num_evaluated: int = 0,
    ):
        """Store the outcome of the reconstruction.

        Parameters
        ----------
        event : Event
            Event which was reconstructed
        status : ReconstructionStatus
            Outcome of the reconstruction
        interpretation : Interpretation, optional
            Best interpretation, required on success
        lepton : Lepton, optional
            Charged lepton used to build the leptonic top quark
        num_evaluated : int, default 0
            Number of role assignments evaluated
        """
        status = enum_factory("status", status)
        if status == ReconstructionStatus.SUCCESS and interpretation is None:
            raise ValueError("A successful reconstruction needs an interpretation.")

        self.event = event
        self.status = status
        self.interpretation = interpretation
        self._lepton = lepton
        self.num_evaluated = num_evaluated

    @classmethod
    def failure(cls, event, status, num_evaluated=0):
        """Builds the result of an aborted reconstruction."""
        return cls(event, status, num_evaluated=num_evaluated)

    @property
    def success(self):
        """Whether the reconstruction succeeded."""
        return self.status == ReconstructionStatus.SUCCESS

    @property
    def rank(self):
        """Rank of the best interpretation (-inf if the reconstruction failed)."""
        return self.interpretation.rank if self.success else INVALID_RANK

    def _check(self, what):
        """Throws if the reconstruction did not succeed."""
        if not self.success:
            raise ReconstructionError(
                f"Cannot access the {what} of event {self.event.index}: "
                f"reconstruction status is {self.status.name}."
            )

    @property
    def assignment(self):
        """Assignment of the jets to decay roles."""
        self._check("jet assignment")
        return self.interpretation.assignment

    def jet(self, role):
        """Jet assigned to the given role.

        Parameters
        ----------
        role : Union[DecayJet, str]
            Decay role, as an enumerated member or its name

        Returns
        -------
        Jet
            Jet playing that role in the best interpretation
        """
        self._check("jets")
        if isinstance(role, str):
            role = DecayJet[role.upper()]

        return self.event.jets[self.interpretation.assignment[role]]

    @property
    def jets(self):
        """Dictionary which maps each decay role to its jet."""
        return {role: self.jet(role) for role in DecayJet}

    @property
    def lepton(self):
        """Charged lepton from t -> blv."""
        self._check("lepton")
        return self._lepton

    @property
    def neutrino(self):
        """Neutrino four-momentum from t -> blv."""
        self._check("neutrino")
        return self.interpretation.neutrino

    @property
    def w_had_p4(self):
        """Four-momentum of the hadronically decaying W boson."""
        return self.jet(DecayJet.Q1_TOP_HAD).p4 + self.jet(DecayJet.Q2_TOP_HAD).p4

    @property
    def top_had_p4(self):
        """Four-momentum of the hadronically decaying top quark."""
        return self.jet(DecayJet.B_TOP_HAD).p4 + self.w_had_p4

    @property
    def top_lep_p4(self):
        """Four-momentum of the semileptonically decaying top quark."""
        return self.lepton.p4 + self.neutrino + self.jet(DecayJet.B_TOP_LEP).p4

    def to_dict(self):
        """Flattens the result into a dictionary of scalars.

        Jet indexes are set to -1 and the neutrino components to NaN when the
        reconstruction failed.

        Returns
        -------
        Dict[str, Union[int, float]]
            Flat description of the result
        """
        out = {
            "index": self.event.index,
            "status": int(self.status),
            "rank": float(self.rank),
            "num_evaluated": self.num_evaluated,
        }
        for role in DecayJet:
            key = f"{role.name.lower()}_index"
            out[key] = self.interpretation.assignment[role] if self.success else -1

        for comp in ("px", "py", "pz", "E"):
            key = f"nu_{comp.lower()}"
            out[key] = float(getattr(self.neutrino, comp)) if self.success else np.nan

        return out

    def __repr__(self):
        """Short human-readable description of the result."""
        if not self.success:
            return f"ReconstructionResult(status={self.status.name})"

        return (
            f"ReconstructionResult(status={self.status.name}, "
            f"rank={self.rank:.4g}, assignment={self.assignment.indexes})"
        )
