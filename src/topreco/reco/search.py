"""Exhaustive search of the jet assignments of a semileptonic tt event."""

import numpy as np

from topreco.data import Interpretation, ReconstructionResult, RoleAssignment
from topreco.utils.enums import ReconstructionStatus
from topreco.utils.globals import INVALID_RANK, NUM_DECAY_JETS
from topreco.utils.logger import logger

__all__ = ["JetAssignmentSearch"]


class JetAssignmentSearch:
    """Finds the assignment of jets to the tt decay roles preferred by a ranker.

    Every assignment of four distinct selected jets to the b-quark jet from
    t -> blv, the b-quark jet from t -> bqq and the two light-flavour jets
    (which are interchangeable) is ranked, and the best one is kept.

    Attributes
    ----------
    ranker : RankerBase
        Ranker used to score each interpretation
    min_pt : float
        Minimum transverse momentum of a jet to be considered
    max_abs_eta : float
        Maximum absolute pseudorapidity of a jet to be considered
    """

    def __init__(self, ranker, min_pt=0.0, max_abs_eta=np.inf):
        """Store the ranker and the jet selection.

        Parameters
        ----------
        ranker : RankerBase
            Ranker used to score each interpretation
        min_pt : float, default 0.
            Minimum transverse momentum of a jet to be considered
        max_abs_eta : float, default inf
            Maximum absolute pseudorapidity of a jet to be considered
        """
        self.ranker = ranker
        self.set_jet_selection(min_pt, max_abs_eta)

    def set_jet_selection(self, min_pt, max_abs_eta=np.inf):
        """Updates the jet selection.

        Parameters
        ----------
        min_pt : float
            Minimum transverse momentum of a jet to be considered
        max_abs_eta : float, default inf
            Maximum absolute pseudorapidity of a jet to be considered
        """
        self.min_pt = float(min_pt)
        self.max_abs_eta = float(max_abs_eta)

    def select_jets(self, jets):
        """Selects the jets which can be assigned a decay role.

        Parameters
        ----------
        jets : List[Jet]
            Jets of the event, ordered in decreasing transverse momentum

        Returns
        -------
        List[int]
            Indexes of the selected jets in the event collection
        """
        selected = []
        for i, jet in enumerate(jets):
            if abs(jet.eta) > self.max_abs_eta:
                continue

            # Jets are ordered in pt, no other jet can pass
            if jet.pt < self.min_pt:
                break

            selected.append(i)

        return selected

    @staticmethod
    def assignments(num_jets):
        """Generates all assignments of jets to the decay roles.

        The light-flavour jets are interchangeable, so only the ordering where
        the first one comes before the second one is generated.

        Parameters
        ----------
        num_jets : int
            Number of selected jets

        Yields
        ------
        Tuple[int, int, int, int]
            Positions of the jets in the selected list, ordered as the
            :class:`DecayJet` roles
        """
        for b_lep in range(num_jets):
            for b_had in range(num_jets):
                if b_had == b_lep:
                    continue

                for q1 in range(num_jets):
                    if q1 == b_lep or q1 == b_had:
                        continue

                    for q2 in range(q1 + 1, num_jets):
                        if q2 == b_lep or q2 == b_had:
                            continue

                        yield b_lep, b_had, q1, q2

    def process(self, event):
        """Reconstructs one event.

        Parameters
        ----------
        event : Event
            Event to reconstruct

        Returns
        -------
        ReconstructionResult
            Best interpretation of the event or the reason why there is none
        """
        # Check inputs, let the ranker prepare for the event
        event.validate()
        status = self.ranker.begin_event(event)
        if status is not None:
            logger.debug(f"Event {event.index}: aborted with status {status.name}.")
            return ReconstructionResult.failure(event, status)

        # Select jets
        selected = self.select_jets(event.jets)
        if len(selected) < NUM_DECAY_JETS:
            logger.debug(
                f"Event {event.index}: only {len(selected)} jet(s) selected, "
                f"status {ReconstructionStatus.INSUFFICIENT_JETS.name}."
            )
            return ReconstructionResult.failure(
                event, ReconstructionStatus.INSUFFICIENT_JETS
            )

        # Rank every interpretation, the first one wins ties
        best_rank, best_assignment, num_evaluated = INVALID_RANK, None, 0
        for positions in self.assignments(len(selected)):
            assignment = RoleAssignment(*[selected[i] for i in positions])
            rank = self.ranker.rank(event, assignment)
            num_evaluated += 1
            if rank > best_rank:
                best_rank, best_assignment = rank, assignment

        # Build the result
        if best_assignment is not None and np.isfinite(best_rank):
            interpretation = Interpretation(
                best_assignment, self.ranker.best_neutrino, best_rank
            )
            result = ReconstructionResult(
                event,
                ReconstructionStatus.SUCCESS,
                interpretation,
                lepton=self.ranker.lepton,
                num_evaluated=num_evaluated,
            )
        else:
            result = ReconstructionResult.failure(
                event, self.ranker.diagnose(), num_evaluated
            )

        logger.debug(
            f"Event {event.index}: {len(selected)} jets selected, "
            f"{num_evaluated} interpretations ranked, status {result.status.name}."
        )

        return result
