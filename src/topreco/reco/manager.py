"""Manages the reconstruction of semileptonic tt events."""

from collections import Counter

from topreco.config.errors import ConfigError
from topreco.utils.enums import ReconstructionStatus
from topreco.utils.logger import logger
from topreco.utils.stopwatch import StopwatchManager

from .factories import ranker_factory
from .search import JetAssignmentSearch

__all__ = ["ReconstructionManager"]


class ReconstructionManager:
    """Manager in charge of reconstructing events.

    It builds the ranker and the jet assignment search once and feeds them
    events, one at a time. The expected configuration looks like:

    .. code-block:: yaml

        ranker:
          name: chi2
          terms:
            - {expression: mass_top_had, mean: 173., variance: 15.}
        jet_selection:
          min_pt: 30.
          max_abs_eta: 2.4
    """

    def __init__(self, cfg):
        """Initialize the reconstruction manager.

        Parameters
        ----------
        cfg : dict
            Reconstruction configuration
        """
        # Check the configuration
        if not isinstance(cfg, dict) or "ranker" not in cfg:
            raise ConfigError("The reconstruction configuration requires a `ranker` block.")

        unknown = set(cfg) - {"ranker", "jet_selection"}
        if unknown:
            raise ConfigError(
                f"Unknown reconstruction configuration block(s): {sorted(unknown)}."
            )

        # Build the ranker and the search
        self.cfg = cfg
        ranker = ranker_factory(cfg["ranker"])
        ranker.validate()
        self._build(ranker)

        logger.info(
            f"Initialized the reconstruction with the `{ranker.name}` ranker "
            f"(jets with pt >= {self.search.min_pt:g} and "
            f"|eta| <= {self.search.max_abs_eta:g})."
        )

    def _build(self, ranker):
        """Builds the search and the bookkeeping around a ranker."""
        jet_cfg = self.cfg.get("jet_selection", None) or {}
        try:
            self.search = JetAssignmentSearch(ranker, **jet_cfg)
        except TypeError as err:
            raise ConfigError(f"Malformed `jet_selection` block: {err}") from err

        self.watch = StopwatchManager()
        self.watch.initialize("reco")
        self.counts = Counter()

    @property
    def ranker(self):
        """Ranker used to score interpretations."""
        return self.search.ranker

    def __call__(self, event):
        """Alias of :meth:`process`."""
        return self.process(event)

    def process(self, event):
        """Reconstructs one event.

        Parameters
        ----------
        event : Event
            Event to reconstruct

        Returns
        -------
        ReconstructionResult
            Outcome of the reconstruction
        """
        self.watch.start("reco")
        try:
            result = self.search.process(event)
        finally:
            self.watch.stop("reco")

        self.counts[result.status] += 1

        return result

    def process_events(self, events):
        """Reconstructs a sequence of events.

        Parameters
        ----------
        events : Iterable[Event]
            Events to reconstruct

        Yields
        ------
        ReconstructionResult
            Outcome of the reconstruction of each event
        """
        for event in events:
            yield self.process(event)

    def summary(self):
        """Counts the processed events per reconstruction status.

        Returns
        -------
        Dict[str, int]
            Dictionary which maps each status name onto a number of events
        """
        return {status.name: self.counts[status] for status in ReconstructionStatus}

    def clone(self):
        """Returns an independent manager with the same configuration.

        The clone shares the read-only configuration objects (such as density
        tables) but none of the per-event state, so that separate managers can
        process separate events in parallel.

        Returns
        -------
        ReconstructionManager
            Independent reconstruction manager
        """
        other = object.__new__(type(self))
        other.cfg = self.cfg
        other._build(self.ranker.clone())

        return other
