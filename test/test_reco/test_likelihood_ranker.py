"""Tests for the topreco.reco.likelihood module."""

import numpy as np
import pytest

from topreco.config.errors import ConfigError
from topreco.data import RoleAssignment
from topreco.math.density import DensityTable1D, DensityTable2D
from topreco.reco import JetAssignmentSearch, LikelihoodRanker, ranker_factory
from topreco.utils.enums import ReconstructionStatus


def _uniform_1d(lo, hi):
    """Uniform one-dimensional density."""
    return DensityTable1D([lo, hi], [1.0 / (hi - lo)])


def _uniform_2d(x_lo, x_hi, y_lo, y_hi):
    """Uniform two-dimensional density."""
    area = (x_hi - x_lo) * (y_hi - y_lo)
    return DensityTable2D([x_lo, x_hi], [y_lo, y_hi], [[1.0 / area]])


class TestLikelihoodConfiguration:
    """Test the configuration of the likelihood ranker."""

    def test_missing_tables(self, nu_table, mass_table):
        """Test that both densities are required."""
        with pytest.raises(ConfigError):
            LikelihoodRanker(nu_likelihood=nu_table)
        with pytest.raises(ConfigError):
            LikelihoodRanker(mass_likelihood=mass_table)

    def test_swapped_tables(self, nu_table, mass_table):
        """Test that the table dimensions are checked."""
        with pytest.raises(ConfigError):
            LikelihoodRanker(nu_likelihood=mass_table, mass_likelihood=nu_table)

    def test_solver(self, nu_table, mass_table):
        """Test that the ranker needs a solver which uses the jets."""
        with pytest.raises(ConfigError):
            LikelihoodRanker(nu_table, mass_table, nu_solver="mass_constraint")

    def test_factory(self):
        """Test building the ranker and its tables from a configuration block."""
        cfg = {
            "name": "likelihood",
            "nu_likelihood": {"edges": [0.0, 10.0], "values": [0.1]},
            "mass_likelihood": {
                "x_edges": [0.0, 100.0],
                "y_edges": [0.0, 200.0],
                "values": [[1.0]],
                "normalize": True,
            },
            "nu_solver": {"name": "ellipse", "met_sigma": [10.0, 10.0, 0.0]},
            "use_cache": False,
        }
        ranker = ranker_factory(cfg)
        assert isinstance(ranker, LikelihoodRanker)
        assert isinstance(ranker.mass_likelihood, DensityTable2D)
        assert ranker.nu_solver.met_sigma == (10.0, 10.0, 0.0)
        assert not ranker.use_cache


class TestLikelihoodRanking:
    """Test the reconstruction of events with the likelihood ranker."""

    def test_success(self, tt_sample, nu_table, mass_table):
        """Test that the best interpretation falls in the peak of both tables."""
        ranker = LikelihoodRanker(nu_table, mass_table)
        result = JetAssignmentSearch(ranker).process(tt_sample.event)

        assert result.success
        peak = np.log(nu_table.density(0.0)) + np.log(mass_table.density(80.0, 173.0))
        assert result.rank == pytest.approx(peak)
        assert ranker.best_neutrino is result.neutrino

        rank = ranker.rank(tt_sample.event, tt_sample.truth)
        assert rank == pytest.approx(peak)

    def test_cache(self, tt_sample, nu_table, mass_table):
        """Test that caching the neutrino does not change the ranks."""
        event = tt_sample.event
        cached = LikelihoodRanker(nu_table, mass_table, use_cache=True)
        uncached = LikelihoodRanker(nu_table, mass_table, use_cache=False)
        search = JetAssignmentSearch(cached)

        cached.begin_event(event)
        uncached.begin_event(event)
        num_assignments = 0
        for positions in search.assignments(len(event.jets)):
            assignment = RoleAssignment(*positions)
            assert cached.rank(event, assignment) == uncached.rank(event, assignment)
            num_assignments += 1

        assert uncached.num_solves == num_assignments
        assert cached.num_solves == len(event.jets)
        assert cached.best_rank == uncached.best_rank

    def test_cache_reset(self, tt_sample, nu_table, mass_table):
        """Test that the cache does not leak across events."""
        ranker = LikelihoodRanker(nu_table, mass_table)
        search = JetAssignmentSearch(ranker)
        first = search.process(tt_sample.event)
        second = search.process(tt_sample.event)
        assert ranker.num_solves == len(tt_sample.event.jets)
        assert first.rank == second.rank

    def test_no_leptons(self, make_event, nu_table, mass_table):
        """Test an event without leptons."""
        event = make_event([(80, 0, 0), (70, 0, 1), (60, 0, 2), (50, 0, 3)])
        result = JetAssignmentSearch(LikelihoodRanker(nu_table, mass_table)).process(event)
        assert result.status == ReconstructionStatus.NO_LEPTONS

    def test_unreconstructable(self, make_event, nu_table, mass_table):
        """Test an event where m(lepton + jet) exceeds m(top) for every jet."""
        event = make_event(
            [(500, 0.0, 3.0), (450, 0.1, 3.1), (400, -0.1, -3.1), (350, 0.0, 3.04)],
            [(40, 0.0, 0.0)],
            met=(20.0, 5.0),
        )
        ranker = LikelihoodRanker(nu_table, mass_table)
        result = JetAssignmentSearch(ranker).process(event)
        assert result.status == ReconstructionStatus.NEUTRINO_UNRECONSTRUCTABLE
        assert not ranker.neutrino_solved

    def test_neutrino_out_of_range(self, tt_sample, mass_table):
        """Test an event where every neutrino distance overflows."""
        ranker = LikelihoodRanker(_uniform_1d(5000.0, 6000.0), mass_table)
        result = JetAssignmentSearch(ranker).process(tt_sample.event)
        assert result.status == ReconstructionStatus.NEUTRINO_LIKELIHOOD_OUT_OF_RANGE
        assert ranker.neutrino_solved

    def test_mass_out_of_range(self, tt_sample):
        """Test an event where every hadronic mass pair overflows."""
        ranker = LikelihoodRanker(
            _uniform_1d(0.0, 1e4), _uniform_2d(0.0, 1.0, 0.0, 1.0)
        )
        result = JetAssignmentSearch(ranker).process(tt_sample.event)
        assert result.status == ReconstructionStatus.MASS_LIKELIHOOD_OUT_OF_RANGE
        assert ranker.neutrino_in_range
        assert not ranker.mass_in_range

    def test_zero_density(self, tt_sample):
        """Test that null densities reject interpretations silently."""
        mass_table = DensityTable2D(
            [0.0, 1000.0, 1001.0], [0.0, 2000.0], [[0.0], [1.0 / 2000.0]]
        )
        ranker = LikelihoodRanker(_uniform_1d(0.0, 1e4), mass_table)
        with np.errstate(divide="raise"):
            result = JetAssignmentSearch(ranker).process(tt_sample.event)

        assert result.status == ReconstructionStatus.NO_VIABLE_INTERPRETATION
        assert ranker.mass_in_range

    def test_clone(self, nu_table, mass_table):
        """Test that clones share the tables but not the solver."""
        ranker = LikelihoodRanker(nu_table, mass_table)
        clone = ranker.clone()
        assert clone.nu_likelihood is ranker.nu_likelihood
        assert clone.nu_solver is not ranker.nu_solver
        assert clone.num_solves == 0
