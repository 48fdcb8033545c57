"""Tests for the topreco.reco.chi2 module."""

import numpy as np
import pytest

from topreco.config.errors import ConfigError
from topreco.reco import Chi2Ranker, JetAssignmentSearch, ranker_factory
from topreco.utils.enums import Chi2Expression, ReconstructionStatus


class TestChi2Configuration:
    """Test the configuration of the chi-square ranker."""

    def test_terms(self):
        """Test adding terms by name or by member."""
        ranker = Chi2Ranker(terms=[{"expression": "MASS_W_HAD", "mean": 80.0, "variance": 10.0}])
        ranker.add_term(Chi2Expression.PT_TT, 0.0, 50.0)
        ranker.add_term("mass_top_had", 173.0, 15.0)
        assert [t[0] for t in ranker.terms] == [
            Chi2Expression.MASS_W_HAD,
            Chi2Expression.PT_TT,
            Chi2Expression.MASS_TOP_HAD,
        ]

    def test_invalid_terms(self):
        """Test that invalid terms are configuration errors."""
        ranker = Chi2Ranker()
        with pytest.raises(ConfigError):
            ranker.add_term("mass_higgs", 125.0, 10.0)
        with pytest.raises(ConfigError):
            ranker.add_term("mass_w_had", 80.0, 0.0)

    def test_empty(self, tt_sample):
        """Test that a chi-square without terms refuses to run."""
        with pytest.raises(ConfigError):
            Chi2Ranker().validate()
        with pytest.raises(ConfigError):
            Chi2Ranker().begin_event(tt_sample.event)

    def test_clone(self):
        """Test that clones do not share their terms."""
        ranker = Chi2Ranker(
            terms=[{"expression": "mass_top_had", "mean": 173.0, "variance": 15.0}]
        )
        clone = ranker.clone()
        clone.add_term("mass_w_had", 80.0, 10.0)

        assert [t[0] for t in ranker.terms] == [Chi2Expression.MASS_TOP_HAD]
        assert len(clone.terms) == 2
        assert clone.nu_solver is not ranker.nu_solver

        ranker.add_term("pt_tt", 0.0, 50.0)
        assert [t[0] for t in clone.terms] == [
            Chi2Expression.MASS_TOP_HAD,
            Chi2Expression.MASS_W_HAD,
        ]

    def test_solver(self):
        """Test that the ranker needs a solver which ignores the jets."""
        with pytest.raises(ConfigError):
            Chi2Ranker(nu_solver={"name": "ellipse"})

    def test_factory(self, chi2_cfg):
        """Test building the ranker from a configuration block."""
        ranker = ranker_factory(chi2_cfg)
        assert isinstance(ranker, Chi2Ranker)
        assert len(ranker.terms) == 3
        assert ranker.nu_solver.mass_w == 80.0


class TestChi2Ranking:
    """Test the reconstruction of events with the chi-square ranker."""

    def test_truth(self, tt_sample, chi2_cfg):
        """Test that the generated interpretation is recovered."""
        ranker = ranker_factory(chi2_cfg)
        result = JetAssignmentSearch(ranker).process(tt_sample.event)

        assert result.success
        assert result.assignment == tt_sample.truth
        assert result.rank == pytest.approx(0.0, abs=1e-8)
        assert result.num_evaluated == 60
        assert result.lepton is tt_sample.event.lepton
        for comp in ("px", "py", "pz"):
            assert getattr(result.neutrino, comp) == pytest.approx(
                getattr(tt_sample.neutrino, comp), abs=1e-4
            )
        assert result.top_lep_p4.mass == pytest.approx(173.0, abs=1e-4)
        assert result.w_had_p4.mass == pytest.approx(80.0, abs=1e-4)

    def test_rank_value(self, tt_sample):
        """Test the rank of a single interpretation."""
        ranker = Chi2Ranker(terms=[{"expression": "mass_w_had", "mean": 90.0, "variance": 5.0}])
        assert ranker.begin_event(tt_sample.event) is None
        assert len(ranker.neutrinos) == 2

        rank = ranker.rank(tt_sample.event, tt_sample.truth)
        assert rank == pytest.approx(-(((80.0 - 90.0) / 5.0) ** 2), abs=1e-6)
        assert ranker.best_rank == rank
        assert ranker.best_neutrino is not None

    def test_no_leptons(self, make_event, chi2_cfg):
        """Test an event without leptons."""
        event = make_event([(80, 0, 0), (70, 0, 1), (60, 0, 2), (50, 0, 3)])
        result = JetAssignmentSearch(ranker_factory(chi2_cfg)).process(event)
        assert result.status == ReconstructionStatus.NO_LEPTONS

    def test_no_neutrino(self, make_event, chi2_cfg, monkeypatch):
        """Test an event where the solver finds no neutrino candidate."""
        event = make_event([(80, 0, 0), (70, 0, 1), (60, 0, 2), (50, 0, 3)], [(30, 0, 0)])
        ranker = ranker_factory(chi2_cfg)
        monkeypatch.setattr(ranker.nu_solver, "solve", lambda lepton, met: [])
        result = JetAssignmentSearch(ranker).process(event)
        assert result.status == ReconstructionStatus.NO_NEUTRINO_CANDIDATES
        assert result.num_evaluated == 0
