"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

from dataclasses import dataclass

import numpy as np
import pytest

from topreco.data import Event, Jet, Lepton, MissingMomentum, RoleAssignment
from topreco.data.physics import four_momentum
from topreco.math.density import DensityTable1D, DensityTable2D

# Masses used to generate the reference event
TOP_MASS = 173.0
W_MASS = 80.0
MUON_MASS = 0.106


def boost(p4, parent):
    """Boosts a four-momentum from the rest frame of `parent` to the lab."""
    beta = np.array([parent.px, parent.py, parent.pz]) / parent.E
    beta2 = np.dot(beta, beta)
    gamma = 1.0 / np.sqrt(1.0 - beta2)
    p = np.array([p4.px, p4.py, p4.pz])
    bp = np.dot(beta, p)
    e = gamma * (p4.E + bp)
    p = p + ((gamma - 1.0) * bp / beta2 + gamma * p4.E) * beta

    return four_momentum(*p, e)


def two_body_decay(parent, m1, m2, theta, phi):
    """Decays `parent` into two particles emitted along (theta, phi) in its
    rest frame.
    """
    m = parent.mass
    p = np.sqrt((m**2 - (m1 + m2) ** 2) * (m**2 - (m1 - m2) ** 2)) / (2 * m)
    d = p * np.array(
        [np.sin(theta) * np.cos(phi), np.sin(theta) * np.sin(phi), np.cos(theta)]
    )
    c1 = four_momentum(*d, np.sqrt(p**2 + m1**2))
    c2 = four_momentum(*(-d), np.sqrt(p**2 + m2**2))

    return boost(c1, parent), boost(c2, parent)


def massive(px, py, pz, m):
    """Builds a four-momentum from its momentum and mass."""
    return four_momentum(px, py, pz, np.sqrt(px**2 + py**2 + pz**2 + m**2))


@dataclass
class TTSample:
    """Generated semileptonic tt event and its true interpretation."""

    event: Event
    truth: RoleAssignment
    neutrino: object
    top_lep: object
    top_had: object


@pytest.fixture(name="tt_sample")
def fixture_tt_sample():
    """Generates one semileptonic tt event with exact masses.

    The event holds the four decay jets plus a soft extra jet, one muon and
    the missing momentum of the neutrino.
    """
    # Top quarks and their decays
    top_lep = massive(40.0, 30.0, 60.0, TOP_MASS)
    top_had = massive(-50.0, -20.0, -90.0, TOP_MASS)
    b_lep, w_lep = two_body_decay(top_lep, 0.0, W_MASS, 2.0, 1.0)
    lep, nu = two_body_decay(w_lep, MUON_MASS, 0.0, 0.8, -2.0)
    b_had, w_had = two_body_decay(top_had, 0.0, W_MASS, 1.2, 2.5)
    q1, q2 = two_body_decay(w_had, 0.0, 0.0, 1.7, 0.3)
    extra = four_momentum(4.0, 3.0, 1.0, np.sqrt(26.0))

    # Order the jets in pt, keep track of the decay roles
    p4s = [b_lep, b_had, q1, q2, extra]
    order = np.argsort([-p4.pt for p4 in p4s])
    jets = [Jet(p4=p4s[i]) for i in order]
    position = {int(j): i for i, j in enumerate(order)}
    q_min, q_max = sorted((position[2], position[3]))
    truth = RoleAssignment(position[0], position[1], q_min, q_max)

    met = MissingMomentum(px=nu.px, py=nu.py)
    event = Event(jets=jets, leptons=[Lepton(p4=lep)], met=met, index=7)

    return TTSample(event, truth, nu, top_lep, top_had)


@pytest.fixture(name="chi2_cfg")
def fixture_chi2_cfg():
    """Chi-square ranker configuration which matches the generated masses."""
    return {
        "name": "chi2",
        "nu_solver": {"name": "mass_constraint", "mass_w": W_MASS},
        "terms": [
            {"expression": "mass_top_lep", "mean": TOP_MASS, "variance": 10.0},
            {"expression": "mass_top_had", "mean": TOP_MASS, "variance": 10.0},
            {"expression": "mass_w_had", "mean": W_MASS, "variance": 10.0},
        ],
    }


@pytest.fixture(name="nu_table")
def fixture_nu_table():
    """Neutrino distance density peaked at small distances."""
    return DensityTable1D([0.0, 5.0, 1000.0], [4.0, 1.0], normalize=True)


@pytest.fixture(name="mass_table")
def fixture_mass_table():
    """Hadronic (m_W, m_top) density peaked around the generated masses."""
    values = np.ones((3, 3))
    values[1, 1] = 100.0
    return DensityTable2D(
        [0.0, 70.0, 90.0, 1000.0], [0.0, 160.0, 185.0, 2000.0], values, normalize=True
    )


def _make_event(jets, leptons=None, met=(0.0, 0.0), index=0):
    """Builds an event from (pt, eta, phi) jet and lepton coordinates."""
    jets = [Jet.from_pt_eta_phi_m(pt, eta, phi, 0.0) for pt, eta, phi in jets]
    leptons = [
        Lepton.from_pt_eta_phi_m(pt, eta, phi, MUON_MASS)
        for pt, eta, phi in (leptons or [])
    ]

    return Event(jets=jets, leptons=leptons, met=MissingMomentum(*met), index=index)


@pytest.fixture(name="make_event")
def fixture_make_event():
    """Provides a function which builds an event from object coordinates."""
    return _make_event
