"""Module with the data classes of the reconstructed physics objects.

The objects are produced upstream (selection and identification are not
the business of this package) and are read-only for the reconstruction.
Four-momenta are represented with :mod:`vector` momentum objects and are
never modified in place.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np
import vector

from topreco.errors import PreconditionError
from topreco.utils.enums import LeptonFlavour

from .base import DataBase, ParticleBase, is_pt_ordered

__all__ = [
    "four_momentum",
    "zero_four_momentum",
    "from_pt_eta_phi_m",
    "Jet",
    "Lepton",
    "MissingMomentum",
    "Event",
]


def four_momentum(px, py, pz, e):
    """Builds a four-momentum from its Cartesian components.

    Parameters
    ----------
    px, py, pz : float
        Momentum components
    e : float
        Energy

    Returns
    -------
    vector.MomentumObject4D
        Four-momentum
    """
    return vector.obj(px=float(px), py=float(py), pz=float(pz), E=float(e))


def zero_four_momentum():
    """Builds a null four-momentum.

    Returns
    -------
    vector.MomentumObject4D
        Four-momentum with all components set to zero
    """
    return four_momentum(0.0, 0.0, 0.0, 0.0)


def from_pt_eta_phi_m(pt, eta, phi, mass):
    """Builds a four-momentum from its collider coordinates.

    Parameters
    ----------
    pt : float
        Transverse momentum
    eta : float
        Pseudorapidity
    phi : float
        Azimuthal angle
    mass : float
        Invariant mass

    Returns
    -------
    vector.MomentumObject4D
        Four-momentum
    """
    p4 = vector.obj(pt=float(pt), eta=float(eta), phi=float(phi), mass=float(mass))

    return four_momentum(p4.px, p4.py, p4.pz, p4.E)


@dataclass(eq=False)
class Jet(ParticleBase):
    """Reconstructed jet.

    Attributes
    ----------
    btag : float
        Value of the b-tagging discriminant
    """

    btag: float = -1.0

    @classmethod
    def from_pt_eta_phi_m(cls, pt, eta, phi, mass, btag=-1.0, id=-1):
        """Builds a jet from its collider coordinates."""
        return cls(p4=from_pt_eta_phi_m(pt, eta, phi, mass), btag=btag, id=id)


@dataclass(eq=False)
class Lepton(ParticleBase):
    """Reconstructed charged lepton.

    Attributes
    ----------
    flavour : LeptonFlavour
        Flavour of the lepton
    """

    flavour: LeptonFlavour = LeptonFlavour.MUON

    # Enumerated attributes
    _enum_attrs = (("flavour", "flavour"),)

    @classmethod
    def from_pt_eta_phi_m(cls, pt, eta, phi, mass, flavour="muon", id=-1):
        """Builds a lepton from its collider coordinates."""
        return cls(p4=from_pt_eta_phi_m(pt, eta, phi, mass), flavour=flavour, id=id)


@dataclass(eq=False)
class MissingMomentum(DataBase):
    """Missing transverse momentum of an event.

    Attributes
    ----------
    px : float
        x component of the missing momentum
    py : float
        y component of the missing momentum
    """

    px: float = 0.0
    py: float = 0.0

    @classmethod
    def from_pt_phi(cls, pt, phi):
        """Builds the missing momentum from its magnitude and azimuth."""
        return cls(px=pt * np.cos(phi), py=pt * np.sin(phi))

    @property
    def pt(self):
        """Magnitude of the missing transverse momentum."""
        return float(np.hypot(self.px, self.py))

    @property
    def phi(self):
        """Azimuthal angle of the missing transverse momentum."""
        return float(np.arctan2(self.py, self.px))

    @property
    def p4(self):
        """Missing momentum as a massless four-momentum with no z component."""
        return four_momentum(self.px, self.py, 0.0, self.pt)


@dataclass(eq=False)
class Event(DataBase):
    """Inputs of the reconstruction of one event.

    Attributes
    ----------
    jets : List[Jet]
        Jets ordered in decreasing transverse momentum
    leptons : List[Lepton]
        Charged leptons ordered in decreasing transverse momentum
    met : MissingMomentum
        Missing transverse momentum
    index : int
        Index of the event in its dataset
    """

    jets: List[Jet] = field(default_factory=list)
    leptons: List[Lepton] = field(default_factory=list)
    met: MissingMomentum = field(default_factory=MissingMomentum)
    index: int = -1

    @property
    def lepton(self):
        """Leading charged lepton, `None` if there is no lepton."""
        return self.leptons[0] if len(self.leptons) else None

    def validate(self):
        """Checks the ordering of the object collections.

        Raises
        ------
        PreconditionError
            If jets or leptons are not ordered in decreasing pt
        """
        if not is_pt_ordered(self.jets):
            raise PreconditionError(
                f"Jets of event {self.index} are not ordered in decreasing pt."
            )
        if not is_pt_ordered(self.leptons):
            raise PreconditionError(
                f"Leptons of event {self.index} are not ordered in decreasing pt."
            )
