"""Module with a parent class of all physics object data structures."""

from dataclasses import dataclass

import numpy as np

from topreco.utils.enums import enum_factory

__all__ = ["DataBase", "ParticleBase", "is_pt_ordered"]


@dataclass(eq=False)
class DataBase:
    """Base class of all data structures.

    Defines basic methods shared by all data structures.
    """

    # Enumerated attributes as (key, enumerated type name) pairs
    _enum_attrs = ()

    def __post_init__(self):
        """Immediately called after building the class attributes.

        Casts enumerated attributes provided as strings (the format one gets
        when reading them from a configuration file) to enumerated members.
        """
        for attr, enum in self._enum_attrs:
            value = getattr(self, attr)
            if value is not None:
                setattr(self, attr, enum_factory(enum, value))


@dataclass(eq=False)
class ParticleBase(DataBase):
    """Base class of all objects described by a four-momentum.

    Attributes
    ----------
    p4 : vector.MomentumObject4D
        Four-momentum of the object
    id : int
        Identifier assigned by the producer of the object (-1 if unset).
        Jet assignments refer to positions in the event collections instead
    """

    p4: object = None
    id: int = -1

    @property
    def pt(self):
        """Transverse momentum."""
        return self.p4.pt

    @property
    def eta(self):
        """Pseudorapidity."""
        return self.p4.eta

    @property
    def phi(self):
        """Azimuthal angle."""
        return self.p4.phi

    @property
    def mass(self):
        """Invariant mass."""
        return self.p4.mass

    def delta_r(self, other):
        """Angular separation with respect to another object.

        Parameters
        ----------
        other : ParticleBase
            Other object

        Returns
        -------
        float
            Distance in the (eta, phi) plane
        """
        return self.p4.deltaR(other.p4)

    def __repr__(self):
        """Short human-readable description of the object."""
        return (
            f"{type(self).__name__}(id={self.id}, pt={self.pt:.3g}, "
            f"eta={self.eta:.3g}, phi={self.phi:.3g})"
        )


def is_pt_ordered(objects):
    """Checks that a collection is ordered in decreasing transverse momentum.

    Parameters
    ----------
    objects : List[ParticleBase]
        Collection of objects

    Returns
    -------
    bool
        `True` if the collection is ordered
    """
    pts = np.array([obj.pt for obj in objects], dtype=float)

    return bool(np.all(pts[:-1] >= pts[1:])) if len(pts) > 1 else True
