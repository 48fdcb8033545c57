"""Neutrino reconstruction from the W-boson mass constraint."""

import numpy as np

from topreco.data.physics import four_momentum
from topreco.errors import PreconditionError
from topreco.utils.globals import W_MASS

from .base import NuSolverBase

__all__ = ["MassConstraintSolver"]


class MassConstraintSolver(NuSolverBase):
    """Reconstructs the neutrino by requiring m(lepton + neutrino) = m(W).

    The transverse momentum of the neutrino is identified with the missing
    transverse momentum and the constraint gives a quadratic equation for
    its longitudinal component. When the equation has no real root, the
    magnitude of the missing momentum is minimally adjusted (keeping its
    azimuth) so that the discriminant vanishes.

    Neutrino candidates are massless and are returned in a list which holds
    zero, one or two four-momenta.

    Attributes
    ----------
    mass_w : float
        Mass of the W boson in GeV
    last_adjusted_met : float
        Adjusted missing momentum magnitude used in the last call to
        :meth:`solve`, `None` if no adjustment was necessary
    """

    # Name of the solver (as specified in the configuration)
    name = "mass_constraint"

    # Alternative allowed names of the solver
    aliases = ("w_mass", "run1")

    def __init__(self, mass_w=W_MASS):
        """Store the mass constraint.

        Parameters
        ----------
        mass_w : float, default 80.419
            Mass of the W boson in GeV
        """
        self.mass_w = mass_w
        self.last_adjusted_met = None

    def solve(self, lepton_p4, met):
        """Finds the neutrino candidates of one lepton.

        Parameters
        ----------
        lepton_p4 : vector.MomentumObject4D
            Four-momentum of the charged lepton
        met : MissingMomentum
            Missing transverse momentum of the event

        Returns
        -------
        List[vector.MomentumObject4D]
            Neutrino candidates, the smaller longitudinal momentum first

        Raises
        ------
        PreconditionError
            If the lepton energy is not positive or if the equations are
            degenerate in a way which cannot occur for physical inputs
        """
        # Fetch the lepton kinematics
        self.last_adjusted_met = None
        lx, ly, lz, el = lepton_p4.px, lepton_p4.py, lepton_p4.pz, lepton_p4.E
        if not el > 0.0:
            raise PreconditionError(
                f"The lepton energy must be positive to solve for the neutrino, got {el}."
            )

        ml2 = el**2 - (lx**2 + ly**2 + lz**2)
        dm2 = self.mass_w**2 - ml2

        # Quadratic equation a pz^2 + b pz + c = 0 for the neutrino pz
        met_pt = np.hypot(met.px, met.py)
        lam = (dm2 + 2 * (met.px * lx + met.py * ly)) / (2 * el)
        a = 1.0 - (lz / el) ** 2
        b = -2 * (lz / el) * lam
        c = met_pt**2 - lam**2

        # Linear equation, only happens for a massless lepton along z
        if a == 0.0:
            if b == 0.0:
                raise PreconditionError(
                    "The neutrino mass constraint is degenerate (a = b = 0)."
                )
            return [self._neutrino(met.px, met.py, -c / b)]

        # Two real-valued solutions, record both
        disc = b * b - 4 * a * c
        if disc > 0.0:
            sqrt_disc = np.sqrt(disc)
            return [
                self._neutrino(met.px, met.py, (-b - sqrt_disc) / (2 * a)),
                self._neutrino(met.px, met.py, (-b + sqrt_disc) / (2 * a)),
            ]

        # No real-valued solution, adjust the MET magnitude
        adjusted_met = self._adjust_met(lx, ly, lz, el, dm2, met)
        if adjusted_met is None:
            return []

        self.last_adjusted_met = adjusted_met
        phi = np.arctan2(met.py, met.px)
        px, py = adjusted_met * np.cos(phi), adjusted_met * np.sin(phi)

        # With the adjusted MET, the discriminant vanishes
        lam = (dm2 + 2 * (px * lx + py * ly)) / (2 * el)
        b = -2 * (lz / el) * lam

        return [self._neutrino(px, py, -b / (2 * a))]

    @staticmethod
    def _adjust_met(lx, ly, lz, el, dm2, met):
        """Finds the MET magnitude which zeroes the discriminant of the
        neutrino pz equation, keeping the MET direction.

        The magnitude solves u MET^2 + v MET + w = 0.

        Returns
        -------
        float
            Adjusted MET magnitude, `None` if there is no positive solution
        """
        # Projection of the lepton transverse momentum on the MET direction
        phi = np.arctan2(met.py, met.px)
        gamma = lx * np.cos(phi) + ly * np.sin(phi)

        u = (lz / el) ** 2 + (gamma / el) ** 2 - 1.0
        v = gamma * dm2 / el**2
        w = (dm2 / (2 * el)) ** 2

        disc = v * v - 4 * u * w
        if disc < 0.0:
            raise PreconditionError(
                f"The MET adjustment equation has a negative discriminant ({disc})."
            )

        if u == 0.0:
            if v == 0.0:
                raise PreconditionError(
                    "The MET adjustment equation is degenerate (u = v = 0)."
                )
            adjusted = -w / v
            return adjusted if adjusted > 0.0 else None

        met_pt = np.hypot(met.px, met.py)
        met_1 = (-v - np.sqrt(disc)) / (2 * u)
        met_2 = (-v + np.sqrt(disc)) / (2 * u)
        if met_1 > 0.0 and met_2 > 0.0:
            # Choose the solution which is closest to the measured MET
            if abs(met_pt - met_1) < abs(met_pt - met_2):
                return met_1
            return met_2

        if met_1 > 0.0:
            return met_1
        if met_2 > 0.0:
            return met_2

        return None

    @staticmethod
    def _neutrino(px, py, pz):
        """Builds a massless neutrino four-momentum."""
        return four_momentum(px, py, pz, np.sqrt(px**2 + py**2 + pz**2))
