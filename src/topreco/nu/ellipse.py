"""Neutrino reconstruction from the W-boson and top-quark mass constraints.

Once the b-quark jet from the semileptonic top quark decay is known, the
two mass constraints and the neutrino mass shell restrict the neutrino
momentum to an ellipse. The point of the ellipse whose transverse
projection is the closest to the measured missing transverse momentum is
taken as the neutrino.
"""

from dataclasses import dataclass

import numpy as np
import scipy

from topreco.config.errors import ConfigValidationError
from topreco.data.physics import four_momentum, zero_four_momentum
from topreco.math.kinematics import (
    ellipse_fom,
    ellipse_fom_scan,
    ellipse_point,
    neutrino_ellipse,
)
from topreco.utils.globals import (
    ELLIPSE_SCAN_POINTS,
    ELLIPSE_TOP_MASS,
    ELLIPSE_W_MASS,
    INVALID_FOM,
)

from .base import NuSolverBase

__all__ = ["EllipseSolver"]


def met_precision(sigma_x=1.0, sigma_y=1.0, rho=0.0):
    """Builds the inverse of the missing momentum covariance matrix.

    Parameters
    ----------
    sigma_x : float, default 1.
        Resolution on the x component of the missing momentum
    sigma_y : float, default 1.
        Resolution on the y component of the missing momentum
    rho : float, default 0.
        Correlation coefficient between the two components

    Returns
    -------
    np.ndarray
        (2, 2) precision matrix
    """
    cov = np.array(
        [
            [sigma_x**2, rho * sigma_x * sigma_y],
            [rho * sigma_x * sigma_y, sigma_y**2],
        ],
        dtype=np.float64,
    )
    if sigma_x <= 0.0 or sigma_y <= 0.0 or abs(rho) >= 1.0:
        raise ConfigValidationError(
            f"The MET covariance is singular or not positive definite "
            f"(sigma_x={sigma_x}, sigma_y={sigma_y}, rho={rho})."
        )

    return np.linalg.inv(cov)


def _to_array(p4):
    """Converts a four-momentum to a (px, py, pz, E) array."""
    return np.array([p4.px, p4.py, p4.pz, p4.E], dtype=np.float64)


class NeutrinoEllipse:
    """Ellipse of neutrino momenta compatible with the mass constraints.

    For an ellipse parameter `t`, the neutrino three-momentum is
    `H (cos t, sin t, 1)` and its energy is the norm of that vector.

    Attributes
    ----------
    h : np.ndarray
        (3, 3) ellipse matrix in the laboratory frame
    reconstructable : bool
        Whether some neutrino momentum satisfies both mass constraints
    """

    def __init__(
        self, lepton_p4, bjet_p4, mass_w=ELLIPSE_W_MASS, mass_top=ELLIPSE_TOP_MASS
    ):
        """Builds the ellipse.

        Parameters
        ----------
        lepton_p4 : vector.MomentumObject4D
            Four-momentum of the charged lepton
        bjet_p4 : vector.MomentumObject4D
            Four-momentum of the b-quark jet from the same top quark
        mass_w : float, default 80.
            Mass of the W boson in GeV
        mass_top : float, default 173.
            Mass of the top quark in GeV
        """
        self.mass_w = mass_w
        self.mass_top = mass_top
        self.h, self.reconstructable = neutrino_ellipse(
            _to_array(lepton_p4), _to_array(bjet_p4), float(mass_w), float(mass_top)
        )

    def solution(self, t):
        """Neutrino four-momentum for a given ellipse parameter.

        Parameters
        ----------
        t : float
            Ellipse parameter

        Returns
        -------
        vector.MomentumObject4D
            Massless neutrino four-momentum
        """
        p = ellipse_point(float(t), self.h)

        return four_momentum(p[0], p[1], p[2], np.linalg.norm(p))

    def pt_solution(self, t):
        """Transverse momentum components of the neutrino for a given
        ellipse parameter.

        Parameters
        ----------
        t : float
            Ellipse parameter

        Returns
        -------
        np.ndarray
            (2) neutrino (px, py)
        """
        return ellipse_point(float(t), self.h)[:2]

    def fom(self, t, met, precision=None):
        """Distance between the neutrino transverse momentum and the measured
        missing momentum, in units of the MET resolution.

        Parameters
        ----------
        t : float
            Ellipse parameter
        met : np.ndarray
            (2) measured missing transverse momentum
        precision : np.ndarray, optional
            (2, 2) inverse of the MET covariance matrix (identity if omitted)

        Returns
        -------
        float
            Figure of merit
        """
        met, precision = self._prepare(met, precision)

        return ellipse_fom(float(t), self.h, met, precision)

    def extremum(self, t0, met, precision=None, minimum=True, width=None):
        """Finds the closest extremum of the figure of merit around a
        starting ellipse parameter.

        Parameters
        ----------
        t0 : float
            Starting ellipse parameter
        met : np.ndarray
            (2) measured missing transverse momentum
        precision : np.ndarray, optional
            (2, 2) inverse of the MET covariance matrix (identity if omitted)
        minimum : bool, default True
            If `True`, look for a minimum, otherwise for a maximum
        width : float, optional
            Half-width of the search interval (one grid step by default)

        Returns
        -------
        float
            Ellipse parameter at the extremum
        float
            Figure of merit at the extremum
        """
        met, precision = self._prepare(met, precision)
        if width is None:
            width = 2 * np.pi / ELLIPSE_SCAN_POINTS

        sign = 1.0 if minimum else -1.0
        fit = scipy.optimize.minimize_scalar(
            lambda t: sign * ellipse_fom(t, self.h, met, precision),
            bounds=[t0 - width, t0 + width],
            method="bounded",
        )

        return float(fit.x), sign * float(fit.fun)

    def best(self, met_x, met_y, sigma_x=1.0, sigma_y=1.0, rho=0.0):
        """Finds the neutrino which best matches the measured missing momentum.

        The figure of merit is scanned on a regular grid of ellipse
        parameters, every local minimum of the grid is refined and the global
        minimum is kept.

        Parameters
        ----------
        met_x : float
            x component of the measured missing momentum
        met_y : float
            y component of the measured missing momentum
        sigma_x : float, default 1.
            Resolution on the x component of the missing momentum
        sigma_y : float, default 1.
            Resolution on the y component of the missing momentum
        rho : float, default 0.
            Correlation coefficient between the two components

        Returns
        -------
        vector.MomentumObject4D
            Best neutrino four-momentum (null if not reconstructable)
        float
            Figure of merit of the best neutrino (-1 if not reconstructable)
        """
        return self._best(
            np.array([met_x, met_y], dtype=np.float64),
            met_precision(sigma_x, sigma_y, rho),
        )

    def _best(self, met, precision):
        """Scans and refines the figure of merit, see :meth:`best`."""
        if not self.reconstructable:
            return zero_four_momentum(), INVALID_FOM

        # Coarse scan of the full ellipse
        num_points = ELLIPSE_SCAN_POINTS
        ts = np.linspace(0.0, 2 * np.pi, num_points, endpoint=False)
        foms = ellipse_fom_scan(ts, self.h, met, precision)

        # Refine each local minimum of the scan (the grid is periodic)
        best_t, best_fom = ts[np.argmin(foms)], np.min(foms)
        is_min = (foms <= np.roll(foms, 1)) & (foms <= np.roll(foms, -1))
        if not np.all(is_min):
            for i in np.where(is_min)[0]:
                t, fom = self.extremum(ts[i], met, precision)
                if fom < best_fom:
                    best_t, best_fom = t, fom

        return self.solution(best_t), float(best_fom)

    @staticmethod
    def _prepare(met, precision):
        """Casts the MET and its precision matrix to contiguous arrays."""
        met = np.ascontiguousarray(met, dtype=np.float64)
        if precision is None:
            precision = np.eye(2, dtype=np.float64)

        return met, np.ascontiguousarray(precision, dtype=np.float64)


@dataclass
class EllipseSolution:
    """Outcome of the ellipse neutrino reconstruction.

    Attributes
    ----------
    p4 : vector.MomentumObject4D
        Best neutrino four-momentum (null if not reconstructable)
    fom : float
        Distance to the measured missing momentum (-1 if not reconstructable)
    reconstructable : bool
        Whether the mass constraints could be satisfied
    """

    p4: object
    fom: float
    reconstructable: bool


class EllipseSolver(NuSolverBase):
    """Reconstructs the neutrino on the ellipse defined by the W-boson and
    top-quark mass constraints, given the b-quark jet of the leptonic top.
    """

    # Name of the solver (as specified in the configuration)
    name = "ellipse"

    # Alternative allowed names of the solver
    aliases = ("rochester",)

    def __init__(
        self, mass_w=ELLIPSE_W_MASS, mass_top=ELLIPSE_TOP_MASS, met_sigma=(1.0, 1.0, 0.0)
    ):
        """Store the mass constraints and the MET resolution model.

        Parameters
        ----------
        mass_w : float, default 80.
            Mass of the W boson in GeV
        mass_top : float, default 173.
            Mass of the top quark in GeV
        met_sigma : Tuple[float, float, float], default (1., 1., 0.)
            MET resolution along x, along y and their correlation coefficient
        """
        self.mass_w = mass_w
        self.mass_top = mass_top
        if len(met_sigma) != 3:
            raise ConfigValidationError(
                "The MET resolution must be provided as (sigma_x, sigma_y, rho), "
                f"got {met_sigma}."
            )
        self.met_sigma = tuple(met_sigma)
        self.precision = met_precision(*self.met_sigma)

    def ellipse(self, lepton_p4, bjet_p4):
        """Builds the neutrino ellipse with the configured masses.

        Parameters
        ----------
        lepton_p4 : vector.MomentumObject4D
            Four-momentum of the charged lepton
        bjet_p4 : vector.MomentumObject4D
            Four-momentum of the b-quark jet from the same top quark

        Returns
        -------
        NeutrinoEllipse
            Neutrino solution ellipse
        """
        return NeutrinoEllipse(lepton_p4, bjet_p4, self.mass_w, self.mass_top)

    def solve(self, lepton_p4, met, bjet_p4):
        """Finds the best neutrino for one lepton and b-quark jet pair.

        Parameters
        ----------
        lepton_p4 : vector.MomentumObject4D
            Four-momentum of the charged lepton
        met : MissingMomentum
            Missing transverse momentum of the event
        bjet_p4 : vector.MomentumObject4D
            Four-momentum of the b-quark jet from the same top quark

        Returns
        -------
        EllipseSolution
            Best neutrino and its figure of merit
        """
        ellipse = self.ellipse(lepton_p4, bjet_p4)
        p4, fom = ellipse._best(
            np.array([met.px, met.py], dtype=np.float64), self.precision
        )

        return EllipseSolution(p4, fom, bool(ellipse.reconstructable))
