"""Numba JIT compiled kernels used to build and scan the neutrino solution ellipse.

The ellipse is described by a (3, 3) matrix H such that the neutrino
three-momentum for the ellipse parameter t is H (cos t, sin t, 1).
"""

import numba as nb
import numpy as np

from .linalg import quadratic_form_2d, rotation_x, rotation_y, rotation_z

__all__ = ["neutrino_ellipse", "ellipse_point", "ellipse_fom", "ellipse_fom_scan"]

# Sine of the lepton-jet opening angle below which they are collinear
COLLINEAR_SIN = 1e-9


@nb.njit(cache=True)
def neutrino_ellipse(
    lepton: nb.float64[:],
    bjet: nb.float64[:],
    mass_w: nb.float64,
    mass_top: nb.float64,
) -> nb.types.Tuple((nb.float64[:, :], nb.boolean)):
    """Builds the ellipse of neutrino momenta compatible with the W-boson and
    the top-quark mass constraints.

    The ellipse is first derived in a frame where the lepton is along +x and
    the b-quark jet lies in the x-y plane (with positive y). In that frame,
    the W mass constraint fixes the neutrino energy to `beta_l x - x0`, the
    top mass constraint then gives the plane `y = y0 + omega x` and the
    neutrino mass shell gives `z^2 + Omega^2 (x - xc)^2 = Z^2`. The matrix
    is finally rotated back to the laboratory frame.

    Parameters
    ----------
    lepton : np.ndarray
        (4) charged lepton four-momentum (px, py, pz, E)
    bjet : np.ndarray
        (4) b-quark jet four-momentum (px, py, pz, E)
    mass_w : float
        Mass of the W boson
    mass_top : float
        Mass of the top quark

    Returns
    -------
    np.ndarray
        (3, 3) ellipse matrix in the laboratory frame
    bool
        `False` if no neutrino momentum satisfies both constraints
    """
    h = np.zeros((3, 3), dtype=np.float64)
    p_l = np.sqrt(lepton[0] ** 2 + lepton[1] ** 2 + lepton[2] ** 2)
    p_b = np.sqrt(bjet[0] ** 2 + bjet[1] ** 2 + bjet[2] ** 2)
    e_l, e_b = lepton[3], bjet[3]
    if p_l <= 0.0 or p_b <= 0.0 or e_l <= 0.0 or e_b <= 0.0:
        return h, False

    beta_l, beta_b = p_l / e_l, p_b / e_b
    m2_l, m2_b = e_l**2 - p_l**2, e_b**2 - p_b**2

    # Move the jet to the frame where the lepton is along +x
    theta_l = np.arctan2(np.sqrt(lepton[0] ** 2 + lepton[1] ** 2), lepton[2])
    phi_l = np.arctan2(lepton[1], lepton[0])
    rot = np.dot(rotation_y(0.5 * np.pi - theta_l), rotation_z(-phi_l))
    b_loc = np.dot(rot, np.ascontiguousarray(bjet[:3]))
    alpha = np.arctan2(b_loc[2], b_loc[1])
    cos_lb = b_loc[0] / p_b
    sin_lb = np.sqrt(b_loc[1] ** 2 + b_loc[2] ** 2) / p_b
    if sin_lb < COLLINEAR_SIN:
        return h, False

    # W mass constraint: E_nu = beta_l x - x0
    x0 = -(mass_w**2 - m2_l) / (2 * e_l)

    # Top mass constraint: y = y0 + omega x
    x0_b = -(mass_top**2 - mass_w**2 - m2_b) / (2 * e_b)
    omega = (beta_l / beta_b - cos_lb) / sin_lb
    y0 = (e_l - x0 + x0_b - beta_b * cos_lb * p_l) / (beta_b * sin_lb)

    # Neutrino mass shell: z^2 + Omega^2 (x - xc)^2 = Z^2
    omega2 = omega**2 + 1.0 - beta_l**2
    if not omega2 > 0.0:
        return h, False

    xc = -(beta_l * x0 + omega * y0) / omega2
    z2 = omega2 * xc**2 + x0**2 - y0**2
    if not np.isfinite(z2) or z2 < 0.0:
        return h, False

    z, big_omega = np.sqrt(z2), np.sqrt(omega2)
    h_loc = np.zeros((3, 3), dtype=np.float64)
    h_loc[0, 0] = z / big_omega
    h_loc[0, 2] = xc
    h_loc[1, 0] = omega * z / big_omega
    h_loc[1, 2] = y0 + omega * xc
    h_loc[2, 1] = z

    # Rotate back to the laboratory frame
    rot = np.dot(rotation_z(phi_l), rotation_y(theta_l - 0.5 * np.pi))
    rot = np.dot(rot, rotation_x(alpha))
    h = np.dot(rot, h_loc)
    for i in range(3):
        for j in range(3):
            if not np.isfinite(h[i, j]):
                return h, False

    return h, True


@nb.njit(cache=True)
def ellipse_point(t: nb.float64, h: nb.float64[:, :]) -> nb.float64[:]:
    """Point of the ellipse for a given parameter.

    Parameters
    ----------
    t : float
        Ellipse parameter
    h : np.ndarray
        (3, 3) ellipse matrix

    Returns
    -------
    np.ndarray
        (3) neutrino three-momentum
    """
    c, s = np.cos(t), np.sin(t)
    p = np.empty(3, dtype=np.float64)
    for i in range(3):
        p[i] = h[i, 0] * c + h[i, 1] * s + h[i, 2]

    return p


@nb.njit(cache=True)
def ellipse_fom(
    t: nb.float64, h: nb.float64[:, :], met: nb.float64[:], precision: nb.float64[:, :]
) -> nb.float64:
    """Distance between the transverse projection of an ellipse point and the
    measured missing momentum, weighted by the MET precision matrix.

    With an identity precision matrix, this is the Euclidean distance in the
    transverse plane.

    Parameters
    ----------
    t : float
        Ellipse parameter
    h : np.ndarray
        (3, 3) ellipse matrix
    met : np.ndarray
        (2) measured missing transverse momentum
    precision : np.ndarray
        (2, 2) inverse of the MET covariance matrix

    Returns
    -------
    float
        Figure of merit
    """
    p = ellipse_point(t, h)
    d = np.empty(2, dtype=np.float64)
    d[0] = p[0] - met[0]
    d[1] = p[1] - met[1]

    return np.sqrt(max(quadratic_form_2d(d, precision), 0.0))


@nb.njit(cache=True)
def ellipse_fom_scan(
    ts: nb.float64[:], h: nb.float64[:, :], met: nb.float64[:], precision: nb.float64[:, :]
) -> nb.float64[:]:
    """Evaluates :func:`ellipse_fom` on a set of ellipse parameters.

    Parameters
    ----------
    ts : np.ndarray
        (N) ellipse parameters
    h : np.ndarray
        (3, 3) ellipse matrix
    met : np.ndarray
        (2) measured missing transverse momentum
    precision : np.ndarray
        (2, 2) inverse of the MET covariance matrix

    Returns
    -------
    np.ndarray
        (N) figures of merit
    """
    foms = np.empty(len(ts), dtype=np.float64)
    for i in range(len(ts)):
        foms[i] = ellipse_fom(ts[i], h, met, precision)

    return foms
