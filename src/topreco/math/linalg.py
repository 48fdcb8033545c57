"""Numba JIT compiled implementation of linear algebra routines."""

import numba as nb
import numpy as np

__all__ = ["rotation_x", "rotation_y", "rotation_z", "quadratic_form_2d"]


@nb.njit(cache=True)
def rotation_x(a: nb.float64) -> nb.float64[:, :]:
    """Matrix of an active rotation about the x axis.

    Parameters
    ----------
    a : float
        Rotation angle in radians

    Returns
    -------
    np.ndarray
        (3, 3) rotation matrix
    """
    c, s = np.cos(a), np.sin(a)
    r = np.zeros((3, 3), dtype=np.float64)
    r[0, 0] = 1.0
    r[1, 1] = c
    r[1, 2] = -s
    r[2, 1] = s
    r[2, 2] = c

    return r


@nb.njit(cache=True)
def rotation_y(a: nb.float64) -> nb.float64[:, :]:
    """Matrix of an active rotation about the y axis.

    Parameters
    ----------
    a : float
        Rotation angle in radians

    Returns
    -------
    np.ndarray
        (3, 3) rotation matrix
    """
    c, s = np.cos(a), np.sin(a)
    r = np.zeros((3, 3), dtype=np.float64)
    r[1, 1] = 1.0
    r[0, 0] = c
    r[0, 2] = s
    r[2, 0] = -s
    r[2, 2] = c

    return r


@nb.njit(cache=True)
def rotation_z(a: nb.float64) -> nb.float64[:, :]:
    """Matrix of an active rotation about the z axis.

    Parameters
    ----------
    a : float
        Rotation angle in radians

    Returns
    -------
    np.ndarray
        (3, 3) rotation matrix
    """
    c, s = np.cos(a), np.sin(a)
    r = np.zeros((3, 3), dtype=np.float64)
    r[2, 2] = 1.0
    r[0, 0] = c
    r[0, 1] = -s
    r[1, 0] = s
    r[1, 1] = c

    return r


@nb.njit(cache=True)
def quadratic_form_2d(d: nb.float64[:], m: nb.float64[:, :]) -> nb.float64:
    """Computes d^T M d for a two-component vector.

    Parameters
    ----------
    d : np.ndarray
        (2) vector
    m : np.ndarray
        (2, 2) matrix

    Returns
    -------
    float
        Value of the quadratic form
    """
    return (
        d[0] * (m[0, 0] * d[0] + m[0, 1] * d[1])
        + d[1] * (m[1, 0] * d[0] + m[1, 1] * d[1])
    )
