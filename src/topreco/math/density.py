"""Binned probability density tables used by the likelihood ranker.

The tables are read-only after construction, so a single instance can be
shared by any number of rankers.
"""

import numpy as np

from topreco.config.errors import ConfigValidationError
from topreco.utils.globals import DENSITY_NORM_TOL
from topreco.utils.logger import logger

__all__ = ["DensityTable1D", "DensityTable2D", "density_table_factory"]


def _check_edges(edges, label):
    """Checks and freezes an array of bin edges."""
    edges = np.array(edges, dtype=np.float64)
    if edges.ndim != 1 or len(edges) < 2:
        raise ConfigValidationError(
            f"The {label} bin edges must be a 1D array with at least two entries."
        )
    if not np.all(np.isfinite(edges)) or np.any(np.diff(edges) <= 0.0):
        raise ConfigValidationError(
            f"The {label} bin edges must be finite and strictly increasing."
        )
    edges.setflags(write=False)

    return edges


def _find_bin(edges, x):
    """Returns the bin of `x`, `None` if it falls outside of the edges."""
    if not np.isfinite(x) or x < edges[0] or x >= edges[-1]:
        return None

    return int(np.searchsorted(edges, x, side="right")) - 1


class DensityTableBase:
    """Shared logic of binned density tables.

    Attributes
    ----------
    values : np.ndarray
        Density in each bin
    """

    # Number of variables the density depends on
    ndim = None

    def _set_values(self, values, widths, normalize):
        """Validates, normalizes and freezes the bin contents.

        Parameters
        ----------
        values : np.ndarray
            Bin contents
        widths : np.ndarray
            Bin widths (1D) or areas (2D), same shape as the contents
        normalize : bool
            If `True`, rescale the contents so that they integrate to one
        """
        values = np.array(values, dtype=np.float64)
        if values.shape != widths.shape:
            raise ConfigValidationError(
                f"Density table contents have shape {values.shape}, expected "
                f"{widths.shape} from the bin edges."
            )
        if not np.all(np.isfinite(values)) or np.any(values < 0.0):
            raise ConfigValidationError(
                "Density table contents must be finite and non-negative."
            )

        integral = np.sum(values * widths)
        if integral <= 0.0:
            raise ConfigValidationError("Density table integrates to zero.")

        if abs(integral - 1.0) > DENSITY_NORM_TOL:
            if not normalize:
                raise ConfigValidationError(
                    f"Density table integrates to {integral:.6g} instead of 1. "
                    "Provide a normalized table or set `normalize: true`."
                )
            logger.warning(f"Rescaling density table by 1/{integral:.6g}.")
            values /= integral

        values.setflags(write=False)
        self.values = values

    def __deepcopy__(self, memo):
        """Tables are read-only, copies share the same instance."""
        return self

    @classmethod
    def from_config(cls, cfg):
        """Builds a table from a configuration dictionary.

        Parameters
        ----------
        cfg : dict
            Keyword arguments of the table constructor

        Returns
        -------
        DensityTableBase
            Density table
        """
        if not isinstance(cfg, dict):
            raise ConfigValidationError(
                f"Cannot build a density table from an object of type {type(cfg)}."
            )

        try:
            return cls(**cfg)
        except TypeError as err:
            raise ConfigValidationError(
                f"Malformed {cls.ndim}D density table configuration: {err}"
            ) from err

    def in_range(self, *args):
        """Whether the arguments fall within the domain of the table."""
        return self.find_bin(*args) is not None

    def density(self, *args):
        """Density at the given point, `None` if it is out of domain."""
        index = self.find_bin(*args)
        if index is None:
            return None

        return float(self.values[index])


class DensityTable1D(DensityTableBase):
    """Probability density of one variable, in bins.

    Attributes
    ----------
    edges : np.ndarray
        (N + 1) bin edges
    values : np.ndarray
        (N) density in each bin
    """

    ndim = 1

    def __init__(self, edges, values, normalize=False):
        """Validates and stores the table.

        Parameters
        ----------
        edges : array_like
            (N + 1) strictly increasing bin edges
        values : array_like
            (N) density in each bin
        normalize : bool, default False
            If `True`, rescale the table to integrate to one instead of
            raising when it does not
        """
        self.edges = _check_edges(edges, "x")
        self._set_values(values, np.diff(self.edges), normalize)

    def find_bin(self, x):
        """Index of the bin containing `x`.

        Parameters
        ----------
        x : float
            Value of the variable

        Returns
        -------
        int
            Bin index, `None` if `x` is outside of the table domain
        """
        return _find_bin(self.edges, x)


class DensityTable2D(DensityTableBase):
    """Joint probability density of two variables, in bins.

    Attributes
    ----------
    x_edges : np.ndarray
        (N + 1) bin edges along the first variable
    y_edges : np.ndarray
        (M + 1) bin edges along the second variable
    values : np.ndarray
        (N, M) density in each bin
    """

    ndim = 2

    def __init__(self, x_edges, y_edges, values, normalize=False):
        """Validates and stores the table.

        Parameters
        ----------
        x_edges : array_like
            (N + 1) strictly increasing bin edges of the first variable
        y_edges : array_like
            (M + 1) strictly increasing bin edges of the second variable
        values : array_like
            (N, M) density in each bin
        normalize : bool, default False
            If `True`, rescale the table to integrate to one instead of
            raising when it does not
        """
        self.x_edges = _check_edges(x_edges, "x")
        self.y_edges = _check_edges(y_edges, "y")
        areas = np.outer(np.diff(self.x_edges), np.diff(self.y_edges))
        self._set_values(values, areas, normalize)

    def find_bin(self, x, y):
        """Index of the bin containing `(x, y)`.

        Parameters
        ----------
        x : float
            Value of the first variable
        y : float
            Value of the second variable

        Returns
        -------
        Tuple[int, int]
            Bin index along each axis, `None` if the point is outside of the
            table domain
        """
        ix, iy = _find_bin(self.x_edges, x), _find_bin(self.y_edges, y)
        if ix is None or iy is None:
            return None

        return ix, iy


def density_table_factory(cfg, ndim):
    """Builds a density table from a configuration block.

    Parameters
    ----------
    cfg : Union[dict, DensityTableBase]
        Table or configuration block (`edges` and `values` in 1D,
        `x_edges`, `y_edges` and `values` in 2D, optional `normalize`)
    ndim : int
        Expected number of variables

    Returns
    -------
    DensityTableBase
        Density table
    """
    if isinstance(cfg, DensityTableBase):
        if cfg.ndim != ndim:
            raise ConfigValidationError(
                f"Expected a {ndim}D density table, got a {cfg.ndim}D one."
            )
        return cfg

    table_cls = DensityTable1D if ndim == 1 else DensityTable2D

    return table_cls.from_config(cfg)
