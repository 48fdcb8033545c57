"""Construct a neutrino solver class from its name."""

from topreco.utils.factory import instantiate, module_dict

from . import ellipse, mass

# Build a dictionary of available neutrino solvers
NU_SOLVER_DICT = {}
for module in [mass, ellipse]:
    NU_SOLVER_DICT.update(**module_dict(module))


def nu_solver_factory(cfg):
    """Instantiates a neutrino solver from a configuration dictionary.

    Parameters
    ----------
    cfg : Union[str, dict]
        Neutrino solver name or configuration

    Returns
    -------
    NuSolverBase
         Initialized neutrino solver
    """
    return instantiate(NU_SOLVER_DICT, cfg)
