"""Construct an interpretation ranker class from its name."""

from topreco.utils.factory import instantiate, module_dict

from . import chi2, likelihood

# Build a dictionary of available rankers
RANKER_DICT = {}
for module in [chi2, likelihood]:
    RANKER_DICT.update(**module_dict(module))


def ranker_factory(cfg):
    """Instantiates an interpretation ranker from a configuration dictionary.

    Parameters
    ----------
    cfg : Union[str, dict]
        Ranker name or configuration

    Returns
    -------
    RankerBase
         Initialized ranker
    """
    return instantiate(RANKER_DICT, cfg)
