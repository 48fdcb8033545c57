"""Contains functions needed to instantiate a class from a dictionary.

This allows to generically convert a YAML block into an instantiated solver
or ranker, with all the appropriate checks that the class exists and is
provided with appropriate arguments.
"""

from copy import deepcopy

from topreco.config.errors import ConfigError

from .logger import logger


def module_dict(module):
    """Converts a module into a dictionary which maps names onto classes.

    Only classes which define a non-empty `name` attribute and which belong
    to the module of interest are registered. Their `aliases` are registered
    as well.

    Parameters
    ----------
    module : module
        Module from which to fetch the classes

    Returns
    -------
    dict
        Dictionary which maps acceptable class names to classes themselves
    """
    class_dict = {}
    for cls_name in getattr(module, "__all__", dir(module)):
        # Skip private objects
        if cls_name[0] == "_":
            continue

        # Only consider classes which belong to the module of interest
        cls = getattr(module, cls_name)
        if not isinstance(cls, type) or module.__name__ not in cls.__module__:
            continue

        # Register the class name and its configuration name
        class_dict[cls_name] = cls
        if getattr(cls, "name", None):
            class_dict[cls.name] = cls

        for alias in getattr(cls, "aliases", ()):
            class_dict[alias] = cls

    return class_dict


def instantiate(class_dict, cfg, **kwargs):
    """Instantiates a class based on a configuration dictionary and a
    dictionary of possible classes to chose from.

    The configuration is expected to look like:

    .. code-block:: yaml

        block:
          name: class_name
          kwarg_1: value_1
          kwarg_2: value_2

    A bare string is interpreted as a class name with no parameters.

    Parameters
    ----------
    class_dict : dict
        Dictionary which maps a class name onto a class
    cfg : Union[str, dict]
        Configuration block
    **kwargs : dict, optional
        Additional parameters to pass to the class constructor

    Returns
    -------
    object
        Instantiated object

    Raises
    ------
    ConfigError
        If the class name is missing or not registered
    """
    # If the configuration is a string, it is a class name
    if isinstance(cfg, str):
        cfg = {"name": cfg}

    config = deepcopy(cfg)
    if "name" not in config:
        raise ConfigError("Could not find the name of the class under `name`.")

    class_name = config.pop("name")
    if class_name not in class_dict:
        raise ConfigError(
            f"Could not find '{class_name}' in the dictionary which maps "
            f"names to classes. Available names: {list(class_dict.keys())}"
        )

    # Arguments given at the top level must not conflict with extra ones
    for key in config:
        if key in kwargs:
            raise ConfigError(
                f"The keyword argument `{key}` is provided twice. Ambiguous."
            )
    kwargs.update(config)

    # Intialize
    cls = class_dict[class_name]
    try:
        return cls(**kwargs)

    except Exception as err:
        logger.error(
            f"Failed to instantiate {cls.__name__} with these arguments:\n"
            f"  - kwargs: {kwargs}"
        )

        raise err
