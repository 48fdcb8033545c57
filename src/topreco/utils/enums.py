"""Module which contains enumerated variables shared across the project."""

from enum import IntEnum

__all__ = [
    "enum_factory",
    "ReconstructionStatus",
    "DecayJet",
    "Chi2Expression",
    "LeptonFlavour",
]


def enum_factory(enum, value):
    """Parses an enumerated object from string name(s) to enumerated member(s).

    Parameters
    ----------
    enum : str
        Name of the enumerated type
    value : Union[str, IntEnum, List[Union[str, IntEnum]]]
        Name or names of the enumerated objects (from config)

    Returns
    -------
    Union[IntEnum, List[IntEnum]]
        Enumerated member or members
    """
    # Get the enumerated type
    ENUM_DICT = {
        "status": ReconstructionStatus,
        "jet": DecayJet,
        "chi2": Chi2Expression,
        "flavour": LeptonFlavour,
    }
    assert enum in ENUM_DICT, (
        f"Enumerated type not recognized: {enum}. Must be one of "
        f"{list(ENUM_DICT.keys())}."
    )
    enum = ENUM_DICT[enum]

    # Translate enumerated strings into members
    if isinstance(value, (str, int)):
        return _parse_member(enum, value)

    return [_parse_member(enum, v) for v in value]


def _parse_member(enum, value):
    """Converts a single name or member to a member of `enum`."""
    if isinstance(value, enum):
        return value
    if isinstance(value, int):
        return enum(value)

    if not isinstance(value, str) or not hasattr(enum, value.upper()):
        raise ValueError(
            f"Enumerated object not recognized: {value}. Must be one "
            f"of {[e.name for e in enum]}."
        )

    return getattr(enum, value.upper())


class ReconstructionStatus(IntEnum):
    """Enumerates the possible outcomes of the reconstruction of one event."""

    SUCCESS = 0
    INSUFFICIENT_JETS = 1
    NO_LEPTONS = 2
    NO_NEUTRINO_CANDIDATES = 3
    NEUTRINO_UNRECONSTRUCTABLE = 4
    NEUTRINO_LIKELIHOOD_OUT_OF_RANGE = 5
    MASS_LIKELIHOOD_OUT_OF_RANGE = 6
    NO_VIABLE_INTERPRETATION = 7


class DecayJet(IntEnum):
    """Enumerates the roles a jet can play in a semileptonic tt decay."""

    B_TOP_LEP = 0  # b-quark jet from t -> blv
    B_TOP_HAD = 1  # b-quark jet from t -> bqq
    Q1_TOP_HAD = 2  # Leading light-flavour jet from t -> bqq
    Q2_TOP_HAD = 3  # Subleading light-flavour jet from t -> bqq


class Chi2Expression(IntEnum):
    """Enumerates the kinematic expressions available to build a chi^2."""

    MASS_TOP_LEP = 0  # Mass of the semileptonically decaying top quark
    MASS_TOP_HAD = 1  # Mass of the hadronically decaying top quark
    MASS_W_HAD = 2  # Mass of the W boson from the hadronic top quark
    PT_TT = 3  # Transverse momentum of the tt system


class LeptonFlavour(IntEnum):
    """Enumerates charged lepton flavours."""

    ELECTRON = 11
    MUON = 13
