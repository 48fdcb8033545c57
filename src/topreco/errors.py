"""Exceptions raised by the reconstruction algorithms.

Kinematic dead ends are never reported through exceptions: they are
encoded as a status on the reconstruction result. Exceptions are reserved
for violated preconditions (defects in the upstream data) and for misuse of
a failed reconstruction result.
"""


class ReconstructionError(Exception):
    """Raised when a reconstruction result is used against its contract."""


class PreconditionError(ReconstructionError):
    """Raised when the input data violates a precondition of an algorithm."""
