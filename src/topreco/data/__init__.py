"""Data structures consumed and produced by the reconstruction.

- `physics.py` describes the input objects (jets, leptons, missing momentum)
- `result.py` describes the jet assignments, interpretations and results
"""

from .physics import *
from .result import *
