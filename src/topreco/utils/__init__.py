"""Utilities shared across the reconstruction package.

- `logger.py` defines the package logger
- `factory.py` instantiates classes from configuration dictionaries
- `enums.py` enumerates statuses, jet roles and chi^2 expressions
- `globals.py` holds physical constants and default parameters
- `stopwatch.py` measures processing times
"""
