"""Settings package for the rental booking engine.

The `base.py` module contains configuration shared across environments.
The `dev.py` and `prod.py` modules extend base settings with environment
specific overrides.
"""
