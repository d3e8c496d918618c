"""Top-level package for Django configuration.

This package holds the settings modules for the rental booking engine,
one per environment.
"""
