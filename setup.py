"""
Setup script for backwards compatibility.

Project metadata, modules and the deal-convert console script are
declared in pyproject.toml; this file only lets older pip versions
perform an editable install.
"""

from setuptools import setup

# All configuration is in pyproject.toml
setup()
