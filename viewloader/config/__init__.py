# viewloader/config/__init__.py
"""
Loader settings and their TOML source.
"""
from .settings import LoaderSettings
from .loader import load_settings, split_delimiters

__all__ = ["LoaderSettings", "load_settings", "split_delimiters"]
