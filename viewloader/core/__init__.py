# viewloader/core/__init__.py
"""
Engine registry, engines, discovery and the template loader.
"""
