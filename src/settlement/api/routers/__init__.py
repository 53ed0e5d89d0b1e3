"""
Routing subpackage.

Exposes the routers so they can be imported succinctly in ``api/main.py``.
"""
from . import negotiations  # noqa: F401
