"""
Settlement Tracker core package.

This package contains the negotiation analytics, recommendation and
bracket suggestion engines together with a thin FastAPI adapter. The
code is organised into subpackages for configuration, schemas, services
(the engines themselves) and API routing.
"""

from .core.config import Settings  # noqa: F401
