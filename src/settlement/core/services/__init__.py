"""
Service subpackage holding the negotiation engines.

``analytics`` describes the move trajectory, ``recommendation`` proposes
the next move, ``brackets`` suggests a joint proposal range and
``evaluation`` values the case from its damages. Every function is pure:
callers pass the moves and context in and persist whatever they need.
"""
from . import analytics, brackets, evaluation, recommendation  # noqa: F401
from .analytics import compute_analytics, compute_analytics_history  # noqa: F401
from .brackets import compute_bracket_suggestion  # noqa: F401
from .evaluation import evaluate_case  # noqa: F401
from .recommendation import compute_recommendation  # noqa: F401
