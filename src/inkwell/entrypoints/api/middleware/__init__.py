"""API middleware."""

from inkwell.entrypoints.api.middleware.gate import (
    GateDecision,
    RequestGateMiddleware,
    decide,
)

__all__ = ["GateDecision", "RequestGateMiddleware", "decide"]
