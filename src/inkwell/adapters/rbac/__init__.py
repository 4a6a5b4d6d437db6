"""RBAC adapters."""

from inkwell.adapters.rbac.postgres import PostgresRbacRepository

__all__ = ["PostgresRbacRepository"]
