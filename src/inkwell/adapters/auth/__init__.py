"""Auth adapters."""

from inkwell.adapters.auth.postgres import PostgresAuthRepository

__all__ = ["PostgresAuthRepository"]
