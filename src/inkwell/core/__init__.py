"""Core domain - auth, RBAC, users and posts, independent of any framework."""
