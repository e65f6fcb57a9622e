"""Reference execution collaborators."""

from __future__ import annotations

from .memory import InMemoryQueryExecutor
from .sqlalchemy_executor import SQLAlchemyQueryExecutor

__all__ = ["InMemoryQueryExecutor", "SQLAlchemyQueryExecutor"]
