"""User store backends."""

from .abstract_user_store import AbstractUserStore, DuplicateUserError
from .sql_user_store import SQLAlchemyUserStore

__all__ = ["AbstractUserStore", "DuplicateUserError", "SQLAlchemyUserStore"]
