"""User accounts and the login session that gates every view."""

from rentease.accounts.session import SessionManager
from rentease.accounts.users import UserRepository

__all__ = ["SessionManager", "UserRepository"]
