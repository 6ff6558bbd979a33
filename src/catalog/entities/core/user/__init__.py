"""User entity module.

- User / OwnerProfile: domain entity and its public projection
- UserTable: database persistence model
- UserRepository: data access layer
"""

from .entity import OwnerProfile, Role, User
from .repository import UserRepository
from .table import UserTable

__all__ = ["OwnerProfile", "Role", "User", "UserRepository", "UserTable"]
