"""
Persistence adapters.

Each repository takes an explicit Store and returns plain projections, never
live ORM objects, so credential columns cannot leak past this layer.
"""

from .relationship_repository import RelationshipRepository
from .user_repository import UserRepository

__all__ = ["RelationshipRepository", "UserRepository"]
