"""
Import all models to ensure they are registered with SQLAlchemy
"""
from movieapp.models.user import User
from movieapp.models.comment import Comment

__all__ = [
    "User",
    "Comment"
]
