"""
Model package
"""

from .user import User
from .character import Character
from .story import Story
from .scrapbook import Scrapbook
from .image_transformation import ImageTransformation

__all__ = [
    "User",
    "Character",
    "Story",
    "Scrapbook",
    "ImageTransformation",
]
