"""
Fixed vocabularies stored as plain strings
"""

from enum import Enum


class CharacterStyle(str, Enum):
    CARTOON = "cartoon"
    PHOTOREALISTIC = "photorealistic"
    WATERCOLOR = "watercolor"
    DIGITAL_ART = "digital-art"
    SKETCH = "sketch"


class StoryType(str, Enum):
    CUSTOM = "custom"
    PREMADE = "premade"


class ScrapbookLayout(str, Enum):
    GRID = "grid"
    COLLAGE = "collage"
    TIMELINE = "timeline"
    MAGAZINE = "magazine"


class TransformationStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
