from __future__ import annotations
from enum import Enum

class MemeStyle(str, Enum):
    classic = "classic"
    modern = "modern"
    bold = "bold"

    @staticmethod
    def for_index(i: int) -> "MemeStyle":
        styles = list(MemeStyle)
        return styles[i % len(styles)]

class CaptionCategory(str, Enum):
    corporate = "corporate"
    startup = "startup"
    tech = "tech"
    generic = "generic"
    custom = "custom"  # caller-supplied, never stored in the catalog

class BackgroundStyle(str, Enum):
    gradient = "gradient"
    pattern = "pattern"
    solid = "solid"
