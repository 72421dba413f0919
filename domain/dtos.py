import base64
from dataclasses import dataclass
from typing import Optional, Tuple
from domain.enums import CaptionCategory, MemeStyle

@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for ch in (self.r, self.g, self.b):
            if not 0 <= ch <= 255:
                raise ValueError(f"channel out of range: {ch}")

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        h = value.strip().lstrip('#')
        if len(h) != 6:
            raise ValueError(f"not a 6-digit hex color: {value!r}")
        return cls(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    @classmethod
    def clamped(cls, r: float, g: float, b: float) -> "Color":
        # floor then clamp, matching 8-bit canvas arithmetic
        return cls(*(max(0, min(255, int(c // 1))) for c in (r, g, b)))

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def luma(self) -> float:
        # integer weights keep the 128 text threshold exact
        return (299 * self.r + 587 * self.g + 114 * self.b) / 1000

    def __str__(self) -> str:
        return self.hex

WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)

@dataclass(frozen=True)
class ColorSample:
    color: Color
    count: int

@dataclass(frozen=True)
class ExtractedPalette:
    primary: Color
    background: Color
    secondary: Optional[Color] = None
    accent: Optional[Color] = None

@dataclass(frozen=True)
class TextColorPair:
    text_color: Color
    stroke_color: Color

@dataclass(frozen=True)
class FiveStopPalette:
    darkest: Color
    dark: Color
    medium: Color
    light: Color
    lightest: Color

@dataclass(frozen=True)
class CaptionTemplate:
    top_text: str
    bottom_text: str
    category: CaptionCategory = CaptionCategory.custom

@dataclass(frozen=True)
class Typography:
    font_size: int
    stroke_width: int
    shadow_blur: int

@dataclass(frozen=True)
class ImagePlacement:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

@dataclass(frozen=True)
class MemeResult:
    id: str
    encoded_image: bytes  # PNG
    top_text: str
    bottom_text: str
    style: MemeStyle

    @property
    def data_uri(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.encoded_image).decode('ascii')

    @property
    def filename(self) -> str:
        n = int(self.id.rsplit('-', 1)[-1]) + 1
        return f"meme-{n}.png"
