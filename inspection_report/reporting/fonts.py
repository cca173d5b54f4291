"""
Unicode font family registration.

A FontSet is built once per engine instance and handed to every drawing call,
so no module relies on whatever font happens to be registered globally.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import reportlab
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from inspection_report.errors import FontLoadError
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="FONTS")


STYLES = ("regular", "bold", "italic", "bold_italic")

# TrueType files per family and style.
FONT_FILES: Dict[str, Dict[str, str]] = {
    "DejaVuSans": {
        "regular": "DejaVuSans.ttf",
        "bold": "DejaVuSans-Bold.ttf",
        "italic": "DejaVuSans-Oblique.ttf",
        "bold_italic": "DejaVuSans-BoldOblique.ttf",
    },
    "Vera": {
        "regular": "Vera.ttf",
        "bold": "VeraBd.ttf",
        "italic": "VeraIt.ttf",
        "bold_italic": "VeraBI.ttf",
    },
}

SYSTEM_FONT_DIRS = [
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/dejavu",
    "/usr/share/fonts/TTF",
    "/usr/local/share/fonts",
    "/Library/Fonts",
    os.path.expanduser("~/Library/Fonts"),
    "C:/Windows/Fonts",
]


def bundled_font_dir() -> Path:
    """Directory of the TrueType fonts shipped inside the reportlab package."""
    return Path(reportlab.__file__).parent / "fonts"


@dataclass(frozen=True)
class FontSet:
    """Registered font names for the four styles of one family."""
    family: str
    regular: str
    bold: str
    italic: str
    bold_italic: str

    def face(self, style: str = "regular") -> str:
        """Registered font name for a style."""
        if style not in STYLES:
            raise ValueError(f"Unknown font style: {style}")
        return getattr(self, style)


def _search_dirs(font_dir: Optional[str]) -> List[Path]:
    dirs = []
    if font_dir:
        dirs.append(Path(font_dir))
    dirs.extend(Path(d) for d in SYSTEM_FONT_DIRS)
    dirs.append(bundled_font_dir())
    return dirs


def _locate(filename: str, dirs: Sequence[Path]) -> Optional[Path]:
    for directory in dirs:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def _missing_glyphs(font: TTFont, glyphs: str) -> str:
    covered = font.face.charToGlyph
    return "".join(ch for ch in glyphs if ord(ch) not in covered)


def load_font_set(
    family: Optional[str] = None,
    font_dir: Optional[str] = None,
    required_glyphs: Optional[str] = None,
) -> FontSet:
    """
    Register the four styles of a Unicode-capable family.

    Args:
        family: Family key in FONT_FILES (defaults to config)
        font_dir: Directory searched before the system font directories
        required_glyphs: Characters every style must cover (defaults to config)

    Returns:
        FontSet naming the registered faces

    Raises:
        FontLoadError: If a file is missing, unreadable or lacks a required glyph
    """
    family = family or config.font_family
    font_dir = font_dir if font_dir is not None else config.font_dir
    required_glyphs = config.required_glyphs if required_glyphs is None else required_glyphs

    files = FONT_FILES.get(family)
    if files is None:
        raise FontLoadError(
            f"Unknown font family '{family}'. Known families: {sorted(FONT_FILES)}"
        )

    dirs = _search_dirs(font_dir)
    names = {}
    for style in STYLES:
        path = _locate(files[style], dirs)
        if path is None:
            raise FontLoadError(
                f"Font file {files[style]} not found (searched: {', '.join(str(d) for d in dirs)})"
            )

        name = family if style == "regular" else f"{family}-{style}"
        try:
            font = TTFont(name, str(path))
        except (TTFError, OSError) as e:
            raise FontLoadError(f"Failed to load font {path}: {e}")

        missing = _missing_glyphs(font, required_glyphs)
        if missing:
            raise FontLoadError(
                f"Font {path.name} lacks required characters: {missing}"
            )

        pdfmetrics.registerFont(font)
        names[style] = name
        logger.debug(f"Registered {name} from {path}")

    pdfmetrics.registerFontFamily(
        family,
        normal=names["regular"],
        bold=names["bold"],
        italic=names["italic"],
        boldItalic=names["bold_italic"],
    )

    logger.info(f"Font family {family} registered")
    return FontSet(family=family, **names)
