"""Average glyph widths for layout estimates.

Segment padding and the offline height estimate both work in average glyph
widths, expressed as a fraction of the font size.  The fractions are
calibrated once from the font metrics reportlab ships for the standard PDF
fonts, instead of measuring every string.
"""

import string
from dataclasses import dataclass

from reportlab.pdfbase.pdfmetrics import stringWidth

from .models import TextDirection

LYRIC_FONT = "Helvetica"
CHORD_FONT = "Helvetica-Bold"

LATIN_SAMPLE = "The quick brown fox jumps over the lazy dog"
CHORD_SAMPLE = "ABCDEFG#bm7"
# The standard fonts carry no Hebrew; Hebrew letters are estimated from the
# Latin lowercase alphabet.
HEBREW_PROXY_SAMPLE = string.ascii_lowercase


@dataclass(frozen=True)
class FontMetrics:
    ltr_em: float
    rtl_em: float
    chord_em: float
    hyphen_em: float

    def glyph_em(self, direction: TextDirection) -> float:
        return self.rtl_em if direction is TextDirection.RTL else self.ltr_em


def average_em(sample: str, font_name: str) -> float:
    """Mean advance width of the glyphs in *sample*, in ems."""
    return stringWidth(sample, font_name, 1) / len(sample)


def calibrate(lyric_font: str = LYRIC_FONT, chord_font: str = CHORD_FONT) -> FontMetrics:
    return FontMetrics(
        ltr_em=average_em(LATIN_SAMPLE, lyric_font),
        rtl_em=average_em(HEBREW_PROXY_SAMPLE, lyric_font),
        chord_em=average_em(CHORD_SAMPLE, chord_font),
        hyphen_em=stringWidth("-", lyric_font, 1),
    )


DEFAULT_METRICS = calibrate()
