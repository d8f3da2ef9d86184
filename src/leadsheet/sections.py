"""Hebrew/English section-name glossary.

Section names are translated only when their script disagrees with the target
locale: a Hebrew name shown to an English reader, or an English name shown to
a Hebrew reader.  Unknown names are returned unchanged.

Hebrew spellings vary in the wild, so lookups ignore spaces, hyphens and
geresh/gershayim marks: ``בית א'``, ``בית א׳``, ``ביתא`` and ``בית 1`` all
mean ``Verse 1``.  A trailing repeat marker (``Chorus 2x``, ``פזמון x2``) is
carried over untouched.
"""

import re

from .models import TextDirection

_HEBREW_RE = re.compile(r"[\u0590-\u05FF]")

# Characters dropped before a lookup: whitespace, hyphens, maqaf, quote marks,
# geresh (U+05F3) and gershayim (U+05F4).
_NOISE_RE = re.compile(r"[\s\-_\u05BE'\"`\u2019\u05F3\u05F4.:]+")

_REPEAT_SUFFIX_RE = re.compile(r"\s*\(?(?:\d+\s*[xX×]|[xX×]\s*\d+)\)?\s*$")
_NUMBER_SUFFIX_RE = re.compile(r"^(.*?\S)\s*(\d+)$")

# English canonical form → Hebrew canonical form
_ENGLISH_TO_HEBREW = {
    "Verse": "בית",
    "Verse 1": "בית 1",
    "Verse 2": "בית 2",
    "Verse 3": "בית 3",
    "Verse 4": "בית 4",
    "Verse 5": "בית 5",
    "Chorus": "פזמון",
    "Pre-Chorus": "טרום פזמון",
    "Post-Chorus": "אחרי פזמון",
    "Bridge": "גשר",
    "Intro": "פתיחה",
    "Outro": "סיום",
    "Ending": "סיום",
    "Tag": "תג",
    "Interlude": "מעבר",
    "Instrumental": "קטע נגינה",
    "Solo": "סולו",
    "Coda": "קודה",
    "Refrain": "רפרן",
}

# Hebrew variants → English canonical form.  The canonical Hebrew forms above
# are added automatically; this table only lists the alternatives.
_HEBREW_VARIANTS = {
    "בית א": "Verse 1",
    "בית ראשון": "Verse 1",
    "בית ב": "Verse 2",
    "בית שני": "Verse 2",
    "בית ג": "Verse 3",
    "בית שלישי": "Verse 3",
    "בית ד": "Verse 4",
    "בית רביעי": "Verse 4",
    "בית ה": "Verse 5",
    "בית חמישי": "Verse 5",
    "קדם פזמון": "Pre-Chorus",
    "פרי פזמון": "Pre-Chorus",
    "פוסט פזמון": "Post-Chorus",
    "אינטרו": "Intro",
    "הקדמה": "Intro",
    "אאוטרו": "Outro",
    "קטע מעבר": "Interlude",
    "נגינה": "Instrumental",
    "אינסטרומנטלי": "Instrumental",
    "פזמון חוזר": "Refrain",
}

# English spellings that are not the canonical key
_ENGLISH_VARIANTS = {
    "prechorus": "Pre-Chorus",
    "postchorus": "Post-Chorus",
    "instrumental break": "Instrumental",
    "inst": "Instrumental",
    "end": "Ending",
}


def contains_hebrew(text: str) -> bool:
    """True if *text* has any character from the Hebrew block U+0590–U+05FF."""
    return bool(_HEBREW_RE.search(text or ""))


def detect_direction(text: str) -> TextDirection:
    return TextDirection.RTL if contains_hebrew(text) else TextDirection.LTR


def _lookup_key(name: str) -> str:
    return _NOISE_RE.sub("", name).lower()


class SectionTranslator:
    """Best-effort bidirectional section-name glossary."""

    def __init__(self):
        self._to_hebrew: dict[str, str] = {}
        self._to_english: dict[str, str] = {}

        for english, hebrew in _ENGLISH_TO_HEBREW.items():
            self._to_hebrew[_lookup_key(english)] = hebrew
            # First English form listed for a Hebrew word wins (Outro over Ending).
            self._to_english.setdefault(_lookup_key(hebrew), english)
        for english_variant, english in _ENGLISH_VARIANTS.items():
            self._to_hebrew[_lookup_key(english_variant)] = _ENGLISH_TO_HEBREW[english]
        for hebrew_variant, english in _HEBREW_VARIANTS.items():
            self._to_english[_lookup_key(hebrew_variant)] = english

    def translate(self, name: str, target_is_hebrew: bool) -> str:
        """Return *name* in the target locale's script when the glossary knows it."""
        if not name or not name.strip():
            return name
        if contains_hebrew(name) == target_is_hebrew:
            return name

        repeat = _REPEAT_SUFFIX_RE.search(name)
        suffix = ""
        base = name
        if repeat and repeat.start() > 0:
            suffix = name[repeat.start():]
            base = name[: repeat.start()]

        translated = self._lookup(base, target_is_hebrew)
        if translated is None:
            return name
        return translated + suffix

    def _lookup(self, name: str, target_is_hebrew: bool) -> str | None:
        table = self._to_hebrew if target_is_hebrew else self._to_english
        found = table.get(_lookup_key(name))
        if found is not None:
            return found

        # "Chorus 2" / "גשר 2": translate the word, keep the number.
        m = _NUMBER_SUFFIX_RE.match(name.strip())
        if m:
            word = table.get(_lookup_key(m.group(1)))
            if word is not None:
                return f"{word} {m.group(2)}"
        return None


_default_translator = SectionTranslator()


def translate(name: str, target_is_hebrew: bool) -> str:
    return _default_translator.translate(name, target_is_hebrew)
