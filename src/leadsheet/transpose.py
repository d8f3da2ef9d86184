"""Chromatic chord transposition.

Two spelling policies live here and must not be confused:

Transposition spelling
    Follows the *input's* notation.  A chord written with a flat and no sharp
    (``Bb``, ``Ebm7``, ``C7b9``) comes back flat; anything else comes back
    sharp.  ``Bb`` +2 → ``C``, ``Bb`` +1 → ``B``, ``Ab`` +1 → ``A``,
    ``Eb`` +1 → ``E``, ``Db`` +1 → ``D``, ``Gb`` +1 → ``G``.

Display spelling
    A fixed preference table applied only to the label currently shown to a
    player (the key picker, the key shown in a header).  ``C#``, ``D#``,
    ``G#`` and ``A#`` are displayed ``Db``, ``Eb``, ``Ab`` and ``Bb``.

Malformed chords never raise: anything whose root is not one of the twelve
pitch classes is returned unchanged.

Usage::

    from leadsheet.transpose import transpose_chord, transpose
    transpose_chord("Am7/E", 3)             # "Cm7/G"
    transpose("{key: G}\\n[G]Amazing [C]grace", 2)
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .models import KeyOption

# Semitone shifts are clamped into this range before use.
MAX_SEMITONES = 11

# [chord] token anywhere in a line
CHORD_TOKEN_RE = re.compile(r"\[([^\]]+)\]")

# {key: X} directive
KEY_DIRECTIVE_RE = re.compile(r"\{key:\s*([^}]+)\}", re.IGNORECASE)

# Root (or bass) note followed by the rest of the symbol
_NOTE_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)

# A flat accidental on a note name (Bb, Eb) or on an extension (7b9, m7b5)
_FLAT_RE = re.compile(r"[A-G]b|(?<![A-Za-z])b\d")


@dataclass(frozen=True)
class SpellingTables:
    """Pitch tables the engine works from.

    Pass an alternative instance to :class:`ChordTranspositionEngine` to try a
    different spelling policy without touching module state.
    """

    sharps: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
    flats: tuple[str, ...] = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")
    aliases: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(
            {
                "Db": "C#",
                "Eb": "D#",
                "Gb": "F#",
                "Ab": "G#",
                "Bb": "A#",
                "Cb": "B",
                "Fb": "E",
                "E#": "F",
                "B#": "C",
            }
        )
    )
    # Pitch classes shown with a flat regardless of how they were written.
    display_flats: frozenset[str] = frozenset({"C#", "D#", "G#", "A#"})


def clamp_semitones(semitones: int) -> int:
    return max(-MAX_SEMITONES, min(MAX_SEMITONES, int(semitones)))


def _split_chord(chord: str) -> tuple[str, str, str | None]:
    """Return ``(main, suffix, bass)`` where *main* is the root note.

    ``"Am7/E"`` → ``("A", "m7", "E")``.  If the root is not a note name the
    whole chord comes back as *main* with an empty suffix, which the caller
    then fails to resolve and passes through.
    """
    main, slash, bass = chord.partition("/")
    m = _NOTE_RE.match(main)
    if not m:
        return chord, "", None
    return m.group(1), m.group(2), bass if slash else None


class ChordTranspositionEngine:
    """Pure, stateless transposer built on a set of :class:`SpellingTables`."""

    def __init__(self, tables: SpellingTables | None = None):
        self.tables = tables or SpellingTables()

    # ------------------------------------------------------------------
    # Pitch classes
    # ------------------------------------------------------------------

    def pitch_class(self, note: str) -> int:
        """Index 0–11 of *note* in the chromatic table, or -1."""
        note = self.tables.aliases.get(note, note)
        try:
            return self.tables.sharps.index(note)
        except ValueError:
            return -1

    def key_index(self, key: str | None) -> int:
        """Pitch class of a key name, ignoring any quality (``"Am"`` → 9)."""
        if not key:
            return -1
        m = _NOTE_RE.match(key.strip())
        if not m:
            return -1
        return self.pitch_class(m.group(1))

    def _transpose_note(self, note: str, semitones: int, prefer_flats: bool) -> str:
        m = _NOTE_RE.match(note)
        if not m:
            return note
        index = self.pitch_class(m.group(1))
        if index == -1:
            return note
        scale = self.tables.flats if prefer_flats else self.tables.sharps
        return scale[(index + semitones) % 12] + m.group(2)

    # ------------------------------------------------------------------
    # Chords and markup
    # ------------------------------------------------------------------

    def transpose_chord(self, chord: str, semitones: int) -> str:
        """Shift *chord* by *semitones* (clamped to ±11).

        Slash chords move root and bass independently under the same spelling
        policy.  A bass that is not a note (``C6/9``) is kept as written.
        """
        semitones = clamp_semitones(semitones)
        if not chord or semitones == 0:
            return chord

        root, suffix, bass = _split_chord(chord)
        if self.pitch_class(root) == -1:
            return chord

        prefer_flats = bool(_FLAT_RE.search(chord)) and "#" not in chord
        result = self._transpose_note(root, semitones, prefer_flats) + suffix
        if bass is not None:
            result += "/" + self._transpose_note(bass, semitones, prefer_flats)
        return result

    def transpose_all_chords(self, markup: str, semitones: int) -> str:
        """Rewrite every ``[chord]`` token in *markup*."""
        semitones = clamp_semitones(semitones)
        if not markup or semitones == 0:
            return markup
        return CHORD_TOKEN_RE.sub(
            lambda m: f"[{self.transpose_chord(m.group(1), semitones)}]", markup
        )

    def transpose_key(self, markup: str, semitones: int) -> str:
        """Rewrite every ``{key: X}`` directive in *markup*."""
        semitones = clamp_semitones(semitones)
        if not markup or semitones == 0:
            return markup
        return KEY_DIRECTIVE_RE.sub(
            lambda m: f"{{key: {self.transpose_chord(m.group(1).strip(), semitones)}}}",
            markup,
        )

    def transpose(self, markup: str, semitones: int) -> str:
        """Transpose both the chords and the ``{key:}`` directive of *markup*."""
        semitones = clamp_semitones(semitones)
        if not markup or semitones == 0:
            return markup
        return self.transpose_key(self.transpose_all_chords(markup, semitones), semitones)

    # ------------------------------------------------------------------
    # Key picker helpers
    # ------------------------------------------------------------------

    def calculate_transposition_between_keys(self, from_key: str, to_key: str) -> int:
        """Signed semitone distance from *from_key* to *to_key* in [-6, 6].

        The shorter rotation wins; a tritone comes back as +6.  Keys that do
        not resolve give 0.
        """
        from_index = self.key_index(from_key)
        to_index = self.key_index(to_key)
        if from_index == -1 or to_index == -1:
            return 0
        semitones = to_index - from_index
        if semitones > 6:
            semitones -= 12
        elif semitones < -6:
            semitones += 12
        return semitones

    def to_preferred_enharmonic_spelling(self, label: str) -> str:
        """Respell a displayed key or chord label using the display table.

        ``"A#m"`` → ``"Bbm"``, ``"Gb"`` → ``"F#"``, ``"D#/A#"`` → ``"Eb/Bb"``.
        """
        if not label:
            return label
        root, suffix, bass = _split_chord(label)
        if self.pitch_class(root) == -1:
            return label
        result = self._display_note(root) + suffix
        if bass is not None:
            m = _NOTE_RE.match(bass)
            if m and self.pitch_class(m.group(1)) != -1:
                bass = self._display_note(m.group(1)) + m.group(2)
            result += "/" + bass
        return result

    def _display_note(self, note: str) -> str:
        index = self.pitch_class(note)
        sharp = self.tables.sharps[index]
        if sharp in self.tables.display_flats:
            return self.tables.flats[index]
        return sharp

    def all_keys(self) -> list[KeyOption]:
        """The twelve key-picker entries, C first."""
        options = []
        for sharp, flat in zip(self.tables.sharps, self.tables.flats):
            label = sharp if sharp == flat else f"{sharp} / {flat}"
            options.append(KeyOption(value=sharp, label=label))
        return options


_default_engine = ChordTranspositionEngine()


def transpose_chord(chord: str, semitones: int) -> str:
    return _default_engine.transpose_chord(chord, semitones)


def transpose_all_chords(markup: str, semitones: int) -> str:
    return _default_engine.transpose_all_chords(markup, semitones)


def transpose_key(markup: str, semitones: int) -> str:
    return _default_engine.transpose_key(markup, semitones)


def transpose(markup: str, semitones: int) -> str:
    return _default_engine.transpose(markup, semitones)


def key_index(key: str | None) -> int:
    return _default_engine.key_index(key)


def calculate_transposition_between_keys(from_key: str, to_key: str) -> int:
    return _default_engine.calculate_transposition_between_keys(from_key, to_key)


def to_preferred_enharmonic_spelling(label: str) -> str:
    return _default_engine.to_preferred_enharmonic_spelling(label)


def all_keys() -> list[KeyOption]:
    return _default_engine.all_keys()


def transpose_display(semitones: int) -> str:
    """Label for a transposition control: ``"Original"``, ``"+2"``, ``"-3"``."""
    if semitones == 0:
        return "Original"
    if semitones > 0:
        return f"+{semitones}"
    return str(semitones)


def strip_chords(markup: str) -> str:
    """Remove every ``[chord]`` token, leaving all other text untouched."""
    if not markup:
        return ""
    return CHORD_TOKEN_RE.sub("", markup)
