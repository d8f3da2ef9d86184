from .exceptions import UnsupportedFormatError
from .formatters.base import Formatter
from .formatters.chordpro import ChordProFormatter
from .formatters.html import HtmlFormatter
from .formatters.text import TextFormatter

_FORMATTERS: list[type[Formatter]] = [
    TextFormatter,
    HtmlFormatter,
    ChordProFormatter,
]


def format_names() -> list[str]:
    return [cls.name for cls in _FORMATTERS]


def get_formatter(name: str) -> Formatter:
    """Return an instantiated formatter for the given format name.

    Raises UnsupportedFormatError if no formatter matches.
    """
    for cls in _FORMATTERS:
        if cls.can_handle(name):
            return cls()
    raise UnsupportedFormatError(name)
