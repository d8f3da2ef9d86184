from abc import ABC, abstractmethod

from ..models import PresentationTree


class Formatter(ABC):
    """Abstract base class for all output formatters."""

    #: Name used on the command line, e.g. ``"html"``.
    name: str = ""
    #: Extension for files written in this format.
    extension: str = ""

    @classmethod
    def can_handle(cls, name: str) -> bool:
        """Return True if this formatter produces the format called *name*."""
        return name.strip().lower() == cls.name

    @abstractmethod
    def render(self, tree: PresentationTree) -> str:
        """Serialise *tree* and return the text.

        Formatters never re-parse markup: everything they need (section names
        already translated, segments already built) is in the tree.
        """

    def render_columns(self, columns: list[PresentationTree]) -> str:
        """Serialise the column trees of one page, first column first.

        Every column is a single-column tree at its own font size.  The
        default renders them one after another; formatters with a page
        header print it once.
        """
        return "".join(self.render(column) for column in columns)
