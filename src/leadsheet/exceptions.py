class LeadsheetError(Exception):
    """Base exception for leadsheet."""


class MeasurementError(LeadsheetError):
    """Raised when a layout height cannot be measured at a given font size."""

    def __init__(self, font_size_px: int, reason: str):
        self.font_size_px = font_size_px
        self.reason = reason
        super().__init__(f"Cannot measure layout at {font_size_px}px: {reason}")


class UnsupportedFormatError(LeadsheetError):
    """Raised when no formatter matches the requested output format."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No formatter found for format: {name}")
