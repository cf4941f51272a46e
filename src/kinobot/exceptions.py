"""Exception hierarchy for lookup adapters and the color extractor."""


class KinobotError(Exception):
    """Base exception for all kinobot errors."""

    pass


class SourceUnavailable(KinobotError):
    """Raised when a source cannot be queried (transport or auth failure)."""

    pass


class ConfigurationError(SourceUnavailable):
    """Raised when a required credential is not configured."""

    pass


class NotFoundError(KinobotError):
    """Raised when a source returned no matches."""

    pass


class NoResultsError(NotFoundError):
    """Raised when a search page has no result rows or its layout changed."""

    pass


class DetailsUnavailable(KinobotError):
    """Raised when the extended details call for a search hit fails."""

    pass


class ExtractionError(KinobotError):
    """Raised when a single field cannot be extracted from a page."""

    pass


class ColorExtractionError(KinobotError):
    """Base exception for accent color failures."""

    pass


class FetchError(ColorExtractionError):
    """Raised when image bytes cannot be downloaded."""

    pass


class DecodeError(ColorExtractionError):
    """Raised when image bytes are not a recognizable raster image."""

    pass


class NoPaletteError(ColorExtractionError):
    """Raised when quantization yields no palette entries."""

    pass
