"""Exception hierarchy for svgps."""


class SvgpsError(Exception):
    """Base exception for all svgps errors."""

    pass


class DocumentError(SvgpsError):
    """Errors related to reading or writing document files."""

    pass


class DocumentLoadError(DocumentError):
    """Error loading an input document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load '{path}': {reason}")


class DocumentSaveError(DocumentError):
    """Error saving an output document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save '{path}': {reason}")


class ParseError(SvgpsError):
    """Malformed source shape parameters.

    Recovered locally: the flattener degrades the offending primitive
    instead of aborting the document.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed shape: {reason}")


class FormatError(SvgpsError):
    """Malformed canonical (.svgcom) header or body."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid canonical stream ({field}): {reason}")


class GeometryError(SvgpsError):
    """Errors in geometric calculations."""

    pass


class DegenerateFillError(GeometryError):
    """An occluder fill encloses no area."""

    def __init__(self, z_index: int, reason: str) -> None:
        self.z_index = z_index
        self.reason = reason
        super().__init__(f"Degenerate fill for shape {z_index}: {reason}")
