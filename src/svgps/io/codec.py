"""Codec for the canonical path format (.svgcom).

The format is three LF-terminated lines::

    <width> <height> <command_count> <coordinate_count>
    <one tag character per command: M, L, C or Z>
    <space-separated coordinates, x and y interleaved>

Anything after the coordinate line is ignored, so files may carry trailing
human-readable notes.
"""

import math
from pathlib import Path

from svgps.domain import (
    POINTS_PER_TAG,
    CanonicalStream,
    Close,
    Cubic,
    Line,
    Move,
    PathCommand,
    Point,
)
from svgps.exceptions import DocumentLoadError, DocumentSaveError, FormatError

UINT32_MAX = 2**32 - 1

# Integral floats below this magnitude are written without a fraction
_INTEGRAL_LIMIT = 2.0**53


def format_coordinate(value: float) -> str:
    """Format a coordinate so that parsing it gives back the same float.

    Integral values are written without a fractional part ("100" rather
    than "100.0"); everything else uses Python's shortest round-trip repr.

    Args:
        value: Finite coordinate

    Returns:
        Text representation
    """
    if value == 0.0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return repr(float(value))


def encode(stream: CanonicalStream) -> str:
    """Serialize a canonical stream.

    Args:
        stream: Stream to serialize

    Returns:
        The .svgcom text, ending with a line feed

    Raises:
        FormatError: If a dimension does not fit an unsigned 32-bit integer
            or a coordinate is not finite
    """
    for name, value in (("width", stream.width), ("height", stream.height)):
        if not 0 <= value <= UINT32_MAX:
            raise FormatError("header", f"{name} {value} is not an unsigned 32-bit integer")

    coords = stream.coordinates()
    if not all(math.isfinite(c) for c in coords):
        raise FormatError("coordinates", "coordinates must be finite")

    header = f"{stream.width} {stream.height} {stream.command_count} {len(coords)}"
    body = " ".join(format_coordinate(c) for c in coords)
    return f"{header}\n{stream.tags}\n{body}\n"


def _parse_header(line: str) -> list[int]:
    fields = line.split()
    if len(fields) != 4:
        raise FormatError(
            "header",
            f"expected 4 fields (width height command_count coordinate_count), got {len(fields)}",
        )

    values: list[int] = []
    for name, text in zip(("width", "height", "command_count", "coordinate_count"), fields):
        if not (text.isascii() and text.isdigit()):
            raise FormatError("header", f"{name} '{text}' is not an unsigned integer")
        value = int(text)
        if value > UINT32_MAX:
            raise FormatError("header", f"{name} {value} does not fit 32 bits")
        values.append(value)
    return values


def _parse_coordinates(line: str, expected: int) -> list[float]:
    fields = line.split() if expected else []
    if len(fields) != expected:
        raise FormatError(
            "coordinates", f"header declares {expected} coordinates, found {len(fields)}"
        )

    coords: list[float] = []
    for i, text in enumerate(fields):
        try:
            value = float(text)
        except ValueError:
            raise FormatError("coordinates", f"coordinate {i} '{text}' is not a number") from None
        if not math.isfinite(value):
            raise FormatError("coordinates", f"coordinate {i} '{text}' is not finite")
        coords.append(value)
    return coords


def decode(text: str) -> CanonicalStream:
    """Parse .svgcom text.

    Args:
        text: File contents

    Returns:
        Parsed canonical stream

    Raises:
        FormatError: If the header, the command line or the coordinate line
            is malformed or they disagree with each other
    """
    lines = text.split("\n")
    if len(lines) < 2:
        raise FormatError("header", "expected a header line followed by a command line")

    width, height, command_count, coordinate_count = _parse_header(lines[0])

    tags = lines[1]
    if len(tags) != command_count:
        raise FormatError(
            "commands", f"header declares {command_count} commands, found {len(tags)}"
        )
    for i, tag in enumerate(tags):
        if tag not in POINTS_PER_TAG:
            raise FormatError("commands", f"command {i} has unknown tag {tag!r}")
    if tags and tags[0] != "M":
        raise FormatError("commands", f"first command must be 'M', got {tags[0]!r}")

    if coordinate_count % 2:
        raise FormatError("coordinates", f"coordinate count {coordinate_count} is odd")

    required = 2 * sum(POINTS_PER_TAG[tag] for tag in tags)
    if required != coordinate_count:
        raise FormatError(
            "coordinates",
            f"commands '{tags}' require {required} coordinates, header declares {coordinate_count}",
        )

    coord_line = lines[2] if len(lines) > 2 else ""
    coords = _parse_coordinates(coord_line, coordinate_count)

    points = iter(Point(coords[i], coords[i + 1]) for i in range(0, len(coords), 2))
    commands: list[PathCommand] = []
    for tag in tags:
        if tag == "M":
            commands.append(Move(next(points)))
        elif tag == "L":
            commands.append(Line(next(points)))
        elif tag == "C":
            commands.append(Cubic(next(points), next(points), next(points)))
        else:
            commands.append(Close())

    return CanonicalStream(width=width, height=height, commands=commands)


def read_svgcom(path: Path) -> CanonicalStream:
    """Load and decode a .svgcom file.

    Args:
        path: File to read

    Returns:
        Parsed canonical stream

    Raises:
        DocumentLoadError: If the file cannot be read
        FormatError: If its contents are malformed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(str(path), str(e)) from e
    return decode(text)


def write_svgcom(path: Path, stream: CanonicalStream) -> None:
    """Encode a stream and write it to a .svgcom file.

    The text is fully encoded before the file is opened, so a format error
    never leaves a partial file behind.

    Raises:
        DocumentSaveError: If the file cannot be written
        FormatError: If the stream cannot be encoded
    """
    text = encode(stream)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise DocumentSaveError(str(path), str(e)) from e
