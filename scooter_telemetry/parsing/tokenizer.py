"""Line splitting, framing checks and field tokenization."""

from typing import Iterator, List, Tuple

from scooter_telemetry.parsing.errors import FramingError

START_CHAR = "+"
END_CHAR = "$"
FIELD_DELIMITER = ","
LINE_SEPARATOR = "\n"


def iter_lines(payload: str) -> Iterator[Tuple[int, str]]:
    """Yield (line_number, line) for every newline-separated line.

    A trailing newline does not produce an extra empty line. Line numbers start
    at 1.
    """
    cursor = 0
    line_number = 0
    while cursor < len(payload):
        end = payload.find(LINE_SEPARATOR, cursor)
        if end == -1:
            end = len(payload)
        line_number += 1
        yield line_number, payload[cursor:end]
        cursor = end + 1


def check_framing(line: str) -> None:
    """Raise FramingError unless line is wrapped in the start and end markers."""
    # A lone "+" or "$" cannot hold both markers
    if len(line) < 2 or line[0] != START_CHAR or line[-1] != END_CHAR:
        raise FramingError(f"Line is not framed by {START_CHAR!r}...{END_CHAR!r}")


def tokenize_line(line: str) -> List[str]:
    """Split a framed line into its raw fields.

    Args:
        line: Raw line including markers, e.g. "+IN,DeviceInfo,...,0035$"

    Returns:
        Raw field strings in order; empty fields are kept

    Raises:
        FramingError: If the line is not framed
    """
    check_framing(line)
    return line[1:-1].split(FIELD_DELIMITER)
