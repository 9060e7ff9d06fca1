"""Line-oriented G-code parser producing linear motion segments.

The parser is lenient: lines without a recognizable command and tokens that
do not look like ``<letter><number>`` are dropped rather than reported as
errors. Dropped lines are logged at DEBUG level.

Example:
    >>> from laser_planner.parser import parse
    >>> segments = parse("G0 X10 Y10\\nM3 S500\\nG1 X20 F1200")
    >>> len(segments)
    2
    >>> segments[1].feedrate, segments[1].laser_on
    (1200.0, True)
"""

import logging
import math
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from laser_planner.models import Point2D, Segment, SourceCommand

logger = logging.getLogger(__name__)

COMMENT_CHAR = ";"

RAPID_CODE = "G0"
FEED_CODE = "G1"
ABSOLUTE_CODE = "G90"
RELATIVE_CODE = "G91"
LASER_ON_CODES = frozenset({"M3", "M4"})  # M4 is GRBL's dynamic power mode
LASER_OFF_CODE = "M5"
MOVE_CODES = frozenset({RAPID_CODE, FEED_CODE})

# GRBL default spindle range vs. 8-bit PWM range
DEFAULT_MAX_POWER = 1000.0
DEFAULT_MAX_PWM = 255

PARAM_LETTERS = frozenset("XYZIJKFS")
PARAMETERS_ONLY_CODE = ""

BLOCK_NUMBER_PATTERN = re.compile(r"^N\d+\s*")
COMMAND_PATTERN = re.compile(r"^([A-Z]{1,2})(\d+)")
PARAM_PATTERN = re.compile(r"([XYZIJKFS])([+-]?\d*\.?\d+)")


@dataclass(frozen=True)
class ParserState:
    """Modal state threaded through a single parse.

    Attributes:
        position: Current tool position in absolute coordinates
        feedrate: Last commanded feed rate (units/min), None if never set
        laser_on: Laser switched on by M3/M4 and off by M5
        power: Last commanded laser power (raw ``S`` value)
        relative: True after G91, False after G90
    """

    position: Point2D = Point2D(0.0, 0.0)
    feedrate: Optional[float] = None
    laser_on: bool = False
    power: Optional[float] = None
    relative: bool = False


@dataclass(frozen=True)
class ParsedProgram:
    """Everything a parse produces.

    Attributes:
        commands: Every recognized command, in program order
        segments: Linear moves emitted by G0/G1 commands
        state: Modal state after the last line
    """

    commands: Tuple[SourceCommand, ...]
    segments: Tuple[Segment, ...]
    state: ParserState


def split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Split a raw line into its code part and its comment text.

    Returns:
        Tuple of (code part, stripped comment or None). The code part is
        returned unstripped so callers can splice it back together.
    """
    index = line.find(COMMENT_CHAR)
    if index == -1:
        return line, None
    return line[:index], line[index + 1 :].strip()


def parse_command(line: str, line_number: int) -> Optional[SourceCommand]:
    """Parse one raw program line into a command.

    A leading block number (``N10``) is skipped. A line made only of
    parameter words, such as ``F1200`` or ``S500``, becomes a command with
    an empty code so its modal values still reach the parser state.

    Args:
        line: Raw line, possibly with a trailing comment
        line_number: Zero-based index of the line

    Returns:
        SourceCommand, or None if the line is empty or has no leading command
    """
    code_part, comment = split_comment(line)
    code_part = BLOCK_NUMBER_PATTERN.sub("", code_part.strip().upper(), count=1)
    if not code_part:
        return None

    match = COMMAND_PATTERN.match(code_part)
    if match and match.group(1) not in PARAM_LETTERS:
        # G00 and G0 are the same command
        code = f"{match.group(1)}{int(match.group(2))}"
        words = code_part[match.end() :]
    elif PARAM_PATTERN.match(code_part):
        code = PARAMETERS_ONLY_CODE
        words = code_part
    else:
        logger.debug("Line %d ignored, no command token: %r", line_number, line)
        return None

    params: Dict[str, float] = {}
    for letter, value in PARAM_PATTERN.findall(words):
        params[letter] = float(value)

    return SourceCommand(
        code=code, params=tuple(params.items()), line_number=line_number, comment=comment
    )


def _target_position(command: SourceCommand, state: ParserState) -> Point2D:
    """Resolve the X/Y target of a move against the current position."""
    x, y = state.position.x, state.position.y
    if state.relative:
        x += command.get("X", 0.0)
        y += command.get("Y", 0.0)
    else:
        x = command.get("X", x)
        y = command.get("Y", y)
    return Point2D(x, y)


def apply_command(
    state: ParserState, command: SourceCommand
) -> Tuple[ParserState, Optional[Segment]]:
    """Advance the modal state by one command.

    ``F`` and ``S`` update the modal feed rate and power on any command, so
    a move's own parameters already apply to the segment it emits.

    Args:
        state: State before the command
        command: Parsed command

    Returns:
        Tuple of (new state, emitted segment or None)
    """
    feedrate = command.get("F")
    if feedrate is not None:
        state = replace(state, feedrate=feedrate)
    power = command.get("S")
    if power is not None:
        state = replace(state, power=power)

    code = command.code
    if code in LASER_ON_CODES:
        return replace(state, laser_on=True), None
    if code == LASER_OFF_CODE:
        return replace(state, laser_on=False), None
    if code == ABSOLUTE_CODE:
        return replace(state, relative=False), None
    if code == RELATIVE_CODE:
        return replace(state, relative=True), None
    if code not in MOVE_CODES:
        logger.debug(
            "Line %d: %s emits no segment", command.line_number, code or "parameter line"
        )
        return state, None

    end = _target_position(command, state)
    segment = Segment(
        start=state.position,
        end=end,
        is_rapid=code == RAPID_CODE,
        feedrate=state.feedrate,
        laser_on=state.laser_on,
        power=state.power,
        source_command=command,
    )
    return replace(state, position=end), segment


def parse_program(text: str, initial_state: Optional[ParserState] = None) -> ParsedProgram:
    """Parse program text into commands, segments and the final modal state.

    Args:
        text: Program text, one command per line
        initial_state: Starting modal state (default: origin, laser off)

    Returns:
        ParsedProgram. Never raises on malformed input.
    """
    state = initial_state if initial_state is not None else ParserState()
    commands: List[SourceCommand] = []
    segments: List[Segment] = []

    for line_number, line in enumerate(text.split("\n")):
        command = parse_command(line, line_number)
        if command is None:
            continue
        commands.append(command)
        state, segment = apply_command(state, command)
        if segment is not None:
            segments.append(segment)

    return ParsedProgram(commands=tuple(commands), segments=tuple(segments), state=state)


def parse(text: str) -> Tuple[Segment, ...]:
    """Parse program text into an ordered sequence of segments."""
    return parse_program(text).segments


def power_to_percentage(power: float, max_power: float = DEFAULT_MAX_POWER) -> float:
    """Convert a raw ``S`` value to a percentage of ``max_power``.

    Examples:
        >>> power_to_percentage(100)
        10.0
        >>> power_to_percentage(1000)
        100.0
    """
    return power * 100 / max_power


def percentage_to_power(percentage: float, max_power: int = DEFAULT_MAX_PWM) -> int:
    """Convert a percentage to a raw ``S`` value, rounding half up.

    Examples:
        >>> percentage_to_power(10)
        26
        >>> percentage_to_power(100)
        255
    """
    return int(math.floor(percentage * max_power / 100 + 0.5))
