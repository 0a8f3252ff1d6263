"""
Terminal notation parser.

Translates panel hole identifiers ("6A", "D16", "3J", "6com", "M7t", "+")
into internal node names ("Light6_A", "Motor_D16", "Relay3_Contact1_NC").
Several holes may alias one node, e.g. every "<n>+" is the supply rail.

A circuit is a list of wire tokens "<terminal>/<terminal>", or one string
with tokens separated by whitespace.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..exceptions import InvalidTerminal, InvalidWireFormat, SelfConnection
from .config import GROUND, SUPPLY, NUM_SECTIONS

logger = logging.getLogger(__name__)

MOTOR_TERMINALS = 20  # D0..D19
MINUS_SIGNS = ("-", "—")  # hyphen and em dash

_COMMON_RE = re.compile(r"^([1-6])com$", re.IGNORECASE)
_MATRIX_RE = re.compile(r"^([1-9])([tb])$", re.IGNORECASE)
_MOTOR_RE = re.compile(r"^[0-9]+$")  # ASCII only; \d would accept "²"
_SECTIONS = tuple(str(n) for n in range(1, NUM_SECTIONS + 1))

_SECTION_TERMINALS = {
    "A": "Light{n}_A",
    "B": "Light{n}_B",
    "C": "Relay{n}_IndicatorLamp_Input",
    "E": "Relay{n}_Coil_Input",
    "F": "Relay{n}_Coil_Output",
    "G": "Relay{n}_Contact1_NO",
    "H": "Relay{n}_Contact1_Common",
    "J": "Relay{n}_Contact1_NC",
    "K": "Relay{n}_Contact2_NO",
    "L": "Relay{n}_Contact2_Common",
    "N": "Relay{n}_Contact2_NC",
    "R": "Slide{n}_Left1",
    "S": "Slide{n}_Common1",
    "T": "Slide{n}_Right1",
    "U": "Slide{n}_Left2",
    "V": "Slide{n}_Common2",
    "W": "Slide{n}_Right2",
    "X": "Button{n}_NormallyOpen",
    "Y": "Button{n}_Common",
    "Z": "Button{n}_NormallyClosed",
}


def _rail(symbol: str) -> str | None:
    if symbol == "+":
        return SUPPLY
    if symbol in MINUS_SIGNS:
        return GROUND
    return None


def parse_terminal(identifier: str) -> str:
    """
    Parse one terminal identifier into its internal node name.

    Args:
        identifier: Hole label, e.g. "6A", "D16", "3J", "6com", "M7t", "+"

    Returns:
        Internal node name, e.g. "Light6_A", "Motor_D16"

    Raises:
        InvalidTerminal: if the identifier does not name a hole on the panel
    """
    token = identifier.strip()

    rail = _rail(token)
    if rail is not None:
        return rail

    # Motor terminals D0-D19
    if token.startswith("D"):
        digits = token[1:]
        if _MOTOR_RE.match(digits) and int(digits) < MOTOR_TERMINALS:
            return f"Motor_D{int(digits)}"
        raise InvalidTerminal("Invalid motor terminal", identifier)

    # Matrix terminals
    if token.startswith("M"):
        rest = token[1:]
        rail = _rail(rest)
        if rail is not None:
            return rail
        if rest in ("10", "11"):
            return f"Matrix_M{rest}"
        match = _MATRIX_RE.match(rest)
        if match:
            position = "Top" if match.group(2).lower() == "t" else "Bottom"
            return f"Matrix_M{match.group(1)}_{position}"
        raise InvalidTerminal("Invalid matrix terminal", identifier)

    match = _COMMON_RE.match(token)
    if match:
        return f"Common_{match.group(1)}"

    if len(token) < 2:
        raise InvalidTerminal("Invalid terminal identifier", identifier)

    section = token[0]
    if section not in _SECTIONS:
        raise InvalidTerminal("Invalid section number", section)

    letter = token[1:].upper()
    rail = _rail(letter)
    if rail is not None:
        return rail
    if letter not in _SECTION_TERMINALS:
        raise InvalidTerminal("Invalid terminal letter", letter)
    return _SECTION_TERMINALS[letter].format(n=section)


def _split_wire(instruction: str) -> tuple[str, str]:
    parts = instruction.strip().split("/")
    if len(parts) != 2:
        raise InvalidWireFormat(instruction)
    return parts[0].strip(), parts[1].strip()


def parse_wire(instruction: str) -> tuple[str, str]:
    """
    Parse a wire token "<terminal>/<terminal>" into a pair of node names.

    Raises:
        InvalidWireFormat: unless the token splits into exactly two parts
        InvalidTerminal: if either end is not a valid terminal
    """
    first, second = _split_wire(instruction)
    return parse_terminal(first), parse_terminal(second)


def parse_notation(instructions: Iterable[str]) -> list[tuple[str, str]]:
    """Parse wire tokens into node-name pairs, in order."""
    return [parse_wire(instruction) for instruction in instructions]


def parse_terminal_pairs(instructions: Iterable[str]) -> list[tuple[str, str]]:
    """
    Validate wire tokens but return the trimmed terminal identifiers.

    Used by layers that draw cables between holes rather than nodes:
        parse_terminal_pairs(["6A / 6com"]) -> [("6A", "6com")]
    """
    pairs = []
    for instruction in instructions:
        first, second = _split_wire(instruction)
        parse_terminal(first)
        parse_terminal(second)
        pairs.append((first, second))
    return pairs


def split_circuit(text: str) -> list[str]:
    """Split a bulk circuit description on any whitespace."""
    return text.split()


def load_circuit(circuit: str | Iterable[str]) -> list[tuple[str, str]]:
    """
    Parse a whole circuit and reject wires that short a node onto itself.

    Args:
        circuit: Either one whitespace-separated string or an iterable of
            wire tokens

    Returns:
        Node-name pairs, one per wire, in input order

    Raises:
        InvalidWireFormat, InvalidTerminal: for malformed tokens
        SelfConnection: if both ends of a wire are the same node
    """
    instructions = split_circuit(circuit) if isinstance(circuit, str) else list(circuit)

    wires = []
    for instruction in instructions:
        first, second = parse_wire(instruction)
        if first == second:
            raise SelfConnection(instruction, first)
        wires.append((first, second))

    logger.debug("Loaded circuit with %d wires", len(wires))
    return wires
