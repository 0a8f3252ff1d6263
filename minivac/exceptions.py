"""Exceptions raised by the Minivac simulator."""


class MinivacError(Exception):
    """Base class for all simulator errors."""

    pass


class InvalidTerminal(MinivacError, ValueError):
    """Raised when a terminal identifier does not name a hole on the panel."""

    def __init__(self, reason: str, token: str):
        self.reason = reason
        self.token = token
        super().__init__(f'{reason}: "{token}"')


class InvalidWireFormat(MinivacError, ValueError):
    """Raised when a wire token is not of the form ``<terminal>/<terminal>``."""

    def __init__(self, instruction: str, reason: str = "Invalid wire format"):
        self.instruction = instruction
        super().__init__(f'{reason}: "{instruction}"')


class SelfConnection(InvalidWireFormat):
    """Raised when both ends of a wire land on the same electrical node."""

    def __init__(self, instruction: str, node: str):
        self.node = node
        super().__init__(instruction, reason=f"Wire connects {node} to itself")


class SolverFailure(MinivacError, RuntimeError):
    """
    Raised when the DC solver cannot produce a solution.

    Either the network is illegal (a loop made only of voltage sources) or
    the linear solve returned non-finite values.
    """

    pass
