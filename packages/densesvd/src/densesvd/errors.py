"""
Failure kinds raised by the SVD core.

The core never terminates the process. Every detected failure is raised
as an SVDError carrying a Reason tag; the caller decides whether to abort.
fatal() keeps the classic behaviour available at the call site:
report to stderr and exit with status 1.
"""

import sys
from enum import Enum
from typing import NoReturn, Optional, TextIO


class Reason(Enum):
    INVALID_DIMENSIONS = 'invalid_dimensions'
    ALLOCATION_FAILURE = 'allocation_failure'
    NON_CONVERGENCE = 'non_convergence'


class SVDError(Exception):
    """Base class. `reason` tells the caller which contract was broken."""

    reason: Reason

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidDimensions(SVDError, ValueError):
    reason = Reason.INVALID_DIMENSIONS


class AllocationFailure(SVDError, MemoryError):
    reason = Reason.ALLOCATION_FAILURE


class NonConvergence(SVDError, ArithmeticError):
    reason = Reason.NON_CONVERGENCE

    def __init__(self, max_iterations: int, index: Optional[int] = None):
        super().__init__(f"svd(): no convergence in {max_iterations} iterations")
        self.max_iterations = max_iterations
        self.index = index


class InvalidInput(ValueError):
    """Malformed user data: non-finite entries, bad weights, wrong counts."""


def fatal(err: Exception, stream: Optional[TextIO] = None) -> NoReturn:
    """Report `err` and terminate the process with status 1."""
    stream = stream if stream is not None else sys.stderr
    sys.stdout.flush()  # keep the exit message last
    message = str(err)
    if not message.endswith('\n'):
        message += '\n'
    stream.write(f"\nerror: svd: {message}")
    stream.flush()
    sys.exit(1)
