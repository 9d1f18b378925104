"""Exception types raised by nlpmodel.

Two families are kept apart:

* :class:`ProblemError` signals a recoverable shape mismatch. The caller can
  catch it, drop the malformed constraint or starting point, and keep using
  the problem, which is left untouched.
* :class:`InvariantViolation` signals a programming error (a missing
  constraint, an interval whose lower end exceeds its upper end, a
  non-scalar objective). It derives from ``AssertionError`` but is raised
  explicitly so that ``python -O`` does not disable the check.
"""

from __future__ import annotations


class ProblemError(ValueError):
    """Recoverable size or shape mismatch while assembling a problem."""


class InvariantViolation(AssertionError):
    """A condition that correct calling code never triggers."""


__all__ = ["ProblemError", "InvariantViolation"]
