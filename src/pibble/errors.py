"""
errors.py
---------

Exception types raised by pibble.

All errors are precondition violations: they are raised before any array is
allocated and carry no partial results. Every class derives from
``PibbleError``, which is a ``ValueError`` so callers that already catch
``ValueError`` for bad arguments keep working.

Hierarchy
---------
PibbleError
├── MissingComponentError       a parameter array (Lambda, Sigma, Eta) is absent
├── MissingHyperparameterError  prior sampling without upsilon/Theta/Gamma/Xi
├── MissingDataError            design matrix (or observed counts) needed but absent
├── MissingSizeError            count prediction without a total-count source
├── UnsupportedTransformError   coordinate conversion not defined
└── InvalidArgumentError        unknown response, bad names, inconsistent shapes
"""

from __future__ import annotations


class PibbleError(ValueError):
    """Base class for all pibble errors."""


class MissingComponentError(PibbleError):
    """A required parameter array is not stored on the fit object."""

    def __init__(self, component: str, purpose: str | None = None):
        self.component = component
        msg = f"PibbleFit object does not contain samples of {component}"
        if purpose:
            msg = f"{msg} (needed to {purpose})"
        super().__init__(msg)


class MissingHyperparameterError(PibbleError):
    """Prior sampling was requested but hyperparameters are missing."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "PibbleFit object is missing prior hyperparameters: "
            + ", ".join(self.missing)
        )


class MissingDataError(PibbleError):
    """Training data (X or Y) is required but absent."""


class MissingSizeError(PibbleError):
    """Count prediction without an explicit size and without observed Y."""


class UnsupportedTransformError(PibbleError):
    """The requested coordinate conversion is not defined."""


class InvalidArgumentError(PibbleError):
    """An argument value is not recognized or is inconsistent with the fit."""
