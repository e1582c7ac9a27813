# aad_lift/core/errors.py
"""
Error taxonomy of the AD engine.

All engine errors derive from `ADError` and also from the builtin exception a
caller would naturally catch (ValueError / TypeError / RuntimeError), so code
written against plain Python exceptions keeps working.
"""


class ADError(Exception):
    """Base class for every error raised by aad_lift itself."""


class ConfigurationError(ADError, ValueError):
    """Invalid registration-time or configuration input (e.g. unknown output kind)."""


class ShapeError(ADError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class NotLiftedError(ADError, TypeError):
    """A lifted value (Node) was required but a raw value was given."""


class BackwardInFlightError(ADError, RuntimeError):
    """A backward pass was started while another one is running on the same tape."""
