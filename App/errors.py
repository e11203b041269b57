"""Error types raised by the generator.

AIDEV-NOTE: All errors derive from ValueError so callers that only care about
"bad input" can keep catching ValueError. Nothing here is retried: inputs are
deterministic and a retry reproduces the same failure.
"""


class GenerationError(ValueError):
    """Base class for generation failures."""


class InvalidInputError(GenerationError):
    """Pixel buffer is malformed (non-positive size, empty or mismatched grid)."""


class InvalidOptionsError(GenerationError):
    """Generation options are out of range."""


class ComputeFailure(GenerationError):
    """Unexpected internal fault during decomposition or synthesis."""
