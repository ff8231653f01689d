"""Failure taxonomy for a render request.

Every error carries a stable `tag` that presentation code can switch on.
"""


class RenderError(Exception):
    tag = "render_error"


class InvalidEffect(RenderError, ValueError):
    """Unknown effect identifier. Raised before any work is done."""

    tag = "invalid_effect"

    def __init__(self, effect):
        self.effect = effect
        super().__init__(f"unknown effect: {effect!r}")


class DecodeFailure(RenderError):
    """The capture clip could not be turned into a SampleBuffer."""

    tag = "decode_failure"


class RenderFailure(RenderError):
    """Unrecoverable numeric state (bad sample rate, diverged output)."""

    tag = "render_failure"
