"""Exception types shared by the session state machine and the model adapters.

Failures raised by the generative service itself (network errors, quota errors,
``google.genai.errors.APIError``) are not wrapped in any of these: they reach the
session untouched so their original message can be shown to the user.
"""

DECODE_ERROR_MESSAGE = "Failed to read image file."
NO_IMAGE_MESSAGE = "no image data found"


class DecodeError(Exception):
    """The uploaded file could not be read or encoded as an image."""

    def __init__(self, message: str = DECODE_ERROR_MESSAGE) -> None:
        super().__init__(message)


class RequestError(Exception):
    """The generative service answered, but without a usable image."""

    def __init__(self, message: str = NO_IMAGE_MESSAGE) -> None:
        super().__init__(message)


class TransitionError(Exception):
    """A session action was requested from a phase that does not allow it.

    The session is left unchanged when this is raised.
    """

    pass
