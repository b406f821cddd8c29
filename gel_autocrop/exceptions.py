"""Custom exceptions for gel autocropping."""


class GelCropError(Exception):
    """Base exception for gel autocropping errors."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class ImageReadError(GelCropError):
    """Failed to read input image."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not read image: {path}",
            "Could not read image file. The file may be corrupted or in an unsupported format.",
        )


class InvalidImageError(GelCropError):
    """Image does not satisfy the single-channel byte image contract."""

    def __init__(self, detail: str = ""):
        msg = f"Invalid image: {detail}" if detail else "Invalid image"
        super().__init__(
            msg,
            "Input image is not supported. Expected a non-empty single-channel 8-bit image.",
        )


class NoRegionFoundError(GelCropError):
    """No non-background content was found to crop to."""

    def __init__(self):
        super().__init__(
            "No region found",
            "Could not locate the gel. Try a different locate method or threshold.",
        )


class SessionClosedError(GelCropError):
    """A foreground separator session was used after being closed."""

    def __init__(self):
        super().__init__(
            "Foreground separator session is closed",
            "The background model was already released. Start a new session.",
        )
