"""
Image Upscaling Exceptions

Every error raised on purpose by the package derives from ImageUpscalingError,
so callers can catch the whole family with one clause and still get a
descriptive message (plus optional details) when printing it.
"""

from typing import Iterable, Optional


class ImageUpscalingError(Exception):
    """Base exception class for all package-specific errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        """
        Args:
            message: Main error message
            details: Additional error details/context
        """
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class DimensionMismatch(ImageUpscalingError):
    """Pixel sequence length does not match width * height."""

    def __init__(self, width: int, height: int, actual: int):
        self.width = width
        self.height = height
        self.expected = width * height
        self.actual = actual
        super().__init__(
            f"Expected {self.expected} pixels for a {width}x{height} image, got {actual}"
        )


class OutOfRange(ImageUpscalingError):
    """Direct (non-clamped) pixel read past the image bounds."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"Pixel ({x}, {y}) is outside a {width}x{height} image"
        )


class UnknownAlgorithm(ImageUpscalingError):
    """Strategy selector or registry was given an unregistered name."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        details = f"Available: {', '.join(self.available)}" if self.available else None
        super().__init__(f"Unknown algorithm: {name}", details)


class DecodeFailure(ImageUpscalingError):
    """An image file could not be read or decoded."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        super().__init__(f"Failed to load image: {self.path}", reason)


class EncodeFailure(ImageUpscalingError):
    """An image could not be encoded or written."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        super().__init__(f"Failed to save image: {self.path}", reason)


class ValidationError(ImageUpscalingError):
    """Input image rejected before processing (size limits)."""


class PipelineError(ImageUpscalingError):
    """A pipeline stage failed; the run produced no output."""

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        super().__init__(message, f"Stage: {stage}" if stage else None)
