"""Error taxonomy for receipt scan attempts."""


from typing import Literal

ErrorKind = Literal["capture_failed", "cancelled", "invalid_image", "recognition_failed"]


class ScanError(Exception):
	"""Base class for every failure a scan attempt can end with."""

	kind: ErrorKind = "recognition_failed"
	default_message = "Scan failed."

	def __init__(self, message: str | None = None) -> None:
		super().__init__(message or self.default_message)


class CaptureFailedError(ScanError):
	"""No usable image was produced by the image source."""

	kind: ErrorKind = "capture_failed"
	default_message = "Failed to capture image."


class UserCancelledError(ScanError):
	"""The user dismissed the capture or selection without choosing an image."""

	kind: ErrorKind = "cancelled"
	default_message = "User canceled."


class InvalidImageError(ScanError):
	"""The image bytes have no usable raster form."""

	kind: ErrorKind = "invalid_image"
	default_message = "Invalid image."


class RecognitionError(ScanError):
	"""The text recognition engine reported a failure."""

	kind: ErrorKind = "recognition_failed"
	default_message = "Text recognition failed."
