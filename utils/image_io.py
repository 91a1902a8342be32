"""Utility helpers for working with input images."""

import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from errors import InvalidImageError

def ensure_image_path(image: str | Path) -> Path:
	"""Validate that the provided path exists and points to a file."""
	path = Path(image).expanduser().resolve()
	if not path.exists():
		raise FileNotFoundError(f"Image path not found: {path}")
	if not path.is_file():
		raise ValueError(f"Image path is not a file: {path}")
	return path

def read_image_bytes(path: Path) -> bytes:
	"""Read the raw bytes of an image."""
	return path.read_bytes()

def decode_image(data: bytes) -> Image.Image:
	"""Decode encoded image bytes into a loaded raster image.

	Raises:
		InvalidImageError: If the bytes are empty or not a readable image.
	"""
	if not data:
		raise InvalidImageError()
	try:
		image = Image.open(io.BytesIO(data))
		image.load()
	except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
		raise InvalidImageError(f"Invalid image: {exc}") from exc
	return image

def prepare_for_ocr(image: Image.Image) -> Image.Image:
	"""Apply EXIF orientation and convert to grayscale for recognition."""
	image = ImageOps.exif_transpose(image)
	if image.mode != "L":
		image = image.convert("L")
	return image
