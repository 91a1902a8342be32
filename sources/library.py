"""Image selection from the local file system (the photo library flow)."""


import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from errors import CaptureFailedError, UserCancelledError
from schemas import CapturedImage
from utils.image_io import ensure_image_path, read_image_bytes

PROMPT = "Image path (blank to cancel): "


@dataclass
class LibraryPicker:
	"""Pick an image file, either preset or asked for interactively."""

	default_path: str | Path | None = None
	prompt: Callable[[str], str] = field(default=input)

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def pick(self, path: str | Path | None = None) -> CapturedImage:
		"""Load the selected image.

		Raises:
			UserCancelledError: If no path is given and the prompt is left blank.
			CaptureFailedError: If the selection does not point to a readable file.
		"""
		selection = path if path is not None else self.default_path
		if selection is None:
			selection = self._ask()
		try:
			image_path = ensure_image_path(selection)
			data = read_image_bytes(image_path)
		except (OSError, ValueError) as exc:
			self._logger.warning("Could not load %s: %s", selection, exc)
			raise CaptureFailedError("Failed to load image.") from exc
		return CapturedImage(data=data, origin="library", source_name=str(image_path))

	def _ask(self) -> str:
		try:
			answer = self.prompt(PROMPT)
		except EOFError as exc:
			raise UserCancelledError() from exc
		answer = answer.strip().strip("'\"")
		if not answer:
			raise UserCancelledError()
		return answer
