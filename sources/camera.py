"""Live camera capture through OpenCV."""


import importlib
import logging
from dataclasses import dataclass
from typing import Any

from config import CameraSettings
from errors import CaptureFailedError, UserCancelledError
from schemas import CapturedImage

CAPTURE_KEYS = frozenset({13, 32})  # enter, space
CANCEL_KEYS = frozenset({27, ord("q")})  # esc, q


def _load_cv2() -> Any:
	"""Lazy import OpenCV so it is only needed when the camera is used."""
	return importlib.import_module("cv2")


@dataclass
class CameraCapture:
	"""Grab a single frame from a camera device, optionally through a preview window."""

	settings: CameraSettings
	window_title: str = "Scan Receipt (Camera) - SPACE to capture, ESC to cancel"

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def capture(self) -> CapturedImage:
		"""Capture a frame and return it PNG-encoded.

		Raises:
			CaptureFailedError: If the device cannot be opened or yields no frame.
			UserCancelledError: If the preview window is dismissed without capturing.
		"""
		cv2 = _load_cv2()
		index = self.settings.device_index
		camera = cv2.VideoCapture(index)
		try:
			if not camera.isOpened():
				self._logger.warning("Camera %s could not be opened", index)
				raise CaptureFailedError()
			frame = self._preview(cv2, camera) if self.settings.preview else self._grab(camera)
		finally:
			camera.release()
			if self.settings.preview:
				cv2.destroyAllWindows()

		ok, encoded = cv2.imencode(".png", frame)
		if not ok:
			raise CaptureFailedError()
		return CapturedImage(data=encoded.tobytes(), origin="camera", source_name=f"camera:{index}")

	def _grab(self, camera: Any) -> Any:
		ok, frame = camera.read()
		if not ok or frame is None:
			raise CaptureFailedError()
		return frame

	def _preview(self, cv2: Any, camera: Any) -> Any:
		shown = False
		while True:
			frame = self._grab(camera)
			cv2.imshow(self.window_title, frame)
			key = cv2.waitKey(30) & 0xFF
			if key in CAPTURE_KEYS:
				return frame
			if key in CANCEL_KEYS:
				raise UserCancelledError()
			if shown and cv2.getWindowProperty(self.window_title, cv2.WND_PROP_VISIBLE) < 1:
				raise UserCancelledError()
			shown = True
