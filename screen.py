"""Scan screen: wires image sources through recognition into a single status line."""
from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

from errors import CaptureFailedError, RecognitionError, ScanError
from extractor import extract_numbers_or_prices
from schemas import INITIAL_STATUS, CapturedImage, RecognizedText, ScanFlow, ScanResult


class Camera(Protocol):
	def capture(self) -> CapturedImage:
		...


class ImageLibrary(Protocol):
	def pick(self, path: str | Path | None = None) -> CapturedImage:
		...


class TextRecognizer(Protocol):
	def recognize(self, image: CapturedImage) -> RecognizedText:
		...


class ScanScreen:
	"""Drives the camera and library flows and owns the displayed status.

	Image sources run on the calling thread. Recognition runs on a single
	worker thread which posts its ``ScanResult`` onto a queue; only
	``process_pending``/``wait``, called from the owning thread, update
	``status``. One scan may be in flight at a time.
	"""

	def __init__(self, recognizer: TextRecognizer, camera: Camera, library: ImageLibrary) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self.recognizer = recognizer
		self.camera = camera
		self.library = library
		self.status = INITIAL_STATUS
		self.last_result: ScanResult | None = None
		self._results: queue.Queue[ScanResult] = queue.Queue()
		self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="recognizer")
		self._lock = threading.Lock()
		self._in_flight = False

	def __enter__(self) -> ScanScreen:
		return self

	def __exit__(self, *exc_info: object) -> None:
		self.close()

	@property
	def busy(self) -> bool:
		with self._lock:
			return self._in_flight

	def scan_with_camera(self) -> bool:
		"""Start the camera flow; returns False if a scan is already in flight."""
		return self._start("camera", self.camera.capture)

	def scan_from_library(self, path: str | Path | None = None) -> bool:
		"""Start the library flow; returns False if a scan is already in flight."""
		return self._start("library", lambda: self.library.pick(path))

	def process_pending(self, block: bool = False, timeout: float | None = None) -> ScanResult | None:
		"""Apply delivered results to ``status`` and return the latest one, if any."""
		latest: ScanResult | None = None
		try:
			latest = self._results.get(block=block, timeout=timeout)
			while True:
				self._apply(latest)
				latest = self._results.get_nowait()
		except queue.Empty:
			pass
		return latest

	def wait(self, timeout: float | None = None) -> ScanResult | None:
		"""Block until the in-flight scan completes and its result is displayed."""
		if not self.busy:
			return self.process_pending()
		return self.process_pending(block=True, timeout=timeout)

	def close(self) -> None:
		self._executor.shutdown(wait=True)

	def _start(self, flow: ScanFlow, acquire) -> bool:
		with self._lock:
			if self._in_flight:
				self._logger.warning("A scan is already in progress; ignoring %s request", flow)
				return False
			self._in_flight = True
		try:
			image = acquire()
		except ScanError as exc:
			self._logger.warning("%s image unavailable: %s", flow.capitalize(), exc)
			self._results.put(ScanResult.failure(flow, exc))
			return True
		except Exception as exc:  # noqa: BLE001
			self._logger.exception("Unexpected %s source failure: %s", flow, exc)
			self._results.put(ScanResult.failure(flow, CaptureFailedError(str(exc) or None)))
			return True
		try:
			self._executor.submit(self._recognize, flow, image)
		except RuntimeError:
			# executor already shut down; nothing will post a result
			with self._lock:
				self._in_flight = False
			raise
		return True

	def _recognize(self, flow: ScanFlow, image: CapturedImage) -> None:
		try:
			text = self.recognizer.recognize(image).full_text()
		except ScanError as exc:
			self._logger.warning("Recognition failed for %s: %s", image.source_name, exc)
			result = ScanResult.failure(flow, exc)
		except Exception as exc:  # noqa: BLE001
			self._logger.exception("Unexpected recognizer failure: %s", exc)
			result = ScanResult.failure(flow, RecognitionError(str(exc) or None))
		else:
			tokens = extract_numbers_or_prices(text)
			if flow == "camera":
				self._logger.info("Extracted numbers or prices: %s", tokens)
			result = ScanResult.success(flow, text, tokens)
		self._results.put(result)

	def _apply(self, result: ScanResult) -> None:
		self.last_result = result
		self.status = result.display()
		with self._lock:
			self._in_flight = False
