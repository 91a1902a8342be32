"""On-device Tesseract OCR provider implementation."""


import logging
from dataclasses import dataclass
from typing import Any

import pytesseract
from pytesseract import Output, TesseractError, TesseractNotFoundError

from config import TesseractSettings
from errors import RecognitionError
from schemas import CapturedImage, RecognizedText, TextCandidate, TextLine
from utils.image_io import decode_image, prepare_for_ocr

LineKey = tuple[int, int, int]


@dataclass
class TesseractOcrClient:
	"""Client wrapper around the local Tesseract engine."""

	settings: TesseractSettings

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		if self.settings.tesseract_cmd:
			pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_cmd

	def recognize(self, image: CapturedImage) -> RecognizedText:
		"""Recognize the text lines of ``image``, best-effort and in reading order.

		Raises:
			InvalidImageError: If the image cannot be decoded.
			RecognitionError: If Tesseract is missing or fails.
		"""
		raster = prepare_for_ocr(decode_image(image.data))
		try:
			data = pytesseract.image_to_data(
				raster,
				lang=self.settings.lang,
				config=self.settings.config_flags,
				output_type=Output.DICT,
			)
		except TesseractNotFoundError as exc:
			raise RecognitionError("Tesseract is not installed or not on PATH.") from exc
		except TesseractError as exc:
			raise RecognitionError(f"Tesseract failed: {exc.message or exc}") from exc

		lines = self._parse_lines(data)
		filtered = [
			line for line in lines
			if line.candidates[0].confidence is None or line.candidates[0].confidence >= self.settings.min_conf
		]
		self._logger.debug("Recognized %s lines (%s kept) from %s", len(lines), len(filtered), image.source_name)
		return RecognizedText(lines=filtered)

	def _parse_lines(self, data: dict[str, list[Any]]) -> list[TextLine]:
		words: dict[LineKey, list[str]] = {}
		confidences: dict[LineKey, list[float]] = {}
		for index, raw_text in enumerate(data.get("text", [])):
			text = str(raw_text).strip()
			confidence = self._extract_confidence(data, index)
			if not text or confidence is None:
				continue
			key = (
				int(data["block_num"][index]),
				int(data["par_num"][index]),
				int(data["line_num"][index]),
			)
			words.setdefault(key, []).append(text)
			confidences.setdefault(key, []).append(confidence)

		lines: list[TextLine] = []
		for line_index, key in enumerate(words):
			scores = confidences[key]
			candidate = TextCandidate(text=" ".join(words[key]), confidence=sum(scores) / len(scores))
			lines.append(TextLine(candidates=[candidate], line_index=line_index))
		return lines

	def _extract_confidence(self, data: dict[str, list[Any]], index: int) -> float | None:
		try:
			value = float(data["conf"][index])
		except (KeyError, IndexError, TypeError, ValueError):
			return None
		if value < 0:
			return None
		return min(value, 100.0) / 100.0
