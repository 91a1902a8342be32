"""Tests for the Tesseract provider, with the engine call replaced."""
from __future__ import annotations

import io

import pytest
from PIL import Image
from pytesseract import TesseractError, TesseractNotFoundError

from config import TesseractSettings
from errors import InvalidImageError, RecognitionError
from providers import tesseract_ocr
from providers.tesseract_ocr import TesseractOcrClient
from schemas import CapturedImage

SAMPLE_DATA = {
	"block_num": [0, 1, 1, 1, 1, 1, 1],
	"par_num": [0, 1, 1, 1, 1, 1, 1],
	"line_num": [0, 1, 1, 1, 2, 2, 2],
	"text": ["", "Coffee", "3.50", " ", "TOTAL", "$12.50", "x"],
	"conf": ["-1", "96", "90", "-1", "80", "70.5", "-1"],
}


def _png(mode: str = "RGB") -> CapturedImage:
	buffer = io.BytesIO()
	Image.new(mode, (40, 20), color="white").save(buffer, format="PNG")
	return CapturedImage(data=buffer.getvalue(), origin="library", source_name="receipt.png")


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict:
	calls: dict = {}

	def fake_image_to_data(image, lang, config, output_type):
		calls.update(mode=image.mode, lang=lang, config=config)
		return SAMPLE_DATA

	monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_data", fake_image_to_data)
	return calls


def test_groups_words_into_lines(captured: dict) -> None:
	client = TesseractOcrClient(TesseractSettings(lang="eng", psm=4, oem=1))
	result = client.recognize(_png())
	assert result.full_text() == "Coffee 3.50\nTOTAL $12.50"
	assert [line.line_index for line in result.lines] == [0, 1]
	assert result.lines[0].top_candidate().confidence == pytest.approx(0.93)
	assert captured == {"mode": "L", "lang": "eng", "config": "--oem 1 --psm 4"}


def test_min_conf_drops_weak_lines(captured: dict) -> None:
	client = TesseractOcrClient(TesseractSettings(min_conf=0.8))
	result = client.recognize(_png())
	assert result.full_text() == "Coffee 3.50"


def test_undecodable_image_is_invalid(captured: dict) -> None:
	client = TesseractOcrClient(TesseractSettings())
	with pytest.raises(InvalidImageError):
		client.recognize(CapturedImage(data=b"not an image", origin="camera"))
	with pytest.raises(InvalidImageError):
		client.recognize(CapturedImage(data=b"", origin="camera"))
	assert captured == {}


def test_missing_engine_is_recognition_error(monkeypatch: pytest.MonkeyPatch) -> None:
	def missing(*args, **kwargs):
		raise TesseractNotFoundError()

	monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_data", missing)
	with pytest.raises(RecognitionError, match="not installed"):
		TesseractOcrClient(TesseractSettings()).recognize(_png())


def test_engine_failure_is_recognition_error(monkeypatch: pytest.MonkeyPatch) -> None:
	def failing(*args, **kwargs):
		raise TesseractError(1, "Failed loading language 'xyz'")

	monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_data", failing)
	with pytest.raises(RecognitionError, match="Failed loading language"):
		TesseractOcrClient(TesseractSettings(lang="xyz")).recognize(_png("L"))


def test_decompression_bomb_is_invalid(captured: dict, monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
	with pytest.raises(InvalidImageError):
		TesseractOcrClient(TesseractSettings()).recognize(_png())
	assert captured == {}
