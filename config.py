"""Application configuration management for the receipt scanner."""


import logging
import os
from dataclasses import dataclass
from typing import Final

from dotenv import load_dotenv

ENV_FILE: Final[str] = ".env"
DEFAULT_LANG: Final[str] = "eng"
DEFAULT_PSM: Final[int] = 6
DEFAULT_OEM: Final[int] = 3
DEFAULT_MIN_CONF: Final[float] = 0.0
DEFAULT_CAMERA_INDEX: Final[int] = 0
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO

_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class TesseractSettings:
	"""Tesseract invocation options."""
	lang: str = DEFAULT_LANG
	psm: int = DEFAULT_PSM
	oem: int = DEFAULT_OEM
	min_conf: float = DEFAULT_MIN_CONF
	tesseract_cmd: str | None = None

	@property
	def config_flags(self) -> str:
		return f"--oem {self.oem} --psm {self.psm}"


@dataclass(frozen=True)
class CameraSettings:
	"""Camera device selection and preview behaviour."""
	device_index: int = DEFAULT_CAMERA_INDEX
	preview: bool = True


@dataclass(frozen=True)
class AppConfig:
	"""Aggregate configuration for the scanner runtime."""
	tesseract: TesseractSettings
	camera: CameraSettings
	log_level: int = DEFAULT_LOG_LEVEL


def load_config() -> AppConfig:
	"""Load environment-based configuration values.

	Returns:
		AppConfig: Parsed configuration with defaults for anything unset.

	Raises:
		ValueError: If a numeric variable cannot be parsed.
	"""
	load_dotenv(ENV_FILE)
	return AppConfig(
		tesseract=_load_tesseract_settings(),
		camera=_load_camera_settings(),
		log_level=_load_log_level(),
	)


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
	"""Configure the root logger for the application."""
	logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _load_tesseract_settings() -> TesseractSettings:
	"""Load Tesseract options from the environment."""
	return TesseractSettings(
		lang=os.getenv("RECEIPT_OCR_LANG", DEFAULT_LANG),
		psm=_env_number("RECEIPT_OCR_PSM", DEFAULT_PSM, int),
		oem=_env_number("RECEIPT_OCR_OEM", DEFAULT_OEM, int),
		min_conf=_env_number("RECEIPT_OCR_MIN_CONF", DEFAULT_MIN_CONF, float),
		tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
	)


def _load_camera_settings() -> CameraSettings:
	"""Load camera options from the environment."""
	preview = os.getenv("RECEIPT_CAMERA_PREVIEW", "1").strip().lower() not in _FALSE_VALUES
	return CameraSettings(
		device_index=_env_number("RECEIPT_CAMERA_INDEX", DEFAULT_CAMERA_INDEX, int),
		preview=preview,
	)


def _load_log_level() -> int:
	name = os.getenv("RECEIPT_LOG_LEVEL", "").strip().upper()
	if not name:
		return DEFAULT_LOG_LEVEL
	level = logging.getLevelName(name)
	if not isinstance(level, int):
		raise ValueError(f"RECEIPT_LOG_LEVEL has an unknown level: {name}")
	return level


def _env_number(name: str, default, cast):
	raw = os.getenv(name)
	if raw is None or not raw.strip():
		return default
	try:
		return cast(raw.strip())
	except ValueError as exc:
		raise ValueError(f"{name} must be a number, got {raw!r}") from exc
