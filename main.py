"""Command-line interface for scanning receipts."""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from typing import Callable

from config import AppConfig, configure_logging, load_config
from providers.tesseract_ocr import TesseractOcrClient
from schemas import ScanResult
from screen import ScanScreen
from sources.camera import CameraCapture
from sources.library import LibraryPicker

HELP_TEXT = "Commands: camera | library [PATH] | quit"


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(description="Scan a receipt and extract numbers or prices")
	mode = parser.add_mutually_exclusive_group(required=True)
	mode.add_argument("--source", choices=["camera", "library"], help="Scan once from the camera or an image file")
	mode.add_argument("--interactive", action="store_true", help="Scan repeatedly from a command prompt")
	parser.add_argument("--image", help="Image file for the library source (prompted for when omitted)")
	parser.add_argument("--camera", type=int, default=None, help="Camera device index")
	parser.add_argument("--no-preview", action="store_true", help="Capture without the camera preview window")
	parser.add_argument("--lang", default=None, help="Tesseract language(s), e.g. eng or eng+deu")
	parser.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode")
	parser.add_argument("--min_conf", type=float, default=None, help="Minimum confidence threshold for text lines")
	parser.add_argument("--json", action="store_true", help="Print the full scan result as JSON")
	return parser.parse_args(argv)


def apply_overrides(args: argparse.Namespace, config: AppConfig) -> AppConfig:
	"""Return ``config`` with any command-line overrides applied."""
	tesseract = config.tesseract
	overrides = {key: value for key, value in (("lang", args.lang), ("psm", args.psm), ("min_conf", args.min_conf)) if value is not None}
	if overrides:
		tesseract = dataclasses.replace(tesseract, **overrides)
	camera = config.camera
	if args.camera is not None:
		camera = dataclasses.replace(camera, device_index=args.camera)
	if args.no_preview:
		camera = dataclasses.replace(camera, preview=False)
	return dataclasses.replace(config, tesseract=tesseract, camera=camera)


def build_screen(config: AppConfig, image: str | None = None) -> ScanScreen:
	"""Assemble a scan screen from the configured recognizer and sources."""
	return ScanScreen(
		recognizer=TesseractOcrClient(config.tesseract),
		camera=CameraCapture(config.camera),
		library=LibraryPicker(default_path=image),
	)


def render(screen: ScanScreen, as_json: bool) -> None:
	result = screen.last_result
	if as_json and result is not None:
		print(json.dumps(result.model_dump(), ensure_ascii=False, indent=2))
	else:
		print(screen.status)


def run(args: argparse.Namespace, screen: ScanScreen) -> ScanResult | None:
	"""Execute a single scan for the provided arguments."""
	if args.source == "camera":
		screen.scan_with_camera()
	else:
		screen.scan_from_library()
	result = screen.wait()
	render(screen, args.json)
	return result


def run_interactive(screen: ScanScreen, as_json: bool = False, read: Callable[[str], str] = input) -> None:
	"""Prompt for scan commands until ``quit`` or end of input."""
	print(HELP_TEXT)
	print(screen.status)
	while True:
		try:
			line = read("> ").strip()
		except EOFError:
			return
		command, _, argument = line.partition(" ")
		command = command.lower()
		if command in ("quit", "exit", "q"):
			return
		if command == "camera":
			screen.scan_with_camera()
		elif command == "library":
			screen.scan_from_library(argument.strip() or None)
		else:
			if command:
				print(HELP_TEXT)
			continue
		screen.wait()
		render(screen, as_json)


def main(argv: list[str] | None = None) -> int:
	"""Entry point for the CLI application."""
	try:
		args = parse_arguments(argv)
		config = apply_overrides(args, load_config())
	except ValueError as exc:
		configure_logging()
		logging.exception("Invalid configuration: %s", exc)
		return 1
	configure_logging(config.log_level)

	try:
		with build_screen(config, image=args.image) as screen:
			if args.interactive:
				run_interactive(screen, as_json=args.json)
				return 0
			result = run(args, screen)
	except Exception as exc:  # noqa: BLE001
		logging.exception("Receipt scan failed: %s", exc)
		return 1
	return 0 if result is not None and result.ok else 1


if __name__ == "__main__":
	raise SystemExit(main())
