"""Tests for the camera and library image sources."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from config import CameraSettings
from errors import CaptureFailedError, UserCancelledError
from sources import camera as camera_module
from sources.camera import CameraCapture
from sources.library import LibraryPicker


def test_library_reads_given_path(tmp_path) -> None:
	image = tmp_path / "receipt.png"
	image.write_bytes(b"bytes")
	picked = LibraryPicker().pick(image)
	assert picked.data == b"bytes"
	assert picked.origin == "library"
	assert picked.source_name == str(image.resolve())


def test_library_prompts_when_no_path(tmp_path) -> None:
	image = tmp_path / "receipt.jpg"
	image.write_bytes(b"jpeg")
	picker = LibraryPicker(prompt=lambda _: f"  '{image}' ")
	assert picker.pick().data == b"jpeg"


@pytest.mark.parametrize("answer", ["", "   "])
def test_library_blank_answer_cancels(answer: str) -> None:
	with pytest.raises(UserCancelledError):
		LibraryPicker(prompt=lambda _: answer).pick()


def test_library_end_of_input_cancels() -> None:
	def closed(_: str) -> str:
		raise EOFError

	with pytest.raises(UserCancelledError):
		LibraryPicker(prompt=closed).pick()


def test_library_missing_file_fails(tmp_path) -> None:
	with pytest.raises(CaptureFailedError, match="Failed to load image."):
		LibraryPicker().pick(tmp_path / "missing.png")
	with pytest.raises(CaptureFailedError):
		LibraryPicker(default_path=tmp_path).pick()


class FakeVideoCapture:
	def __init__(self, frames: list, opened: bool = True) -> None:
		self.frames = list(frames)
		self.opened = opened
		self.released = False

	def isOpened(self) -> bool:
		return self.opened

	def read(self):
		if not self.frames:
			return False, None
		return True, self.frames.pop(0)

	def release(self) -> None:
		self.released = True


def _fake_cv2(device: FakeVideoCapture, keys: list[int] | None = None) -> SimpleNamespace:
	pressed = list(keys or [])
	return SimpleNamespace(
		VideoCapture=lambda index: device,
		imencode=lambda ext, frame: (True, SimpleNamespace(tobytes=lambda: f"{ext}:{frame}".encode())),
		imshow=lambda title, frame: None,
		waitKey=lambda delay: pressed.pop(0) if pressed else -1,
		getWindowProperty=lambda title, prop: 1.0,
		destroyAllWindows=lambda: None,
		WND_PROP_VISIBLE=4,
	)


def test_camera_grabs_frame_without_preview(monkeypatch: pytest.MonkeyPatch) -> None:
	device = FakeVideoCapture(["frame-1"])
	monkeypatch.setattr(camera_module, "_load_cv2", lambda: _fake_cv2(device))
	image = CameraCapture(CameraSettings(device_index=1, preview=False)).capture()
	assert image.data == b".png:frame-1"
	assert image.origin == "camera"
	assert image.source_name == "camera:1"
	assert device.released


def test_camera_preview_captures_on_space(monkeypatch: pytest.MonkeyPatch) -> None:
	device = FakeVideoCapture(["f1", "f2", "f3"])
	monkeypatch.setattr(camera_module, "_load_cv2", lambda: _fake_cv2(device, keys=[255, 32]))
	image = CameraCapture(CameraSettings()).capture()
	assert image.data == b".png:f2"


def test_camera_preview_escape_cancels(monkeypatch: pytest.MonkeyPatch) -> None:
	device = FakeVideoCapture(["f1", "f2"])
	monkeypatch.setattr(camera_module, "_load_cv2", lambda: _fake_cv2(device, keys=[27]))
	with pytest.raises(UserCancelledError):
		CameraCapture(CameraSettings()).capture()
	assert device.released


def test_camera_unavailable_fails(monkeypatch: pytest.MonkeyPatch) -> None:
	device = FakeVideoCapture([], opened=False)
	monkeypatch.setattr(camera_module, "_load_cv2", lambda: _fake_cv2(device))
	with pytest.raises(CaptureFailedError, match="Failed to capture image."):
		CameraCapture(CameraSettings(preview=False)).capture()
	assert device.released
