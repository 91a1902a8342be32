"""Pydantic schemas for captured images, recognized text and scan outcomes."""


from typing import Literal

from pydantic import BaseModel, Field

from errors import ErrorKind, ScanError

ScanFlow = Literal["camera", "library"]

INITIAL_STATUS = "No data scanned yet."
NO_TEXT_STATUS = "No text found"
NO_NUMBERS_STATUS = "No numbers found"


class TextCandidate(BaseModel):
	"""One recognition hypothesis for a line of text."""
	text: str
	confidence: float | None = None


class TextLine(BaseModel):
	"""A recognized line with its confidence-ranked candidates."""
	candidates: list[TextCandidate] = Field(min_length=1)
	line_index: int | None = None

	def top_candidate(self) -> TextCandidate:
		"""Return the highest-confidence candidate; unscored candidates rank last."""
		ranked = sorted(
			self.candidates,
			key=lambda candidate: -candidate.confidence if candidate.confidence is not None else float("inf"),
		)
		return ranked[0]


class RecognizedText(BaseModel):
	"""Ordered lines produced by a single recognition request."""
	lines: list[TextLine] = Field(default_factory=list)

	def full_text(self) -> str:
		return "\n".join(line.top_candidate().text for line in self.lines)


class CapturedImage(BaseModel):
	"""Encoded image bytes handed over by an image source."""
	data: bytes
	origin: ScanFlow
	source_name: str | None = None


class ScanResult(BaseModel):
	"""Outcome of one scan attempt: either recognized text or a single error."""
	flow: ScanFlow
	text: str | None = None
	tokens: list[str] = Field(default_factory=list)
	error: str | None = None
	error_kind: ErrorKind | None = None

	@property
	def ok(self) -> bool:
		return self.error is None

	@classmethod
	def success(cls, flow: ScanFlow, text: str, tokens: list[str]) -> "ScanResult":
		return cls(flow=flow, text=text, tokens=tokens)

	@classmethod
	def failure(cls, flow: ScanFlow, exc: ScanError) -> "ScanResult":
		return cls(flow=flow, error=str(exc), error_kind=exc.kind)

	def display(self) -> str:
		"""Render the outcome as the single status line shown to the user."""
		if not self.ok:
			return f"Error: {self.error}"
		if self.flow == "camera":
			return ", ".join(self.tokens) if self.tokens else NO_NUMBERS_STATUS
		return self.text or NO_TEXT_STATUS
