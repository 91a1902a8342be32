"""Extraction of number- and price-like tokens from recognized text."""


import re
from typing import Final

# Fraction digits past the second are consumed but not returned.
NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"([0-9]+(?:\.[0-9]{1,2})?)(?:(?<=\.[0-9]{2})[0-9]+)?")


def extract_numbers_or_prices(text: str) -> list[str]:
	"""Return every integer or one/two-decimal number in ``text``, left to right.

	Tokens are returned verbatim: no numeric parsing, no deduplication and no
	currency handling. A third fraction digit is left behind in the text and
	never becomes a token of its own (``"12.555"`` yields ``"12.55"``).
	"""
	return [match.group(1) for match in NUMBER_PATTERN.finditer(text)]
