"""
Pytest configuration for local imports and artifact fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pytest
import reportlab.pdfgen.canvas

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def make_png_bytes(
	width: int,
	height: int,
	dpi: float | None = None,
	split: bool = False,
) -> bytes:
	"""
	Build a PNG image in memory.

	Args:
		width: Width in pixels.
		height: Height in pixels.
		dpi: Density to store, None for no pHYs chunk.
		split: Paint the left half red and the right half blue.

	Returns:
		PNG bytes.
	"""
	image = PIL.Image.new("RGB", (width, height), (220, 0, 0))
	if split:
		image.paste((0, 0, 220), (width // 2, 0, width, height))
	buffer = io.BytesIO()
	if dpi is None:
		image.save(buffer, format="PNG")
	else:
		image.save(buffer, format="PNG", dpi=(dpi, dpi))
	return buffer.getvalue()


#============================================
def make_pdf_bytes(width: float, height: float, rotation: int = 0) -> bytes:
	"""
	Build a one-page PDF filled with black.

	Args:
		width: Page width in points.
		height: Page height in points.
		rotation: Page /Rotate value.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(width, height))
	if rotation:
		pdf.setPageRotation(rotation)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.rect(0, 0, width, height, stroke=0, fill=1)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
	"""1 x 0.5 inch red image at 100 ppi."""
	return make_png_bytes(100, 50, dpi=100)


@pytest.fixture
def split_png_bytes() -> bytes:
	"""2 x 1 inch image at 100 ppi, red left half and blue right half."""
	return make_png_bytes(200, 100, dpi=100, split=True)


@pytest.fixture
def pdf_bytes() -> bytes:
	"""1 x 0.5 inch black PDF page."""
	return make_pdf_bytes(72.0, 36.0)
