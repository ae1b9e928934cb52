import pathlib

import pytest

import conftest
import gang_sheet_builder.artifact
import gang_sheet_builder.errors


decode_artifact = gang_sheet_builder.artifact.decode_artifact


#============================================
def test_png_with_density(png_bytes: bytes) -> None:
	"""
	PNG size and pHYs density are read through Pillow.
	"""
	loaded = decode_artifact(png_bytes, "art.png")
	artifact = loaded.artifact
	assert artifact.kind == "raster"
	assert (artifact.native_width, artifact.native_height) == (100, 50)
	assert artifact.density == pytest.approx(100.0, abs=0.01)
	assert loaded.image is not None
	assert loaded.page is None


#============================================
def test_png_without_density() -> None:
	"""
	Images without density metadata leave density unset.
	"""
	loaded = decode_artifact(conftest.make_png_bytes(30, 20), "plain.png")
	assert loaded.artifact.density is None


#============================================
def test_pdf_page_size(pdf_bytes: bytes) -> None:
	"""
	PDF pages report their media box in points.
	"""
	loaded = decode_artifact(pdf_bytes, "art.pdf")
	artifact = loaded.artifact
	assert artifact.kind == "vector"
	assert artifact.native_width == pytest.approx(72.0)
	assert artifact.native_height == pytest.approx(36.0)
	assert loaded.page is not None


#============================================
def test_pdf_detected_without_suffix(pdf_bytes: bytes) -> None:
	"""
	PDF bytes are recognized by their header.
	"""
	loaded = decode_artifact(pdf_bytes, "upload")
	assert loaded.artifact.kind == "vector"


#============================================
def test_rotated_pdf_page_reports_displayed_size() -> None:
	"""
	A /Rotate 90 page reports its displayed width and height.
	"""
	data = conftest.make_pdf_bytes(72.0, 36.0, rotation=90)
	loaded = decode_artifact(data, "rotated.pdf")
	assert loaded.artifact.native_width == pytest.approx(36.0)
	assert loaded.artifact.native_height == pytest.approx(72.0)


#============================================
def test_pdf_page_out_of_range(pdf_bytes: bytes) -> None:
	"""
	Asking for a missing page is a decode error.
	"""
	with pytest.raises(gang_sheet_builder.errors.ArtifactDecodeError) as excinfo:
		decode_artifact(pdf_bytes, "art.pdf", page_index=3)
	assert "out of range" in str(excinfo.value)


#============================================
@pytest.mark.parametrize("data", [b"", b"not an image at all"])
def test_undecodable_bytes(data: bytes) -> None:
	"""
	Empty or unknown bytes raise ArtifactDecodeError.
	"""
	with pytest.raises(gang_sheet_builder.errors.ArtifactDecodeError):
		decode_artifact(data, "junk.png")


#============================================
def test_load_artifact_from_file(tmp_path: pathlib.Path, png_bytes: bytes) -> None:
	"""
	Files are decoded under their own name.
	"""
	path = tmp_path / "sticker.png"
	path.write_bytes(png_bytes)
	loaded = gang_sheet_builder.artifact.load_artifact(path)
	assert loaded.artifact.source_name == "sticker.png"
	assert loaded.artifact.native_width == 100
