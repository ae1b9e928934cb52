import io
import json
import pathlib

import fitz
import PIL.Image
import pypdf
import pytest

import conftest
import gang_sheet_builder.artifact
import gang_sheet_builder.config
import gang_sheet_builder.packer
import gang_sheet_builder.render


DPI = 72
INK_THRESHOLD = 240

SMALL_SHEET = gang_sheet_builder.config.GangSheetConfig(
	sheet_width=4.0,
	sheet_height=3.0,
	margin=0.25,
	gap=0.5,
)


#============================================
def _render_pdf_page(data: bytes, index: int) -> PIL.Image.Image:
	"""
	Render one page of a PDF to an image.

	Args:
		data: PDF bytes.
		index: Page index.

	Returns:
		PIL image.
	"""
	document = fitz.open(stream=data, filetype="pdf")
	page = document[index]
	scale = DPI / 72.0
	matrix = fitz.Matrix(scale, scale)
	pixmap = page.get_pixmap(matrix=matrix, alpha=False)
	image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()
	return image


#============================================
def _pixel_at(image: PIL.Image.Image, x_in: float, y_in: float, sheet_height: float) -> tuple[int, int, int]:
	"""
	Sample a pixel at sheet coordinates in inches, origin bottom-left.
	"""
	column = int(round(x_in * DPI))
	row = int(round((sheet_height - y_in) * DPI))
	return image.getpixel((column, row))


#============================================
def _plan_and_render(data: bytes, name: str, quantity: int, rotate: bool, outlines: bool = False):
	"""
	Decode, plan and render an artifact on the small test sheet.
	"""
	loaded = gang_sheet_builder.artifact.decode_artifact(data, name)
	request = gang_sheet_builder.packer.PlacementRequest(quantity=quantity, rotate=rotate)
	plan = gang_sheet_builder.packer.build_plan(loaded.artifact, request, SMALL_SHEET)
	pdf_data = gang_sheet_builder.render.render_plan_bytes(plan, loaded, outlines)
	return plan, pdf_data


#============================================
def _is_ink(pixel: tuple[int, int, int]) -> bool:
	return min(pixel) < INK_THRESHOLD


#============================================
def _check_cells(plan, pdf_data: bytes) -> None:
	"""
	Every placement center is inked and every horizontal gap is blank.
	"""
	sheet_height = plan.sheet_spec.sheet_height
	for sheet in plan.sheets:
		image = _render_pdf_page(pdf_data, sheet.index)
		for p in sheet.placements:
			center = _pixel_at(image, p.x + p.width / 2.0, p.y + p.height / 2.0, sheet_height)
			assert _is_ink(center), f"sheet {sheet.index} row {p.row} col {p.column} is blank"
			gap_x = p.x + p.width + plan.sheet_spec.gap / 2.0
			if gap_x >= plan.sheet_spec.sheet_width - plan.sheet_spec.margin:
				continue
			gap = _pixel_at(image, gap_x, p.y + p.height / 2.0, sheet_height)
			assert not _is_ink(gap), f"sheet {sheet.index} gap after col {p.column} has ink"


#============================================
def test_raster_sheets_render(png_bytes: bytes) -> None:
	"""
	Eight 1 x 0.5 inch copies render on two pages, six then two.
	"""
	plan, pdf_data = _plan_and_render(png_bytes, "art.png", 8, rotate=False)
	assert [len(sheet.placements) for sheet in plan.sheets] == [6, 2]
	reader = pypdf.PdfReader(io.BytesIO(pdf_data))
	assert len(reader.pages) == 2
	assert float(reader.pages[0].mediabox.width) == 4.0 * 72
	assert float(reader.pages[0].mediabox.height) == 3.0 * 72
	_check_cells(plan, pdf_data)

	image = _render_pdf_page(pdf_data, 1)
	empty = _pixel_at(image, 2.0, 0.5, plan.sheet_spec.sheet_height)
	assert not _is_ink(empty)


#============================================
def test_raster_rotation_turns_counter_clockwise(split_png_bytes: bytes) -> None:
	"""
	A rotated copy puts the left half of the image at the bottom.
	"""
	plan, pdf_data = _plan_and_render(split_png_bytes, "split.png", 2, rotate=True)
	placement = plan.sheets[0].placements[0]
	assert placement.width == pytest.approx(1.0, abs=1e-4)
	assert placement.height == pytest.approx(2.0, abs=1e-4)
	image = _render_pdf_page(pdf_data, 0)
	sheet_height = plan.sheet_spec.sheet_height
	center_x = placement.x + placement.width / 2.0
	bottom = _pixel_at(image, center_x, placement.y + placement.height / 4.0, sheet_height)
	top = _pixel_at(image, center_x, placement.y + placement.height * 3.0 / 4.0, sheet_height)
	assert bottom[0] > 150 and bottom[2] < 80
	assert top[2] > 150 and top[0] < 80


#============================================
def test_vector_sheets_render(pdf_bytes: bytes) -> None:
	"""
	PDF page artifacts are merged onto every placement.
	"""
	plan, pdf_data = _plan_and_render(pdf_bytes, "art.pdf", 8, rotate=False, outlines=True)
	reader = pypdf.PdfReader(io.BytesIO(pdf_data))
	assert len(reader.pages) == 2
	_check_cells(plan, pdf_data)


#============================================
def test_vector_rotated_render(pdf_bytes: bytes) -> None:
	"""
	Rotated PDF page copies cover their rotated footprint.
	"""
	plan, pdf_data = _plan_and_render(pdf_bytes, "art.pdf", 5, rotate=True)
	assert plan.footprint.width == 0.5
	assert plan.footprint.height == 1.0
	_check_cells(plan, pdf_data)


#============================================
def test_zero_quantity_has_no_pages(png_bytes: bytes) -> None:
	"""
	An empty plan writes a PDF without pages.
	"""
	plan, pdf_data = _plan_and_render(png_bytes, "art.png", 0, rotate=False)
	assert plan.sheets == ()
	reader = pypdf.PdfReader(io.BytesIO(pdf_data))
	assert len(reader.pages) == 0


#============================================
def test_render_plan_and_manifest(tmp_path: pathlib.Path) -> None:
	"""
	render_plan writes the PDF and write_manifest records the layout.
	"""
	data = conftest.make_png_bytes(100, 50, dpi=100)
	loaded = gang_sheet_builder.artifact.decode_artifact(data, "art.png")
	request = gang_sheet_builder.packer.PlacementRequest(quantity=7)
	plan = gang_sheet_builder.packer.build_plan(loaded.artifact, request, SMALL_SHEET)

	output_path = tmp_path / "sheet.pdf"
	result = gang_sheet_builder.render.render_plan(plan, loaded, output_path)
	assert output_path.stat().st_size > 0
	assert result.placed == 7
	assert result.sheets == 2
	assert result.per_sheet == 6

	manifest_path = tmp_path / "sheet.json"
	gang_sheet_builder.render.write_manifest(manifest_path, "art.png", plan, result, SMALL_SHEET)
	manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert manifest["placements_per_sheet"] == [6, 1]
	assert manifest["layout"]["sheet_width"] == 4.0
	assert manifest["capacity"]["per_row"] == 2
