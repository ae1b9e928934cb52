"""
Rendering a placement plan into a PDF document.
"""

# Standard Library
import io
import json
import pathlib
import typing

# PIP3 modules
import PIL.Image
import pypdf
import reportlab.lib.utils
import reportlab.pdfgen.canvas
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.artifact
import gang_sheet_builder.config
import gang_sheet_builder.packer


LoadedArtifact = gsb.artifact.LoadedArtifact
PlacementPlan = gsb.packer.PlacementPlan
Placement = gsb.packer.Placement
Sheet = gsb.packer.Sheet
GangSheetConfig = gsb.config.GangSheetConfig
GangSheetResult = gsb.config.GangSheetResult

OUTLINE_WIDTH = gsb.config.OUTLINE_WIDTH
OUTLINE_GRAY = gsb.config.OUTLINE_GRAY
inches_to_points = gsb.config.inches_to_points
DIRECT_IMAGE_MODES = ("RGB", "RGBA", "L", "CMYK")


#============================================
def page_size_points(plan: PlacementPlan) -> tuple[float, float]:
	"""
	Get the output page size for a plan.

	Args:
		plan: PlacementPlan.

	Returns:
		Tuple of (width, height) in points.
	"""
	return (
		inches_to_points(plan.sheet_spec.sheet_width),
		inches_to_points(plan.sheet_spec.sheet_height),
	)


#============================================
def placement_box_points(placement: Placement) -> tuple[float, float, float, float]:
	"""
	Convert a placement to a box in points.

	Args:
		placement: Placement in inches.

	Returns:
		Tuple of (x, y, width, height) in points.
	"""
	return (
		inches_to_points(placement.x),
		inches_to_points(placement.y),
		inches_to_points(placement.width),
		inches_to_points(placement.height),
	)


#============================================
def draw_placement_outlines(pdf: reportlab.pdfgen.canvas.Canvas, sheet: Sheet) -> None:
	"""
	Draw cut outlines around every placement on the current page.

	Args:
		pdf: ReportLab canvas.
		sheet: Sheet being drawn.
	"""
	pdf.saveState()
	pdf.setLineWidth(OUTLINE_WIDTH)
	pdf.setStrokeColorRGB(OUTLINE_GRAY, OUTLINE_GRAY, OUTLINE_GRAY)
	for placement in sheet.placements:
		x, y, width, height = placement_box_points(placement)
		pdf.rect(x, y, width, height, stroke=1, fill=0)
	pdf.restoreState()


#============================================
def prepare_image(image: PIL.Image.Image) -> PIL.Image.Image:
	"""
	Convert an image to a mode ReportLab embeds directly.

	Args:
		image: Decoded PIL image.

	Returns:
		Image in RGB, RGBA, L or CMYK mode.
	"""
	if image.mode in DIRECT_IMAGE_MODES:
		return image
	if image.mode in ("LA", "PA") or "transparency" in image.info:
		return image.convert("RGBA")
	return image.convert("RGB")


#============================================
def draw_raster_placement(
	pdf: reportlab.pdfgen.canvas.Canvas,
	placement: Placement,
	image_reader: reportlab.lib.utils.ImageReader,
) -> None:
	"""
	Draw one raster placement.

	A rotated placement turns the image 90 degrees counter-clockwise about
	the bottom-right corner of its box, so the drawn image exactly covers
	the footprint.

	Args:
		pdf: ReportLab canvas.
		placement: Placement in inches.
		image_reader: ImageReader for the artifact.
	"""
	x, y, width, height = placement_box_points(placement)
	pdf.saveState()
	if placement.rotated:
		pdf.translate(x + width, y)
		pdf.rotate(90)
		pdf.drawImage(image_reader, 0, 0, width=height, height=width, mask="auto")
	else:
		pdf.drawImage(image_reader, x, y, width=width, height=height, mask="auto")
	pdf.restoreState()


#============================================
def write_raster_pdf(
	plan: PlacementPlan,
	loaded: LoadedArtifact,
	stream: typing.BinaryIO,
	draw_outlines: bool,
) -> None:
	"""
	Write a raster artifact plan with ReportLab, one page per sheet.

	Args:
		plan: PlacementPlan.
		loaded: LoadedArtifact holding a PIL image.
		stream: Binary output stream.
		draw_outlines: Draw cut outlines.
	"""
	page_width, page_height = page_size_points(plan)
	pdf = reportlab.pdfgen.canvas.Canvas(stream, pagesize=(page_width, page_height))
	image_reader = reportlab.lib.utils.ImageReader(prepare_image(loaded.image))
	for sheet in plan.sheets:
		for placement in sheet.placements:
			draw_raster_placement(pdf, placement, image_reader)
		if draw_outlines:
			draw_placement_outlines(pdf, sheet)
		pdf.showPage()
	pdf.save()


#============================================
def build_outline_overlay(plan: PlacementPlan, sheet: Sheet) -> pypdf.PageObject:
	"""
	Build a PDF overlay page with placement outlines.

	Args:
		plan: PlacementPlan.
		sheet: Sheet to outline.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	page_width, page_height = page_size_points(plan)
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	draw_placement_outlines(pdf, sheet)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def vector_transform(placement: Placement, artifact_page: pypdf.PageObject) -> pypdf.Transformation:
	"""
	Build the transform that maps the artifact page onto a placement box.

	Args:
		placement: Placement in inches.
		artifact_page: Artifact PDF page.

	Returns:
		pypdf Transformation.
	"""
	x, y, width, height = placement_box_points(placement)
	mediabox = artifact_page.mediabox
	native_width = float(mediabox.width)
	native_height = float(mediabox.height)
	if placement.rotated:
		scale_x = height / native_width
		scale_y = width / native_height
	else:
		scale_x = width / native_width
		scale_y = height / native_height

	transform = pypdf.Transformation().translate(
		-float(mediabox.left),
		-float(mediabox.bottom),
	).scale(scale_x, scale_y)
	if placement.rotated:
		transform = transform.rotate(90).translate(x + width, y)
	else:
		transform = transform.translate(x, y)
	return transform


#============================================
def write_vector_pdf(
	plan: PlacementPlan,
	loaded: LoadedArtifact,
	stream: typing.BinaryIO,
	draw_outlines: bool,
) -> None:
	"""
	Write a PDF page artifact plan with pypdf, one page per sheet.

	Args:
		plan: PlacementPlan.
		loaded: LoadedArtifact holding a pypdf page.
		stream: Binary output stream.
		draw_outlines: Draw cut outlines.
	"""
	writer = pypdf.PdfWriter()
	page_width, page_height = page_size_points(plan)
	for sheet in plan.sheets:
		writer.add_page(
			pypdf.PageObject.create_blank_page(
				width=page_width,
				height=page_height,
			)
		)
		page = writer.pages[-1]
		for placement in sheet.placements:
			page.merge_transformed_page(loaded.page, vector_transform(placement, loaded.page))
		if draw_outlines:
			page.merge_page(build_outline_overlay(plan, sheet))
	writer.write(stream)


#============================================
def build_result(plan: PlacementPlan) -> GangSheetResult:
	"""
	Summarize a plan.

	Args:
		plan: PlacementPlan.

	Returns:
		GangSheetResult.
	"""
	return GangSheetResult(
		quantity=plan.quantity,
		placed=plan.total_placements,
		sheets=len(plan.sheets),
		per_row=plan.capacity.per_row,
		per_column=plan.capacity.per_column,
		per_sheet=plan.capacity.per_sheet,
		footprint_width=plan.footprint.width,
		footprint_height=plan.footprint.height,
		rotated=plan.rotated,
	)


#============================================
def write_plan_pdf(
	plan: PlacementPlan,
	loaded: LoadedArtifact,
	stream: typing.BinaryIO,
	draw_outlines: bool = False,
) -> GangSheetResult:
	"""
	Render a plan into a PDF stream.

	An empty plan yields a document without pages.

	Args:
		plan: PlacementPlan.
		loaded: Decoded artifact.
		stream: Binary output stream.
		draw_outlines: Draw cut outlines.

	Returns:
		GangSheetResult.
	"""
	if not plan.sheets:
		pypdf.PdfWriter().write(stream)
	elif loaded.page is not None:
		write_vector_pdf(plan, loaded, stream, draw_outlines)
	else:
		write_raster_pdf(plan, loaded, stream, draw_outlines)
	return build_result(plan)


#============================================
def render_plan(
	plan: PlacementPlan,
	loaded: LoadedArtifact,
	output_path: pathlib.Path,
	draw_outlines: bool = False,
) -> GangSheetResult:
	"""
	Render a plan into a PDF file.

	Args:
		plan: PlacementPlan.
		loaded: Decoded artifact.
		output_path: Output PDF path.
		draw_outlines: Draw cut outlines.

	Returns:
		GangSheetResult.
	"""
	with output_path.open("wb") as handle:
		result = write_plan_pdf(plan, loaded, handle, draw_outlines)
	logger.info(
		"Gang sheet written to {}: {} placements on {} sheets",
		output_path,
		result.placed,
		result.sheets,
	)
	return result


#============================================
def render_plan_bytes(
	plan: PlacementPlan,
	loaded: LoadedArtifact,
	draw_outlines: bool = False,
) -> bytes:
	"""
	Render a plan into PDF bytes.

	Args:
		plan: PlacementPlan.
		loaded: Decoded artifact.
		draw_outlines: Draw cut outlines.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	write_plan_pdf(plan, loaded, buffer, draw_outlines)
	return buffer.getvalue()


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	source_name: str,
	plan: PlacementPlan,
	result: GangSheetResult,
	config: GangSheetConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		source_name: Artifact name.
		plan: PlacementPlan.
		result: Render result.
		config: Gang sheet configuration.
	"""
	data = {
		"input": source_name,
		"quantity": result.quantity,
		"placed": result.placed,
		"sheets": result.sheets,
		"rotated": result.rotated,
		"footprint": {
			"width": result.footprint_width,
			"height": result.footprint_height,
		},
		"capacity": {
			"per_row": result.per_row,
			"per_column": result.per_column,
			"per_sheet": result.per_sheet,
			"usable_width": plan.capacity.usable_width,
			"usable_height": plan.capacity.usable_height,
		},
		"placements_per_sheet": [len(sheet.placements) for sheet in plan.sheets],
		"layout": {
			"sheet_width": config.sheet_width,
			"sheet_height": config.sheet_height,
			"margin": config.margin,
			"gap": config.gap,
			"default_density": config.default_density,
			"max_sheets": config.max_sheets,
			"draw_outlines": config.draw_outlines,
			"units": "in",
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
