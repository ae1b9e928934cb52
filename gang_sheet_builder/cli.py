"""
CLI entry points for gang sheet generation.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# PIP3 modules
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.artifact
import gang_sheet_builder.config
import gang_sheet_builder.errors
import gang_sheet_builder.packer
import gang_sheet_builder.render


GangSheetConfig = gsb.config.GangSheetConfig
GangSheetError = gsb.errors.GangSheetError
PlacementRequest = gsb.packer.PlacementRequest

DEFAULT_DENSITY = gsb.config.DEFAULT_DENSITY
DEFAULT_SHEET_WIDTH = gsb.config.DEFAULT_SHEET_WIDTH
DEFAULT_SHEET_HEIGHT = gsb.config.DEFAULT_SHEET_HEIGHT
DEFAULT_MARGIN = gsb.config.DEFAULT_MARGIN
DEFAULT_GAP = gsb.config.DEFAULT_GAP
DEFAULT_MAX_SHEETS = gsb.config.DEFAULT_MAX_SHEETS


#============================================
def build_config(args: argparse.Namespace) -> GangSheetConfig:
	"""
	Build gang sheet config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		GangSheetConfig.
	"""
	config = GangSheetConfig(
		default_density=args.density,
		sheet_width=args.sheet_width,
		sheet_height=args.sheet_height,
		margin=args.margin,
		gap=args.gap,
		max_sheets=args.max_sheets,
		draw_outlines=args.draw_outlines,
	)
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Tile one image or PDF page across gang sheet PDF pages.")
	parser.add_argument("input", help="Raster image or PDF file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	request_group = parser.add_argument_group("Request")
	request_group.add_argument("-q", "--quantity", dest="quantity", type=int, default=1, help="Number of copies.")
	request_group.add_argument("-r", "--rotate", dest="rotate", action="store_true", help="Rotate each copy 90 degrees.")
	request_group.add_argument("-R", "--no-rotate", dest="rotate", action="store_false", help="Keep copies upright.")
	request_group.add_argument("--page", dest="page_index", type=int, default=1, help="PDF page number (1-based).")

	sheet_group = parser.add_argument_group("Sheet (inches)")
	sheet_group.add_argument("-W", "--sheet-width", dest="sheet_width", type=float, default=DEFAULT_SHEET_WIDTH, help="Sheet width.")
	sheet_group.add_argument("-H", "--sheet-height", dest="sheet_height", type=float, default=DEFAULT_SHEET_HEIGHT, help="Sheet height.")
	sheet_group.add_argument("--margin", dest="margin", type=float, default=DEFAULT_MARGIN, help="Margin on every edge.")
	sheet_group.add_argument("--gap", dest="gap", type=float, default=DEFAULT_GAP, help="Gap between copies.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("--density", dest="density", type=float, default=DEFAULT_DENSITY, help="Fallback pixels per inch.")
	behavior_group.add_argument("-g", "--max-sheets", dest="max_sheets", type=int, default=DEFAULT_MAX_SHEETS, help="Limit number of sheets.")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw cut outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable cut outlines.")
	behavior_group.add_argument("--plan-only", dest="plan_only", action="store_true", help="Print the layout and skip rendering.")
	behavior_group.add_argument("--log-level", dest="log_level", choices=["DEBUG", "INFO", "WARNING"], default="WARNING", help="Log level.")

	parser.set_defaults(
		rotate=False,
		draw_outlines=False,
		plan_only=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def print_plan(plan: gsb.packer.PlacementPlan) -> None:
	"""
	Print a per-sheet layout listing.

	Args:
		plan: PlacementPlan.
	"""
	for sheet in plan.sheets:
		print(f"Sheet {sheet.index + 1}: {len(sheet.placements)} copies")
		for placement in sheet.placements:
			print(
				"  row {} col {} at ({:.3f}, {:.3f}) size {:.3f} x {:.3f}{}".format(
					placement.row,
					placement.column,
					placement.x,
					placement.y,
					placement.width,
					placement.height,
					" rotated" if placement.rotated else "",
				)
			)


#============================================
def run_pipeline(args: argparse.Namespace) -> gsb.config.GangSheetResult | None:
	"""
	Run the full pipeline from artifact input to gang sheet output.

	Args:
		args: Parsed argparse namespace.

	Returns:
		GangSheetResult, or None when rendering is skipped.
	"""
	print("Gang sheet pipeline")
	print(f"Input: {args.input}")
	print(f"Output PDF: {args.output_path}")
	print(f"Quantity: {args.quantity}")
	print(f"Rotate: {args.rotate}")
	print(f"Sheet: {args.sheet_width} x {args.sheet_height} in, margin {args.margin}, gap {args.gap}")
	print(f"Draw outlines: {args.draw_outlines}")

	start_time = time.perf_counter()
	input_path = pathlib.Path(args.input)
	loaded = gsb.artifact.load_artifact(input_path, args.page_index - 1)
	artifact = loaded.artifact
	print(f"Artifact: {artifact.kind} {artifact.native_width:g} x {artifact.native_height:g}")

	config = build_config(args)
	request = PlacementRequest(quantity=args.quantity, rotate=args.rotate)
	plan_start = time.perf_counter()
	plan = gsb.packer.build_plan(artifact, request, config)
	plan_end = time.perf_counter()
	print(f"Footprint: {plan.footprint.width:.3f} x {plan.footprint.height:.3f} in")
	print(
		f"Capacity: {plan.capacity.per_row} per row, "
		f"{plan.capacity.per_column} per column, {plan.capacity.per_sheet} per sheet"
	)
	print(f"Sheets needed: {len(plan.sheets)}")

	if args.plan_only:
		print_plan(plan)
		print("Stopping before rendering.")
		return None

	output_path = pathlib.Path(args.output_path)
	render_start = time.perf_counter()
	result = gsb.render.render_plan(plan, loaded, output_path, config.draw_outlines)
	render_end = time.perf_counter()
	print(f"Pages written: {result.sheets}")
	print(f"Copies placed: {result.placed}")

	manifest_path = args.manifest_path
	if manifest_path is not None:
		gsb.render.write_manifest(pathlib.Path(manifest_path), input_path.name, plan, result, config)
		print(f"Manifest written: {manifest_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: plan={:.3f}s render={:.2f}s total={:.2f}s".format(
			plan_end - plan_start,
			render_end - render_start,
			total_time,
		)
	)
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	logger.remove()
	logger.add(sys.stderr, level=args.log_level)
	try:
		run_pipeline(args)
	except GangSheetError as error:
		sys.exit(f"Error: {error}")
