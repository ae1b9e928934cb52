"""
Capacity planning: how many footprints fit on one sheet.
"""

# Standard Library
import dataclasses
import math

# PIP3 modules
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.config
import gang_sheet_builder.errors
import gang_sheet_builder.units


SheetSpec = gsb.config.SheetSpec
Footprint = gsb.units.Footprint
ArtifactTooLarge = gsb.errors.ArtifactTooLarge
InvalidSheetSpec = gsb.errors.InvalidSheetSpec

CAPACITY_EPSILON = gsb.config.CAPACITY_EPSILON


@dataclasses.dataclass(frozen=True)
class Capacity:
	per_row: int
	per_column: int
	per_sheet: int
	usable_width: float
	usable_height: float


#============================================
def validate_sheet_spec(sheet_spec: SheetSpec) -> None:
	"""
	Reject sheet geometry without a usable area.

	Args:
		sheet_spec: Sheet geometry in inches.
	"""
	reason = None
	if sheet_spec.sheet_width <= 0 or sheet_spec.sheet_height <= 0:
		reason = "sheet dimensions must be positive"
	elif sheet_spec.margin < 0:
		reason = "margin must not be negative"
	elif sheet_spec.gap < 0:
		reason = "gap must not be negative"
	elif sheet_spec.margin * 2.0 >= sheet_spec.sheet_width:
		reason = "margin leaves no usable width"
	elif sheet_spec.margin * 2.0 >= sheet_spec.sheet_height:
		reason = "margin leaves no usable height"
	if reason is not None:
		raise InvalidSheetSpec(
			sheet_spec.sheet_width,
			sheet_spec.sheet_height,
			sheet_spec.margin,
			sheet_spec.gap,
			reason,
		)


#============================================
def count_along(usable: float, size: float, gap: float) -> int:
	"""
	Count items of one size that fit along a usable span.

	N items need N sizes and N-1 gaps, so adding one gap to the span turns
	the fit into a plain floor division. The span gets CAPACITY_EPSILON of
	slack so exact fits survive float error; N items never overrun it by more.

	Args:
		usable: Usable span.
		size: Item size along the span.
		gap: Spacing between adjacent items.

	Returns:
		Item count, zero when even one item does not fit.
	"""
	count = math.floor((usable + gap + CAPACITY_EPSILON) / (size + gap))
	return max(count, 0)


#============================================
def plan_capacity(footprint: Footprint, sheet_spec: SheetSpec) -> Capacity:
	"""
	Compute the per-row, per-column and per-sheet capacity.

	Args:
		footprint: Footprint after rotation, in inches.
		sheet_spec: Sheet geometry in inches.

	Returns:
		Capacity.
	"""
	validate_sheet_spec(sheet_spec)
	usable_width = sheet_spec.sheet_width - 2.0 * sheet_spec.margin
	usable_height = sheet_spec.sheet_height - 2.0 * sheet_spec.margin

	per_row = count_along(usable_width, footprint.width, sheet_spec.gap)
	per_column = count_along(usable_height, footprint.height, sheet_spec.gap)
	if per_row == 0 or per_column == 0:
		raise ArtifactTooLarge(
			footprint.width,
			footprint.height,
			usable_width,
			usable_height,
			per_row,
			per_column,
		)

	capacity = Capacity(
		per_row=per_row,
		per_column=per_column,
		per_sheet=per_row * per_column,
		usable_width=usable_width,
		usable_height=usable_height,
	)
	logger.debug(
		"Capacity for {:.4g} x {:.4g} in: {} per row, {} per column, {} per sheet",
		footprint.width,
		footprint.height,
		capacity.per_row,
		capacity.per_column,
		capacity.per_sheet,
	)
	return capacity
