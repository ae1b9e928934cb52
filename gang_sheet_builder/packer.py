"""
Placement packing: row-major fill of footprints across sheets.

Coordinates are in inches with the origin at the bottom-left corner of the
sheet and y increasing upward, matching PDF page space. Rows are filled
from the top margin downward, columns from the left margin rightward.
"""

# Standard Library
import dataclasses

# PIP3 modules
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.capacity
import gang_sheet_builder.config
import gang_sheet_builder.errors
import gang_sheet_builder.units


Artifact = gsb.units.Artifact
Footprint = gsb.units.Footprint
Capacity = gsb.capacity.Capacity
SheetSpec = gsb.config.SheetSpec
GangSheetConfig = gsb.config.GangSheetConfig
InvalidRequest = gsb.errors.InvalidRequest
QuantityExceedsLimit = gsb.errors.QuantityExceedsLimit

DEFAULT_MAX_SHEETS = gsb.config.DEFAULT_MAX_SHEETS


@dataclasses.dataclass(frozen=True)
class PlacementRequest:
	quantity: int
	rotate: bool = False


@dataclasses.dataclass(frozen=True)
class Placement:
	x: float
	y: float
	width: float
	height: float
	rotated: bool
	row: int
	column: int


@dataclasses.dataclass(frozen=True)
class Sheet:
	index: int
	placements: tuple[Placement, ...]


@dataclasses.dataclass(frozen=True)
class PlacementPlan:
	sheets: tuple[Sheet, ...]
	sheet_spec: SheetSpec
	footprint: Footprint
	capacity: Capacity
	quantity: int
	rotated: bool

	@property
	def total_placements(self) -> int:
		return sum(len(sheet.placements) for sheet in self.sheets)


#============================================
def sheets_required(quantity: int, per_sheet: int) -> int:
	"""
	Count sheets needed for a quantity.

	Args:
		quantity: Requested replica count.
		per_sheet: Placements per full sheet.

	Returns:
		Sheet count, zero for zero quantity.
	"""
	if quantity <= 0:
		return 0
	return -(-quantity // per_sheet)


#============================================
def cell_origin(
	row: int,
	column: int,
	footprint: Footprint,
	sheet_spec: SheetSpec,
) -> tuple[float, float]:
	"""
	Compute the bottom-left corner of a grid cell.

	Args:
		row: Row index, 0 is the top row.
		column: Column index, 0 is the left column.
		footprint: Footprint in inches.
		sheet_spec: Sheet geometry in inches.

	Returns:
		Tuple of (x, y).
	"""
	x = sheet_spec.margin + column * (footprint.width + sheet_spec.gap)
	y = (
		sheet_spec.sheet_height
		- sheet_spec.margin
		- (row + 1) * footprint.height
		- row * sheet_spec.gap
	)
	return (x, y)


#============================================
def pack(
	quantity: int,
	footprint: Footprint,
	sheet_spec: SheetSpec,
	capacity: Capacity,
	max_sheets: int = DEFAULT_MAX_SHEETS,
	rotated: bool = False,
) -> PlacementPlan:
	"""
	Lay out quantity placements row-major across as many sheets as needed.

	Args:
		quantity: Requested replica count.
		footprint: Footprint after rotation, in inches.
		sheet_spec: Sheet geometry in inches.
		capacity: Capacity from plan_capacity.
		max_sheets: Hard ceiling on the number of sheets.
		rotated: Whether placements carry a 90 degree rotation.

	Returns:
		PlacementPlan.
	"""
	if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
		raise InvalidRequest(quantity)
	gsb.config.validate_max_sheets(max_sheets)

	sheet_count = sheets_required(quantity, capacity.per_sheet)
	if sheet_count > max_sheets:
		raise QuantityExceedsLimit(quantity, capacity.per_sheet, sheet_count, max_sheets)

	sheets: list[Sheet] = []
	emitted = 0
	for sheet_index in range(sheet_count):
		placements: list[Placement] = []
		for row in range(capacity.per_column):
			if emitted >= quantity:
				break
			for column in range(capacity.per_row):
				if emitted >= quantity:
					break
				x, y = cell_origin(row, column, footprint, sheet_spec)
				placements.append(
					Placement(
						x=x,
						y=y,
						width=footprint.width,
						height=footprint.height,
						rotated=rotated,
						row=row,
						column=column,
					)
				)
				emitted += 1
		sheets.append(Sheet(index=sheet_index, placements=tuple(placements)))

	logger.debug(
		"Packed {} placements on {} sheets ({} per sheet)",
		emitted,
		len(sheets),
		capacity.per_sheet,
	)
	return PlacementPlan(
		sheets=tuple(sheets),
		sheet_spec=sheet_spec,
		footprint=footprint,
		capacity=capacity,
		quantity=quantity,
		rotated=rotated,
	)


#============================================
def build_plan(
	artifact: Artifact,
	request: PlacementRequest,
	config: GangSheetConfig,
) -> PlacementPlan:
	"""
	Run normalize, capacity planning and packing for one request.

	Args:
		artifact: Decoded artifact.
		request: Quantity and rotation.
		config: Gang sheet configuration.

	Returns:
		PlacementPlan.
	"""
	footprint = gsb.units.normalize(artifact, request.rotate, config.default_density)
	sheet_spec = config.sheet_spec()
	capacity = gsb.capacity.plan_capacity(footprint, sheet_spec)
	return pack(
		request.quantity,
		footprint,
		sheet_spec,
		capacity,
		max_sheets=config.max_sheets,
		rotated=request.rotate,
	)


#============================================
def plan_to_dict(plan: PlacementPlan) -> dict:
	"""
	Convert a plan into JSON-ready data.

	Args:
		plan: PlacementPlan.

	Returns:
		Dict with geometry, capacity and per-sheet placements.
	"""
	data = {
		"quantity": plan.quantity,
		"rotated": plan.rotated,
		"total_placements": plan.total_placements,
		"sheet": dataclasses.asdict(plan.sheet_spec),
		"footprint": dataclasses.asdict(plan.footprint),
		"capacity": dataclasses.asdict(plan.capacity),
		"sheets": [
			{
				"index": sheet.index,
				"placements": [dataclasses.asdict(placement) for placement in sheet.placements],
			}
			for sheet in plan.sheets
		],
	}
	return data
