"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.errors


POINTS_PER_INCH = 72.0

DEFAULT_DENSITY = 300.0
DEFAULT_SHEET_WIDTH = 22.0
DEFAULT_SHEET_HEIGHT = 36.0
DEFAULT_MARGIN = 0.125
DEFAULT_GAP = 0.5
DEFAULT_MAX_SHEETS = 50

CAPACITY_EPSILON = 1e-9

OUTLINE_WIDTH = 0.5
OUTLINE_GRAY = 0.6

RASTER_SUFFIXES = {
	".bmp",
	".gif",
	".jpeg",
	".jpg",
	".png",
	".tif",
	".tiff",
	".webp",
}
VECTOR_SUFFIXES = {
	".pdf",
}


@dataclasses.dataclass(frozen=True)
class SheetSpec:
	sheet_width: float
	sheet_height: float
	margin: float
	gap: float


@dataclasses.dataclass
class GangSheetConfig:
	default_density: float = DEFAULT_DENSITY
	sheet_width: float = DEFAULT_SHEET_WIDTH
	sheet_height: float = DEFAULT_SHEET_HEIGHT
	margin: float = DEFAULT_MARGIN
	gap: float = DEFAULT_GAP
	max_sheets: int = DEFAULT_MAX_SHEETS
	draw_outlines: bool = False

	def __post_init__(self) -> None:
		validate_default_density(self.default_density)
		validate_max_sheets(self.max_sheets)

	#============================================
	def sheet_spec(self) -> SheetSpec:
		"""
		Build the sheet geometry for this configuration.

		Returns:
			SheetSpec.
		"""
		return SheetSpec(
			sheet_width=self.sheet_width,
			sheet_height=self.sheet_height,
			margin=self.margin,
			gap=self.gap,
		)


@dataclasses.dataclass
class GangSheetResult:
	quantity: int
	placed: int
	sheets: int
	per_row: int
	per_column: int
	per_sheet: int
	footprint_width: float
	footprint_height: float
	rotated: bool


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def points_to_inches(value: float) -> float:
	"""
	Convert points to inches.

	Args:
		value: Points value.

	Returns:
		Inches value.
	"""
	return value / POINTS_PER_INCH


#============================================
def validate_default_density(value: float) -> None:
	"""
	Reject a fallback density that cannot convert pixels to inches.

	Args:
		value: Fallback pixels per inch.
	"""
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise gsb.errors.InvalidConfig("default_density", value, "must be a number")
	if not math.isfinite(value) or value <= 0:
		raise gsb.errors.InvalidConfig("default_density", value, "must be a positive finite number")


#============================================
def validate_max_sheets(value: int) -> None:
	"""
	Reject a sheet ceiling that is negative or not an integer.

	Args:
		value: Maximum number of sheets.
	"""
	if isinstance(value, bool) or not isinstance(value, int) or value < 0:
		raise gsb.errors.InvalidConfig("max_sheets", value, "must be a non-negative integer")
