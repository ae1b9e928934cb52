"""
Error kinds raised while planning a gang sheet.

All of them are terminal: planning is pure arithmetic, so a retry with the
same inputs fails the same way.
"""


class GangSheetError(ValueError):
	"""
	Base class for gang sheet planning failures.
	"""


class InvalidArtifact(GangSheetError):
	"""
	Artifact has non-positive native dimensions or an unknown kind.
	"""

	def __init__(
		self,
		native_width: float,
		native_height: float,
		source_name: str = "",
		reason: str = "both dimensions must be positive",
	):
		self.native_width = native_width
		self.native_height = native_height
		self.source_name = source_name
		self.reason = reason
		label = f" '{source_name}'" if source_name else ""
		message = f"Artifact{label} of native size {native_width} x {native_height} is invalid: {reason}"
		super().__init__(message)


class ArtifactDecodeError(GangSheetError):
	"""
	Artifact bytes could not be decoded as an image or PDF page.
	"""

	def __init__(self, source_name: str, reason: str):
		self.source_name = source_name
		self.reason = reason
		super().__init__(f"Cannot decode artifact '{source_name}': {reason}")


class InvalidSheetSpec(GangSheetError):
	"""
	Sheet geometry leaves no usable area.
	"""

	def __init__(self, sheet_width: float, sheet_height: float, margin: float, gap: float, reason: str):
		self.sheet_width = sheet_width
		self.sheet_height = sheet_height
		self.margin = margin
		self.gap = gap
		self.reason = reason
		message = (
			f"Invalid sheet {sheet_width} x {sheet_height} "
			f"(margin {margin}, gap {gap}): {reason}"
		)
		super().__init__(message)


class InvalidRequest(GangSheetError):
	"""
	Placement request is malformed, such as a negative quantity.
	"""

	def __init__(self, quantity: int):
		self.quantity = quantity
		super().__init__(f"Quantity must be a non-negative integer, got {quantity!r}")


class ArtifactTooLarge(GangSheetError):
	"""
	Footprint does not fit the usable sheet area even once.
	"""

	def __init__(
		self,
		footprint_width: float,
		footprint_height: float,
		usable_width: float,
		usable_height: float,
		per_row: int,
		per_column: int,
	):
		self.footprint_width = footprint_width
		self.footprint_height = footprint_height
		self.usable_width = usable_width
		self.usable_height = usable_height
		self.per_row = per_row
		self.per_column = per_column
		message = (
			f"Footprint {footprint_width:.4g} x {footprint_height:.4g} in does not fit "
			f"usable area {usable_width:.4g} x {usable_height:.4g} in "
			f"(per_row={per_row}, per_column={per_column})"
		)
		super().__init__(message)


class QuantityExceedsLimit(GangSheetError):
	"""
	Requested quantity needs more sheets than the configured ceiling.
	"""

	def __init__(self, quantity: int, per_sheet: int, sheets_needed: int, max_sheets: int):
		self.quantity = quantity
		self.per_sheet = per_sheet
		self.sheets_needed = sheets_needed
		self.max_sheets = max_sheets
		message = (
			f"Quantity {quantity} at {per_sheet} per sheet needs {sheets_needed} sheets, "
			f"above the limit of {max_sheets}"
		)
		super().__init__(message)


class InvalidConfig(GangSheetError):
	"""
	Configuration value is out of range or not a number.
	"""

	def __init__(self, name: str, value, reason: str):
		self.name = name
		self.value = value
		self.reason = reason
		super().__init__(f"Invalid configuration {name}={value!r}: {reason}")
