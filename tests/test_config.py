import math

import pytest

import gang_sheet_builder.config
import gang_sheet_builder.errors


GangSheetConfig = gang_sheet_builder.config.GangSheetConfig


#============================================
def test_defaults_are_valid() -> None:
	"""
	The default configuration builds the 22 x 36 inch sheet.
	"""
	config = GangSheetConfig()
	sheet = config.sheet_spec()
	assert (sheet.sheet_width, sheet.sheet_height) == (22.0, 36.0)
	assert (sheet.margin, sheet.gap) == (0.125, 0.5)


#============================================
@pytest.mark.parametrize("default_density", [0, -300.0, math.nan, math.inf, "300"])
def test_bad_default_density(default_density) -> None:
	"""
	A density that cannot convert pixels is refused at construction.
	"""
	with pytest.raises(gang_sheet_builder.errors.InvalidConfig) as excinfo:
		GangSheetConfig(default_density=default_density)
	assert excinfo.value.name == "default_density"


#============================================
@pytest.mark.parametrize("max_sheets", [-1, 2.5, True])
def test_bad_max_sheets(max_sheets) -> None:
	"""
	The sheet ceiling must be a non-negative integer.
	"""
	with pytest.raises(gang_sheet_builder.errors.InvalidConfig) as excinfo:
		GangSheetConfig(max_sheets=max_sheets)
	assert excinfo.value.name == "max_sheets"


#============================================
def test_zero_max_sheets_allowed() -> None:
	"""
	A ceiling of zero is valid and only admits empty plans.
	"""
	assert GangSheetConfig(max_sheets=0).max_sheets == 0
