import pytest
import reportlab.lib.units

import gang_sheet_builder.capacity
import gang_sheet_builder.config
import gang_sheet_builder.packer
import gang_sheet_builder.render
import gang_sheet_builder.units


#============================================
def build_full_plan() -> gang_sheet_builder.packer.PlacementPlan:
	"""
	Build one full default sheet of 3.5 x 2 inch footprints.
	"""
	sheet = gang_sheet_builder.config.GangSheetConfig().sheet_spec()
	footprint = gang_sheet_builder.units.Footprint(3.5, 2.0)
	capacity = gang_sheet_builder.capacity.plan_capacity(footprint, sheet)
	return gang_sheet_builder.packer.pack(capacity.per_sheet, footprint, sheet, capacity)


#============================================
def test_grid_boxes_within_page() -> None:
	"""
	Ensure all placement boxes are on-page in points.
	"""
	plan = build_full_plan()
	page_width, page_height = gang_sheet_builder.render.page_size_points(plan)
	assert page_width == pytest.approx(22 * reportlab.lib.units.inch)
	assert page_height == pytest.approx(36 * reportlab.lib.units.inch)
	for placement in plan.sheets[0].placements:
		x, y, width, height = gang_sheet_builder.render.placement_box_points(placement)
		assert 0.0 <= x < x + width <= page_width
		assert 0.0 <= y < y + height <= page_height


#============================================
def test_grid_boxes_non_overlapping() -> None:
	"""
	Ensure adjacent boxes keep at least the configured gap.
	"""
	plan = build_full_plan()
	gap = plan.sheet_spec.gap
	epsilon = 0.001
	by_cell = {(p.row, p.column): p for p in plan.sheets[0].placements}
	for (row, col), placement in by_cell.items():
		right = by_cell.get((row, col + 1))
		if right is not None:
			assert right.x - (placement.x + placement.width) >= gap - epsilon
		below = by_cell.get((row + 1, col))
		if below is not None:
			assert placement.y - (below.y + below.height) >= gap - epsilon
