import itertools

import pytest

import label_merge.config
import label_merge.layout


PageFormat = label_merge.config.PageFormat
LabelFootprint = label_merge.config.LabelFootprint


#============================================
def build_two_per_page() -> tuple[PageFormat, LabelFootprint]:
	"""
	Page fitting one column and two rows of labels.
	"""
	page_format = PageFormat(width=100.0, height=120.0, margin_top=10.0, margin_left=10.0, gap=5.0)
	footprint = LabelFootprint(width=80.0, height=45.0)
	return (page_format, footprint)


#============================================
def test_grid_counts_exact_fit() -> None:
	"""
	Labels that exactly fill the usable area are all counted.
	"""
	page_format = PageFormat(width=210.0, height=297.0, margin_top=10.0, margin_left=10.0, gap=0.0)
	footprint = LabelFootprint(width=95.0, height=27.7)
	grid = label_merge.layout.compute_grid(page_format, footprint)
	assert grid.columns == 2
	assert grid.rows == 10
	assert grid.slots_per_page == 20


#============================================
def test_default_a4_settings() -> None:
	"""
	A4 with 10 mm margins, 5 mm gap and 90 x 50 mm labels gives 2 x 5.
	"""
	page_format = label_merge.config.page_format_by_name("A4")
	footprint = LabelFootprint(width=90.0, height=50.0)
	grid = label_merge.layout.compute_grid(page_format, footprint)
	assert (grid.columns, grid.rows) == (2, 5)


#============================================
def test_page_break_after_capacity() -> None:
	"""
	With k slots per page, instance k lands on page 1.
	"""
	page_format, footprint = build_two_per_page()
	grid = label_merge.layout.compute_grid(page_format, footprint)
	capacity = grid.slots_per_page
	assert capacity == 2
	slots = label_merge.layout.plan_layout(page_format, footprint, capacity + 1)
	assert [slot.page_index for slot in slots] == [0] * capacity + [1]
	assert (slots[-1].row, slots[-1].col) == (0, 0)


#============================================
def test_row_major_positions() -> None:
	"""
	Slots fill left to right, then top to bottom.
	"""
	page_format = PageFormat(width=100.0, height=100.0, margin_top=5.0, margin_left=5.0, gap=2.0)
	footprint = LabelFootprint(width=20.0, height=30.0)
	slots = label_merge.layout.plan_layout(page_format, footprint, 6)
	assert [(slot.row, slot.col) for slot in slots] == [(0, 0), (0, 1), (0, 2), (0, 3), (1, 0), (1, 1)]
	assert slots[1].x == pytest.approx(27.0)
	assert slots[4].y == pytest.approx(37.0)
	assert slots[4].x == pytest.approx(5.0)


#============================================
def test_zero_instances_yield_no_slots() -> None:
	page_format, footprint = build_two_per_page()
	assert label_merge.layout.plan_layout(page_format, footprint, 0) == []


#============================================
def test_slots_do_not_overlap() -> None:
	"""
	No two slots on the same page intersect.
	"""
	page_format = label_merge.config.page_format_by_name("Letter", gap=1.5)
	footprint = LabelFootprint(width=66.04, height=25.4)
	slots = label_merge.layout.plan_layout(page_format, footprint, 75)
	for slot_a, slot_b in itertools.combinations(slots, 2):
		assert not label_merge.layout.slots_overlap(slot_a, slot_b)


#============================================
def test_slots_stay_within_margins() -> None:
	"""
	When labels fit, every slot stays inside the page minus margins.
	"""
	page_format = PageFormat(width=210.0, height=297.0, margin_top=12.0, margin_left=8.0, gap=3.0)
	footprint = LabelFootprint(width=63.5, height=33.87)
	slots = label_merge.layout.plan_layout(page_format, footprint, 40)
	for slot in slots:
		assert slot.x >= page_format.margin_left
		assert slot.y >= page_format.margin_top
		assert slot.x + slot.width <= page_format.width - page_format.margin_left + 1e-6
		assert slot.y + slot.height <= page_format.height - page_format.margin_top + 1e-6


#============================================
def test_oversize_label_one_per_page() -> None:
	"""
	A label larger than the printable area still gets one slot per page.
	"""
	page_format = PageFormat(width=100.0, height=100.0, margin_top=10.0, margin_left=10.0, gap=5.0)
	footprint = LabelFootprint(width=150.0, height=90.0)
	slots = label_merge.layout.plan_layout(page_format, footprint, 3)
	assert [slot.page_index for slot in slots] == [0, 1, 2]
	for slot in slots:
		assert (slot.row, slot.col, slot.x, slot.y) == (0, 0, 10.0, 10.0)


#============================================
def test_explicit_right_and_bottom_margins() -> None:
	"""
	Explicit right and bottom margins replace the mirrored ones.
	"""
	page_format = PageFormat(
		width=100.0,
		height=100.0,
		margin_top=0.0,
		margin_left=0.0,
		gap=0.0,
		margin_right=50.0,
		margin_bottom=0.0,
	)
	footprint = LabelFootprint(width=25.0, height=25.0)
	grid = label_merge.layout.compute_grid(page_format, footprint)
	assert (grid.columns, grid.rows) == (2, 4)


#============================================
def test_column_and_row_caps() -> None:
	page_format = PageFormat(width=210.0, height=297.0, gap=0.0, max_columns=1, max_rows=3)
	footprint = LabelFootprint(width=20.0, height=20.0)
	grid = label_merge.layout.compute_grid(page_format, footprint)
	assert (grid.columns, grid.rows, grid.slots_per_page) == (1, 3, 3)


#============================================
def test_separate_horizontal_and_vertical_gaps() -> None:
	page_format = PageFormat(width=100.0, height=100.0, margin_top=0.0, margin_left=0.0, gap=0.0, h_gap=10.0, v_gap=0.0)
	footprint = LabelFootprint(width=30.0, height=25.0)
	slots = label_merge.layout.plan_layout(page_format, footprint, 5)
	assert slots[1].x == pytest.approx(40.0)
	assert slots[3].y == pytest.approx(25.0)


#============================================
@pytest.mark.parametrize(
	"page_format, footprint",
	[
		(PageFormat(width=100.0, height=100.0), LabelFootprint(width=0.0, height=10.0)),
		(PageFormat(width=100.0, height=100.0), LabelFootprint(width=10.0, height=-1.0)),
		(PageFormat(width=0.0, height=100.0), LabelFootprint(width=10.0, height=10.0)),
		(PageFormat(width=100.0, height=100.0, margin_top=-1.0), LabelFootprint(width=10.0, height=10.0)),
		(PageFormat(width=100.0, height=100.0, gap=-0.5), LabelFootprint(width=10.0, height=10.0)),
		(PageFormat(width=100.0, height=100.0, max_rows=0), LabelFootprint(width=10.0, height=10.0)),
	],
)
def test_invalid_configuration_raises(page_format: PageFormat, footprint: LabelFootprint) -> None:
	"""
	Bad dimensions fail before any slot is produced, even for zero labels.
	"""
	with pytest.raises(ValueError):
		label_merge.layout.plan_layout(page_format, footprint, 0)


#============================================
def test_negative_instance_count_raises() -> None:
	page_format, footprint = build_two_per_page()
	with pytest.raises(ValueError):
		label_merge.layout.plan_layout(page_format, footprint, -1)


#============================================
def test_count_pages() -> None:
	page_format, footprint = build_two_per_page()
	grid = label_merge.layout.compute_grid(page_format, footprint)
	assert label_merge.layout.count_pages(grid, 0) == 0
	assert label_merge.layout.count_pages(grid, 2) == 1
	assert label_merge.layout.count_pages(grid, 3) == 2


#============================================
def test_landscape_swaps_dimensions() -> None:
	page_format = label_merge.config.page_format_by_name("letter", orientation="landscape")
	assert (page_format.width, page_format.height) == (279.4, 215.9)
	with pytest.raises(ValueError):
		label_merge.config.page_format_by_name("B5")
