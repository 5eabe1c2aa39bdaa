"""
Page layout planning for label sheets.

All geometry is in millimetres with the origin at the top-left corner of
the page. Slots fill each page row by row, left to right.
"""

# Standard Library
import math

# local repo modules
import label_merge as lm
import label_merge.config


LabelFootprint = lm.config.LabelFootprint
PageFormat = lm.config.PageFormat
LayoutSlot = lm.config.LayoutSlot
GridSpec = lm.config.GridSpec

LAYOUT_EPSILON = lm.config.LAYOUT_EPSILON


#============================================
def resolve_margins(page_format: PageFormat) -> tuple[float, float, float, float]:
	"""
	Resolve page margins, mirroring left and top when right and bottom are unset.

	Args:
		page_format: Page format.

	Returns:
		Tuple of (top, right, bottom, left).
	"""
	right = page_format.margin_right
	if right is None:
		right = page_format.margin_left
	bottom = page_format.margin_bottom
	if bottom is None:
		bottom = page_format.margin_top
	return (page_format.margin_top, right, bottom, page_format.margin_left)


#============================================
def resolve_gaps(page_format: PageFormat) -> tuple[float, float]:
	"""
	Resolve horizontal and vertical gaps.

	Args:
		page_format: Page format.

	Returns:
		Tuple of (h_gap, v_gap).
	"""
	h_gap = page_format.gap if page_format.h_gap is None else page_format.h_gap
	v_gap = page_format.gap if page_format.v_gap is None else page_format.v_gap
	return (h_gap, v_gap)


#============================================
def validate_layout(page_format: PageFormat, footprint: LabelFootprint) -> None:
	"""
	Check page and label dimensions before planning.

	Args:
		page_format: Page format.
		footprint: Label footprint.

	Raises:
		ValueError: On non-positive sizes, negative margins or gaps, or caps below one.
	"""
	if footprint.width <= 0 or footprint.height <= 0:
		raise ValueError(
			f"Label footprint must be positive, got {footprint.width} x {footprint.height} mm"
		)
	if page_format.width <= 0 or page_format.height <= 0:
		raise ValueError(
			f"Page size must be positive, got {page_format.width} x {page_format.height} mm"
		)
	top, right, bottom, left = resolve_margins(page_format)
	h_gap, v_gap = resolve_gaps(page_format)
	named_values = {
		"margin_top": top,
		"margin_right": right,
		"margin_bottom": bottom,
		"margin_left": left,
		"h_gap": h_gap,
		"v_gap": v_gap,
	}
	for name, value in named_values.items():
		if value < 0:
			raise ValueError(f"{name} must not be negative, got {value}")
	for name in ("max_columns", "max_rows"):
		cap = getattr(page_format, name)
		if cap is not None and cap < 1:
			raise ValueError(f"{name} must be at least 1, got {cap}")


#============================================
def fit_count(usable: float, size: float, gap: float) -> int:
	"""
	Count how many items of a size fit along one axis.

	Args:
		usable: Usable length in mm.
		size: Item length in mm.
		gap: Gap between items in mm.

	Returns:
		Count, never below one.
	"""
	count = math.floor((usable + gap) / (size + gap) + LAYOUT_EPSILON)
	return max(1, count)


#============================================
def compute_grid(page_format: PageFormat, footprint: LabelFootprint) -> GridSpec:
	"""
	Compute the label grid for one page.

	A footprint larger than the printable area still gets a 1 x 1 grid, so
	each page always holds at least one label.

	Args:
		page_format: Page format.
		footprint: Label footprint.

	Returns:
		GridSpec.
	"""
	validate_layout(page_format, footprint)
	top, right, bottom, left = resolve_margins(page_format)
	h_gap, v_gap = resolve_gaps(page_format)
	usable_width = page_format.width - left - right
	usable_height = page_format.height - top - bottom

	columns = fit_count(usable_width, footprint.width, h_gap)
	rows = fit_count(usable_height, footprint.height, v_gap)
	if page_format.max_columns is not None:
		columns = min(columns, page_format.max_columns)
	if page_format.max_rows is not None:
		rows = min(rows, page_format.max_rows)
	return GridSpec(columns=columns, rows=rows, slots_per_page=columns * rows)


#============================================
def count_pages(grid: GridSpec, instance_count: int) -> int:
	if instance_count <= 0:
		return 0
	return (instance_count + grid.slots_per_page - 1) // grid.slots_per_page


#============================================
def plan_layout(
	page_format: PageFormat,
	footprint: LabelFootprint,
	instance_count: int,
) -> list[LayoutSlot]:
	"""
	Assign every label instance a page and a slot.

	Args:
		page_format: Page format.
		footprint: Label footprint.
		instance_count: Number of labels to place.

	Returns:
		One LayoutSlot per instance, in instance order.
	"""
	if instance_count < 0:
		raise ValueError(f"instance_count must not be negative, got {instance_count}")
	grid = compute_grid(page_format, footprint)
	h_gap, v_gap = resolve_gaps(page_format)

	slots: list[LayoutSlot] = []
	for index in range(instance_count):
		page_index = index // grid.slots_per_page
		within_page = index % grid.slots_per_page
		row = within_page // grid.columns
		col = within_page % grid.columns
		slot = LayoutSlot(
			page_index=page_index,
			row=row,
			col=col,
			x=page_format.margin_left + col * (footprint.width + h_gap),
			y=page_format.margin_top + row * (footprint.height + v_gap),
			width=footprint.width,
			height=footprint.height,
		)
		slots.append(slot)
	return slots


#============================================
def slot_box(slot: LayoutSlot) -> tuple[float, float, float, float]:
	return (slot.x, slot.y, slot.x + slot.width, slot.y + slot.height)


#============================================
def slots_overlap(slot_a: LayoutSlot, slot_b: LayoutSlot) -> bool:
	"""
	Check whether two slots on the same page overlap.

	Slots that only share an edge do not overlap.

	Args:
		slot_a: First slot.
		slot_b: Second slot.

	Returns:
		True if both slots are on one page and their rectangles intersect.
	"""
	if slot_a.page_index != slot_b.page_index:
		return False
	box_a = slot_box(slot_a)
	box_b = slot_box(slot_b)
	left = max(box_a[0], box_b[0])
	right = min(box_a[2], box_b[2])
	top = max(box_a[1], box_b[1])
	bottom = min(box_a[3], box_b[3])
	return right - left > LAYOUT_EPSILON and bottom - top > LAYOUT_EPSILON
