"""
Batch coordination: bind rows, place labels, build the render stream.
"""

# Standard Library
import collections.abc
import dataclasses

# local repo modules
import label_merge as lm
import label_merge.config
import label_merge.layout
import label_merge.template


Template = lm.template.Template
BindingResult = lm.template.BindingResult
LabelFootprint = lm.config.LabelFootprint
PageFormat = lm.config.PageFormat
LayoutSlot = lm.config.LayoutSlot
GridSpec = lm.config.GridSpec
BatchSummary = lm.config.BatchSummary


@dataclasses.dataclass(frozen=True)
class RenderInstruction:
	page_index: int
	slot: LayoutSlot
	texts: tuple[str, ...]
	row_index: int


@dataclasses.dataclass
class BatchPlan:
	variables: list[str]
	grid: GridSpec
	instructions: list[RenderInstruction]
	summary: BatchSummary

	def pages(self) -> list[list[RenderInstruction]]:
		return group_by_page(self.instructions)


#============================================
def resolve_selection(
	rows: collections.abc.Sequence,
	selection: collections.abc.Sequence[int] | None,
) -> list[int]:
	"""
	Resolve the row indices to render.

	Args:
		rows: All data rows.
		selection: Row indices in render order, or None for every row.

	Returns:
		List of row indices.

	Raises:
		ValueError: If an index is outside the row list.
	"""
	if selection is None:
		return list(range(len(rows)))
	indices: list[int] = []
	for index in selection:
		if isinstance(index, bool) or not isinstance(index, int):
			raise ValueError(f"Row selection must hold integers, got {index!r}")
		if index < 0 or index >= len(rows):
			raise ValueError(f"Row {index} not found ({len(rows)} rows available)")
		indices.append(index)
	return indices


#============================================
def apply_limits(
	count: int,
	grid: GridSpec,
	max_labels: int | None,
	max_pages: int | None,
) -> int:
	"""
	Apply label and page limits to a label count.
	"""
	limited = count
	if max_labels is not None:
		limited = min(limited, max(0, max_labels))
	if max_pages is not None:
		limited = min(limited, max(0, max_pages) * grid.slots_per_page)
	return limited


#============================================
def plan_batch(
	template: Template,
	rows: collections.abc.Sequence[collections.abc.Mapping],
	page_format: PageFormat,
	footprint: LabelFootprint,
	selection: collections.abc.Sequence[int] | None = None,
	max_labels: int | None = None,
	max_pages: int | None = None,
	trim_names: bool = False,
) -> BatchPlan:
	"""
	Plan a batch of labels from a template and data rows.

	Configuration is checked before any row is bound, so a bad page format
	or selection fails the whole batch.

	Args:
		template: Label template.
		rows: Data rows.
		page_format: Page format.
		footprint: Label footprint.
		selection: Row indices to render, in order. None renders all rows.
		max_labels: Optional label limit.
		max_pages: Optional page limit.
		trim_names: Strip whitespace around placeholder names.

	Returns:
		BatchPlan.
	"""
	grid = lm.layout.compute_grid(page_format, footprint)
	indices = resolve_selection(rows, selection)
	variables = lm.template.scan_variables(template, trim_names)

	count = apply_limits(len(indices), grid, max_labels, max_pages)
	bindings: list[BindingResult] = []
	for row_index in indices[:count]:
		bindings.append(
			lm.template.bind_template(template, rows[row_index], row_index, trim_names)
		)
	slots = lm.layout.plan_layout(page_format, footprint, len(bindings))

	instructions: list[RenderInstruction] = []
	for binding, slot in zip(bindings, slots):
		instructions.append(
			RenderInstruction(
				page_index=slot.page_index,
				slot=slot,
				texts=binding.texts,
				row_index=binding.row_index,
			)
		)

	summary = BatchSummary(
		total_labels=len(indices),
		printed_labels=len(instructions),
		leftover_labels=len(indices) - len(instructions),
		pages=lm.layout.count_pages(grid, len(instructions)),
		labels_per_page=grid.slots_per_page,
	)
	return BatchPlan(
		variables=variables,
		grid=grid,
		instructions=instructions,
		summary=summary,
	)


#============================================
def render_batch(
	template: Template,
	rows: collections.abc.Sequence[collections.abc.Mapping],
	page_format: PageFormat,
	footprint: LabelFootprint,
	selection: collections.abc.Sequence[int] | None = None,
) -> list[RenderInstruction]:
	"""
	Build the page-ordered render stream for a batch.

	Args:
		template: Label template.
		rows: Data rows.
		page_format: Page format.
		footprint: Label footprint.
		selection: Row indices to render, in order. None renders all rows.

	Returns:
		List of RenderInstruction, one per selected row.
	"""
	plan = plan_batch(template, rows, page_format, footprint, selection)
	return plan.instructions


#============================================
def group_by_page(
	instructions: collections.abc.Iterable[RenderInstruction],
) -> list[list[RenderInstruction]]:
	"""
	Split a render stream into pages.

	A new page starts whenever page_index changes from the previous instruction.

	Args:
		instructions: Render instructions in stream order.

	Returns:
		List of pages, each a list of instructions.
	"""
	pages: list[list[RenderInstruction]] = []
	current_index = None
	for instruction in instructions:
		if not pages or instruction.page_index != current_index:
			pages.append([])
			current_index = instruction.page_index
		pages[-1].append(instruction)
	return pages
