"""
PDF rendering of planned label batches with ReportLab.
"""

# Standard Library
import json
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import label_merge as lm
import label_merge.batch
import label_merge.config
import label_merge.layout
import label_merge.template


Template = lm.template.Template
TemplateElement = lm.template.TemplateElement
BatchPlan = lm.batch.BatchPlan
RenderInstruction = lm.batch.RenderInstruction
PageFormat = lm.config.PageFormat
LabelFootprint = lm.config.LabelFootprint
LayoutSlot = lm.config.LayoutSlot
GridSpec = lm.config.GridSpec
BatchSummary = lm.config.BatchSummary
RenderConfig = lm.config.RenderConfig

mm_to_points = lm.config.mm_to_points
DEFAULT_FONT_REGULAR = lm.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = lm.config.DEFAULT_FONT_BOLD
DEFAULT_FONT_ITALIC = lm.config.DEFAULT_FONT_ITALIC
DEFAULT_FONT_BOLD_ITALIC = lm.config.DEFAULT_FONT_BOLD_ITALIC
TEXT_LEADING_FACTOR = lm.config.TEXT_LEADING_FACTOR
OUTLINE_LINE_WIDTH = lm.config.OUTLINE_LINE_WIDTH
PROGRESS_BAR_WIDTH = lm.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = lm.config.PROGRESS_UPDATE_EVERY

ImageCache = dict[str, reportlab.lib.utils.ImageReader | None]


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a progress bar that redraws in place.

	Args:
		prefix: Label text.
		current: Labels drawn so far, clamped to total.
		total: Labels in the batch.
	"""
	if total <= 0:
		return
	done = min(max(current, 0), total)
	filled = (PROGRESS_BAR_WIDTH * done) // total
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {done}/{total} ({100 * done // total}%)", end="\r")


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse an editor color string into RGB floats.

	Args:
		value: Color string like "#AABBCC" or the short form "#ABC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range, black when unparseable.
	"""
	digits = (value or "").strip().lstrip("#")
	if len(digits) == 3:
		digits = "".join(char * 2 for char in digits)
	if len(digits) != 6:
		return (0.0, 0.0, 0.0)
	try:
		channels = [int(digits[index:index + 2], 16) for index in (0, 2, 4)]
	except ValueError:
		return (0.0, 0.0, 0.0)
	return (channels[0] / 255.0, channels[1] / 255.0, channels[2] / 255.0)


#============================================
def map_font_name(bold: bool, italic: bool) -> str:
	if italic and bold:
		return DEFAULT_FONT_BOLD_ITALIC
	if italic:
		return DEFAULT_FONT_ITALIC
	if bold:
		return DEFAULT_FONT_BOLD
	return DEFAULT_FONT_REGULAR


#============================================
def element_box(
	element: TemplateElement,
	slot: LayoutSlot,
	page_height: float,
) -> tuple[float, float, float, float]:
	"""
	Convert an element box from label millimetres to PDF points.

	Args:
		element: Template element positioned from the label's top-left.
		slot: Slot the label is placed in.
		page_height: Page height in points.

	Returns:
		Tuple of (x, y, width, height) with y at the bottom edge.
	"""
	x = mm_to_points(slot.x + element.x)
	width = mm_to_points(element.width)
	height = mm_to_points(element.height)
	y = page_height - mm_to_points(slot.y + element.y) - height
	return (x, y, width, height)


#============================================
def load_image(path: str, image_cache: ImageCache) -> reportlab.lib.utils.ImageReader | None:
	"""
	Load an image once per path.

	Args:
		path: Image file path.
		image_cache: Cache keyed by path. Missing files are cached as None.

	Returns:
		ImageReader, or None when the file cannot be read.
	"""
	if path in image_cache:
		return image_cache[path]
	image_reader = None
	try:
		image = PIL.Image.open(path)
		image.load()
		image_reader = reportlab.lib.utils.ImageReader(image)
	except OSError as error:
		print(f"Image skipped: {path} ({error})")
	image_cache[path] = image_reader
	return image_reader


#============================================
def draw_text_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: TemplateElement,
	text: str,
	slot: LayoutSlot,
	page_height: float,
	font_size_override: float | None = None,
) -> None:
	"""
	Draw a resolved text element.

	Args:
		pdf: ReportLab canvas.
		element: Text element.
		text: Resolved text for this label.
		slot: Slot the label is placed in.
		page_height: Page height in points.
		font_size_override: Optional font size in points.
	"""
	lines = text.splitlines()
	if not lines:
		return
	font_name = map_font_name(element.bold, element.italic)
	font_size = element.font_size
	if font_size_override is not None:
		font_size = font_size_override
	pdf.setFont(font_name, font_size)
	color = parse_hex_color(element.color)
	pdf.setFillColorRGB(color[0], color[1], color[2])

	x, y, width, height = element_box(element, slot, page_height)
	top = y + height
	leading = font_size * TEXT_LEADING_FACTOR
	align = element.align.upper()
	for index, line in enumerate(lines):
		line_width = pdf.stringWidth(line, font_name, font_size)
		if align == "CENTER":
			text_x = x + (width - line_width) / 2.0
		elif align == "RIGHT":
			text_x = x + width - line_width
		else:
			text_x = x
		text_y = top - font_size - index * leading
		pdf.drawString(text_x, text_y, line)


#============================================
def draw_shape_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: TemplateElement,
	slot: LayoutSlot,
	page_height: float,
) -> None:
	"""
	Draw a rect, circle or line element.

	Args:
		pdf: ReportLab canvas.
		element: Shape element.
		slot: Slot the label is placed in.
		page_height: Page height in points.
	"""
	x, y, width, height = element_box(element, slot, page_height)
	stroke = parse_hex_color(element.stroke_color)
	pdf.setStrokeColorRGB(stroke[0], stroke[1], stroke[2])
	pdf.setLineWidth(element.stroke_width)
	fill = 0
	if element.fill_color:
		color = parse_hex_color(element.fill_color)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		fill = 1

	if element.shape == "line":
		pdf.line(x, y + height, x + width, y)
	elif element.shape == "circle":
		pdf.ellipse(x, y, x + width, y + height, stroke=1, fill=fill)
	else:
		pdf.rect(x, y, width, height, stroke=1, fill=fill)


#============================================
def draw_image_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: TemplateElement,
	slot: LayoutSlot,
	page_height: float,
	image_cache: ImageCache,
) -> None:
	"""
	Draw an image element scaled into its box.

	Args:
		pdf: ReportLab canvas.
		element: Image element.
		slot: Slot the label is placed in.
		page_height: Page height in points.
		image_cache: Image cache.
	"""
	if not element.image_path:
		return
	image_reader = load_image(element.image_path, image_cache)
	if image_reader is None:
		return
	x, y, width, height = element_box(element, slot, page_height)
	pdf.drawImage(
		image_reader,
		x,
		y,
		width=width,
		height=height,
		mask="auto",
		preserveAspectRatio=True,
		anchor="c",
	)


#============================================
def draw_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	template: Template,
	instruction: RenderInstruction,
	page_height: float,
	config: RenderConfig,
	image_cache: ImageCache,
) -> None:
	"""
	Draw one bound label in its slot.

	Elements draw in template order, so later elements sit on top.

	Args:
		pdf: ReportLab canvas.
		template: Label template.
		instruction: Render instruction for this label.
		page_height: Page height in points.
		config: Render configuration.
		image_cache: Image cache.
	"""
	texts = iter(instruction.texts)
	for element in template.elements:
		if element.kind == "text":
			text = next(texts, element.content)
			draw_text_element(
				pdf,
				element,
				text,
				instruction.slot,
				page_height,
				config.font_size,
			)
		elif element.kind == "shape":
			draw_shape_element(pdf, element, instruction.slot, page_height)
		elif element.kind == "image":
			draw_image_element(pdf, element, instruction.slot, page_height, image_cache)


#============================================
def draw_slot_outline(
	pdf: reportlab.pdfgen.canvas.Canvas,
	slot: LayoutSlot,
	page_height: float,
) -> None:
	x = mm_to_points(slot.x)
	width = mm_to_points(slot.width)
	height = mm_to_points(slot.height)
	y = page_height - mm_to_points(slot.y) - height
	pdf.rect(x, y, width, height, stroke=1, fill=0)


#============================================
def grid_slots(
	page_format: PageFormat,
	footprint: LabelFootprint,
	grid: GridSpec,
) -> list[LayoutSlot]:
	"""
	List every slot of one full page.
	"""
	return lm.layout.plan_layout(page_format, footprint, grid.slots_per_page)


#============================================
def draw_label_outlines(
	pdf: reportlab.pdfgen.canvas.Canvas,
	slots: list[LayoutSlot],
	page_height: float,
) -> None:
	"""
	Draw label outlines on the current page.

	Args:
		pdf: ReportLab canvas.
		slots: Slots to outline.
		page_height: Page height in points.
	"""
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
	for slot in slots:
		draw_slot_outline(pdf, slot, page_height)


#============================================
def draw_calibration_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	slots: list[LayoutSlot],
	page_height: float,
) -> None:
	"""
	Draw calibration boxes with center marks and a 10 mm ruler.

	Args:
		pdf: ReportLab canvas.
		slots: Slots of one full page.
		page_height: Page height in points.
	"""
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.6, 0.6, 0.6)
	for slot in slots:
		draw_slot_outline(pdf, slot, page_height)

	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(0.6)
	size = 6.0
	for slot in slots:
		center_x = mm_to_points(slot.x + slot.width / 2.0)
		center_y = page_height - mm_to_points(slot.y + slot.height / 2.0)
		pdf.line(center_x - size, center_y, center_x + size, center_y)
		pdf.line(center_x, center_y - size, center_x, center_y + size)

	if not slots:
		return
	ruler_x = mm_to_points(slots[0].x)
	ruler_y = page_height - mm_to_points(slots[0].y) + 4.0
	pdf.line(ruler_x, ruler_y, ruler_x + mm_to_points(10.0), ruler_y)
	pdf.setFont(DEFAULT_FONT_REGULAR, 8)
	pdf.drawString(ruler_x, ruler_y + 4.0, "10 mm")


#============================================
def render_plan_to_pdf(
	template: Template,
	plan: BatchPlan,
	page_format: PageFormat,
	footprint: LabelFootprint,
	output_path: pathlib.Path,
	config: RenderConfig,
	verbose: bool = False,
) -> BatchSummary:
	"""
	Render a planned batch to a multi-page PDF.

	Nothing is written when the plan holds no labels and no calibration
	page is requested.

	Args:
		template: Label template.
		plan: Batch plan from plan_batch.
		page_format: Page format used for the plan.
		footprint: Label footprint used for the plan.
		output_path: Output PDF path.
		config: Render configuration.
		verbose: Print a progress bar.

	Returns:
		BatchSummary, counting the calibration page if drawn.
	"""
	pages = plan.pages()
	summary = BatchSummary(
		total_labels=plan.summary.total_labels,
		printed_labels=plan.summary.printed_labels,
		leftover_labels=plan.summary.leftover_labels,
		pages=len(pages),
		labels_per_page=plan.summary.labels_per_page,
	)
	if not pages and not config.calibration:
		return summary

	page_width = mm_to_points(page_format.width)
	page_height = mm_to_points(page_format.height)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=(page_width, page_height))
	pdf.setTitle(template.name)

	full_page_slots = grid_slots(page_format, footprint, plan.grid)
	if config.calibration:
		draw_calibration_page(pdf, full_page_slots, page_height)
		pdf.showPage()
		summary.pages += 1

	image_cache: ImageCache = {}
	total = len(plan.instructions)
	done = 0
	for page in pages:
		if config.draw_outlines:
			draw_label_outlines(pdf, full_page_slots, page_height)
		for instruction in page:
			draw_label(pdf, template, instruction, page_height, config, image_cache)
			done += 1
			if verbose and (done % PROGRESS_UPDATE_EVERY == 0 or done == total):
				print_progress("Labels", done, total)
		pdf.showPage()
	if verbose and total > 0:
		print("")
	pdf.save()
	return summary


#============================================
def render_single_label(
	template: Template,
	texts: tuple[str, ...],
	page_format: PageFormat,
	footprint: LabelFootprint,
	output_path: pathlib.Path,
	config: RenderConfig,
) -> None:
	"""
	Render one bound label centered on a single page.

	Args:
		template: Label template.
		texts: Resolved text per text element.
		page_format: Page format, only its size is used.
		footprint: Label footprint.
		output_path: Output PDF path.
		config: Render configuration.
	"""
	lm.layout.validate_layout(page_format, footprint)
	slot = LayoutSlot(
		page_index=0,
		row=0,
		col=0,
		x=(page_format.width - footprint.width) / 2.0,
		y=(page_format.height - footprint.height) / 2.0,
		width=footprint.width,
		height=footprint.height,
	)
	instruction = RenderInstruction(page_index=0, slot=slot, texts=texts, row_index=0)
	page_width = mm_to_points(page_format.width)
	page_height = mm_to_points(page_format.height)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=(page_width, page_height))
	pdf.setTitle(template.name)
	if config.draw_outlines:
		draw_label_outlines(pdf, [slot], page_height)
	draw_label(pdf, template, instruction, page_height, config, {})
	pdf.showPage()
	pdf.save()


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	template_path: pathlib.Path,
	data_path: pathlib.Path | None,
	plan: BatchPlan,
	summary: BatchSummary,
	page_format: PageFormat,
	footprint: LabelFootprint,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		template_path: Template JSON path.
		data_path: CSV path, or None for default rows.
		plan: Batch plan.
		summary: Render summary.
		page_format: Page format.
		footprint: Label footprint.
	"""
	data = {
		"template": str(template_path),
		"data": str(data_path) if data_path is not None else None,
		"variables": plan.variables,
		"rows": [instruction.row_index for instruction in plan.instructions],
		"labels_per_page": summary.labels_per_page,
		"total_labels": summary.total_labels,
		"printed_labels": summary.printed_labels,
		"leftover_labels": summary.leftover_labels,
		"pages": summary.pages,
		"layout": {
			"page_width": page_format.width,
			"page_height": page_format.height,
			"margin_top": page_format.margin_top,
			"margin_left": page_format.margin_left,
			"margin_right": page_format.margin_right,
			"margin_bottom": page_format.margin_bottom,
			"gap": page_format.gap,
			"label_width": footprint.width,
			"label_height": footprint.height,
			"columns": plan.grid.columns,
			"rows": plan.grid.rows,
		},
	}
	with pathlib.Path(manifest_path).open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
