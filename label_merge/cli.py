"""
CLI entry points for CSV to label sheet conversion.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import label_merge as lm
import label_merge.batch
import label_merge.config
import label_merge.data
import label_merge.render
import label_merge.template


PageFormat = lm.config.PageFormat
LabelFootprint = lm.config.LabelFootprint
RenderConfig = lm.config.RenderConfig

DEFAULT_PAGE_FORMAT = lm.config.DEFAULT_PAGE_FORMAT
DEFAULT_ORIENTATION = lm.config.DEFAULT_ORIENTATION
DEFAULT_MARGIN_TOP = lm.config.DEFAULT_MARGIN_TOP
DEFAULT_MARGIN_LEFT = lm.config.DEFAULT_MARGIN_LEFT
DEFAULT_GAP = lm.config.DEFAULT_GAP
DEFAULT_LABEL_WIDTH = lm.config.DEFAULT_LABEL_WIDTH
DEFAULT_LABEL_HEIGHT = lm.config.DEFAULT_LABEL_HEIGHT


#============================================
def build_page_format(args: argparse.Namespace) -> PageFormat:
	"""
	Build a page format from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PageFormat.
	"""
	return lm.config.page_format_by_name(
		args.page_format,
		orientation=args.orientation,
		margin_top=args.margin_top,
		margin_left=args.margin_left,
		gap=args.gap,
		margin_right=args.margin_right,
		margin_bottom=args.margin_bottom,
		max_columns=args.columns,
		max_rows=args.rows,
	)


#============================================
def build_footprint(args: argparse.Namespace) -> LabelFootprint:
	"""
	Build a label footprint from a catalog id or explicit size.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LabelFootprint.
	"""
	width = DEFAULT_LABEL_WIDTH
	height = DEFAULT_LABEL_HEIGHT
	if args.label_size is not None:
		size = lm.config.get_label_size(args.label_size)
		if size is None:
			raise ValueError(f"Unknown label size: {args.label_size}")
		width = size.width
		height = size.height
	if args.label_width is not None:
		width = args.label_width
	if args.label_height is not None:
		height = args.label_height
	return LabelFootprint(width=width, height=height)


#============================================
def build_render_config(args: argparse.Namespace) -> RenderConfig:
	return RenderConfig(
		draw_outlines=args.draw_outlines,
		calibration=args.calibration,
		font_size=args.font_size,
	)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Merge CSV rows into a label template and tile the labels onto PDF pages.")
	parser.add_argument("template", help="Template JSON file.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-i", "--data", dest="data_path", default=None, help="CSV data file (default: one empty starter row).")
	input_group.add_argument("-s", "--select", dest="selection", type=int, nargs="+", default=None, help="Row indices to render, in order.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	page_group = parser.add_argument_group("Page")
	page_group.add_argument("-f", "--page-format", dest="page_format", default=DEFAULT_PAGE_FORMAT, choices=sorted(lm.config.PAGE_FORMATS), help="Paper size.")
	page_group.add_argument("-r", "--orientation", dest="orientation", default=DEFAULT_ORIENTATION, choices=("portrait", "landscape"), help="Page orientation.")
	page_group.add_argument("--margin-top", dest="margin_top", type=float, default=DEFAULT_MARGIN_TOP, help="Top margin in mm.")
	page_group.add_argument("--margin-left", dest="margin_left", type=float, default=DEFAULT_MARGIN_LEFT, help="Left margin in mm.")
	page_group.add_argument("--margin-right", dest="margin_right", type=float, default=None, help="Right margin in mm (default: left margin).")
	page_group.add_argument("--margin-bottom", dest="margin_bottom", type=float, default=None, help="Bottom margin in mm (default: top margin).")
	page_group.add_argument("--gap", dest="gap", type=float, default=DEFAULT_GAP, help="Gap between labels in mm.")
	page_group.add_argument("--columns", dest="columns", type=int, default=None, help="Maximum labels per row.")
	page_group.add_argument("--rows", dest="rows", type=int, default=None, help="Maximum labels per column.")

	label_group = parser.add_argument_group("Label")
	label_group.add_argument("-L", "--label-size", dest="label_size", default=None, help="Catalog label size id, e.g. avery-5160.")
	label_group.add_argument("-W", "--label-width", dest="label_width", type=float, default=None, help="Label width in mm.")
	label_group.add_argument("-H", "--label-height", dest="label_height", type=float, default=None, help="Label height in mm.")
	label_group.add_argument("--font-size", dest="font_size", type=float, default=None, help="Override text font size in points.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw label outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable label outlines.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")
	behavior_group.add_argument("-t", "--trim-names", dest="trim_names", action="store_true", help="Match {{ name }} as {{name}}.")
	behavior_group.add_argument("-T", "--no-trim-names", dest="trim_names", action="store_false", help="Match placeholder names exactly.")
	behavior_group.add_argument("--single", dest="single_row", type=int, default=None, help="Render one row centered on its own page.")
	behavior_group.add_argument(
		"--list-variables",
		dest="list_variables",
		action="store_true",
		help="Print the template variables and stop.",
	)

	limit_group = parser.add_argument_group("Limits")
	limit_group.add_argument("-g", "--max-pages", dest="max_pages", type=int, default=None, help="Limit number of label pages.")
	limit_group.add_argument("-l", "--max-labels", dest="max_labels", type=int, default=None, help="Limit number of labels.")

	parser.set_defaults(
		draw_outlines=False,
		calibration=False,
		trim_names=False,
		list_variables=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def load_rows(args: argparse.Namespace) -> list[dict[str, str]]:
	if args.data_path is None:
		return lm.data.default_rows()
	return lm.data.load_rows_csv(pathlib.Path(args.data_path))


#============================================
def run_single(args: argparse.Namespace, template: lm.template.Template, rows: list[dict[str, str]]) -> None:
	"""
	Render one row as a single centered label.

	Args:
		args: Parsed argparse namespace.
		template: Label template.
		rows: Data rows.
	"""
	selection = lm.batch.resolve_selection(rows, [args.single_row])
	binding = lm.template.bind_template(template, rows[selection[0]], selection[0], args.trim_names)
	lm.render.render_single_label(
		template,
		binding.texts,
		build_page_format(args),
		build_footprint(args),
		pathlib.Path(args.output_path),
		build_render_config(args),
	)
	print(f"Single label written: {args.output_path}")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from template and CSV to a PDF sheet.

	Args:
		args: Parsed argparse namespace.
	"""
	print("CSV to label sheet pipeline")
	print(f"Template: {args.template}")
	print(f"Data: {args.data_path or '(default rows)'}")
	print(f"Output PDF: {args.output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")
	print(f"Draw outlines: {args.draw_outlines}")
	print(f"Calibration: {args.calibration}")
	if args.max_labels is not None:
		print(f"Max labels: {args.max_labels}")
	if args.max_pages is not None:
		print(f"Max pages: {args.max_pages}")

	start_time = time.perf_counter()
	template_path = pathlib.Path(args.template)
	template = lm.template.load_template(template_path)
	rows = load_rows(args)
	print(f"Rows loaded: {len(rows)}")

	variables = lm.template.scan_variables(template, args.trim_names)
	print(f"Variables: {', '.join(variables) if variables else '(none)'}")
	columns = lm.data.row_columns(rows)
	missing = [name for name in variables if name not in columns]
	if missing:
		print(f"Variables without a data column: {', '.join(missing)}")
	if args.list_variables:
		return

	if args.single_row is not None:
		run_single(args, template, rows)
		return

	page_format = build_page_format(args)
	footprint = build_footprint(args)
	plan = lm.batch.plan_batch(
		template,
		rows,
		page_format,
		footprint,
		selection=args.selection,
		max_labels=args.max_labels,
		max_pages=args.max_pages,
		trim_names=args.trim_names,
	)
	print(f"Grid: {plan.grid.columns} x {plan.grid.rows} ({plan.grid.slots_per_page} per page)")
	plan_end = time.perf_counter()

	output_path = pathlib.Path(args.output_path)
	summary = lm.render.render_plan_to_pdf(
		template,
		plan,
		page_format,
		footprint,
		output_path,
		build_render_config(args),
		verbose=True,
	)
	render_end = time.perf_counter()
	if summary.pages == 0:
		print("No labels to render, no PDF written.")
	else:
		print(f"Pages written: {summary.pages}")
	print(f"Labels printed: {summary.printed_labels}")
	print(f"Labels leftover: {summary.leftover_labels}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	data_path = pathlib.Path(args.data_path) if args.data_path else None
	lm.render.write_manifest(
		pathlib.Path(manifest_path),
		template_path,
		data_path,
		plan,
		summary,
		page_format,
		footprint,
	)
	print(
		"Timing: plan={:.2f}s render={:.2f}s total={:.2f}s".format(
			plan_end - start_time,
			render_end - plan_end,
			render_end - start_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)
