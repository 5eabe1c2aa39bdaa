"""
Shared configuration and constants.
"""

import dataclasses


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4
LAYOUT_EPSILON = 1e-9

DEFAULT_PAGE_FORMAT = "A4"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_MARGIN_TOP = 10.0
DEFAULT_MARGIN_LEFT = 10.0
DEFAULT_GAP = 5.0
DEFAULT_LABEL_WIDTH = 90.0
DEFAULT_LABEL_HEIGHT = 50.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_ITALIC = "Helvetica-Oblique"
DEFAULT_FONT_BOLD_ITALIC = "Helvetica-BoldOblique"
DEFAULT_TEXT_SIZE = 10.0
DEFAULT_TEXT_COLOR = "#000000"
TEXT_LEADING_FACTOR = 1.2
OUTLINE_LINE_WIDTH = 0.3
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

DEFAULT_ROW_COLUMNS = ("nombre", "descripcion", "precio", "codigo")

# page sizes in millimetres, portrait
PAGE_FORMATS = {
	"A4": (210.0, 297.0),
	"A3": (297.0, 420.0),
	"A5": (148.0, 210.0),
	"Letter": (215.9, 279.4),
	"Legal": (215.9, 355.6),
	"Tabloid": (279.4, 431.8),
}


@dataclasses.dataclass(frozen=True)
class LabelSize:
	id: str
	name: str
	width: float
	height: float
	category: str
	brand: str = ""
	description: str = ""


LABEL_SIZES = (
	LabelSize("avery-5160", "Avery 5160", 66.04, 25.4, "address", "Avery", "Address labels (30 per sheet)"),
	LabelSize("avery-5161", "Avery 5161", 101.6, 25.4, "address", "Avery", "Address labels (20 per sheet)"),
	LabelSize("avery-5162", "Avery 5162", 101.6, 33.87, "address", "Avery", "Address labels (14 per sheet)"),
	LabelSize("avery-5163", "Avery 5163", 101.6, 50.8, "shipping", "Avery", "Shipping labels (10 per sheet)"),
	LabelSize("avery-5164", "Avery 5164", 101.6, 84.67, "shipping", "Avery", "Shipping labels (6 per sheet)"),
	LabelSize("avery-5167", "Avery 5167", 19.05, 12.7, "product", "Avery", "Return address labels (80 per sheet)"),
	LabelSize("avery-22805", "Avery 22805", 63.5, 33.87, "name", "Avery", "Name badges (24 per sheet)"),
	LabelSize("brother-dk1201", "Brother DK-1201", 29.0, 90.0, "address", "Brother", "Standard address labels"),
	LabelSize("brother-dk1202", "Brother DK-1202", 62.0, 100.0, "shipping", "Brother", "Shipping labels"),
	LabelSize("brother-dk1208", "Brother DK-1208", 38.0, 90.0, "address", "Brother", "Large address labels"),
	LabelSize("standard-small", "Small Product", 25.0, 15.0, "product", "", "Small product labels"),
	LabelSize("standard-medium", "Medium Product", 50.0, 30.0, "product", "", "Medium product labels"),
	LabelSize("standard-large", "Large Product", 75.0, 50.0, "product", "", "Large product labels"),
	LabelSize("business-card", "Business Card", 85.0, 55.0, "standard", "", "Standard business card size"),
	LabelSize("postcard", "Postcard", 148.0, 105.0, "standard", "", "Standard postcard size"),
)


@dataclasses.dataclass(frozen=True)
class LabelFootprint:
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class PageFormat:
	width: float
	height: float
	margin_top: float = DEFAULT_MARGIN_TOP
	margin_left: float = DEFAULT_MARGIN_LEFT
	gap: float = DEFAULT_GAP
	margin_right: float | None = None
	margin_bottom: float | None = None
	h_gap: float | None = None
	v_gap: float | None = None
	max_columns: int | None = None
	max_rows: int | None = None


@dataclasses.dataclass(frozen=True)
class LayoutSlot:
	page_index: int
	row: int
	col: int
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class GridSpec:
	columns: int
	rows: int
	slots_per_page: int


@dataclasses.dataclass
class BatchSummary:
	total_labels: int
	printed_labels: int
	leftover_labels: int
	pages: int
	labels_per_page: int


@dataclasses.dataclass
class RenderConfig:
	draw_outlines: bool
	calibration: bool
	font_size: float | None = None


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetre value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH / MM_PER_INCH


#============================================
def page_format_by_name(
	name: str,
	orientation: str = DEFAULT_ORIENTATION,
	margin_top: float = DEFAULT_MARGIN_TOP,
	margin_left: float = DEFAULT_MARGIN_LEFT,
	gap: float = DEFAULT_GAP,
	**kwargs,
) -> PageFormat:
	"""
	Build a PageFormat from a named paper size.

	Args:
		name: Paper name such as "A4" or "Letter" (case insensitive).
		orientation: "portrait" or "landscape".
		margin_top: Top margin in mm.
		margin_left: Left margin in mm.
		gap: Gap between labels in mm.

	Returns:
		PageFormat.
	"""
	lookup = {key.lower(): key for key in PAGE_FORMATS}
	key = lookup.get(name.strip().lower())
	if key is None:
		raise ValueError(f"Unknown page format: {name}")
	width, height = PAGE_FORMATS[key]
	normalized = orientation.strip().lower()
	if normalized == "landscape":
		width, height = height, width
	elif normalized != "portrait":
		raise ValueError(f"Unknown orientation: {orientation}")
	return PageFormat(
		width=width,
		height=height,
		margin_top=margin_top,
		margin_left=margin_left,
		gap=gap,
		**kwargs,
	)


#============================================
def get_label_size(label_id: str) -> LabelSize | None:
	"""
	Look up a catalog label size by id.
	"""
	for size in LABEL_SIZES:
		if size.id == label_id:
			return size
	return None


#============================================
def label_sizes_by_category(category: str) -> list[LabelSize]:
	return [size for size in LABEL_SIZES if size.category == category]


#============================================
def footprint_for(size: LabelSize) -> LabelFootprint:
	return LabelFootprint(width=size.width, height=size.height)
