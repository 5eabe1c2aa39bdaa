"""
Label templates, placeholder scanning and variable binding.
"""

# Standard Library
import collections.abc
import dataclasses
import json
import pathlib
import re

# local repo modules
import label_merge as lm
import label_merge.config


DEFAULT_TEXT_SIZE = lm.config.DEFAULT_TEXT_SIZE
DEFAULT_TEXT_COLOR = lm.config.DEFAULT_TEXT_COLOR

ELEMENT_KINDS = ("text", "shape", "image")
SHAPE_KINDS = ("rect", "circle", "line")
TOKEN_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")
TEXT_FIELDS = ("content", "color", "align", "shape", "fill_color", "stroke_color", "image_path")
FLOAT_FIELDS = ("x", "y", "width", "height", "font_size", "stroke_width")
BOOL_FIELDS = ("bold", "italic")


@dataclasses.dataclass(frozen=True)
class TemplateElement:
	kind: str
	x: float = 0.0
	y: float = 0.0
	width: float = 0.0
	height: float = 0.0
	content: str = ""
	font_size: float = DEFAULT_TEXT_SIZE
	bold: bool = False
	italic: bool = False
	color: str = DEFAULT_TEXT_COLOR
	align: str = "LEFT"
	shape: str = "rect"
	fill_color: str = ""
	stroke_color: str = "#000000"
	stroke_width: float = 0.3
	image_path: str = ""


@dataclasses.dataclass(frozen=True)
class Template:
	name: str
	elements: tuple[TemplateElement, ...] = ()

	def text_elements(self) -> list[TemplateElement]:
		return [element for element in self.elements if element.kind == "text"]


@dataclasses.dataclass(frozen=True)
class BindingResult:
	row_index: int
	texts: tuple[str, ...]


#============================================
def parse_bool(value, field_name: str) -> bool:
	"""
	Parse a JSON flag that may arrive as a bool, number or string.

	Args:
		value: Raw value.
		field_name: Field name for the error message.

	Returns:
		Boolean value.
	"""
	if isinstance(value, bool):
		return value
	if isinstance(value, (int, float)):
		return value != 0
	normalized = str(value).strip().lower()
	if normalized in ("true", "yes", "1"):
		return True
	if normalized in ("false", "no", "0", ""):
		return False
	raise ValueError(f"{field_name} must be true or false, got {value!r}")


#============================================
def token_name(match: re.Match, trim_names: bool) -> str | None:
	"""
	Get the placeholder name of a token match.

	Returns None when trimming leaves an empty name.
	"""
	name = match.group(1)
	if trim_names:
		name = name.strip()
	if not name:
		return None
	return name


#============================================
def element_from_dict(data: dict) -> TemplateElement:
	"""
	Build a TemplateElement from a plain dict.

	Args:
		data: Element mapping with at least a "kind" key.

	Returns:
		TemplateElement.
	"""
	kind = str(data.get("kind", "")).strip().lower()
	if kind not in ELEMENT_KINDS:
		raise ValueError(f"Unknown element kind: {data.get('kind')!r}")
	known = {field.name for field in dataclasses.fields(TemplateElement)}
	values = {key: value for key, value in data.items() if key in known}
	values["kind"] = kind
	for key in FLOAT_FIELDS:
		if key in values:
			values[key] = float(values[key])
	for key in TEXT_FIELDS:
		if key in values:
			values[key] = "" if values[key] is None else str(values[key])
	for key in BOOL_FIELDS:
		if key in values:
			values[key] = parse_bool(values[key], key)
	if kind == "shape":
		shape = str(values.get("shape", "rect")).strip().lower()
		if shape not in SHAPE_KINDS:
			raise ValueError(f"Unknown shape: {shape!r}")
		values["shape"] = shape
	if "align" in values:
		values["align"] = str(values["align"]).strip().upper()
	return TemplateElement(**values)


#============================================
def template_from_dict(data: dict) -> Template:
	"""
	Build a Template from a plain dict.

	Args:
		data: Mapping with "name" and an "elements" list.

	Returns:
		Template.
	"""
	elements = tuple(element_from_dict(item) for item in data.get("elements", []))
	return Template(name=str(data.get("name", "template")), elements=elements)


#============================================
def template_to_dict(template: Template) -> dict:
	return {
		"name": template.name,
		"elements": [dataclasses.asdict(element) for element in template.elements],
	}


#============================================
def load_template(path: pathlib.Path) -> Template:
	"""
	Load a template JSON file.

	Args:
		path: Template JSON path.

	Returns:
		Template.
	"""
	with pathlib.Path(path).open("r", encoding="utf-8") as handle:
		data = json.load(handle)
	return template_from_dict(data)


#============================================
def scan_text(content: str, trim_names: bool = False) -> list[str]:
	"""
	List the placeholder names in one text, in occurrence order.

	Args:
		content: Text content.
		trim_names: Strip whitespace around names.

	Returns:
		Names, duplicates included.
	"""
	names: list[str] = []
	for match in TOKEN_PATTERN.finditer(content or ""):
		name = token_name(match, trim_names)
		if name is not None:
			names.append(name)
	return names


#============================================
def scan_variables(template: Template, trim_names: bool = False) -> list[str]:
	"""
	Collect distinct placeholder names from a template.

	Names keep first-seen order: text elements in element order, then
	left to right within each element.

	Args:
		template: Template to scan.
		trim_names: Strip whitespace around names.

	Returns:
		Ordered list of distinct names.
	"""
	found: list[str] = []
	for element in template.text_elements():
		for name in scan_text(element.content, trim_names):
			if name not in found:
				found.append(name)
	return found


#============================================
def bind_text(
	content: str,
	row: collections.abc.Mapping,
	trim_names: bool = False,
) -> str:
	"""
	Substitute row values into the placeholders of one text.

	Replacement values are not scanned again. Names missing from the row
	keep their token text unchanged.

	Args:
		content: Text content with {{name}} tokens.
		row: Field name to value mapping.
		trim_names: Strip whitespace around names.

	Returns:
		Resolved text.
	"""
	def replace(match: re.Match) -> str:
		name = token_name(match, trim_names)
		if name is not None and name in row:
			return str(row[name])
		return match.group(0)

	return TOKEN_PATTERN.sub(replace, content or "")


#============================================
def bind_template(
	template: Template,
	row: collections.abc.Mapping,
	row_index: int = 0,
	trim_names: bool = False,
) -> BindingResult:
	"""
	Resolve every text element of a template against one row.

	Args:
		template: Template to bind.
		row: Field name to value mapping.
		row_index: Index of the row in the caller's row list.
		trim_names: Strip whitespace around names.

	Returns:
		BindingResult with one text per text element.
	"""
	texts = tuple(
		bind_text(element.content, row, trim_names) for element in template.text_elements()
	)
	return BindingResult(row_index=row_index, texts=texts)
