import json
import pathlib

import pytest

import label_merge.template


#============================================
def _text_template(*contents: str) -> label_merge.template.Template:
	"""
	Build a template holding one text element per content string.
	"""
	elements = [{"kind": "text", "content": content} for content in contents]
	return label_merge.template.template_from_dict({"name": "t", "elements": elements})


#============================================
def test_scan_first_seen_order_across_elements() -> None:
	"""
	Names keep element order, then left-to-right order, without repeats.
	"""
	template = _text_template("{{b}} and {{a}}", "{{c}} {{b}}", "{{a}}{{d}}")
	assert label_merge.template.scan_variables(template) == ["b", "a", "c", "d"]


#============================================
def test_scan_is_idempotent(price_template: label_merge.template.Template) -> None:
	"""
	Scanning the same template twice gives the same list.
	"""
	first = label_merge.template.scan_variables(price_template)
	second = label_merge.template.scan_variables(price_template)
	assert first == second == ["name", "price", "code"]


#============================================
def test_scan_ignores_shape_and_image_elements() -> None:
	"""
	Only text elements contribute names.
	"""
	template = label_merge.template.template_from_dict(
		{
			"name": "t",
			"elements": [
				{"kind": "shape", "content": "{{hidden}}"},
				{"kind": "image", "image_path": "{{logo}}.png"},
				{"kind": "text", "content": "{{shown}}"},
			],
		}
	)
	assert label_merge.template.scan_variables(template) == ["shown"]


#============================================
def test_scan_empty_cases() -> None:
	"""
	No text elements or no tokens yields an empty list.
	"""
	assert label_merge.template.scan_variables(label_merge.template.Template(name="empty")) == []
	assert label_merge.template.scan_variables(_text_template("plain", "{single}", "{{}}")) == []


#============================================
def test_scan_keeps_whitespace_unless_trimmed() -> None:
	"""
	Names match exactly by default and can be trimmed on request.
	"""
	template = _text_template("{{ price }} {{price}}")
	assert label_merge.template.scan_variables(template) == [" price ", "price"]
	assert label_merge.template.scan_variables(template, trim_names=True) == ["price"]


#============================================
def test_scan_text_reports_duplicates() -> None:
	assert label_merge.template.scan_text("{{a}}-{{a}}-{{b}}") == ["a", "a", "b"]


#============================================
def test_unknown_element_kind_rejected() -> None:
	"""
	Loading a template with an unknown element kind fails.
	"""
	with pytest.raises(ValueError):
		label_merge.template.template_from_dict({"elements": [{"kind": "barcode"}]})
	with pytest.raises(ValueError):
		label_merge.template.template_from_dict({"elements": [{"kind": "shape", "shape": "star"}]})


#============================================
def test_load_template_round_trip(tmp_path: pathlib.Path, price_template: label_merge.template.Template) -> None:
	"""
	A template written as JSON loads back equal.
	"""
	path = tmp_path / "template.json"
	path.write_text(json.dumps(label_merge.template.template_to_dict(price_template)), encoding="utf-8")
	loaded = label_merge.template.load_template(path)
	assert loaded == price_template
	assert len(loaded.text_elements()) == 3


#============================================
def test_blank_trimmed_token_is_not_a_name() -> None:
	"""
	A token holding only whitespace yields no name once trimmed.
	"""
	template = _text_template("a {{  }} b {{ x }}")
	assert label_merge.template.scan_variables(template, trim_names=True) == ["x"]
	assert label_merge.template.scan_variables(template) == ["  ", " x "]


#============================================
def test_names_never_hold_braces() -> None:
	"""
	Extra braces around a token stay outside the name.
	"""
	assert label_merge.template.scan_text("{{{a}}}") == ["a"]
	assert label_merge.template.scan_text("{{a{{b}}") == ["b"]


#============================================
def test_loader_converts_field_types() -> None:
	"""
	JSON scalars become the element's text and flag types at load time.
	"""
	template = label_merge.template.template_from_dict(
		{
			"elements": [
				{"kind": "text", "content": 42, "bold": "false", "italic": "true", "color": None},
				{"kind": "image", "image_path": 7},
			],
		}
	)
	text_element, image_element = template.elements
	assert text_element.content == "42"
	assert text_element.bold is False
	assert text_element.italic is True
	assert text_element.color == ""
	assert image_element.image_path == "7"
	assert label_merge.template.scan_variables(template) == []


#============================================
def test_loader_rejects_bad_flag() -> None:
	with pytest.raises(ValueError):
		label_merge.template.template_from_dict({"elements": [{"kind": "text", "bold": "maybe"}]})
