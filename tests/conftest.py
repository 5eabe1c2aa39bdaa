"""
Pytest configuration for local imports and shared label fixtures.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()
import label_merge.template


#============================================
@pytest.fixture
def price_template() -> label_merge.template.Template:
	"""
	Template with a name/price text, a border and a static caption.
	"""
	return label_merge.template.template_from_dict(
		{
			"name": "price-tag",
			"elements": [
				{"kind": "shape", "shape": "rect", "x": 0, "y": 0, "width": 90, "height": 50},
				{"kind": "text", "content": "{{name}} - {{price}}", "x": 5, "y": 5, "width": 80, "height": 10},
				{"kind": "text", "content": "Code: {{code}}", "x": 5, "y": 20, "width": 80, "height": 10},
				{"kind": "text", "content": "Thank you", "x": 5, "y": 35, "width": 80, "height": 10},
			],
		}
	)


#============================================
@pytest.fixture
def product_rows() -> list[dict[str, str]]:
	return [
		{"name": "A", "price": "$1", "code": "001"},
		{"name": "B", "price": "$2", "code": "002"},
		{"name": "C", "price": "$3", "code": "003"},
	]
