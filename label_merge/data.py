"""
Data rows: CSV import and export, normalization to display strings.
"""

# Standard Library
import csv
import pathlib

# local repo modules
import label_merge as lm
import label_merge.config


DEFAULT_ROW_COLUMNS = lm.config.DEFAULT_ROW_COLUMNS


#============================================
def format_value(value) -> str:
	"""
	Convert a field value to its display string.

	Args:
		value: Any primitive value.

	Returns:
		Display string.
	"""
	if value is None:
		return ""
	if isinstance(value, bool):
		return "true" if value else "false"
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value)


#============================================
def normalize_row(row: dict) -> dict[str, str]:
	return {str(key): format_value(value) for key, value in row.items()}


#============================================
def default_rows() -> list[dict[str, str]]:
	"""
	Return a single empty starter row.
	"""
	return [{column: "" for column in DEFAULT_ROW_COLUMNS}]


#============================================
def row_columns(rows: list[dict]) -> list[str]:
	if not rows:
		return []
	return list(rows[0].keys())


#============================================
def load_rows_csv(path: pathlib.Path) -> list[dict[str, str]]:
	"""
	Load data rows from a CSV file with a header row.

	Rows whose cells are all blank are skipped. Short rows are padded with
	empty strings.

	Args:
		path: CSV path.

	Returns:
		List of rows keyed by header name.
	"""
	rows: list[dict[str, str]] = []
	with pathlib.Path(path).open("r", encoding="utf-8-sig", newline="") as handle:
		reader = csv.reader(handle)
		headers = next(reader, None)
		if headers is None:
			return rows
		headers = [header.strip() for header in headers]
		for record in reader:
			if not any(cell.strip() for cell in record):
				continue
			row: dict[str, str] = {}
			for index, header in enumerate(headers):
				row[header] = record[index] if index < len(record) else ""
			rows.append(row)
	return rows


#============================================
def write_rows_csv(path: pathlib.Path, rows: list[dict]) -> None:
	"""
	Write data rows to a CSV file.

	Args:
		path: Output CSV path.
		rows: Rows to write. Columns come from the first row, then any new
			keys in later rows.
	"""
	columns: list[str] = []
	for row in rows:
		for key in row:
			if key not in columns:
				columns.append(key)
	with pathlib.Path(path).open("w", encoding="utf-8", newline="") as handle:
		writer = csv.DictWriter(handle, fieldnames=columns, restval="")
		writer.writeheader()
		for row in rows:
			writer.writerow(normalize_row(row))
