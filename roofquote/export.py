"""
Quantities CSV export — one row per measurement, SQ for area, LF for lines.
"""

import csv
import io

# (label, Quantities field, unit, decimals)
CSV_ROWS = [
    ("Area", "area_sq", "SQ", 2),
    ("Eave", "eave_lf", "LF", 0),
    ("Rake", "rake_lf", "LF", 0),
    ("Ridge", "ridge_lf", "LF", 0),
    ("Hip", "hip_lf", "LF", 0),
    ("Valley", "valley_lf", "LF", 0),
    ("Wall", "wall_lf", "LF", 0),
    ("Step", "step_lf", "LF", 0),
]


def quantities_csv(quantities) -> str:
    """Render a Quantities record as Item,Quantity,Unit CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Item", "Quantity", "Unit"])
    for label, field, unit, decimals in CSV_ROWS:
        value = float(getattr(quantities, field, 0.0) or 0.0)
        writer.writerow([label, f"{value:.{decimals}f}", unit])
    return buf.getvalue()
