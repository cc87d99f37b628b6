"""
Deterministic calculation engine.

Pure Python math. No I/O.
Given accepted roof geometry, pins and a price sheet, produce exact
Quantities, resolved line quantities and candidate materials.
"""
