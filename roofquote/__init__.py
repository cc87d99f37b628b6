"""
roofquote — roofing takeoff and estimation pipeline.

Geometry → Quantities → qtyFrom rules → Pricing, plus pin material
selection and scope-of-work narrative. Pure math, no I/O.
"""
