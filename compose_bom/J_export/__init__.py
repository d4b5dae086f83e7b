"""
J_export: Outward-facing surfaces for the extracted table.

Provides:
- J01: FastAPI application (create_app)
- J02: Version-to-version BOM comparison (compare_boms)
"""
