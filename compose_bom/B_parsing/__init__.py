"""
B_parsing: Version recognition and BOM table parsing strategies.

Provides:
- B01: BOM / artifact version and artifact id recognizers
- B01a: Cell normalization and link helpers
- B03: Pipe-delimited matrix table parser
- B04: Selector-ordered per-BOM rows parser
- B05: Flat sequential text parser
- B06: Package-registry fallback (search API, version listing, POM manifests)
"""
