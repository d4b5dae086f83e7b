"""
compose_bom: Jetpack Compose BOM compatibility matrix extractor.

Subpackages:
- A_core: logging, domain models, interfaces, exceptions
- B_parsing: version recognizers and table parsing strategies
- G_config: config.yaml loading
- H_pipeline: extraction orchestrator and result normalizer
- J_export: HTTP API and BOM comparison
- Z_utils: HTTP fetcher
"""

__version__ = "1.0.0"
