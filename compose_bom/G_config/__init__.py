# compose_bom/G_config/__init__.py
"""
Configuration for the BOM extraction pipeline.

Load from config.yaml:

    from compose_bom.G_config import load_config

    config = load_config()
    print(config.source_urls)

Or build programmatically (tests, embedding):

    from compose_bom.G_config import PipelineConfig

    config = PipelineConfig(source_urls=[], registry_max_versions=5)

See G_config/config.yaml for every key and its default.
"""

from .G02_pipeline_config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    PipelineConfig,
    load_config,
)

__all__ = [
    "PipelineConfig",
    "load_config",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
]
