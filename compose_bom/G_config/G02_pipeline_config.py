# compose_bom/G_config/G02_pipeline_config.py
"""
Pipeline configuration for the BOM extraction run.

Everything the orchestrator needs (source URLs, registry endpoints,
timeouts) is carried by one PipelineConfig passed in at construction, so
tests can build the pipeline without network access or module globals.

Usage:
    from compose_bom.G_config import load_config

    # From G_config/config.yaml (or $COMPOSE_BOM_CONFIG)
    config = load_config()

    # Programmatic
    config = PipelineConfig(source_urls=["https://example.test/bom.txt"], registry_enabled=False)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A12_exceptions import ConfigurationError
from compose_bom.G_config.G01_config_keys import (
    ApiConfig,
    ConfigKey,
    HttpConfig,
    LoggingConfig,
    PipelineKeys,
    RegistryConfig,
    SourcesConfig,
    get_nested_config,
)

logger = get_logger(__name__)

CONFIG_ENV_VAR = "COMPOSE_BOM_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"
SUPPORTED_LOCALES = ("ja", "en")


def _is_number(value: Any) -> bool:
    # bool is an int subclass; YAML `true` is not a duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _url_list(value: Any) -> Any:
    """A single URL string becomes a one-item list; other values pass through to validate()."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


@dataclass
class PipelineConfig:
    """
    Settings for one extraction pipeline.

    Defaults mirror config.yaml so that PipelineConfig() is usable as-is.
    """

    # Text sources
    source_urls: List[str] = field(default_factory=lambda: list(SourcesConfig.URLS.default))
    artifact_namespace: str = SourcesConfig.ARTIFACT_NAMESPACE.default
    selection_marker: str = SourcesConfig.SELECTION_MARKER.default

    # Registry fallback
    registry_enabled: bool = RegistryConfig.ENABLED.default
    registry_search_url: Optional[str] = RegistryConfig.SEARCH_URL.default
    registry_metadata_url: Optional[str] = RegistryConfig.METADATA_URL.default
    registry_manifest_url_template: str = RegistryConfig.MANIFEST_URL_TEMPLATE.default
    registry_max_versions: int = RegistryConfig.MAX_VERSIONS.default

    # HTTP
    timeout_seconds: float = HttpConfig.TIMEOUT_SECONDS.default
    user_agent: str = HttpConfig.USER_AGENT.default

    # Orchestrator
    deadline_seconds: Optional[float] = PipelineKeys.DEADLINE_SECONDS.default

    # Boundary
    locale: str = ApiConfig.LOCALE.default
    host: str = ApiConfig.HOST.default
    port: int = ApiConfig.PORT.default

    # Logging
    log_level: str = LoggingConfig.LEVEL.default
    log_dir: Optional[str] = LoggingConfig.LOG_DIR.default

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError for settings the pipeline cannot run with."""
        if not isinstance(self.source_urls, list) or not all(isinstance(u, str) for u in self.source_urls):
            raise ConfigurationError(
                "urls must be a list of strings",
                config_key="sources.urls",
                expected_type="list[str]",
                actual_value=self.source_urls,
            )
        if not isinstance(self.registry_enabled, bool):
            raise ConfigurationError(
                "enabled must be true or false",
                config_key="registry.enabled",
                expected_type="bool",
                actual_value=self.registry_enabled,
            )
        if not self.source_urls and not self.registry_enabled:
            raise ConfigurationError(
                "No text sources configured and registry fallback disabled",
                config_key="sources.urls",
            )
        if self.registry_enabled:
            if not (self.registry_search_url or self.registry_metadata_url):
                raise ConfigurationError(
                    "Registry fallback needs a search_url or a metadata_url",
                    config_key="registry",
                )
            if "{version}" not in (self.registry_manifest_url_template or ""):
                raise ConfigurationError(
                    "Manifest URL template must contain {version}",
                    config_key="registry.manifest_url_template",
                    actual_value=self.registry_manifest_url_template,
                )
        if (
            not isinstance(self.registry_max_versions, int)
            or isinstance(self.registry_max_versions, bool)
            or self.registry_max_versions < 1
        ):
            raise ConfigurationError(
                "max_versions must be a positive integer",
                config_key="registry.max_versions",
                expected_type="int >= 1",
                actual_value=self.registry_max_versions,
            )
        if not _is_number(self.timeout_seconds) or self.timeout_seconds <= 0:
            raise ConfigurationError(
                "timeout_seconds must be a positive number",
                config_key="http.timeout_seconds",
                expected_type="number > 0",
                actual_value=self.timeout_seconds,
            )
        if self.deadline_seconds is not None and (
            not _is_number(self.deadline_seconds) or self.deadline_seconds <= 0
        ):
            raise ConfigurationError(
                "deadline_seconds must be a positive number or null",
                config_key="pipeline.deadline_seconds",
                expected_type="number > 0 | null",
                actual_value=self.deadline_seconds,
            )
        if self.locale not in SUPPORTED_LOCALES:
            raise ConfigurationError(
                "Unsupported locale",
                config_key="api.locale",
                expected_type=" | ".join(SUPPORTED_LOCALES),
                actual_value=self.locale,
            )

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PipelineConfig":
        """Create configuration from the nested config.yaml structure."""
        d = d or {}
        return cls(
            source_urls=_url_list(get_nested_config(d, ConfigKey.SOURCES, SourcesConfig.URLS)),
            artifact_namespace=get_nested_config(d, ConfigKey.SOURCES, SourcesConfig.ARTIFACT_NAMESPACE),
            selection_marker=get_nested_config(d, ConfigKey.SOURCES, SourcesConfig.SELECTION_MARKER),
            registry_enabled=get_nested_config(d, ConfigKey.REGISTRY, RegistryConfig.ENABLED),
            registry_search_url=get_nested_config(d, ConfigKey.REGISTRY, RegistryConfig.SEARCH_URL),
            registry_metadata_url=get_nested_config(d, ConfigKey.REGISTRY, RegistryConfig.METADATA_URL),
            registry_manifest_url_template=get_nested_config(
                d, ConfigKey.REGISTRY, RegistryConfig.MANIFEST_URL_TEMPLATE
            ),
            registry_max_versions=get_nested_config(d, ConfigKey.REGISTRY, RegistryConfig.MAX_VERSIONS),
            timeout_seconds=get_nested_config(d, ConfigKey.HTTP, HttpConfig.TIMEOUT_SECONDS),
            user_agent=get_nested_config(d, ConfigKey.HTTP, HttpConfig.USER_AGENT),
            deadline_seconds=get_nested_config(d, ConfigKey.PIPELINE, PipelineKeys.DEADLINE_SECONDS),
            locale=get_nested_config(d, ConfigKey.API, ApiConfig.LOCALE),
            host=get_nested_config(d, ConfigKey.API, ApiConfig.HOST),
            port=get_nested_config(d, ConfigKey.API, ApiConfig.PORT),
            log_level=get_nested_config(d, ConfigKey.LOGGING, LoggingConfig.LEVEL),
            log_dir=get_nested_config(d, ConfigKey.LOGGING, LoggingConfig.LOG_DIR),
        )

    @classmethod
    def from_yaml(cls, config_path: Optional[Union[str, Path]] = None) -> "PipelineConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML file. If None, uses G_config/config.yaml.

        Raises:
            ConfigurationError: When the file is not valid YAML or holds invalid values.
        """
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

        if not path.exists():
            if config_path:
                raise ConfigurationError("Config file not found", config_key="path", actual_value=str(path))
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path.name}: {e}", config_key="path") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config root must be a mapping",
                config_key="path",
                expected_type="mapping",
                actual_value=type(data).__name__,
            )
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Nested structure matching config.yaml."""
        return {
            ConfigKey.SOURCES.value: {
                SourcesConfig.URLS.value: list(self.source_urls),
                SourcesConfig.ARTIFACT_NAMESPACE.value: self.artifact_namespace,
                SourcesConfig.SELECTION_MARKER.value: self.selection_marker,
            },
            ConfigKey.REGISTRY.value: {
                RegistryConfig.ENABLED.value: self.registry_enabled,
                RegistryConfig.SEARCH_URL.value: self.registry_search_url,
                RegistryConfig.METADATA_URL.value: self.registry_metadata_url,
                RegistryConfig.MANIFEST_URL_TEMPLATE.value: self.registry_manifest_url_template,
                RegistryConfig.MAX_VERSIONS.value: self.registry_max_versions,
            },
            ConfigKey.HTTP.value: {
                HttpConfig.TIMEOUT_SECONDS.value: self.timeout_seconds,
                HttpConfig.USER_AGENT.value: self.user_agent,
            },
            ConfigKey.PIPELINE.value: {
                PipelineKeys.DEADLINE_SECONDS.value: self.deadline_seconds,
            },
            ConfigKey.API.value: {
                ApiConfig.LOCALE.value: self.locale,
                ApiConfig.HOST.value: self.host,
                ApiConfig.PORT.value: self.port,
            },
            ConfigKey.LOGGING.value: {
                LoggingConfig.LEVEL.value: self.log_level,
                LoggingConfig.LOG_DIR.value: self.log_dir,
            },
        }


def load_config(config_path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Load the pipeline configuration.

    Resolution order:
    1. config_path argument
    2. COMPOSE_BOM_CONFIG environment variable (if set and non-empty)
    3. G_config/config.yaml
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
        config_path = env_path or None
    return PipelineConfig.from_yaml(config_path)


__all__ = ["PipelineConfig", "load_config", "CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH"]
