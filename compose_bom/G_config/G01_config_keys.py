# compose_bom/G_config/G01_config_keys.py
"""
Configuration key constants for the BOM extraction pipeline.

Provides type-safe configuration key enums that:
- Prevent typos in configuration keys
- Document default values
- Centralize configuration schema

Usage:
    from compose_bom.G_config.G01_config_keys import ConfigKey, HttpConfig, get_nested_config

    timeout = get_nested_config(config, ConfigKey.HTTP, HttpConfig.TIMEOUT_SECONDS)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ConfigKeyBase(str, Enum):
    """
    Base class for configuration key enums.

    Inherits from str to allow direct use as dictionary keys.
    """

    _default: Any
    _description: str

    def __new__(cls, key: str, default: Any = None, description: str = "") -> "ConfigKeyBase":
        obj = str.__new__(cls, key)
        obj._value_ = key
        obj._default = default
        obj._description = description
        return obj

    @property
    def default(self) -> Any:
        return self._default

    @property
    def description(self) -> str:
        return self._description


class ConfigKey(ConfigKeyBase):
    """Top-level sections of config.yaml."""

    SOURCES = ("sources", {}, "Text sources tried in order")
    REGISTRY = ("registry", {}, "Package-registry fallback")
    HTTP = ("http", {}, "Outbound HTTP settings")
    PIPELINE = ("pipeline", {}, "Orchestrator settings")
    API = ("api", {}, "HTTP boundary settings")
    LOGGING = ("logging", {}, "Logging settings")


class SourcesConfig(ConfigKeyBase):
    """Keys within the 'sources' section."""

    URLS = (
        "urls",
        [
            "https://developer.android.com/develop/ui/compose/bom/bom-mapping.md.txt?hl=ja",
            "https://developer.android.com/develop/ui/compose/bom/bom-mapping.md.txt",
            "https://r.jina.ai/http://developer.android.com/develop/ui/compose/bom/bom-mapping.md.txt?hl=ja",
            "https://r.jina.ai/http://developer.android.com/develop/ui/compose/bom/bom-mapping",
        ],
        "Documentation and mirror URLs, highest priority first",
    )
    ARTIFACT_NAMESPACE = ("artifact_namespace", "androidx.compose.", "Artifact id prefix to keep")
    SELECTION_MARKER = ("selection_marker", "Make a selection", "Phrase marking the BOM selector line")


class RegistryConfig(ConfigKeyBase):
    """Keys within the 'registry' section."""

    ENABLED = ("enabled", True, "Use the registry when no text source works")
    SEARCH_URL = (
        "search_url",
        "https://search.maven.org/solrsearch/select"
        "?q=g:androidx.compose+AND+a:compose-bom&core=gav&rows=200&wt=json",
        "Search API returning published BOM versions",
    )
    METADATA_URL = (
        "metadata_url",
        "https://dl.google.com/android/maven2/androidx/compose/compose-bom/maven-metadata.xml",
        "Version listing used when the search API yields too little",
    )
    MANIFEST_URL_TEMPLATE = (
        "manifest_url_template",
        "https://dl.google.com/android/maven2/androidx/compose/compose-bom/{version}/compose-bom-{version}.pom",
        "Per-version POM URL; {version} is substituted",
    )
    MAX_VERSIONS = ("max_versions", 40, "Newest BOM versions to read manifests for")


class HttpConfig(ConfigKeyBase):
    """Keys within the 'http' section."""

    TIMEOUT_SECONDS = ("timeout_seconds", 15.0, "Per-request timeout in seconds")
    USER_AGENT = ("user_agent", "compose-bom-matrix/1.0", "User-Agent header")


class PipelineKeys(ConfigKeyBase):
    """Keys within the 'pipeline' section."""

    DEADLINE_SECONDS = ("deadline_seconds", 60.0, "Overall budget per extraction (null = none)")


class ApiConfig(ConfigKeyBase):
    """Keys within the 'api' section."""

    LOCALE = ("locale", "ja", "Language of user-facing error messages")
    HOST = ("host", "127.0.0.1", "Bind address for `serve`")
    PORT = ("port", 5173, "Port for `serve`")


class LoggingConfig(ConfigKeyBase):
    """Keys within the 'logging' section."""

    LEVEL = ("level", "INFO", "Log level name")
    LOG_DIR = ("log_dir", None, "Directory for rotating log files (null = console only)")


def get_config(
    config: Dict[str, Any],
    key: ConfigKeyBase,
    default: Optional[Any] = None,
) -> Any:
    """Get a configuration value with type-safe key."""
    return config.get(key.value, default if default is not None else key.default)


def get_nested_config(
    config: Dict[str, Any],
    *keys: ConfigKeyBase,
    default: Optional[Any] = None,
) -> Any:
    """
    Get a nested configuration value.

    Example:
        >>> get_nested_config(config, ConfigKey.HTTP, HttpConfig.TIMEOUT_SECONDS)
        15.0
    """
    result = config
    for key in keys[:-1]:
        result = result.get(key.value) or {}
        if not isinstance(result, dict):
            return default if default is not None else keys[-1].default

    final_key = keys[-1]
    return result.get(final_key.value, default if default is not None else final_key.default)


__all__ = [
    "ConfigKey",
    "SourcesConfig",
    "RegistryConfig",
    "HttpConfig",
    "PipelineKeys",
    "ApiConfig",
    "LoggingConfig",
    "get_config",
    "get_nested_config",
]
