#!/usr/bin/env python3
"""
Configuration loader for the news monitor.

Loads settings from config.yaml and provides defaults.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from sources import DEFAULT_CUSTOM_COLOR, DEFAULT_SOURCES, FeedSource, SourceRegistry

logger = logging.getLogger(__name__)

# Default config path (relative to this file's parent directory)
CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

DEFAULT_PROXIES = [
    'https://api.allorigins.win/raw?url=',
    'https://corsproxy.io/?url=',
    'https://api.codetabs.com/v1/proxy?quest=',
]

UNDATED_POLICIES = ('now', 'last')


def _section(data: dict, key: str) -> dict:
    """A top-level section as a dict; a missing or empty section is {}."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    return value


@dataclass
class FetchConfig:
    """Network fetching settings."""
    timeout_seconds: float = 15
    cache_ttl_minutes: float = 5
    max_workers: int = 10
    proxy_start_index: int = 0
    proxies: List[str] = field(default_factory=lambda: list(DEFAULT_PROXIES))


@dataclass
class AggregationConfig:
    """Merge/sort/dedup settings."""
    undated_policy: str = "now"  # now, last
    dedup_key_length: int = 50


@dataclass
class GeoConfig:
    """Geo-tagging settings."""
    cluster_distance_km: float = 500


@dataclass
class SourceConfig:
    """Which sources to aggregate, plus per-source overrides."""
    enabled: List[str] = field(default_factory=list)  # empty = all
    overrides: Dict[str, dict] = field(default_factory=dict)
    custom_feeds: List[dict] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Output configuration settings."""
    default_format: str = "json"  # json, markdown


@dataclass
class Config:
    """Main configuration container."""
    version: int = 1
    fetch: FetchConfig = field(default_factory=FetchConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    geo: GeoConfig = field(default_factory=GeoConfig)
    sources: SourceConfig = field(default_factory=SourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config file (defaults to config.yaml in parent dir)

        Returns:
            Config instance; defaults when the file is missing or unreadable
        """
        config_path = Path(path) if path else CONFIG_PATH

        if not config_path.exists():
            return cls.defaults()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValueError("top level of config must be a mapping")
            return cls._from_dict(data)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)
            return cls.defaults()

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        fetch_data = _section(data, 'fetch')
        agg_data = _section(data, 'aggregation')
        geo_data = _section(data, 'geo')
        sources_data = _section(data, 'sources')
        output_data = _section(data, 'output')

        undated_policy = agg_data.get('undated_policy', 'now')
        if undated_policy not in UNDATED_POLICIES:
            raise ValueError(f"aggregation.undated_policy must be one of {UNDATED_POLICIES}")

        return cls(
            version=data.get('version', 1),
            fetch=FetchConfig(
                timeout_seconds=float(fetch_data.get('timeout_seconds', 15)),
                cache_ttl_minutes=float(fetch_data.get('cache_ttl_minutes', 5)),
                max_workers=int(fetch_data.get('max_workers', 10)),
                proxy_start_index=int(fetch_data.get('proxy_start_index', 0)),
                proxies=list(fetch_data.get('proxies') or DEFAULT_PROXIES),
            ),
            aggregation=AggregationConfig(
                undated_policy=undated_policy,
                dedup_key_length=int(agg_data.get('dedup_key_length', 50)),
            ),
            geo=GeoConfig(
                cluster_distance_km=float(geo_data.get('cluster_distance_km', 500)),
            ),
            sources=SourceConfig(
                enabled=list(sources_data.get('enabled') or []),
                overrides=dict(sources_data.get('overrides') or {}),
                custom_feeds=list(data.get('custom_feeds') or []),
            ),
            output=OutputConfig(
                default_format=output_data.get('default_format', 'json'),
            ),
        )

    @classmethod
    def defaults(cls) -> "Config":
        """Return default configuration."""
        return cls()

    def build_registry(self) -> SourceRegistry:
        """
        Build the source registry: built-in sources with any overrides
        applied, followed by custom feeds. Invalid custom feeds are skipped
        with a warning.
        """
        registry = SourceRegistry()

        for source in DEFAULT_SOURCES:
            override = self.sources.overrides.get(source.id)
            if override:
                merged = {**source.to_dict(), **override}
                source = FeedSource.from_dict(source.id, merged)
            registry.add(source)

        for source_id, data in self.sources.overrides.items():
            if source_id not in registry:
                try:
                    registry.add(FeedSource.from_dict(source_id, data))
                except ValueError as e:
                    logger.warning("Skipping source %s: %s", source_id, e)

        for feed in self.sources.custom_feeds:
            try:
                registry.add_custom_feed(
                    feed['id'], feed.get('name', feed['id']), feed['url'],
                    feed.get('color') or DEFAULT_CUSTOM_COLOR,
                )
            except (KeyError, ValueError) as e:
                logger.warning("Skipping custom feed %r: %s", feed, e)

        return registry

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            'version': self.version,
            'fetch': {
                'timeout_seconds': self.fetch.timeout_seconds,
                'cache_ttl_minutes': self.fetch.cache_ttl_minutes,
                'max_workers': self.fetch.max_workers,
                'proxy_start_index': self.fetch.proxy_start_index,
                'proxies': self.fetch.proxies,
            },
            'aggregation': {
                'undated_policy': self.aggregation.undated_policy,
                'dedup_key_length': self.aggregation.dedup_key_length,
            },
            'geo': {
                'cluster_distance_km': self.geo.cluster_distance_km,
            },
            'sources': {
                'enabled': self.sources.enabled,
                'overrides': self.sources.overrides,
            },
            'custom_feeds': self.sources.custom_feeds,
            'output': {
                'default_format': self.output.default_format,
            },
        }


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def reload_config(path: Optional[Path] = None) -> Config:
    """Re-read configuration, from `path` when given."""
    global _config
    _config = Config.load(path)
    return _config
