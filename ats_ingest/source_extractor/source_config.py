"""
Ingestion configuration loader.

This module captures everything a run needs from the process environment
(company lists, the trigger secret, the database URL) into one explicit
`IngestionConfig` value. The orchestrator only ever sees that value, so tests
can inject their own configuration.

Company lists come from `COMPANIES_GREENHOUSE`, `COMPANIES_LEVER` and
`COMPANIES_ASHBY` (comma-separated slugs). An optional `config/sources.yml`
can add companies or disable a provider:

    providers:
      greenhouse:
        enabled: true
        companies: [airbnb, stripe]
      ashby:
        enabled: false
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .adapters import ADAPTERS

load_dotenv()

logger = logging.getLogger(__name__)

COMPANY_ENV_VARS = {
    "greenhouse": "COMPANIES_GREENHOUSE",
    "lever": "COMPANIES_LEVER",
    "ashby": "COMPANIES_ASHBY",
}


class ConfigurationError(ValueError):
    """Raised when the configured (source, company) pairs cannot be read."""


@dataclass
class ProviderConfig:
    """Configuration for a single source provider."""

    enabled: bool = True
    companies: list[str] = field(default_factory=list)


@dataclass
class IngestionConfig:
    """Configuration captured once at the start of an ingestion run."""

    companies: dict[str, list[str]] = field(default_factory=dict)
    cron_secret: str | None = None
    database_url: str | None = None

    def units(self) -> Iterator[tuple[str, str]]:
        """Yield (source, company) pairs, grouped by source in insertion order."""
        for source, companies in self.companies.items():
            for company in companies:
                yield source, company

    @property
    def unit_count(self) -> int:
        return sum(len(companies) for companies in self.companies.values())


def parse_company_list(value: str | None) -> list[str]:
    """Split a comma-separated slug list, dropping blanks."""
    if not value:
        return []
    return [slug.strip() for slug in value.split(",") if slug.strip()]


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent.parent


def load_sources_config(config_path: str | None = None) -> dict[str, ProviderConfig]:
    """
    Load provider configuration from YAML file.

    Args:
        config_path: Optional override for the config file path. When omitted,
            the function reads `config/sources.yml` relative to the project
            root, and a missing file simply means "no overrides".

    Returns:
        Dictionary mapping provider names to `ProviderConfig` objects.

    Raises:
        ConfigurationError: If an explicit file is missing, or the YAML cannot
            be parsed or has an invalid structure.
    """
    path = Path(config_path) if config_path else _project_root() / "config" / "sources.yml"
    if not path.exists():
        if config_path:
            logger.error("Sources configuration file not found: %s", path)
            raise ConfigurationError(f"Sources configuration file not found: {path}")
        logger.debug("No sources configuration file at %s", path)
        return {}

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config: Mapping[str, Any] | None = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse sources configuration: %s", exc)
        raise ConfigurationError(f"Invalid YAML in sources configuration: {exc}") from exc

    if not raw_config:
        logger.warning("Sources configuration file is empty: %s", path)
        return {}

    if not isinstance(raw_config, Mapping):
        raise ConfigurationError("Sources configuration must be a mapping")

    providers_section = raw_config.get("providers")
    if not isinstance(providers_section, Mapping):
        raise ConfigurationError("`providers` section is missing or invalid in sources configuration")

    providers: dict[str, ProviderConfig] = {}
    for provider_name, provider_data in providers_section.items():
        if provider_name not in ADAPTERS:
            raise ConfigurationError(f"Unknown provider '{provider_name}' in sources configuration")
        if provider_data is None:
            provider_data = {}
        if not isinstance(provider_data, Mapping):
            raise ConfigurationError(f"Invalid provider configuration for '{provider_name}'")

        companies = provider_data.get("companies") or []
        if not isinstance(companies, list):
            raise ConfigurationError(f"`companies` for provider '{provider_name}' must be a list")

        providers[provider_name] = ProviderConfig(
            enabled=bool(provider_data.get("enabled", True)),
            companies=[str(slug).strip() for slug in companies if str(slug).strip()],
        )

    logger.info(
        "Loaded sources configuration",
        extra={
            "sources_count": len(providers),
            "enabled_sources": [name for name, cfg in providers.items() if cfg.enabled],
        },
    )
    return providers


def load_ingestion_config(
    config_path: str | None = None,
    env: Mapping[str, str] | None = None,
) -> IngestionConfig:
    """
    Build the configuration for one ingestion run.

    Environment company lists come first; companies from the YAML file are
    appended (duplicates dropped). A provider disabled in YAML contributes no
    companies at all.

    Args:
        config_path: Optional path to a sources YAML file
        env: Environment mapping (defaults to os.environ)

    Returns:
        IngestionConfig

    Raises:
        ConfigurationError: If the sources file is invalid
    """
    env = os.environ if env is None else env
    providers = load_sources_config(config_path)

    companies: dict[str, list[str]] = {}
    for source, env_var in COMPANY_ENV_VARS.items():
        provider = providers.get(source, ProviderConfig())
        if not provider.enabled:
            logger.info("Source disabled in configuration", extra={"source": source})
            companies[source] = []
            continue

        slugs = parse_company_list(env.get(env_var))
        for slug in provider.companies:
            if slug not in slugs:
                slugs.append(slug)
        companies[source] = slugs

    config = IngestionConfig(
        companies=companies,
        cron_secret=env.get("CRON_SECRET") or None,
        database_url=env.get("DATABASE_URL") or None,
    )

    logger.info(
        "Loaded ingestion configuration",
        extra={
            "units": config.unit_count,
            "companies_per_source": {s: len(c) for s, c in companies.items()},
            "has_cron_secret": config.cron_secret is not None,
        },
    )
    return config


__all__ = [
    "COMPANY_ENV_VARS",
    "ConfigurationError",
    "IngestionConfig",
    "ProviderConfig",
    "load_ingestion_config",
    "load_sources_config",
    "parse_company_list",
]
