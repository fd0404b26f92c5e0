"""Configuration loading for docs-check (.docs-check.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit

import yaml

from .errors import ConfigError, ConfigNotFoundError, DocsCheckError
from .globs import validate_pattern
from .logging import get_logger
from .models import DeclarationKind

CONFIG_FILENAME = ".docs-check.yml"
WILDCARD_KEY = "*"
URL_PLACEHOLDER = "{name}"

_KNOWN_KEYS = {
    "entryPoints",
    "intentionallyNotDocumented",
    "externalSymbolLinkMappings",
    "exclude",
    "requiredToBeDocumented",
    "strict",
    "strictPatterns",
    "jobs",
}

logger = get_logger("config")


@dataclass(frozen=True)
class CheckConfig:
    """Immutable settings for one docs-check run."""

    root: Path
    entry_points: Tuple[str, ...]
    intentionally_not_documented: FrozenSet[str] = frozenset()
    external_symbol_link_mappings: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    exclude: Tuple[str, ...] = ()
    required_to_be_documented: FrozenSet[DeclarationKind] = frozenset(DeclarationKind)
    strict: bool = False
    strict_patterns: bool = False
    jobs: int = 1
    source: Optional[Path] = None

    def with_overrides(
        self, *, strict: Optional[bool] = None, jobs: Optional[int] = None
    ) -> "CheckConfig":
        """Return a copy with CLI-level overrides applied."""
        return CheckConfig(
            root=self.root,
            entry_points=self.entry_points,
            intentionally_not_documented=self.intentionally_not_documented,
            external_symbol_link_mappings=self.external_symbol_link_mappings,
            exclude=self.exclude,
            required_to_be_documented=self.required_to_be_documented,
            strict=self.strict if strict is None else strict,
            strict_patterns=self.strict_patterns,
            jobs=self.jobs if jobs is None else _validate_jobs(jobs),
            source=self.source,
        )


def load_config(config_path: Path) -> CheckConfig:
    """Load and validate configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    if not config_file.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {config_file}")

    data = _read_config(config_file)
    return parse_config(data, root=config_file.parent, source=config_file)


def parse_config(
    data: Mapping[str, Any], *, root: Path, source: Optional[Path] = None
) -> CheckConfig:
    """Validate a raw configuration mapping and build a CheckConfig."""
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration must contain a mapping at the root")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    if "entryPoints" not in data:
        raise ConfigError("entryPoints is required")
    entry_points = _as_str_list(data.get("entryPoints"), "entryPoints")
    if not entry_points:
        raise ConfigError("entryPoints must list at least one glob pattern")
    exclude = _as_str_list(data.get("exclude"), "exclude")
    for pattern in (*entry_points, *exclude):
        validate_pattern(pattern)

    exemptions = _as_str_list(data.get("intentionallyNotDocumented"), "intentionallyNotDocumented")
    duplicates = sorted({name for name in exemptions if exemptions.count(name) > 1})
    if duplicates:
        raise ConfigError(
            "intentionallyNotDocumented contains duplicate entries: " + ", ".join(duplicates)
        )

    link_map = _parse_link_mappings(data.get("externalSymbolLinkMappings"))

    required_raw = data.get("requiredToBeDocumented")
    if required_raw is None:
        required = frozenset(DeclarationKind)
    else:
        kinds: List[DeclarationKind] = []
        for value in _as_str_list(required_raw, "requiredToBeDocumented"):
            try:
                kinds.append(DeclarationKind.parse(value))
            except ValueError as exc:
                raise ConfigError(f"requiredToBeDocumented: {exc}") from exc
        required = frozenset(kinds)

    return CheckConfig(
        root=root.resolve(),
        entry_points=tuple(entry_points),
        intentionally_not_documented=frozenset(exemptions),
        external_symbol_link_mappings=MappingProxyType(link_map),
        exclude=tuple(exclude),
        required_to_be_documented=required,
        strict=_as_bool(data.get("strict"), "strict"),
        strict_patterns=_as_bool(data.get("strictPatterns"), "strictPatterns"),
        jobs=_validate_jobs(data.get("jobs", 1)),
        source=source,
    )


def validate_url(key: str, value: str) -> str:
    """Return ``value`` when it is an absolute http(s) URL or URL template."""
    candidate = value.strip()
    sample = candidate.replace(URL_PLACEHOLDER, "x")
    try:
        parts = urlsplit(sample)
    except ValueError as exc:
        raise ConfigError(f"externalSymbolLinkMappings[{key!r}] is not a valid URL: {value!r}") from exc
    if parts.scheme not in {"http", "https"} or not parts.netloc or any(ch.isspace() for ch in sample):
        raise ConfigError(f"externalSymbolLinkMappings[{key!r}] is not a valid URL: {value!r}")
    return candidate


def _parse_link_mappings(value: Any) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError("externalSymbolLinkMappings must be a mapping")

    result: Dict[str, str] = {}

    def _add(symbol: Any, url: Any, owner: Optional[str]) -> None:
        if not isinstance(symbol, str) or not symbol.strip():
            raise ConfigError("externalSymbolLinkMappings keys must be non-empty strings")
        if not isinstance(url, str):
            raise ConfigError(f"externalSymbolLinkMappings[{symbol!r}] must be a URL string")
        key = symbol.strip()
        if key in result:
            where = f" (package {owner!r})" if owner else ""
            raise ConfigError(f"externalSymbolLinkMappings defines {key!r} more than once{where}")
        result[key] = validate_url(key, url)

    for key, mapped in value.items():
        if isinstance(mapped, Mapping):
            # TypeDoc shape: {package: {symbol: url}}
            for symbol, url in mapped.items():
                _add(symbol, url, str(key))
        else:
            _add(key, mapped, None)
    return result


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        raise ConfigError(f"{path.name} is empty")
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        items: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"{key} entries must be strings, got {item!r}")
            items.append(item)
        return items
    raise ConfigError(f"{key} must be a list of strings")


def _as_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be true or false")


def _validate_jobs(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"jobs must be a positive integer, got {value!r}")
    return value


__all__ = [
    "CONFIG_FILENAME",
    "CheckConfig",
    "ConfigError",
    "ConfigNotFoundError",
    "DocsCheckError",
    "load_config",
    "parse_config",
    "validate_url",
]
