"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TypeVar

from spec_lab.search import DEFAULT_MAX_HITS, DEFAULT_SNIPPET_RADIUS
from spec_lab.taxonomy import Metric, TimeGranularity

CONFIG_FILE_NAME = "spec_lab.toml"

E = TypeVar("E", bound=StrEnum)

MAX_SEARCH_HITS_CAP = 500
MAX_SNIPPET_RADIUS_CAP = 400
MAX_BATCH_SIZE_CAP = 10_000

DEFAULT_BATCH_SIZE = 25
DEFAULT_CEILING_PER_CHANGED_LINE = 4
DEFAULT_CEILING_SLACK = 200


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Search result and indexing batch limits."""

    max_hits: int = DEFAULT_MAX_HITS
    snippet_radius: int = DEFAULT_SNIPPET_RADIUS
    batch_size: int = DEFAULT_BATCH_SIZE


@dataclass(slots=True, frozen=True)
class DistanceConfig:
    """Ceiling policy for previous-to-current edit distance."""

    ceiling_per_changed_line: int = DEFAULT_CEILING_PER_CHANGED_LINE
    ceiling_slack: int = DEFAULT_CEILING_SLACK

    def ceiling_for(self, added: int, deleted: int) -> int:
        return (added + deleted) * self.ceiling_per_changed_line + self.ceiling_slack


@dataclass(slots=True, frozen=True)
class TaxonomyConfig:
    """Default chart settings."""

    granularity: TimeGranularity = TimeGranularity.DAY
    metric: Metric = Metric.GROUPS
    soft_assignment: bool = True


@dataclass(slots=True, frozen=True)
class LabConfig:
    """Fully merged lab configuration."""

    root: Path
    data_dir: Path
    search: SearchConfig
    distance: DistanceConfig
    taxonomy: TaxonomyConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "root": str(self.root),
            "data_dir": str(self.data_dir),
            "search": {
                "max_hits": self.search.max_hits,
                "snippet_radius": self.search.snippet_radius,
                "batch_size": self.search.batch_size,
            },
            "distance": {
                "ceiling_per_changed_line": self.distance.ceiling_per_changed_line,
                "ceiling_slack": self.distance.ceiling_slack,
            },
            "taxonomy": {
                "granularity": self.taxonomy.granularity.value,
                "metric": self.taxonomy.metric.value,
                "soft_assignment": self.taxonomy.soft_assignment,
            },
        }


@dataclass(slots=True, frozen=True)
class LabOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    max_hits: int | None = None
    snippet_radius: int | None = None
    batch_size: int | None = None
    granularity: str | None = None
    metric: str | None = None
    soft_assignment: bool | None = None


def default_config(root: Path) -> LabConfig:
    """Build default config for a given root directory."""
    resolved_root = root.resolve()
    return LabConfig(
        root=resolved_root,
        data_dir=resolved_root / ".spec_lab",
        search=SearchConfig(),
        distance=DistanceConfig(),
        taxonomy=TaxonomyConfig(),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional spec_lab.toml from the root directory."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def merge_config(base: LabConfig, payload: dict[str, object], overrides: LabOverrides) -> LabConfig:
    """Merge defaults, config file, then startup overrides."""
    search_payload = _get_table(payload, "search")
    distance_payload = _get_table(payload, "distance")
    taxonomy_payload = _get_table(payload, "taxonomy")

    search = SearchConfig(
        max_hits=_optional_positive_int_with_cap(
            search_payload.get("max_hits"), "search.max_hits", base.search.max_hits, MAX_SEARCH_HITS_CAP
        ),
        snippet_radius=_optional_positive_int_with_cap(
            search_payload.get("snippet_radius"),
            "search.snippet_radius",
            base.search.snippet_radius,
            MAX_SNIPPET_RADIUS_CAP,
        ),
        batch_size=_optional_positive_int_with_cap(
            search_payload.get("batch_size"),
            "search.batch_size",
            base.search.batch_size,
            MAX_BATCH_SIZE_CAP,
        ),
    )
    distance = DistanceConfig(
        ceiling_per_changed_line=_optional_positive_int_with_cap(
            distance_payload.get("ceiling_per_changed_line"),
            "distance.ceiling_per_changed_line",
            base.distance.ceiling_per_changed_line,
            cap=None,
        ),
        ceiling_slack=_optional_non_negative_int(
            distance_payload.get("ceiling_slack"), "distance.ceiling_slack", base.distance.ceiling_slack
        ),
    )

    soft_assignment = base.taxonomy.soft_assignment
    if "soft_assignment" in taxonomy_payload:
        raw_soft = taxonomy_payload["soft_assignment"]
        if not isinstance(raw_soft, bool):
            raise ValueError("Config field 'taxonomy.soft_assignment' must be a boolean.")
        soft_assignment = raw_soft
    taxonomy = TaxonomyConfig(
        granularity=_optional_enum(
            taxonomy_payload.get("granularity"),
            "taxonomy.granularity",
            TimeGranularity,
            base.taxonomy.granularity,
        ),
        metric=_optional_enum(
            taxonomy_payload.get("metric"), "taxonomy.metric", Metric, base.taxonomy.metric
        ),
        soft_assignment=soft_assignment,
    )

    data_dir = base.data_dir
    if "data_dir" in payload:
        raw_data_dir = payload["data_dir"]
        if not isinstance(raw_data_dir, str):
            raise ValueError("Config field 'data_dir' must be a string.")
        data_dir = base.root / raw_data_dir

    merged = LabConfig(
        root=base.root,
        data_dir=data_dir,
        search=search,
        distance=distance,
        taxonomy=taxonomy,
    )
    return apply_overrides(merged, overrides)


def apply_overrides(config: LabConfig, overrides: LabOverrides) -> LabConfig:
    """Apply startup overrides at highest precedence."""
    search = SearchConfig(
        max_hits=_optional_positive_int_with_cap(
            overrides.max_hits, "overrides.max_hits", config.search.max_hits, MAX_SEARCH_HITS_CAP
        ),
        snippet_radius=_optional_positive_int_with_cap(
            overrides.snippet_radius,
            "overrides.snippet_radius",
            config.search.snippet_radius,
            MAX_SNIPPET_RADIUS_CAP,
        ),
        batch_size=_optional_positive_int_with_cap(
            overrides.batch_size, "overrides.batch_size", config.search.batch_size, MAX_BATCH_SIZE_CAP
        ),
    )
    taxonomy = TaxonomyConfig(
        granularity=_optional_enum(
            overrides.granularity, "overrides.granularity", TimeGranularity, config.taxonomy.granularity
        ),
        metric=_optional_enum(overrides.metric, "overrides.metric", Metric, config.taxonomy.metric),
        soft_assignment=(
            overrides.soft_assignment
            if overrides.soft_assignment is not None
            else config.taxonomy.soft_assignment
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return LabConfig(
        root=config.root,
        data_dir=data_dir.resolve(),
        search=search,
        distance=config.distance,
        taxonomy=taxonomy,
    )


def load_effective_config(root: Path, overrides: LabOverrides | None = None) -> LabConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or LabOverrides())


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def _optional_non_negative_int(value: object, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Config field '{name}' must be a non-negative integer.")
    return value


def _optional_enum(value: object, name: str, enum_type: type[E], default: E) -> E:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(f"Config field '{name}' must be one of: {allowed}.") from None
