"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: fetch.user_agent and one location.

Example::

    fetch:
      user_agent: ${HOURCAST_USER_AGENT}
    locations:
      - name: onset
        lat: 41.75
        lon: -70.644
        title: Forecast for Onset, MA
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hourcast.config.settings import (
    AppConfig,
    FetchConfig,
    LocationConfig,
    OutputConfig,
)


_ENV_REF = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def _expand_env(value: str) -> str:
    """
    Substitute ``${VAR}`` / ``${VAR:default}`` references in a config string.

    Used mainly for the NWS contact string, e.g.
    ``user_agent: ${HOURCAST_USER_AGENT:ops@example.com}``. An unset
    variable without a default expands to "", which build_config then
    rejects as an empty user agent.
    """

    def lookup(match: re.Match[str]) -> str:
        default = match.group(2)
        return os.environ.get(match.group(1), default if default is not None else "")

    return _ENV_REF.sub(lookup, value)


def _expand_tree(node: Any) -> Any:
    """Apply _expand_env to every string in the parsed YAML (locations included)."""
    if isinstance(node, str):
        return _expand_env(node)
    if isinstance(node, dict):
        return {key: _expand_tree(child) for key, child in node.items()}
    if isinstance(node, list):
        return [_expand_tree(child) for child in node]
    return node


def _merge_sections(base: dict[str, Any], site: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay a site config on base.yaml.

    Mappings such as ``fetch`` and ``output`` merge key by key; any other
    value, including the ``locations`` list, is replaced wholesale.
    """
    merged = dict(base)
    for key, value in site.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge_sections(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml(path: Path) -> dict[str, Any]:
    """Read one hourcast YAML file with environment references expanded."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _expand_tree(data) if data else {}


def build_config(data: dict[str, Any]) -> AppConfig:
    """
    Build an AppConfig from a plain mapping.

    Raises:
        ValueError: If required sections are missing or invalid.
    """
    fetch_data = data.get("fetch", {})
    if not fetch_data.get("user_agent"):
        msg = "Config must specify 'fetch.user_agent' (contact e-mail for NWS)"
        raise ValueError(msg)

    locations_data = data.get("locations", [])
    if not locations_data:
        msg = "Config must specify at least one entry in 'locations'"
        raise ValueError(msg)

    output_data = data.get("output", {})

    try:
        return AppConfig(
            fetch=FetchConfig(**fetch_data),
            locations=[LocationConfig(**loc) for loc in locations_data],
            output=OutputConfig(
                output_root=Path(output_data.get("root", "./output")),
            ),
        )
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ValueError(msg) from e


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> AppConfig:
    """
    Load application configuration from YAML file(s).

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated AppConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)
    merged = _merge_sections(base_data, main_data)

    return build_config(merged)
