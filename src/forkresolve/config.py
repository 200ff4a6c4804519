"""Project file loading.

A project file is YAML with four top-level keys::

    indexes:                      # required, first entry is the default index
      - url: https://a.example/simple
        packages:
          foo:
            "1.0": []
            "2.0": ["bar>=1.0"]
    requirements:                 # required
      - "bar"
      - requirement: 'foo==1.0; sys_platform == "linux"'
        index: https://a.example/simple
    forks:                        # optional
      - markers: sys_platform == "linux"
        environment: {sys_platform: linux}
    environment: {sys_platform: linux}   # optional, excludes ``forks``

Every structural problem raises ``ConfigError`` naming the offending key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from packaging.markers import InvalidMarker, Marker
from packaging.requirements import InvalidRequirement, Requirement
from packaging.version import InvalidVersion, Version

from forkresolve.core.indexes.catalog import IndexCatalog, PackageIndex
from forkresolve.core.indexes.url import IndexUrl
from forkresolve.core.resolver.fork_state import RootRequirement
from forkresolve.core.resolver.resolver import ForkSpec
from forkresolve.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_FILE = "forkresolve.yaml"


@dataclass
class ProjectConfig:
    """Everything a resolution needs, as read from a project file."""

    catalog: IndexCatalog
    requirements: list[RootRequirement] = field(default_factory=list)
    forks: list[ForkSpec] = field(default_factory=list)
    environment: dict[str, str] | None = None


def load_project(path: str | Path) -> ProjectConfig:
    """Read and validate the project file at *path*.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or does
            not describe a project.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read project file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    logger.debug("Loaded project file %s", path)
    return parse_project(data)


def parse_project(data: Any) -> ProjectConfig:
    """Build a ``ProjectConfig`` from already-parsed YAML data."""
    if not isinstance(data, dict):
        raise ConfigError("Project file must be a mapping")
    unknown = set(data) - {"indexes", "requirements", "forks", "environment"}
    if unknown:
        raise ConfigError(f"Unknown keys in project file: {', '.join(sorted(unknown))}")

    catalog = IndexCatalog([_parse_index(entry, i) for i, entry in enumerate(_list(data, "indexes"))])
    if not len(catalog):
        raise ConfigError("indexes: at least one index is required")

    requirements = [
        _parse_requirement(entry, i) for i, entry in enumerate(_list(data, "requirements"))
    ]
    forks = [_parse_fork(entry, i) for i, entry in enumerate(data.get("forks") or [])]

    environment = None
    if data.get("environment") is not None:
        environment = _parse_environment(data["environment"], "environment")
    if forks and environment is not None:
        raise ConfigError("forks and environment cannot both be set")

    return ProjectConfig(
        catalog=catalog,
        requirements=requirements,
        forks=forks,
        environment=environment,
    )


def _list(data: dict, key: str) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        raise ConfigError(f"{key}: expected a list")
    return value


def _parse_index(entry: Any, position: int) -> PackageIndex:
    where = f"indexes[{position}]"
    if not isinstance(entry, dict) or "url" not in entry:
        raise ConfigError(f"{where}: expected a mapping with a 'url' key")
    index = PackageIndex(IndexUrl.parse(str(entry["url"])))

    packages = entry.get("packages") or {}
    if not isinstance(packages, dict):
        raise ConfigError(f"{where}.packages: expected a mapping")
    for name, releases in packages.items():
        if not isinstance(releases, dict):
            raise ConfigError(f"{where}.packages.{name}: expected a version mapping")
        for version, deps in releases.items():
            try:
                index.add(str(name), Version(str(version)), list(deps or []))
            except InvalidVersion as exc:
                raise ConfigError(f"{where}.packages.{name}: {exc}") from exc
            except InvalidRequirement as exc:
                raise ConfigError(f"{where}.packages.{name}.{version}: {exc}") from exc
            except ValueError as exc:
                raise ConfigError(f"{where}.packages: {exc}") from exc
    return index


def _parse_requirement(entry: Any, position: int) -> RootRequirement:
    where = f"requirements[{position}]"
    if isinstance(entry, str):
        text, index = entry, None
    elif isinstance(entry, dict) and "requirement" in entry:
        text, index = str(entry["requirement"]), entry.get("index")
    else:
        raise ConfigError(f"{where}: expected a string or a mapping with 'requirement'")
    try:
        requirement = Requirement(text)
    except InvalidRequirement as exc:
        raise ConfigError(f"{where}: {exc}") from exc
    return RootRequirement(requirement, IndexUrl.parse(str(index)) if index is not None else None)


def _parse_fork(entry: Any, position: int) -> ForkSpec:
    where = f"forks[{position}]"
    if not isinstance(entry, dict) or "markers" not in entry:
        raise ConfigError(f"{where}: expected a mapping with 'markers' and 'environment'")
    try:
        markers = Marker(str(entry["markers"]))
    except InvalidMarker as exc:
        raise ConfigError(f"{where}.markers: {exc}") from exc
    if entry.get("environment") is None:
        raise ConfigError(f"{where}.environment: a representative environment is required")
    environment = _parse_environment(entry["environment"], f"{where}.environment")
    try:
        return ForkSpec(markers, environment)
    except ValueError as exc:
        raise ConfigError(f"{where}.environment: {exc}") from exc


def _parse_environment(value: Any, where: str) -> dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigError(f"{where}: expected a mapping of marker variables")
    return {str(k): str(v) for k, v in value.items()}


def parse_environment_option(pairs: tuple[str, ...]) -> dict[str, str] | None:
    """Turn ``KEY=VALUE`` command-line pairs into an environment mapping."""
    if not pairs:
        return None
    environment: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ConfigError(f"Invalid environment entry {pair!r}: expected KEY=VALUE")
        environment[key.strip()] = value.strip()
    return environment
