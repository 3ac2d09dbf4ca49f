"""
ProjectConfig: Project-level resolution defaults for symbiosis.

This module provides:

- find_config_file: Walk up directories to locate .symbiosis.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- ProjectInfo: Typed project metadata
- ResolutionProfile: A named set of resolution settings
- ResolvedConfig: Fully resolved settings for one profile
- ProjectConfig: Main config object with load/resolve interface
- resolve_settings: Load + resolve, falling back to built-in defaults

Configuration is loaded from `.symbiosis.toml` with optional
`.symbiosis.local.toml` overrides. The resolution order is:

    built-in defaults → [defaults] → named profile → local overrides

Example `.symbiosis.toml`::

    [project]
    name = "templates"
    default_profile = "dsl"

    [defaults]
    direction = "IOK"
    visibility = "public"
    kernel = "builtins"

    [profiles.dsl]
    direction = "OIK"
    visibility = "private"

Example:
    >>> config = ProjectConfig.load()
    >>> resolved = config.resolve("dsl")
    >>> resolved.direction.name
    'OIK'
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any

from symbiosis.direction import IOK, Direction, coerce_direction
from symbiosis.errors import InvalidDirectionError
from symbiosis.kernel import DEFAULT_KERNEL_REF, load_kernel

if TYPE_CHECKING:
    from symbiosis.trigger import Trigger

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".symbiosis.toml"
LOCAL_CONFIG_FILENAME = ".symbiosis.local.toml"

SETTING_KEYS = ("direction", "visibility", "kernel")

BUILTIN_DEFAULTS: dict[str, Any] = {
    "direction": IOK.name,
    "visibility": "public",
    "kernel": DEFAULT_KERNEL_REF,
}


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.symbiosis.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Neither input is mutated; a new dict is returned.
    """
    merged: dict[str, Any] = {}

    for key in base.keys() | override.keys():
        if key in base and key in override:
            base_val = base[key]
            over_val = override[key]
            if isinstance(base_val, dict) and isinstance(over_val, dict):
                merged[key] = deep_merge(base_val, over_val)
            else:
                merged[key] = over_val
        elif key in base:
            merged[key] = base[key]
        else:
            merged[key] = override[key]

    return merged


def _settings(raw: dict[str, Any], where: str) -> dict[str, Any]:
    unknown = set(raw) - set(SETTING_KEYS)
    if unknown:
        raise ValueError(
            f"Unknown setting(s) in {where}: {', '.join(sorted(unknown))}. "
            f"Allowed: {', '.join(SETTING_KEYS)}"
        )
    return dict(raw)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectInfo:
    """
    Typed project metadata from the ``[project]`` table.

    Attributes:
        name: Human-readable project name.
        default_profile: Profile to resolve when none is given explicitly.
    """

    name: str
    default_profile: str | None = None


@dataclass(frozen=True)
class ResolutionProfile:
    """
    A named profile from ``[profiles.NAME]``.

    Attributes:
        name: Profile name (the TOML key under ``[profiles]``).
        settings: The profile's direction/visibility/kernel values.
    """

    name: str
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Fully resolved resolution settings.

    Attributes:
        project: Project metadata.
        profile_name: The resolved profile, or None for defaults only.
        direction: The validated default direction.
        visibility: Registered trigger visibility ("public", "private", ...).
        kernel_ref: Reference to the kernel context (``'module[:attr]'``).
    """

    project: ProjectInfo
    profile_name: str | None
    direction: Direction
    visibility: str
    kernel_ref: str

    @cached_property
    def kernel(self) -> Any:
        """The kernel context, imported from :attr:`kernel_ref`."""
        return load_kernel(self.kernel_ref)

    @property
    def trigger_class(self) -> type[Trigger]:
        """The trigger class registered for :attr:`visibility`."""
        from symbiosis.trigger import TriggerRegistry

        trigger_class = TriggerRegistry.get(self.visibility)
        if trigger_class is None:
            raise ValueError(
                f"Unknown trigger visibility: {self.visibility!r}. "
                f"Available: {TriggerRegistry.types()}"
            )
        return trigger_class


@dataclass
class ProjectConfig:
    """
    Main project configuration loaded from ``.symbiosis.toml``.

    Typical usage::

        config = ProjectConfig.load()
        resolved = config.resolve()         # uses default_profile
        resolved = config.resolve("dsl")    # explicit profile
    """

    project: ProjectInfo
    defaults: dict[str, Any]
    profiles: dict[str, ResolutionProfile]
    _local_overrides: dict[str, Any] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, start_dir: Path | None = None) -> ProjectConfig:
        """
        Find and load project configuration.

        Raises:
            FileNotFoundError: If no ``.symbiosis.toml`` is found.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            raise FileNotFoundError(
                f"Could not find {CONFIG_FILENAME} in {start_dir or Path.cwd()} "
                f"or any parent directory"
            )

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        local_overrides: dict[str, Any] = {}
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            with open(local_path, "rb") as f:
                local_overrides = tomllib.load(f)

        logger.debug("Loaded %s (local overrides: %s)", config_path, bool(local_overrides))
        return cls.from_dict(data, local_overrides=local_overrides)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        local_overrides: dict[str, Any] | None = None,
    ) -> ProjectConfig:
        """
        Create a :class:`ProjectConfig` from a parsed TOML dict.

        Raises:
            ValueError: If a settings table contains unknown keys.
        """
        project_raw = data.get("project", {})
        project = ProjectInfo(
            name=project_raw.get("name", ""),
            default_profile=project_raw.get("default_profile"),
        )

        defaults = _settings(data.get("defaults", {}), "[defaults]")

        profiles = {
            name: ResolutionProfile(
                name=name, settings=_settings(raw, f"[profiles.{name}]")
            )
            for name, raw in data.get("profiles", {}).items()
        }

        local_overrides = dict(local_overrides or {})
        if "defaults" in local_overrides:
            local_overrides["defaults"] = _settings(
                local_overrides["defaults"], f"[defaults] of {LOCAL_CONFIG_FILENAME}"
            )
        if "profiles" in local_overrides:
            local_overrides["profiles"] = {
                name: _settings(raw, f"[profiles.{name}] of {LOCAL_CONFIG_FILENAME}")
                for name, raw in local_overrides["profiles"].items()
            }

        return cls(
            project=project,
            defaults=defaults,
            profiles=profiles,
            _local_overrides=local_overrides,
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, profile_name: str | None = None) -> ResolvedConfig:
        """
        Resolve settings for a profile.

        If *profile_name* is ``None``, uses ``project.default_profile``
        (including local overrides); with no default either, only the
        ``[defaults]`` layers apply.

        Raises:
            ValueError: If the profile does not exist, or a setting is invalid.
        """
        local_project = self._local_overrides.get("project", {})
        profile_name = profile_name or local_project.get(
            "default_profile", self.project.default_profile
        )

        settings = deep_merge(BUILTIN_DEFAULTS, self.defaults)
        settings = deep_merge(settings, self._local_overrides.get("defaults", {}))

        if profile_name is not None:
            if profile_name not in self.profiles:
                available = ", ".join(sorted(self.profiles)) or "(none)"
                raise ValueError(
                    f"Unknown profile {profile_name!r}. Available profiles: {available}"
                )
            settings = deep_merge(settings, self.profiles[profile_name].settings)
            local_profile = self._local_overrides.get("profiles", {}).get(profile_name, {})
            settings = deep_merge(settings, local_profile)

        try:
            direction = coerce_direction(settings["direction"])
        except InvalidDirectionError as e:
            raise ValueError(f"Invalid direction in config: {e}") from e

        project = self.project
        if local_project:
            project = ProjectInfo(
                name=local_project.get("name", project.name),
                default_profile=local_project.get(
                    "default_profile", project.default_profile
                ),
            )

        return ResolvedConfig(
            project=project,
            profile_name=profile_name,
            direction=direction,
            visibility=str(settings["visibility"]),
            kernel_ref=str(settings["kernel"]),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_profiles(self) -> list[str]:
        """Sorted list of profile names."""
        return sorted(self.profiles)


def resolve_settings(
    profile: str | None = None,
    start_dir: Path | None = None,
) -> ResolvedConfig:
    """
    Resolve settings from ``.symbiosis.toml``, or built-in defaults.

    Falls back to the built-in defaults (IOK, public, builtins) when no
    config file is found. An explicitly requested *profile* must exist.

    Raises:
        ValueError: If *profile* is given but no config file defines it.
    """
    try:
        config = ProjectConfig.load(start_dir)
    except FileNotFoundError:
        if profile is not None:
            raise ValueError(
                f"Profile {profile!r} requested but no {CONFIG_FILENAME} was found"
            ) from None
        logger.debug("No %s found; using built-in defaults", CONFIG_FILENAME)
        config = ProjectConfig.from_dict({})
    return config.resolve(profile)
