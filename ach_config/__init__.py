"""
ach_config -- single public entrypoint for originator configuration.

Responsibility:
    Provides the way to obtain an originator profile at runtime through
    ``get_originator_profile()``.  The profile turns into ``BuildParams``
    (and an optional ``BatchOffset``) for ``ach_services.build``.

Architecture position:
    Configuration -- YAML-driven.  Sits above ``ach_kernel`` and beside
    ``ach_services``.  The kernel and engines MUST NEVER import from
    ``ach_config``.

Failure modes:
    - ``ProfileNotFoundError`` -- no profile with the requested name.
    - ``FileNotFoundError`` -- the profile directory does not exist.
    - ``yaml.YAMLError`` / ``KeyError`` / ``ValueError`` -- malformed
      profile files.

Audit relevance:
    Every successful lookup emits an ``ACH_CONFIG_TRACE`` log entry with
    the profile name and checksum, tying each built file back to the
    exact profile content that produced it.
"""

from __future__ import annotations

from pathlib import Path

from ach_config.loader import compute_checksum, load_profiles
from ach_config.schema import OffsetDef, OriginatorProfile
from ach_kernel.exceptions import ProfileNotFoundError
from ach_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default profiles directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "profiles"


def get_originator_profile(
    name: str,
    config_dir: Path | None = None,
) -> OriginatorProfile:
    """
    Look up an originator profile by name.

    Args:
        name: The ``name`` declared in the profile file.
        config_dir: Override path to the profiles directory.
            Defaults to ach_config/profiles/.

    Raises:
        ProfileNotFoundError: If no profile declares ``name``.
        FileNotFoundError: If ``config_dir`` does not exist.
    """
    profiles_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    profiles = load_profiles(profiles_dir)

    profile = profiles.get(name)
    if profile is None:
        raise ProfileNotFoundError(name, str(profiles_dir))

    _logger.info(
        "ACH_CONFIG_TRACE",
        extra={
            "trace_type": "ACH_CONFIG_TRACE",
            "profile": profile.name,
            "checksum": profile.checksum,
            "company_id": profile.company_id,
            "has_offset": profile.offset is not None,
        },
    )
    return profile


__all__ = [
    "OffsetDef",
    "OriginatorProfile",
    "compute_checksum",
    "get_originator_profile",
]
