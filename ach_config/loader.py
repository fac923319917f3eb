"""
Originator profile loader (``ach_config.loader``).

Responsibility
--------------
Loads YAML profile files and parses them into ``ach_config.schema``
dataclass instances.  Runtime callers go through
``ach_config.get_originator_profile()``; this module is the tooling
underneath it.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Identifier fields (routing numbers, company id, account number) must be
  quoted strings in YAML.  An unquoted ``011401533`` would otherwise load
  as an integer and silently lose its leading zero.
* ``compute_checksum`` produces a deterministic SHA-256 hash for profile
  identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Identifier given as a non-string  -> ``ValueError``.
* Two files declaring the same profile name  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ach_config.schema import OffsetDef, OriginatorProfile


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _identifier(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(
            f"{key} must be a quoted string in YAML, got {type(value).__name__} {value!r}"
        )
    return value


def parse_offset(data: dict[str, Any]) -> OffsetDef:
    """Parse an OffsetDef from a dict."""
    return OffsetDef(
        routing_number=_identifier(data, "routing_number"),
        account_number=_identifier(data, "account_number"),
        account_type=data.get("account_type", "checking"),
        individual_name=data.get("individual_name", "OFFSET"),
    )


def parse_profile(data: dict[str, Any]) -> OriginatorProfile:
    """
    Parse an ``OriginatorProfile`` from a dict.

    Preconditions:
        - ``data`` contains ``name``, ``immediate_destination``,
          ``immediate_origin``, both names and ``company_id``.
    Postconditions:
        - ``checksum`` is the checksum of ``data``.
    Raises:
        KeyError: if required keys are missing.
        ValueError: if an identifier is not a string.
    """
    offset_data = data.get("offset")
    return OriginatorProfile(
        name=data["name"],
        immediate_destination=_identifier(data, "immediate_destination"),
        immediate_origin=_identifier(data, "immediate_origin"),
        immediate_destination_name=data["immediate_destination_name"],
        immediate_origin_name=data["immediate_origin_name"],
        company_id=_identifier(data, "company_id"),
        entry_description=data.get("entry_description", "PAYMENT"),
        file_id_modifier=str(data.get("file_id_modifier", "A")),
        reference_code=data.get("reference_code", ""),
        offset=parse_offset(offset_data) if offset_data else None,
        checksum=compute_checksum(data),
    )


def load_profiles(directory: Path) -> dict[str, OriginatorProfile]:
    """
    Load every ``*.yaml`` profile in ``directory``, keyed by profile name.

    Raises:
        FileNotFoundError: if ``directory`` does not exist.
        ValueError: if two files declare the same name.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Profile directory not found: {directory}")

    profiles: dict[str, OriginatorProfile] = {}
    for path in sorted(directory.glob("*.yaml")):
        profile = parse_profile(load_yaml_file(path))
        if profile.name in profiles:
            raise ValueError(f"Duplicate originator profile {profile.name!r} in {path}")
        profiles[profile.name] = profile
    return profiles


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Returns a hex-encoded SHA-256 hash string.
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
