"""
Originator profile schema.

An originator profile is the human-authored description of one company
that sends ACH files: its bank routing (immediate destination/origin),
names, company id and, optionally, the offset account used to balance
its batches.  YAML files are parsed into these types by the loader.

Key distinction:
  OriginatorProfile = source artifact (reviewable, versioned YAML)
  BuildParams       = runtime input for one ``build`` call
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from ach_kernel.domain.ach_file import BuildParams
from ach_kernel.domain.batch import BatchOffset


@dataclass(frozen=True)
class OffsetDef:
    """The originator's own account for balancing batches."""

    routing_number: str
    account_number: str
    account_type: str = "checking"  # checking | savings
    individual_name: str = "OFFSET"

    def to_offset(self) -> BatchOffset:
        return BatchOffset(
            routing_number=self.routing_number,
            account_number=self.account_number,
            account_type=self.account_type,
            individual_name=self.individual_name,
        )


@dataclass(frozen=True)
class OriginatorProfile:
    """Static file parameters for one originating company."""

    name: str
    immediate_destination: str
    immediate_origin: str
    immediate_destination_name: str
    immediate_origin_name: str
    company_id: str
    entry_description: str = "PAYMENT"
    file_id_modifier: str = "A"
    reference_code: str = ""
    offset: OffsetDef | None = None
    checksum: str = ""

    def build_params(self, **overrides: Any) -> BuildParams:
        """
        ``BuildParams`` seeded from this profile.

        Keyword overrides take precedence, which is how per-file values
        such as ``effective_date`` or ``creation_date`` are supplied.

        Raises:
            TypeError: if an override names a field ``BuildParams`` lacks.
        """
        names = {f.name for f in fields(BuildParams)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"Unknown build parameter(s): {', '.join(unknown)}")

        params = BuildParams(
            immediate_destination=self.immediate_destination,
            immediate_origin=self.immediate_origin,
            immediate_destination_name=self.immediate_destination_name,
            immediate_origin_name=self.immediate_origin_name,
            company_id=self.company_id,
            entry_description=self.entry_description,
            file_id_modifier=self.file_id_modifier,
            reference_code=self.reference_code,
        )
        return replace(params, **overrides)

    def offset_account(self) -> BatchOffset | None:
        """The balancing account as a ``BatchOffset``; None when not configured."""
        return self.offset.to_offset() if self.offset is not None else None
