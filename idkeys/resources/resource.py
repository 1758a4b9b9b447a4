"""Resources and the taxa they contain."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace

from idkeys.constants import DWC_RANKS, Rank, ResourceFlag, TaxonomicStatus

TaxonId = str
CatalogValue = str | list[str]

# Fields produced by the name grammar. A correction copies these onto the
# taxon it corrects.
NAME_FIELDS = (
    "scientific_name",
    "scientific_name_only",
    "scientific_name_authorship",
    "taxon_remarks",
    "taxon_rank",
    "generic_name",
    "infrageneric_epithet",
    "specific_epithet",
    "infraspecific_epithet",
)


@dataclass(kw_only=True)
class WorkingTaxon:
    scientific_name_id: TaxonId | None = None
    scientific_name: str | None = None
    # scientific_name without the authorship
    scientific_name_only: str | None = None
    scientific_name_authorship: str | None = None
    generic_name: str | None = None
    infrageneric_epithet: str | None = None
    specific_epithet: str | None = None
    infraspecific_epithet: str | None = None

    taxon_rank: Rank | None = None
    taxon_remarks: str | None = None
    collection_code: str | None = None

    taxonomic_status: TaxonomicStatus | None = None
    accepted_name_usage_id: TaxonId | None = None
    accepted_name_usage: str | None = None

    parent_name_usage_id: TaxonId | None = None
    parent_name_usage: str | None = None
    classification: dict[Rank, str] = field(default_factory=dict)
    higher_classification: str | None = None

    verbatim_identification: str | None = None
    cluster: str | None = None
    indistinguishable_from: list[TaxonId] = field(default_factory=list)
    identifiable: bool = True

    # State of this taxon before it was amended by a correction line.
    incorrect: WorkingTaxon | None = None

    @property
    def genus(self) -> str | None:
        return self.classification.get(Rank.genus)

    @property
    def subgenus(self) -> str | None:
        return self.classification.get(Rank.subgenus)

    def is_accepted(self) -> bool:
        return self.taxonomic_status is TaxonomicStatus.accepted

    def snapshot(self) -> WorkingTaxon:
        return replace(
            self,
            classification=dict(self.classification),
            indistinguishable_from=list(self.indistinguishable_from),
        )

    def amend(self, correction: WorkingTaxon) -> None:
        """Apply a correction to this taxon, keeping the old state in .incorrect."""
        if self.incorrect is not None:
            raise ValueError(f"{self.scientific_name} has already been corrected")
        old = self.snapshot()
        self.incorrect = old
        for name in NAME_FIELDS:
            setattr(self, name, getattr(correction, name))
        if self.taxon_rank in DWC_RANKS and self.scientific_name_only is not None:
            self.classification[self.taxon_rank] = self.scientific_name_only
        # Genus and subgenus that were taken from the name itself follow the
        # corrected name.
        for rank, old_value, new_value in (
            (Rank.genus, old.generic_name, self.generic_name),
            (Rank.subgenus, old.infrageneric_epithet, self.infrageneric_epithet),
        ):
            if old_value is not None and self.classification.get(rank) == old_value:
                if new_value is None:
                    del self.classification[rank]
                else:
                    self.classification[rank] = new_value

    def to_taxon(self) -> Taxon:
        return Taxon(**{f.name: getattr(self, f.name) for f in fields(WorkingTaxon)})


@dataclass(kw_only=True)
class Taxon(WorkingTaxon):
    scientific_name_id: TaxonId
    scientific_name: str
    taxon_rank: Rank
    taxonomic_status: TaxonomicStatus
    collection_code: str

    def __post_init__(self) -> None:
        missing = [
            name
            for name in (
                "scientific_name_id",
                "scientific_name",
                "taxon_rank",
                "taxonomic_status",
                "collection_code",
            )
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"Taxon is missing required fields: {', '.join(missing)}")


@dataclass(kw_only=True)
class ResourceMetadata:
    levels: list[Rank]
    catalog: Mapping[str, CatalogValue] | None = None
    flags: frozenset[ResourceFlag] = frozenset()

    def has_flag(self, flag: ResourceFlag) -> bool:
        return flag in self.flags


@dataclass(kw_only=True)
class Resource:
    work_id: str
    index: int  # 1-based position in the work's text file
    metadata: ResourceMetadata
    taxa: dict[TaxonId, Taxon] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.work_id}:{self.index}"

    @property
    def file(self) -> str:
        return f"{self.work_id}-{self.index}"


@dataclass(frozen=True)
class ResourceHistory:
    """The previous revision of a work's text file."""

    text: str
    # Per resource, the numeric suffixes of the identifiers emitted for it.
    ids: Sequence[Sequence[int]] = ()

    def ids_for(self, index: int) -> Sequence[int]:
        if index < len(self.ids):
            return self.ids[index]
        return ()
