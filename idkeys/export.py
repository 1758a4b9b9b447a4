"""Exporting resources as Darwin Core CSV files."""

import csv
import logging
import re
from pathlib import Path

from .constants import DWC_RANKS
from .resources.resource import Resource, ResourceHistory, Taxon

logger = logging.getLogger(__name__)

DWC_FIELDS = [
    "scientificNameID",
    "scientificName",
    "scientificNameAuthorship",
    "genericName",
    "infragenericEpithet",
    "specificEpithet",
    "infraspecificEpithet",
    "taxonRank",
    "taxonRemarks",
    "collectionCode",
    "taxonomicStatus",
    "acceptedNameUsageID",
    "acceptedNameUsage",
    "parentNameUsageID",
    "parentNameUsage",
    *[rank.display_name for rank in DWC_RANKS],
    "higherClassification",
    "verbatimIdentification",
    "indistinguishableFrom",
    "identifiable",
]

PROBLEM_FIELDS = ["work", "resource", "reason"]


def data_for_taxon(taxon: Taxon) -> dict[str, str]:
    row = {
        "scientificNameID": taxon.scientific_name_id,
        "scientificName": taxon.scientific_name,
        "scientificNameAuthorship": taxon.scientific_name_authorship or "",
        "genericName": taxon.generic_name or "",
        "infragenericEpithet": taxon.infrageneric_epithet or "",
        "specificEpithet": taxon.specific_epithet or "",
        "infraspecificEpithet": taxon.infraspecific_epithet or "",
        "taxonRank": taxon.taxon_rank.display_name,
        "taxonRemarks": taxon.taxon_remarks or "",
        "collectionCode": taxon.collection_code,
        "taxonomicStatus": taxon.taxonomic_status.value,
        "acceptedNameUsageID": taxon.accepted_name_usage_id or "",
        "acceptedNameUsage": taxon.accepted_name_usage or "",
        "parentNameUsageID": taxon.parent_name_usage_id or "",
        "parentNameUsage": taxon.parent_name_usage or "",
        "higherClassification": taxon.higher_classification or "",
        "verbatimIdentification": taxon.verbatim_identification or "",
        "indistinguishableFrom": " | ".join(taxon.indistinguishable_from),
        "identifiable": "" if taxon.identifiable else "FALSE",
    }
    for rank in DWC_RANKS:
        row[rank.display_name] = taxon.classification.get(rank, "")
    return row


def export_resource(resource: Resource, directory: Path) -> Path:
    """Write the taxa of a resource to <directory>/<work>-<index>.csv."""
    path = directory / f"{resource.file}.csv"
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, DWC_FIELDS)
        writer.writeheader()
        for taxon in resource.taxa.values():
            writer.writerow(data_for_taxon(taxon))
    logger.info("%s: wrote %d taxa to %s", resource.id, len(resource.taxa), path)
    return path


def read_ids(path: Path) -> list[int]:
    """Read the numbers of the identifiers in an exported resource, in order."""
    with path.open(newline="") as f:
        return [
            int(row["scientificNameID"].rsplit(":", 1)[1]) for row in csv.DictReader(f)
        ]


def _resource_index(path: Path) -> int:
    return int(path.stem.rsplit("-", 1)[1])


def load_history(old_text: str, directory: Path, work_id: str) -> ResourceHistory:
    """Combine the previous text of a work with its exported identifiers."""
    pattern = re.compile(rf"^{re.escape(work_id)}-[1-9]\d*$")
    files = sorted(
        (
            path
            for path in directory.glob(f"{work_id}-*.csv")
            if pattern.match(path.stem)
        ),
        key=_resource_index,
    )
    ids = []
    for expected, path in enumerate(files, start=1):
        if _resource_index(path) != expected:
            logger.warning("%s: missing export for resource %d", work_id, expected)
            break
        ids.append(read_ids(path))
    return ResourceHistory(old_text, ids)


def record_problem(path: Path, work_id: str, resource_id: str, reason: str) -> None:
    is_new = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, PROBLEM_FIELDS)
        if is_new:
            writer.writeheader()
        writer.writerow({"work": work_id, "resource": resource_id, "reason": reason})
