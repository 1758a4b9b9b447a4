"""Enums and fixed tables for identification keys."""

import enum


class Rank(enum.IntEnum):
    stirps = 0  # not ICZN
    race = 1  # not ICZN
    aberration = 2  # not ICZN
    form = 3
    variety = 4
    subspecies = 5
    species = 10
    complex = 12  # not ICZN
    aggregate = 13  # not ICZN
    subgroup = 14
    group = 15
    series = 16  # not ICZN
    subsection = 17  # not ICZN
    section = 18  # not ICZN
    subgenus = 19
    genus = 20
    subtribe = 25
    tribe = 30
    subfamily = 35
    family = 40
    superfamily = 45
    infraorder = 55
    suborder = 60
    order = 65
    superorder = 70
    infraclass = 90
    subclass = 95
    class_ = 100
    subphylum = 115
    phylum = 120
    kingdom = 140

    @property
    def display_name(self) -> str:
        """Name as written in headers and in Darwin Core output."""
        return self.name.rstrip("_")

    def get_label(self) -> str | None:
        """Abbreviation written between the species and infraspecific epithet."""
        return RANK_LABELS.get(self)


class TaxonomicStatus(enum.Enum):
    accepted = "accepted"
    synonym = "synonym"
    heterotypic_synonym = "heterotypic synonym"
    incorrect = "incorrect"

    @classmethod
    def from_symbol(cls, symbol: str) -> "TaxonomicStatus":
        return {
            "=": cls.synonym,
            "+": cls.heterotypic_synonym,
            ">": cls.incorrect,
        }[symbol]


class DiffType(enum.Enum):
    added = "+"
    deleted = "-"
    modified = "~"
    unchanged = "="


class ResourceFlag(enum.Enum):
    # Keys that deliberately stop above the leaf rank in places.
    missing_leaf_taxa = "missing-leaf-taxa"


RANK_LABELS = {
    Rank.subspecies: "subsp.",
    Rank.variety: "var.",
    Rank.form: "f.",
    Rank.aberration: "ab.",
    Rank.race: "r.",
    Rank.stirps: "st.",
}

RANK_LABELS_REVERSE = {
    "st": Rank.stirps,
    "r": Rank.race,
    "ab": Rank.aberration,
    "f": Rank.form,
    "var": Rank.variety,
    "ssp": Rank.subspecies,
    "subsp": Rank.subspecies,
}

# Ranks that every complete key should reach.
MAIN_RANKS = [
    Rank.kingdom,
    Rank.phylum,
    Rank.class_,
    Rank.order,
    Rank.family,
    Rank.genus,
    Rank.species,
]

# Ranks with their own Darwin Core classification column.
DWC_RANKS = [
    Rank.kingdom,
    Rank.phylum,
    Rank.class_,
    Rank.order,
    Rank.family,
    Rank.subfamily,
    Rank.genus,
    Rank.subgenus,
]

INDET_SUFFIXES = frozenset({"sp.", "spec.", "indet.", "sp. indet.", "spec. indet."})
INDET_MARKER = "[indet]"

# Cluster tag of taxa that cannot be identified on their own.
ANONYMOUS_CLUSTER = "_"

HYBRID_SIGN = "×"
RESOURCE_DELIMITER = "\n\n===\n\n"
