"""Parsing of single name lines in identification keys.

The main interface is parse_name(), which turns a line (without indentation)
into a WorkingTaxon, given the rank implied by the indentation and the nearest
accepted ancestor.

Lines look like this:

    Crabro (Crabro) cribrarius (Linnaeus, 1758), in part
    = [1] Sphex cribraria Linnaeus, 1758
      > Sphex cribrarius Linnaeus, 1758

A leading "=" or "+" marks a (heterotypic) synonym of the parent, ">" a
correction of the parent, and "[n]" or "[_]" a cluster of taxa that cannot be
told apart. Below the genus, the line only needs to contain the epithet; the
rest of the name comes from the ancestors.

"""

from __future__ import annotations

from dataclasses import dataclass, field

import regex as re

from idkeys.constants import (
    HYBRID_SIGN,
    RANK_LABELS_REVERSE,
    Rank,
    TaxonomicStatus,
)
from idkeys.helpers import capitalize, capitalize_authors, capitalize_generic_name

from .errors import NameSyntaxError
from .resource import WorkingTaxon

# Author citations without a year:
#   1. Any number of
#      - capitalized words
#      - "&"
#      - " in "
#      - " ex "
#      - lowercase name particles
#   2. Followed by a capitalized word
#   3. Optionally, followed by "et al."
LOWERCASE_NAME_PARTICLES = "|".join(["y", "der", "den", "de", "van", "von"])
SIMPLE_AUTHOR_PATTERN = (
    r"(?:(?:\p{Lu}\S*|&|in|ex|"
    + LOWERCASE_NAME_PARTICLES
    + r")\s*)*\p{Lu}\S+(?:\s+et\s+al\.)?"
)

NAME_PATTERN = re.compile(
    r"^"
    # 1: the name itself, only the epithet below the genus
    r"(\S+)"
    r"(?: "
    # not "auct.", "sp. nov.", "sensu", etc.
    r"(?!auctt?\.|(?:syn|comb|sp|spec|nom|gen|subgen)\. n(?:ov)?\.|s(?:ens[.u]|\.)|in part|partim)"
    # 2: the author citation
    r"("
    # anything in parentheses, with optional revising author(s)
    r"\(.+?\)(?:\s+" + SIMPLE_AUTHOR_PATTERN + r")?"
    # anything followed by a year
    r"|.+?\d{4}\)?"
    # just author(s)
    r"|" + SIMPLE_AUTHOR_PATTERN + r"))?"
    # 3: remarks
    r"(?:,? (.+))?"
    r"$"
)

# 1: genus, 2: subgenus
SUBGENUS_PATTERN = re.compile(r"^([A-Z]\S+) (?:\(([A-Z]\S+?)\))(?= |$)")

# 1: genus, possibly a hybrid ("x Festulpia")
# 2: subgenus
# 3: specific epithet, which may be
#    - a hybrid: "x vulgaris"
#    - a hybrid formula: "conglomeratus x maritimus"
#    - an intergeneric hybrid formula: "Festuca_rubra x Vulpia_bromoides"
BINAME_PATTERN = re.compile(
    r"^(?:((?:x )?[A-Z]\S+) (?:\(([A-Z]\S+?)\) )?)?"
    r"(x [a-z-]+|[a-z-][^\s.]+(?: x [a-z-]+)?|[A-Z][a-z]+_[a-z-]+ x [A-Z][a-z]+_[a-z-]+)"
    r"(?= |$)"
)

INTERGENERIC_HYBRID_PATTERN = re.compile(
    r"^[A-Z][a-z]+ [a-z]+" + HYBRID_SIGN + r"[A-Z][a-z]+ [a-z]+$"
)

_STATUS_PATTERN = re.compile(r"^([+=>]) (?:\? ?)?")
_CLUSTER_PATTERN = re.compile(r"^\[(_|\d+)\] ")
_RANK_ABBREVIATION = r"(st|r|ab|f|var|ssp|subsp)\. "
_HYBRID_INFIX = re.compile(r"(^| )x ")


@dataclass
class ParsedName:
    taxon: WorkingTaxon
    # Problems that still allowed the name to be composed.
    errors: list[str] = field(default_factory=list)

    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class _Context:
    """Parts of the name inherited from the ancestors.

    genus and specific_epithet are used to compose the name and must be
    correct. The written_ variants are used to strip the redundant parts of
    the line and must match the text, which may still have the spelling
    that a correction line fixed.

    """

    genus: str | None = None
    subgenus: str | None = None
    specific_epithet: str | None = None
    written_genus: str | None = None
    written_specific_epithet: str | None = None

    @classmethod
    def from_parent(cls, parent: WorkingTaxon) -> _Context:
        return cls(
            genus=parent.genus,
            subgenus=parent.subgenus,
            specific_epithet=parent.specific_epithet,
            written_genus=parent.incorrect.genus if parent.incorrect else None,
            written_specific_epithet=(
                parent.incorrect.specific_epithet if parent.incorrect else None
            ),
        )

    def genus_to_strip(self) -> str:
        return self.written_genus or self.genus or ""

    def specific_epithet_to_strip(self) -> str:
        return self.written_specific_epithet or self.specific_epithet or ""

    def update_from_name(self, name: str, rank: Rank) -> None:
        match = BINAME_PATTERN.match(name)
        if match is not None:
            genus, subgenus, species = match.groups()
        else:
            match = SUBGENUS_PATTERN.match(name)
            if match is None:
                return
            genus, subgenus = match.groups()
            species = None

        if genus:
            self.written_genus = genus
            self.genus = capitalize_generic_name(
                _HYBRID_INFIX.sub(HYBRID_SIGN, genus, count=1)
            )
        if subgenus:
            self.subgenus = capitalize(subgenus)
        elif genus:
            # A genus without subgenus replaces the subgenus of the parent.
            self.subgenus = None
        if species and rank < Rank.species:
            self.written_specific_epithet = species
            self.specific_epithet = _HYBRID_INFIX.sub(HYBRID_SIGN, species, count=1)


def get_synonym_rank(name: str, rank: Rank | None) -> Rank | None:
    """Rank of a synonym, which is always written out in full."""
    rest = BINAME_PATTERN.sub("", name, count=1)
    rank_prefix = re.match(r"^(?: |^)" + _RANK_ABBREVIATION, rest)
    if rank_prefix is not None:
        return RANK_LABELS_REVERSE[rank_prefix.group(1)]
    elif not BINAME_PATTERN.search(name):
        return Rank.subgenus if SUBGENUS_PATTERN.search(name) else rank
    elif re.match(r"^ (?!sensu)[a-z0-9-]+($| )", rest):
        return Rank.subspecies
    else:
        return Rank.species


def _join(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


def _strip_redundant_parts(name: str, rank: Rank, context: _Context) -> str:
    genus = context.genus_to_strip()
    if rank <= Rank.group:
        if (
            genus
            and name[:1] == genus[:1]
            and name.lower().startswith(genus.lower() + " ")
        ):
            name = name[len(genus) + 1 :]
        name = re.sub(r"^\(.*?\) ", "", name, count=1)

        if rank < Rank.species:
            species = context.specific_epithet_to_strip()
            if species and name.startswith(species + " "):
                name = name[len(species) + 1 :]
            name = re.sub(r"^" + _RANK_ABBREVIATION, "", name, count=1)
    elif rank <= Rank.genus:
        if (
            genus
            and name[:1] == genus[:1]
            and name.lower().startswith(genus.lower() + " (")
        ):
            name = name[len(genus) + 1 :]
        name = re.sub(r"^\((.*?)\)", r"\1", name, count=1)
    return name


def _compose(
    item: WorkingTaxon, taxon: str, rank: Rank, context: _Context
) -> list[str]:
    """Fill in the name fields of item and return any problems with the name."""
    errors = []
    if rank > Rank.genus:
        item.scientific_name = capitalize(taxon)
        if taxon[:1].upper() != taxon[:1]:
            errors.append(
                f'Taxon name ({rank.display_name}) should be capitalized: "{taxon}"'
            )
    elif rank is Rank.genus:
        item.scientific_name = capitalize_generic_name(taxon)
        if taxon[:1].upper() != taxon[:1] or (
            taxon[:1] == HYBRID_SIGN and taxon[1:2].upper() != taxon[1:2]
        ):
            errors.append(f'Generic epithet should be capitalized: "{taxon}"')
    elif rank > Rank.group:
        item.generic_name = context.genus
        item.infrageneric_epithet = context.subgenus
        item.scientific_name = capitalize(taxon)
        if taxon[:1].upper() != taxon[:1]:
            errors.append(f'Infrageneric epithet should be capitalized: "{taxon}"')
    elif rank is Rank.group or rank is Rank.subgroup:
        suffix = f"-{rank.display_name}"
        item.generic_name = context.genus
        item.infrageneric_epithet = context.subgenus
        epithet = taxon.lower().removesuffix(suffix)
        item.scientific_name = _join(item.generic_name, epithet + suffix)
        if taxon.lower() != taxon:
            errors.append(
                f'{rank.display_name.capitalize()} name should be lowercase: "{taxon}"'
            )
    elif rank > Rank.species:
        item.generic_name = context.genus
        item.infrageneric_epithet = context.subgenus
        item.scientific_name = _join(item.generic_name, taxon.lower())
        if taxon.lower() != taxon:
            errors.append(f'Taxon name should be lowercase: "{taxon}"')
    elif rank is Rank.species:
        item.generic_name = context.genus
        item.infrageneric_epithet = context.subgenus
        if INTERGENERIC_HYBRID_PATTERN.match(taxon):
            item.specific_epithet = taxon
        else:
            item.specific_epithet = taxon.lower()
            if item.specific_epithet != taxon:
                errors.append(f'Specific epithet should be lowercase: "{taxon}"')
        item.scientific_name = _join(item.generic_name, item.specific_epithet)
    else:
        item.generic_name = context.genus
        item.infrageneric_epithet = context.subgenus
        item.specific_epithet = context.specific_epithet
        item.infraspecific_epithet = taxon.lower()
        item.scientific_name = _join(
            item.generic_name,
            item.specific_epithet,
            rank.get_label(),
            item.infraspecific_epithet,
        )
        if item.infraspecific_epithet != taxon:
            errors.append(f'Infraspecific epithet should be lowercase: "{taxon}"')
    return errors


def parse_name(
    name: str, rank: Rank | None, parent: WorkingTaxon | None = None
) -> ParsedName:
    """Parse a single line of a key.

    rank is the rank given by the indentation of the line and parent the
    nearest accepted ancestor, if any. Raises NameSyntaxError if the line
    cannot be parsed at all.

    """
    if parent is None:
        parent = WorkingTaxon()
    item = WorkingTaxon()

    # Synonyms have the accepted name usage as 'parent'.
    status = _STATUS_PATTERN.match(name)
    if status is not None:
        item.taxonomic_status = TaxonomicStatus.from_symbol(status.group(1))
        name = name[status.end() :]
        rank = get_synonym_rank(
            name, parent.taxon_rank if parent.taxon_rank is not None else rank
        )
    else:
        item.taxonomic_status = TaxonomicStatus.accepted
    if rank is None:
        raise NameSyntaxError(f'Cannot determine the rank of "{name}"')

    cluster = _CLUSTER_PATTERN.match(name)
    if cluster is not None:
        item.cluster = cluster.group(1)
        name = name[cluster.end() :]

    item.verbatim_identification = re.sub(
        r"(?<=^| )x(?=$| )", HYBRID_SIGN, name
    ).replace("_", " ")

    # Synonyms, and names without ancestors to provide the genus or species,
    # are written in full.
    context = _Context.from_parent(parent)
    if (
        status is not None
        or not context.genus
        or (rank < Rank.species and not context.specific_epithet)
    ):
        context.update_from_name(name, rank)

    name = _strip_redundant_parts(name, rank, context)

    if rank is Rank.genus and name.startswith("x "):
        name = HYBRID_SIGN + name[2:]
    if rank is Rank.species and _HYBRID_INFIX.search(name):
        name = _HYBRID_INFIX.sub(HYBRID_SIGN, name, count=1)

    parts = NAME_PATTERN.match(name)
    if parts is None:
        raise NameSyntaxError(f'Taxon "{name}" could not be parsed')

    # Underscores encode spaces in old names ("Orsillus pini_canariensis"),
    # undescribed species ("Leiobunum species_A") and intergeneric hybrids.
    taxon = parts.group(1).replace("_", " ")
    item.scientific_name_authorship = capitalize_authors(parts.group(2) or "") or None
    item.taxon_remarks = parts.group(3)
    item.taxon_rank = rank

    errors = []
    if re.search(r"[^\p{L}0-9" + HYBRID_SIGN + r"\- ]", taxon):
        errors.append(f'Taxon name contains unexpected characters: "{taxon}"')
    errors += _compose(item, taxon, rank, context)

    item.scientific_name_only = item.scientific_name
    if item.scientific_name_authorship:
        item.scientific_name = (
            f"{item.scientific_name} {item.scientific_name_authorship}"
        )

    return ParsedName(item, errors)
