"""Parsing of the text files that contain identification keys.

A text file holds one or more resources separated by a line with "===":

    ---
    levels: [genus, species]
    catalog:
      id: B1
    ---

    Lasius Fabricius, 1804
      niger (Linnaeus, 1758)
        = Formica nigra Linnaeus, 1758

    ===

    levels: [species]
    ---
    ...

Every resource starts with a YAML header and continues with one name per line,
indented two spaces per level. The taxa get identifiers of the form
"<work>:<resource>:<number>". When the previous revision of the file is
given, the numbers of lines that were kept (or edited) are carried over, and
new lines get numbers above all previously used ones.

"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import yaml

from idkeys.catalog import Work
from idkeys.catalog.entity import REQUIRED_MISSING
from idkeys.constants import (
    ANONYMOUS_CLUSTER,
    DWC_RANKS,
    INDET_MARKER,
    INDET_SUFFIXES,
    MAIN_RANKS,
    RESOURCE_DELIMITER,
    DiffType,
    Rank,
    ResourceFlag,
)
from idkeys.helpers import (
    count_lines,
    is_valid_rank,
    rank_of_string,
    suggest,
    suggest_rank,
)

from .diff import DiffPart, ResourceDiff, diff_resource, unchanged_diff
from .errors import (
    ConfigurationError,
    NameSyntaxError,
    ParseError,
    ResourceSyntaxError,
)
from .parse_name import parse_name
from .resource import (
    CatalogValue,
    Resource,
    ResourceHistory,
    ResourceMetadata,
    TaxonId,
    WorkingTaxon,
)

logger = logging.getLogger(__name__)

_HEADER_SEPARATOR = re.compile(r"(\n---\n+)")
_STATUS_PREFIXES = ("= ", "+ ", "> ")


@dataclass
class Block:
    text: str
    line: int  # line in the file where the block starts


def split_resources(text: str) -> list[Block]:
    blocks = []
    line = 1
    for chunk in text.split(RESOURCE_DELIMITER):
        blocks.append(Block(chunk, line))
        line += count_lines(chunk) + count_lines(RESOURCE_DELIMITER)
    return blocks


def split_block(block: Block) -> tuple[str, str, int]:
    """Return the header, the content and the line where the content starts."""
    header, *rest = _HEADER_SEPARATOR.split(block.text, maxsplit=1)
    if not rest:
        return header, "", block.line + count_lines(header) + 1
    separator, content = rest
    return header, content, block.line + count_lines(header) + count_lines(separator)


# Header


def parse_header(header: str) -> ResourceMetadata:
    try:
        config = yaml.safe_load(header)
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Invalid yaml header: {error}") from error

    if not isinstance(config, dict):
        raise ConfigurationError("yaml header should be an object")
    if "scope" in config:
        raise ConfigurationError('"scope" data should go in "catalog"')

    metadata = ResourceMetadata(levels=_parse_levels(config.get("levels", [])))
    if "flags" in config:
        metadata.flags = _parse_flags(config["flags"])
    if "catalog" in config:
        metadata.catalog = _parse_catalog(config["catalog"])
    return metadata


def _parse_levels(levels: Any) -> list[Rank]:
    if not isinstance(levels, list):
        raise ConfigurationError('"levels" should be an array')
    if not levels:
        raise ConfigurationError("Resource contains no taxa")

    invalid = []
    for level in levels:
        if is_valid_rank(level):
            continue
        suggestion = suggest_rank(level) if isinstance(level, str) else None
        if suggestion is not None:
            invalid.append(f'{level} (did you mean "{suggestion}"?)')
        else:
            invalid.append(str(level))
    if invalid:
        raise ConfigurationError(
            f'"levels" contains invalid values: {", ".join(invalid)}'
        )
    return [rank_of_string(level) for level in levels]


def _parse_flags(flags: Any) -> frozenset[ResourceFlag]:
    if not isinstance(flags, list):
        raise ConfigurationError('"flags" should be an array')
    known = {flag.value: flag for flag in ResourceFlag}
    invalid = []
    for flag in flags:
        if flag in known:
            continue
        suggestion = suggest(str(flag), known)
        if suggestion is not None:
            invalid.append(f'{flag} (did you mean "{suggestion}"?)')
        else:
            invalid.append(str(flag))
    if invalid:
        raise ConfigurationError(
            f'"flags" contains invalid values: {", ".join(invalid)}'
        )
    return frozenset(known[flag] for flag in flags)


def _parse_catalog(catalog: Any) -> Mapping[str, CatalogValue]:
    if not isinstance(catalog, dict):
        raise ConfigurationError('"catalog" should be an object')
    values = {}
    for key, value in catalog.items():
        if isinstance(value, str):
            values[str(key)] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            values[str(key)] = str(value)
        else:
            raise ConfigurationError(
                f'"catalog" should contain only strings ("{key}")'
            )

    work = Work(values)
    # The header only identifies the work; the catalog holds the full record.
    errors = [error for error in work.validate() if error.error != REQUIRED_MISSING]
    if errors:
        raise ConfigurationError(
            f'"catalog" contains errors: {"; ".join(str(error) for error in errors)}'
        )
    return dict(work.fields)


# Content lines


def is_indet(line: str) -> bool:
    """Whether the line marks that lower taxa are deliberately left out."""
    line = line.strip()
    return line == INDET_MARKER or any(
        line.endswith(" " + suffix) for suffix in INDET_SUFFIXES
    )


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _is_status_line(body: str) -> bool:
    return body.startswith(_STATUS_PREFIXES)


def _is_correction(line: str) -> bool:
    return line.lstrip(" ").startswith("> ")


def _max_depth(body: str, levels: Sequence[Rank]) -> int:
    """Deepest level a line may have. Synonyms and corrections may go deeper."""
    if body.startswith("> "):
        return len(levels) + 1
    elif _is_status_line(body):
        return len(levels)
    else:
        return len(levels) - 1


def _holds_identifier(line: str | None) -> bool:
    return (
        line is not None
        and line.strip() != ""
        and not is_indet(line)
        and not _is_correction(line)
    )


def validate_content(
    metadata: ResourceMetadata, content: str, first_line: int
) -> list[ParseError]:
    lines = [
        (first_line + offset, line)
        for offset, line in enumerate(content.rstrip().split("\n"))
        if line.strip()
    ]
    errors = []
    for number, line in lines:
        indent = _indentation(line)
        if indent % 2:
            errors.append(
                ParseError(
                    "Indentation should be a multiple of 2 spaces", number, indent, line
                )
            )
        elif indent // 2 > _max_depth(line[indent:], metadata.levels):
            errors.append(ParseError("Too much indentation", number, indent, line))

    if not metadata.has_flag(ResourceFlag.missing_leaf_taxa):
        errors += _check_leaf_taxa(metadata.levels, lines)
    return errors


def _check_leaf_taxa(
    levels: Sequence[Rank], lines: Sequence[tuple[int, str]]
) -> Iterable[ParseError]:
    """Every taxon above the leaf rank needs at least one child."""
    main_ranks = [rank for rank in levels if rank in MAIN_RANKS]
    if not main_ranks:
        return
    leaf_depth = levels.index(main_ranks[-1])

    for i, (number, line) in enumerate(lines):
        indent = _indentation(line)
        if (
            indent // 2 >= leaf_depth
            or _is_status_line(line[indent:])
            or is_indet(line)
        ):
            continue
        following = next(
            (
                other
                for _, other in lines[i + 1 :]
                if not (
                    _indentation(other) > indent
                    and _is_status_line(other.lstrip(" "))
                )
            ),
            None,
        )
        if following is None or _indentation(following) <= indent:
            yield ParseError("Missing leaf taxon", number, 0, line)


# Taxa


@dataclass
class _ContentParser:
    resource: Resource
    old_ids: Sequence[int]
    errors: list[ParseError] = field(default_factory=list)
    drafts: dict[TaxonId, WorkingTaxon] = field(default_factory=dict)
    # Recoverable errors per taxon, dropped if the taxon gets corrected.
    pending_errors: dict[TaxonId, list[ParseError]] = field(default_factory=dict)
    # Per level above the current line, the accepted taxon it belongs to.
    parents: list[TaxonId | None] = field(default_factory=list)
    depth: int = 0
    previous_id: TaxonId | None = None
    old_slot: int = 0
    next_id: int = 0

    def parse(self, diff: ResourceDiff, first_line: int) -> None:
        self.next_id = max(
            [*self.old_ids, sum(1 for part in diff if _takes_old_slot(part))]
        )
        number = first_line - 1
        for part in diff:
            slot = None
            if _takes_old_slot(part):
                self.old_slot += 1
                slot = self.old_slot
            if part.text is None:
                continue
            number += 1
            if not part.text.strip() or is_indet(part.text):
                continue
            self._parse_line(part, part.text, number, slot)

        for errors in self.pending_errors.values():
            self.errors += errors
        _resolve_clusters(self.drafts.values())

    def _mint(self) -> int:
        self.next_id += 1
        return self.next_id

    def _update_parents(self, depth: int, *, correction: bool) -> None:
        if depth > self.depth:
            previous = self.drafts.get(self.previous_id) if self.previous_id else None
            # Taxa are placed under accepted taxa only, but corrections can
            # apply to synonyms.
            if correction or (previous is not None and previous.is_accepted()):
                self.parents.append(self.previous_id)
            else:
                self.parents.append(None)
            # Levels can be skipped, e.g. if some genera in the key have
            # subgenera and others do not.
            self.parents += [None] * (depth - self.depth - 1)
        elif depth < self.depth:
            del self.parents[depth:]
        self.depth = depth

    def _parse_line(
        self, part: DiffPart, text: str, number: int, slot: int | None
    ) -> None:
        levels = self.resource.metadata.levels
        indent = _indentation(text)
        body = text[indent:]
        depth = indent // 2
        # Reported by validate_content()
        if indent % 2 or depth > _max_depth(body, levels):
            return

        correction = _is_correction(body)
        self._update_parents(depth, correction=correction)
        parent_id = next((id for id in reversed(self.parents) if id is not None), None)
        parent = self.drafts[parent_id] if parent_id is not None else None
        rank = levels[depth] if depth < len(levels) else None

        try:
            parsed = parse_name(body, rank, parent)
        except NameSyntaxError as error:
            self.errors.append(ParseError(str(error), number, indent, text))
            self.previous_id = None
            return
        errors = [
            ParseError(message, number, indent, text) for message in parsed.errors
        ]
        item = parsed.taxon

        if correction:
            self._apply_correction(parent_id, parent, item, errors, number, text)
            return
        if parent is None and not item.is_accepted():
            self.errors.append(
                ParseError("Synonym without accepted taxon", number, indent, text)
            )
            self.previous_id = None
            return

        if part.type is DiffType.added or slot is None:
            sequence_number = self._mint()
        elif slot <= len(self.old_ids):
            sequence_number = self.old_ids[slot - 1]
        else:
            sequence_number = slot
        taxon_id = f"{self.resource.id}:{sequence_number}"
        if taxon_id in self.drafts:
            taxon_id = f"{self.resource.id}:{self._mint()}"
            logger.warning(
                "%s: identifier %s:%d is already in use, using %s",
                self.resource.id,
                self.resource.id,
                sequence_number,
                taxon_id,
            )
        elif part.type is not DiffType.unchanged:
            logger.debug(
                "%s: %s line %d gets %s",
                self.resource.id,
                part.type.name,
                number,
                taxon_id,
            )

        item.scientific_name_id = taxon_id
        item.collection_code = self.resource.id
        _link(item, parent)

        self.drafts[taxon_id] = item
        self.previous_id = taxon_id
        if errors:
            self.pending_errors[taxon_id] = errors

    def _apply_correction(
        self,
        parent_id: TaxonId | None,
        parent: WorkingTaxon | None,
        correction: WorkingTaxon,
        errors: list[ParseError],
        number: int,
        text: str,
    ) -> None:
        if parent_id is None or parent is None:
            self.errors.append(
                ParseError("Correction without taxon to correct", number, 0, text)
            )
            return
        try:
            parent.amend(correction)
        except ValueError as error:
            self.errors.append(ParseError(str(error), number, 0, text))
            return
        logger.debug("%s: corrected to %s", parent_id, parent.scientific_name)
        self.pending_errors.pop(parent_id, None)
        self.errors += errors


def _takes_old_slot(part: DiffPart) -> bool:
    """Whether the line held an identifier in the previous revision."""
    return part.type is not DiffType.added and _holds_identifier(part.original)


def _link(item: WorkingTaxon, parent: WorkingTaxon | None) -> None:
    if parent is not None:
        if item.is_accepted():
            item.parent_name_usage_id = parent.scientific_name_id
            item.parent_name_usage = parent.scientific_name
        else:
            item.accepted_name_usage_id = parent.scientific_name_id
            item.accepted_name_usage = parent.scientific_name

    for rank in DWC_RANKS:
        if parent is not None and rank in parent.classification:
            item.classification[rank] = parent.classification[rank]
        if item.taxon_rank is rank and item.scientific_name_only is not None:
            item.classification[rank] = item.scientific_name_only
    if item.generic_name and Rank.genus not in item.classification:
        item.classification[Rank.genus] = item.generic_name
    if item.infrageneric_epithet and Rank.subgenus not in item.classification:
        item.classification[Rank.subgenus] = item.infrageneric_epithet

    if parent is None:
        item.higher_classification = None
    elif not item.is_accepted():
        item.higher_classification = parent.higher_classification
    elif parent.higher_classification:
        item.higher_classification = (
            f"{parent.higher_classification} | {parent.scientific_name_only}"
        )
    else:
        item.higher_classification = parent.scientific_name_only


def _resolve_clusters(drafts: Iterable[WorkingTaxon]) -> None:
    clusters: dict[tuple[TaxonId | None, str], list[WorkingTaxon]] = defaultdict(list)
    for draft in drafts:
        if draft.cluster is None or not draft.is_accepted():
            continue
        if draft.cluster == ANONYMOUS_CLUSTER:
            draft.identifiable = False
        else:
            clusters[(draft.parent_name_usage_id, draft.cluster)].append(draft)

    for members in clusters.values():
        for member in members:
            member.indistinguishable_from = [
                other.scientific_name_id
                for other in members
                if other is not member and other.scientific_name_id is not None
            ]


def parse_resource_content(
    diff: ResourceDiff, resource: Resource, old_ids: Sequence[int], first_line: int
) -> list[ParseError]:
    """Fill in the taxa of the resource. Returns the errors instead if there are any."""
    parser = _ContentParser(resource, old_ids)
    parser.parse(diff, first_line)
    if parser.errors:
        return parser.errors
    resource.taxa = {
        taxon_id: draft.to_taxon() for taxon_id, draft in parser.drafts.items()
    }
    logger.debug("%s: parsed %d taxa", resource.id, len(resource.taxa))
    return []


# Files


def _header_error(error: ConfigurationError, block: Block) -> ParseError:
    return ParseError(str(error), block.line, 0, block.text.split("\n", 1)[0])


def parse_file(
    text: str, work_id: str, old: ResourceHistory | None = None
) -> list[Resource]:
    """Parse all resources in a text file.

    If the previous revision of the file is given, identifiers of unchanged
    taxa are kept. Raises ResourceSyntaxError with all problems found.

    """
    old_blocks = split_resources(old.text) if old is not None else []
    resources = []
    errors: list[ParseError] = []

    for index, block in enumerate(split_resources(text)):
        header, content, first_line = split_block(block)
        try:
            metadata = parse_header(header)
        except ConfigurationError as error:
            errors.append(_header_error(error, block))
            continue
        resource = Resource(work_id=work_id, index=index + 1, metadata=metadata)
        errors += validate_content(metadata, content, first_line)

        if old is not None and index < len(old_blocks):
            diff = diff_resource(split_block(old_blocks[index])[1], content)
            old_ids = old.ids_for(index)
        else:
            diff = unchanged_diff(content)
            old_ids = ()
        errors += parse_resource_content(diff, resource, old_ids, first_line)
        resources.append(resource)

    if errors:
        raise ResourceSyntaxError(errors)
    return resources


def parse_file_header(text: str) -> list[ResourceMetadata]:
    errors = []
    headers = []
    for block in split_resources(text):
        try:
            headers.append(parse_header(split_block(block)[0]))
        except ConfigurationError as error:
            errors.append(_header_error(error, block))
    if errors:
        raise ResourceSyntaxError(errors)
    return headers
