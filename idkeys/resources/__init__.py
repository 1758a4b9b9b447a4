"""Package for parsing identification keys."""

__all__ = [
    "DiffPart",
    "NameSyntaxError",
    "ParseError",
    "ParsedName",
    "Resource",
    "ResourceHistory",
    "ResourceMetadata",
    "ResourceSyntaxError",
    "Taxon",
    "WorkingTaxon",
    "diff_resource",
    "parse_file",
    "parse_file_header",
    "parse_name",
]

from .diff import DiffPart as DiffPart, diff_resource as diff_resource
from .errors import (
    NameSyntaxError as NameSyntaxError,
    ParseError as ParseError,
    ResourceSyntaxError as ResourceSyntaxError,
)
from .parse_name import ParsedName as ParsedName, parse_name as parse_name
from .parse_text import parse_file as parse_file, parse_file_header as parse_file_header
from .resource import (
    Resource as Resource,
    ResourceHistory as ResourceHistory,
    ResourceMetadata as ResourceMetadata,
    Taxon as Taxon,
    WorkingTaxon as WorkingTaxon,
)
