"""Formats of the values of catalog fields.

Values are stored as strings; fields that allow multiple values separate them
with "; ".

"""

import re
from collections.abc import Callable, Mapping, Sequence

Value = str | list[str]
Format = Sequence[str] | re.Pattern[str] | Callable[[str], bool]
MultipleConfig = bool | Callable[[Mapping[str, Value]], bool]

MULTIPLE_SEPARATOR = "; "

ENTRY_TYPE = ("print", "online", "cd", "application")
KEY_TYPE = (
    "key",
    "matrix",
    "reference",
    "gallery",
    "checklist",
    "supplement",
    "collection",
    "algorithm",
)
COMPLETE = ("TRUE", "FALSE")

WORK_ID = re.compile(r"^B[1-9]\d*$")
# Level 0 of the Extended Date/Time Format
EDTF_0 = re.compile(
    r"^(\d{4}(-\d{2}(-\d{2}(T\d{2}:\d{2}:\d{2}(Z|[-+]\d{2}(:\d{2})?))?)?)?"
    r"|\d{4}(-\d{2}(-\d{2})?)?/(\d{4}(-\d{2}(-\d{2})?)?|\.\.))$"
)
ISSN_L = re.compile(r"^[0-9]{4}-[0-9]{3}[0-9X]$")
ISBN = re.compile(r"^(\d{13}|\d{9}[0-9X])$")
DOI = re.compile(r"^10\.")
QID = re.compile(r"^Q[1-9][0-9]*$")
URL = re.compile(
    r"^(ftp|http|https)://((?:[a-z0-9][a-z0-9-_]*?[a-z0-9]?\.)+(?:xn--)?[a-z0-9]+)(:\d*)?"
    r"((?:/(?:%\d\d|[!$&'()*+,\-.0-9\";=@A-Z_a-z~])*)*)"
    r"(\?(?:%\d\d|[!$&'()*+,\-./0-9:;=?@A-Z_a-z~])*)?"
    r"(#(?:%\d\d|[!$&'()*+,\-./0-9:;=?@A-Z_a-z~])*)?",
    re.IGNORECASE,
)

_UNKNOWN_LICENSE = re.compile(r"^<(public domain|.+\?)>$")
_SPDX_IDENTIFIER = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.+-]*$")
_LANGUAGE_TAG = re.compile(
    r"^[a-z]{2,3}(-[a-z]{4})?(-([a-z]{2}|\d{3}))?(-([a-z\d]{5,8}|\d[a-z\d]{3}))*$",
    re.IGNORECASE,
)


def LICENSE(value: str) -> bool:
    return bool(_UNKNOWN_LICENSE.match(value) or _SPDX_IDENTIFIER.match(value))


def LANGUAGE(value: str) -> bool:
    return bool(_LANGUAGE_TAG.match(value))


def MULTILANG(entry: Mapping[str, Value]) -> bool:
    """Titles may be given once per language."""
    language = entry.get("language")
    return isinstance(language, list) and len(language) > 1


def ISBN_PAIR(entry: Mapping[str, Value]) -> bool:
    """A book may have both an ISBN-10 and an ISBN-13."""
    isbn = entry.get("ISBN")
    if not isinstance(isbn, list) or len(isbn) != 2:
        return False
    return sorted(len(value) for value in isbn) == [10, 13]


def parse_value(value: str, *, multiple: bool) -> Value | None:
    if value == "":
        return None
    elif multiple:
        return value.split(MULTIPLE_SEPARATOR)
    else:
        return value
