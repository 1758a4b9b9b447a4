"""Diffs between two revisions of the content of a resource.

The main interface is diff_resource(). Lines are compared first; runs of added
lines that directly border runs of deleted lines are compared again word by
word, so that an edited line comes out as a single modified line instead of a
deletion plus an addition.

The diff drives identifier assignment in parse_text, so its output must not
change for a given pair of texts. In particular, when the backtrace of the LCS
table has a choice, it takes the previous text's line first.

"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from idkeys.constants import DiffType

Change = tuple[DiffType, str]


@dataclass
class DiffPart:
    # Current text of the line, None if the line was deleted.
    text: str | None
    type: DiffType
    # Previous text of the line, None if the line was added.
    original: str | None = None


ResourceDiff = list[DiffPart]

_WORD_TOKEN = re.compile(r"\S+|\n|[^\S\n]+")


def tokenize_words(text: str) -> list[str]:
    return _WORD_TOKEN.findall(text)


def tokenize_lines(text: str) -> list[str]:
    return text.split("\n")


def _lcs(current: Sequence[str], previous: Sequence[str]) -> list[Change]:
    m = len(current)
    n = len(previous)

    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m):
        for j in range(n):
            if current[i] == previous[j]:
                table[i + 1][j + 1] = table[i][j] + 1
            else:
                table[i + 1][j + 1] = max(table[i][j + 1], table[i + 1][j])

    changes: list[Change] = []
    i = m
    j = n
    while i + j != 0:
        if i > 0 and j > 0 and current[i - 1] == previous[j - 1]:
            changes.append((DiffType.unchanged, current[i - 1]))
            i -= 1
            j -= 1
        elif i != 0 and (j == 0 or table[i - 1][j] > table[i][j - 1]):
            changes.append((DiffType.added, current[i - 1]))
            i -= 1
        else:
            changes.append((DiffType.deleted, previous[j - 1]))
            j -= 1
    changes.reverse()
    return changes


def diff_tokens(current: Sequence[str], previous: Sequence[str]) -> list[Change]:
    """Diff two token sequences, with the common prefix and suffix split off."""
    shortest = min(len(current), len(previous))
    start = 0
    while start < shortest and current[start] == previous[start]:
        start += 1
    end = 0
    while end < shortest - start and current[-1 - end] == previous[-1 - end]:
        end += 1

    prefix = [(DiffType.unchanged, token) for token in current[:start]]
    suffix = [
        (DiffType.unchanged, token) for token in current[len(current) - end :]
    ]
    middle = _lcs(
        current[start : len(current) - end], previous[start : len(previous) - end]
    )
    return [*prefix, *middle, *suffix]


def _convert_word_diff(changes: Sequence[Change]) -> ResourceDiff:
    lines: ResourceDiff = []
    line: DiffPart | None = None
    # Previous lines merged into the current line after its first one.
    merged: list[str] = []
    next_line_new = False

    for change_type, token in changes:
        if line is None:
            merged = []
            line = DiffPart(text=None, type=change_type)

        if token == "\n":
            if change_type is DiffType.deleted:
                # Two previous lines were merged. The later one is kept as a
                # deleted line so that its identifier slot is not lost.
                merged.append("")
                continue

            # A new newline starts a new line. If the current line already
            # existed, the next one is the new line.
            if next_line_new:
                line.type = DiffType.added
                next_line_new = False
            if change_type is DiffType.added and line.type is not DiffType.added:
                next_line_new = True

            if line.text is None:
                line.text = ""
            lines.append(line)
            line = None

            lines += [
                DiffPart(text=None, type=DiffType.deleted, original=original)
                for original in merged
            ]
            continue

        if change_type is not line.type:
            line.type = DiffType.modified

        if change_type is not DiffType.deleted:
            line.text = (line.text or "") + token
        if change_type is not DiffType.added:
            if merged:
                merged[-1] += token
            else:
                line.original = (line.original or "") + token

    return lines


def _word_tokens(lines: Sequence[str]) -> list[str]:
    return [token for line in lines for token in [*tokenize_words(line), "\n"]]


def _merge_lines(added: Sequence[str], deleted: Sequence[str]) -> ResourceDiff:
    if added and deleted:
        return _convert_word_diff(
            diff_tokens(_word_tokens(added), _word_tokens(deleted))
        )
    elif added:
        return [DiffPart(text=line, type=DiffType.added) for line in added]
    elif deleted:
        return [
            DiffPart(text=None, type=DiffType.deleted, original=line)
            for line in deleted
        ]
    else:
        return []


def diff_resource(old: str, new: str) -> ResourceDiff:
    """Classify every line of new (and every removed line of old)."""
    line_changes = diff_tokens(
        tokenize_lines(new.rstrip()), tokenize_lines(old.rstrip())
    )

    parts: ResourceDiff = []
    added: list[str] = []
    deleted: list[str] = []
    for change_type, line in line_changes:
        if change_type is DiffType.added:
            added.append(line)
        elif change_type is DiffType.deleted:
            deleted.append(line)
        else:
            parts += _merge_lines(added, deleted)
            parts.append(DiffPart(text=line, type=DiffType.unchanged, original=line))
            added = []
            deleted = []
    parts += _merge_lines(added, deleted)
    return parts


def unchanged_diff(text: str) -> ResourceDiff:
    """Diff of a text against itself."""
    return [
        DiffPart(text=line, type=DiffType.unchanged, original=line)
        for line in tokenize_lines(text.rstrip())
    ]
