from idkeys.constants import DiffType

from .diff import DiffPart, diff_resource, diff_tokens, tokenize_words, unchanged_diff

TEXT = """Lasius Fabricius, 1804
  niger (Linnaeus, 1758)
    = Formica nigra Linnaeus, 1758
  flavus (Fabricius, 1782)
"""


def types(parts: list[DiffPart]) -> list[DiffType]:
    return [part.type for part in parts]


def test_tokenize_words() -> None:
    assert tokenize_words("  niger  (L.)") == ["  ", "niger", "  ", "(L.)"]
    assert tokenize_words("a\nb") == ["a", "\n", "b"]


def test_diff_tokens() -> None:
    assert diff_tokens(["a", "b"], ["a", "b"]) == [
        (DiffType.unchanged, "a"),
        (DiffType.unchanged, "b"),
    ]
    assert diff_tokens(["a", "x", "b"], ["a", "b"]) == [
        (DiffType.unchanged, "a"),
        (DiffType.added, "x"),
        (DiffType.unchanged, "b"),
    ]
    assert diff_tokens([], ["a"]) == [(DiffType.deleted, "a")]


def test_identical() -> None:
    parts = diff_resource(TEXT, TEXT)
    assert types(parts) == [DiffType.unchanged] * 4
    assert [part.text for part in parts] == TEXT.rstrip().split("\n")
    assert parts == unchanged_diff(TEXT)


def test_added_line() -> None:
    parts = diff_resource("A\nB", "A\nX\nB")
    assert types(parts) == [DiffType.unchanged, DiffType.added, DiffType.unchanged]
    assert parts[1] == DiffPart(text="X", type=DiffType.added)


def test_deleted_line() -> None:
    parts = diff_resource("A\nX\nB", "A\nB")
    assert types(parts) == [DiffType.unchanged, DiffType.deleted, DiffType.unchanged]
    assert parts[1] == DiffPart(text=None, type=DiffType.deleted, original="X")


def test_modified_line() -> None:
    old = "Lasius\n  niger\n  flavus"
    new = "Lasius\n  nigra\n  flavus"
    parts = diff_resource(old, new)
    assert types(parts) == [DiffType.unchanged, DiffType.modified, DiffType.unchanged]
    assert parts[1].text == "  nigra"
    assert parts[1].original == "  niger"


def test_old_line_goes_first_on_ties() -> None:
    parts = diff_resource("A\nB", "B\nA")
    assert types(parts) == [DiffType.added, DiffType.unchanged, DiffType.deleted]
    assert [part.text for part in parts] == ["B", "A", None]


def test_merged_lines() -> None:
    parts = diff_resource("A\nfoo\nbar\nB", "A\nfoo bar\nB")
    assert types(parts) == [
        DiffType.unchanged,
        DiffType.modified,
        DiffType.deleted,
        DiffType.unchanged,
    ]
    assert parts[1] == DiffPart(text="foo bar", type=DiffType.modified, original="foo")
    assert parts[2] == DiffPart(text=None, type=DiffType.deleted, original="bar")


def test_merged_lines_keep_their_text() -> None:
    old = "Lasius\n  nigr\n  [indet]\nFormica"
    parts = diff_resource(old, "Lasius\n  niger\nFormica")
    assert parts[1] == DiffPart(
        text="  niger", type=DiffType.modified, original="  nigr"
    )
    assert parts[2] == DiffPart(
        text=None, type=DiffType.deleted, original="  [indet]"
    )


def test_split_line() -> None:
    parts = diff_resource("A\nfoo bar\nB", "A\nfoo\nbar\nB")
    assert types(parts) == [
        DiffType.unchanged,
        DiffType.unchanged,
        DiffType.added,
        DiffType.unchanged,
    ]
    assert [part.text for part in parts] == ["A", "foo", "bar", "B"]
    assert parts[1].original == "foo"
    assert parts[2].original == " bar"


def test_trailing_whitespace() -> None:
    assert diff_resource("A\nB\n\n", "A\nB") == unchanged_diff("A\nB")
