from . import value
from .entity import REQUIRED_MISSING, FieldError
from .work import Work

VALID = {
    "id": "B1",
    "title": "Key to the ants of Europe",
    "entry_type": "print",
    "language": "en",
    "key_type": "key",
    "taxon": "Formicidae",
    "region": "Europe",
}


def test_valid() -> None:
    work = Work(VALID)
    assert work.validate() == []
    assert work.get("language") == ["en"]
    assert work.get("title") == ["Key to the ants of Europe"]
    assert work.has("region")
    assert not work.has("date")


def test_required_fields() -> None:
    errors = Work({}).validate()
    assert errors == [
        FieldError(field, REQUIRED_MISSING)
        for field in (
            "id",
            "title",
            "entry_type",
            "language",
            "key_type",
            "taxon",
            "region",
        )
    ]
    assert str(errors[0]) == "[id] Value(s) required but missing"


def test_empty_values_are_missing() -> None:
    errors = Work({**VALID, "region": ""}).validate()
    assert errors == [FieldError("region", REQUIRED_MISSING)]


def test_unknown_field() -> None:
    errors = Work({**VALID, "colour": "red"}).validate()
    assert errors == [FieldError("colour", "Unknown field")]


def test_formats() -> None:
    errors = Work({**VALID, "id": "X1", "key_type": "key; poster"}).validate()
    assert [str(error) for error in errors] == [
        '[id] The value "X1" does not conform to pattern: ^B[1-9]\\d*$',
        '[key_type] The value "poster" is not included: '
        "key, matrix, reference, gallery, checklist, supplement, collection, "
        "algorithm",
    ]

    errors = Work({**VALID, "language": "english"}).validate()
    assert [str(error) for error in errors] == [
        '[language] The value "english" does not conform to pattern: LANGUAGE'
    ]


def test_single_value() -> None:
    errors = Work({**VALID, "series": "Fauna; Flora"}).validate()
    assert errors == [FieldError("series", "Multiple values but only one expected")]


def test_multilingual_title() -> None:
    titles = {**VALID, "title": "Ants; Ameisen"}
    errors = Work(titles).validate()
    assert errors == [FieldError("title", "Multiple values but only one expected")]

    assert Work({**titles, "language": "en; de"}).validate() == []


def test_isbn_pair() -> None:
    assert Work({**VALID, "ISBN": "9780123456786; 0123456789"}).validate() == []
    errors = Work({**VALID, "ISBN": "9780123456786; 9780123456793"}).validate()
    assert errors == [FieldError("ISBN", "Multiple values but only one expected")]


def test_license() -> None:
    assert value.LICENSE("CC-BY-4.0")
    assert value.LICENSE("<public domain>")
    assert value.LICENSE("<all rights reserved?>")
    assert not value.LICENSE("<all rights reserved>")
    assert not value.LICENSE("")


def test_language() -> None:
    assert value.LANGUAGE("en")
    assert value.LANGUAGE("zh-Hant-TW")
    assert value.LANGUAGE("de-1996")
    assert not value.LANGUAGE("english")


def test_derived_fields() -> None:
    work = Work({**VALID, "date": "1998-05", "license": "CC-BY-4.0"})
    assert work.get("year") == "1998"
    assert work.get("decade") == "1990"
    assert work.get("access") == "Open license"

    work = Work(
        {**VALID, "license": "<unknown?>", "fulltext_url": "https://example.org/key"}
    )
    assert work.get("access") == "Full text available, no license"

    work = Work({**VALID, "archive_url": "https://web.archive.org/web/key"})
    assert work.get("access") == "Archived full text available, no license"

    work = Work({**VALID, "date": "../1998"})
    assert not work.has("year")
    assert work.get("access") == "No full text available"
