from . import value
from .entity import Entity, Field


class Work(Entity):
    """A publication that contains one or more identification keys."""

    schema = {
        "id": Field(required=True, format=value.WORK_ID),
        "title": Field(required=True, multiple=value.MULTILANG),
        "author": Field(multiple=True),
        "url": Field(multiple=True, format=value.URL),
        "fulltext_url": Field(multiple=True, format=value.URL),
        "archive_url": Field(multiple=True, format=value.URL),
        "entry_type": Field(required=True, format=value.ENTRY_TYPE),
        "date": Field(format=value.EDTF_0),
        "publisher": Field(multiple=True),
        "series": Field(),
        "ISSN": Field(format=value.ISSN_L),
        "ISBN": Field(multiple=value.ISBN_PAIR, format=value.ISBN),
        "DOI": Field(format=value.DOI),
        "QID": Field(format=value.QID),
        "volume": Field(),
        "issue": Field(),
        "pages": Field(),
        "edition": Field(),
        "language": Field(required=True, multiple=True, format=value.LANGUAGE),
        "license": Field(multiple=True, format=value.LICENSE),
        "key_type": Field(required=True, multiple=True, format=value.KEY_TYPE),
        "taxon": Field(required=True, multiple=True),
        "taxon_scope": Field(multiple=True),
        "scope": Field(multiple=True),
        "region": Field(required=True, multiple=True),
        "complete": Field(format=value.COMPLETE),
        "target_taxa": Field(multiple=True),
        "listed_in": Field(multiple=True, format=value.WORK_ID),
        "part_of": Field(multiple=True, format=value.WORK_ID),
        "version_of": Field(multiple=True, format=value.WORK_ID),
        "duplicate_of": Field(format=value.WORK_ID),
    }

    def derive_fields(self) -> None:
        date = self.fields.get("date")
        if isinstance(date, str) and date[:4].isdigit():
            year = int(date[:4])
            self.derived_fields["year"] = str(year)
            self.derived_fields["decade"] = str(year - year % 10)

        license = self.fields.get("license")
        if isinstance(license, list) and not any(
            item.endswith("?>") for item in license
        ):
            self.derived_fields["access"] = "Open license"
        elif "fulltext_url" in self.fields:
            self.derived_fields["access"] = "Full text available, no license"
        elif "archive_url" in self.fields:
            self.derived_fields["access"] = "Archived full text available, no license"
        else:
            self.derived_fields["access"] = "No full text available"
