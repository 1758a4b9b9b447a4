import pytest

from idkeys.constants import Rank, TaxonomicStatus

from .errors import NameSyntaxError
from .parse_name import get_synonym_rank, parse_name
from .resource import WorkingTaxon

LASIUS = WorkingTaxon(
    scientific_name="Lasius Fabricius, 1804",
    scientific_name_only="Lasius",
    taxon_rank=Rank.genus,
    classification={Rank.genus: "Lasius"},
)
NIGER = WorkingTaxon(
    scientific_name="Lasius niger (Linnaeus, 1758)",
    scientific_name_only="Lasius niger",
    taxon_rank=Rank.species,
    generic_name="Lasius",
    specific_epithet="niger",
    classification={Rank.genus: "Lasius"},
)


def test_genus() -> None:
    parsed = parse_name("Lasius Fabricius, 1804", Rank.genus)
    assert parsed.is_valid()
    taxon = parsed.taxon
    assert taxon.scientific_name == "Lasius Fabricius, 1804"
    assert taxon.scientific_name_only == "Lasius"
    assert taxon.scientific_name_authorship == "Fabricius, 1804"
    assert taxon.taxon_rank is Rank.genus
    assert taxon.taxonomic_status is TaxonomicStatus.accepted


def test_species() -> None:
    taxon = parse_name("niger (Linnaeus, 1758)", Rank.species, LASIUS).taxon
    assert taxon.scientific_name == "Lasius niger (Linnaeus, 1758)"
    assert taxon.generic_name == "Lasius"
    assert taxon.specific_epithet == "niger"

    # The genus may be repeated
    taxon = parse_name("Lasius niger (Linnaeus, 1758)", Rank.species, LASIUS).taxon
    assert taxon.scientific_name == "Lasius niger (Linnaeus, 1758)"


def test_species_without_genus() -> None:
    taxon = parse_name("Nematus fåhraei Thomson", Rank.species).taxon
    assert taxon.scientific_name == "Nematus fåhraei Thomson"
    assert taxon.generic_name == "Nematus"


def test_infraspecific() -> None:
    taxon = parse_name("alienus Förster, 1850", Rank.subspecies, NIGER).taxon
    assert taxon.scientific_name == "Lasius niger subsp. alienus Förster, 1850"
    assert taxon.infraspecific_epithet == "alienus"

    taxon = parse_name("niger var. alienus", Rank.variety, NIGER).taxon
    assert taxon.scientific_name == "Lasius niger var. alienus"


def test_group() -> None:
    assert parse_name("niger", Rank.group, LASIUS).taxon.scientific_name == (
        "Lasius niger-group"
    )
    assert parse_name("niger-group", Rank.group, LASIUS).taxon.scientific_name == (
        "Lasius niger-group"
    )
    assert parse_name("alienus", Rank.subgroup, LASIUS).taxon.scientific_name == (
        "Lasius alienus-subgroup"
    )


def test_subgenus() -> None:
    taxon = parse_name("Chthonolasius Ruzsky, 1912", Rank.subgenus, LASIUS).taxon
    assert taxon.scientific_name == "Chthonolasius Ruzsky, 1912"
    assert taxon.generic_name == "Lasius"


def test_authors() -> None:
    taxon = parse_name("Sphecidae A. Costa, 1886", Rank.family).taxon
    assert taxon.scientific_name_authorship == "A. Costa, 1886"
    taxon = parse_name("Crabro LINNAEUS, 1758", Rank.genus).taxon
    assert taxon.scientific_name_authorship == "Linnaeus, 1758"
    taxon = parse_name("Tachysphex Kohl", Rank.genus).taxon
    assert taxon.scientific_name_authorship == "Kohl"
    taxon = parse_name("Crabro Lepeletier & Brullé", Rank.genus).taxon
    assert taxon.scientific_name_authorship == "Lepeletier & Brullé"


def test_remarks() -> None:
    taxon = parse_name("niger auct., nec Linnaeus", Rank.species, LASIUS).taxon
    assert taxon.scientific_name == "Lasius niger"
    assert taxon.scientific_name_authorship is None
    assert taxon.taxon_remarks == "auct., nec Linnaeus"

    taxon = parse_name("niger sensu Seifert", Rank.species, LASIUS).taxon
    assert taxon.taxon_remarks == "sensu Seifert"

    taxon = parse_name("niger (Linnaeus, 1758), in part", Rank.species, LASIUS).taxon
    assert taxon.scientific_name_authorship == "(Linnaeus, 1758)"
    assert taxon.taxon_remarks == "in part"


def test_synonym() -> None:
    taxon = parse_name("= Formica nigra Linnaeus, 1758", None, NIGER).taxon
    assert taxon.taxonomic_status is TaxonomicStatus.synonym
    assert taxon.taxon_rank is Rank.species
    assert taxon.scientific_name == "Formica nigra Linnaeus, 1758"
    assert taxon.generic_name == "Formica"

    taxon = parse_name("+ ? Formica nigra Linnaeus, 1758", None, NIGER).taxon
    assert taxon.taxonomic_status is TaxonomicStatus.heterotypic_synonym
    assert taxon.scientific_name == "Formica nigra Linnaeus, 1758"


def test_synonym_rank() -> None:
    assert get_synonym_rank("Formica nigra Linnaeus, 1758", Rank.species) is Rank.species
    assert get_synonym_rank("Formica nigra alienus", Rank.species) is Rank.subspecies
    assert get_synonym_rank("Formica nigra var. alienus", Rank.species) is Rank.variety
    assert get_synonym_rank("f. lactans Horváth, 1899", Rank.species) is Rank.form
    assert get_synonym_rank("Formica (Serviformica)", Rank.genus) is Rank.subgenus
    assert get_synonym_rank("Formica Linnaeus, 1758", Rank.genus) is Rank.genus
    assert get_synonym_rank("Formica nigra sensu Forel", Rank.species) is Rank.species


def test_cluster() -> None:
    parsed = parse_name("[1] niger", Rank.species, LASIUS)
    assert parsed.taxon.cluster == "1"
    assert parsed.taxon.scientific_name == "Lasius niger"
    assert parse_name("[_] niger", Rank.species, LASIUS).taxon.cluster == "_"


def test_hybrids() -> None:
    taxon = parse_name("x Festulpia", Rank.genus).taxon
    assert taxon.scientific_name == "×Festulpia"
    assert taxon.verbatim_identification == "× Festulpia"

    taxon = parse_name("Tilia x vulgaris", Rank.species).taxon
    assert taxon.scientific_name == "Tilia ×vulgaris"

    taxon = parse_name("Rumex conglomeratus x maritimus", Rank.species).taxon
    assert taxon.scientific_name == "Rumex conglomeratus×maritimus"

    parsed = parse_name("Festuca_rubra x Vulpia_bromoides", Rank.species)
    assert parsed.is_valid()
    assert parsed.taxon.scientific_name == "Festuca rubra×Vulpia bromoides"


def test_underscores() -> None:
    parsed = parse_name("pini_canariensis Lindberg, 1953", Rank.subspecies, NIGER)
    assert parsed.taxon.infraspecific_epithet == "pini canariensis"
    assert parsed.taxon.verbatim_identification == "pini canariensis Lindberg, 1953"


def test_recoverable_errors() -> None:
    parsed = parse_name("formicidae", Rank.family)
    assert parsed.errors == ['Taxon name (family) should be capitalized: "formicidae"']
    assert parsed.taxon.scientific_name == "Formicidae"

    parsed = parse_name("Niger", Rank.species, LASIUS)
    assert parsed.errors == ['Specific epithet should be lowercase: "Niger"']
    assert parsed.taxon.scientific_name == "Lasius niger"

    parsed = parse_name("lasius", Rank.genus)
    assert parsed.errors == ['Generic epithet should be capitalized: "lasius"']

    parsed = parse_name("Lasius?", Rank.genus)
    assert parsed.errors == ['Taxon name contains unexpected characters: "Lasius?"']
    assert parsed.taxon.scientific_name == "Lasius?"


def test_syntax_errors() -> None:
    with pytest.raises(NameSyntaxError):
        parse_name("", Rank.species)
    with pytest.raises(NameSyntaxError):
        parse_name("Lasius ", Rank.genus)
