"""Unit tests for HR Open (LER-RS) mapping."""

import pytest

from lumen.contexts.interchange.hr_open import (
    HR_OPEN_TYPE,
    convert_hr_open,
    from_model,
    is_hr_open,
    to_json_resume,
)
from lumen.contexts.modeling.sub_items import PlainItem


@pytest.fixture
def hr_open_document():
    return {
        "type": HR_OPEN_TYPE,
        "person": {
            "name": {"given": "Jane", "family": "Doe"},
            "communication": {"email": "jane@example.com"},
            "location": {"address": {"city": "Lisbon", "country": "PT"}},
        },
        "communication": {"phone": "+351 000", "email": "other@example.com"},
        "narratives": [{"type": "summary", "content": "Builds reliable systems."}],
        "employmentHistories": [
            {
                "organization": {"name": "Acme", "location": "Remote"},
                "position": {
                    "title": "Engineer",
                    "startDate": "2021-01",
                    "highlights": ["Shipped v2"],
                },
            },
            "not an object",
        ],
        "educationAndLearnings": [
            {
                "institution": {"name": "Tech University"},
                "program": {"name": "CS", "type": "BSc"},
                "dates": {"start": "2010", "end": "2014"},
            }
        ],
        "skills": [{"name": "Python", "proficiencyLevel": "Expert", "keywords": ["asyncio"]}],
        "certifications": [{"name": "CKA", "issuingAuthority": "CNCF"}],
    }


@pytest.mark.unit
class TestDetection:
    """is_hr_open()."""

    def test_person_name_marks_hr_open(self, hr_open_document):
        """A person with a name is enough."""
        assert is_hr_open(hr_open_document) is True

    @pytest.mark.parametrize(
        "candidate", [{"basics": {}}, {"person": {}}, {"person": "Jane"}, [], None]
    )
    def test_other_shapes(self, candidate):
        """JSON Resume and junk are not HR Open."""
        assert is_hr_open(candidate) is False


@pytest.mark.unit
class TestImport:
    """HR Open to canonical model."""

    def test_basics(self, hr_open_document):
        """Name, contact and location come from person first."""
        model = convert_hr_open(hr_open_document)
        assert model.basics.name == "Jane Doe"
        assert model.basics.email == "jane@example.com"
        assert model.basics.phone == "+351 000"
        assert model.basics.summary == "Builds reliable systems."
        assert model.basics.location.city == "Lisbon"
        assert model.basics.location.country_code == "PT"

    def test_formatted_name_wins(self, hr_open_document):
        """person.name.formatted is used as-is when present."""
        hr_open_document["person"]["name"]["formatted"] = "Dr. Jane Doe"
        assert to_json_resume(hr_open_document)["basics"]["name"] == "Dr. Jane Doe"

    def test_sections(self, hr_open_document):
        """Mapped sections are populated and visible; others are empty."""
        model = convert_hr_open(hr_open_document)

        assert [w.name for w in model.work] == ["Acme"]
        assert model.work[0].position == "Engineer"
        assert model.work[0].location == "Remote"
        assert model.work[0].highlights == [PlainItem("Shipped v2")]
        assert model.education[0].study_type == "BSc"
        assert model.education[0].end_date == "2014"
        assert model.skills[0].level == "Expert"
        assert model.certificates[0].issuer == "CNCF"
        assert all(entry.visible for _, entries in model.iter_sections() for entry in entries)
        assert model.volunteer == []
        assert model.non_conforming is None


@pytest.mark.unit
class TestExport:
    """Canonical model to HR Open."""

    def test_visible_content_only(self, mixed_model):
        """Hidden entries and sub-items are left out."""
        document = from_model(mixed_model)

        histories = document["employmentHistories"]
        assert [h["organization"]["name"] for h in histories] == ["Acme"]
        assert histories[0]["position"]["highlights"] == [
            "Cut deploy time in half",
            "Led on-call rotation",
        ]
        assert [s["name"] for s in document["skills"]] == ["Python"]
        assert document["skills"][0]["keywords"] == ["asyncio"]
        assert document["educationAndLearnings"][0]["courses"] == ["Compilers"]

    def test_person(self, mixed_model):
        """The first word is the given name; the rest is the family name."""
        person = from_model(mixed_model)["person"]
        assert person["name"] == {"formatted": "Jane Q Doe", "given": "Jane", "family": "Q Doe"}
        assert person["location"]["address"]["country"] == "PT"

    def test_export_is_importable(self, mixed_model):
        """An exported document is recognized and converts back."""
        document = from_model(mixed_model)
        assert document["type"] == HR_OPEN_TYPE
        assert is_hr_open(document)
        assert convert_hr_open(document).basics.name == "Jane Q Doe"
