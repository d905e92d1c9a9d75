"""Unit tests for the LinkedIn data export importer."""

import io
import zipfile

import pytest

from lumen.contexts.interchange.linkedin import (
    column_key,
    convert_date,
    estimate_skill_level,
    import_linkedin_export,
    read_rows,
)

PROFILE_CSV = (
    "First Name,Last Name,Headline,Summary,Geo Location,Email Address\n"
    'Jane,Doe,Platform Engineer,"Builds things, reliably.",Lisbon,jane@example.com\n'
)
POSITIONS_CSV = (
    "Company Name,Title,Description,Location,Started On,Finished On\n"
    'Acme,Staff Engineer,"Led the ""platform"" team",Remote,Jan 2021,\n'
    "Globex,Engineer,,,Mar 2018,Dec 2020\n"
)


def _archive(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.mark.unit
class TestCsv:
    """Header mapping and CSV reading."""

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("First Name", "firstName"),
            ("first name", "firstName"),
            (" Started On ", "startDate"),
            ("URL", "url"),
            ("Connected On", "connectedOn"),
            ("License Number", "licenseNumber"),
            ("???", ""),
        ],
    )
    def test_column_key(self, header, expected):
        """Known headers map to fixed keys, others become camelCase."""
        assert column_key(header) == expected

    def test_quoted_commas_and_escaped_quotes(self):
        """Quoted fields keep their commas and doubled quotes."""
        rows = read_rows(POSITIONS_CSV)
        assert rows[0]["description"] == 'Led the "platform" team'
        assert read_rows(PROFILE_CSV)[0]["summary"] == "Builds things, reliably."

    def test_short_and_blank_rows(self):
        """Missing trailing values read as "" and blank lines are skipped."""
        rows = read_rows("Name,Proficiency\nEnglish\n\n , \nPortuguese,Native\n")
        assert rows == [
            {"name": "English", "proficiency": ""},
            {"name": "Portuguese", "proficiency": "Native"},
        ]

    def test_empty_file(self):
        """No header, no rows."""
        assert read_rows("") == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("Jan 2020", "2020-01-01"),
        ("2019", "2019-01-01"),
        ("Mar 5, 2021", "2021-03-05"),
        ("2022-07-14", "2022-07-14"),
        ("", ""),
        ("Present", ""),
    ],
)
def test_convert_date(value, expected):
    """LinkedIn date text becomes an ISO date, or "" when unreadable."""
    assert convert_date(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "count, expected",
    [
        ("55", "Expert"),
        (20, "Advanced"),
        ("5", "Intermediate"),
        ("", "Beginner"),
        (None, "Beginner"),
    ],
)
def test_estimate_skill_level(count, expected):
    """Endorsement thresholds are 5, 20 and 50."""
    assert estimate_skill_level(count) == expected


@pytest.mark.unit
class TestImport:
    """Whole archives."""

    def test_profile_and_positions(self):
        """Profile fills basics; positions become work entries."""
        result = import_linkedin_export(
            _archive({"Profile.csv": PROFILE_CSV, "Positions.csv": POSITIONS_CSV})
        )

        assert result.has_errors is False
        assert result.processed_files == ["Profile.csv", "Positions.csv"]
        basics = result.model.basics
        assert (basics.name, basics.label, basics.email) == (
            "Jane Doe",
            "Platform Engineer",
            "jane@example.com",
        )
        assert basics.location.city == "Lisbon"

        acme, globex = result.model.work
        assert (acme.name, acme.position, acme.location) == ("Acme", "Staff Engineer", "Remote")
        assert (acme.start_date, acme.end_date) == ("2021-01-01", "")
        assert (globex.start_date, globex.end_date) == ("2018-03-01", "2020-12-01")
        assert globex.location is None
        assert all(entry.visible for entry in result.model.work)
        assert result.model.non_conforming is None

    def test_other_sections(self):
        """Education, skills, languages and certifications are mapped."""
        files = {
            "Education.csv": (
                "School Name,Start Date,End Date,Notes,Degree Name,Activities\n"
                "Tech University,2010,2014,,BSc,\n"
            ),
            "Skills.csv": "Name,Endorsement Count\nPython,60\n,3\nGo,2\n",
            "Languages.csv": "Name,Proficiency\nEnglish,\nPortuguese,Native or bilingual\n",
            "Certifications.csv": (
                "Name,Url,Authority,Started On,Finished On,License Number\n"
                "CKA,https://cncf.io,CNCF,Jun 2022,,123\n"
            ),
        }
        model = import_linkedin_export(_archive(files)).model

        assert model.education[0].institution == "Tech University"
        assert model.education[0].study_type == "BSc"
        assert model.education[0].start_date == "2010-01-01"
        assert [(s.name, s.level) for s in model.skills] == [
            ("Python", "Expert"),
            ("Go", "Beginner"),
        ]
        assert [(lang.language, lang.fluency) for lang in model.languages] == [
            ("English", "Native speaker"),
            ("Portuguese", "Native or bilingual"),
        ]
        certificate = model.certificates[0]
        assert (certificate.name, certificate.issuer, certificate.date) == (
            "CKA",
            "CNCF",
            "2022-06-01",
        )

    def test_file_names_are_matched_case_insensitively(self):
        """Archives may nest files in a folder and vary the case."""
        result = import_linkedin_export(
            _archive({"Basic_LinkedInDataExport/PROFILE.CSV": PROFILE_CSV})
        )
        assert result.processed_files == ["Basic_LinkedInDataExport/PROFILE.CSV"]
        assert result.model.basics.name == "Jane Doe"

    def test_accepts_a_path(self, tmp_path):
        """The archive can be read from disk."""
        path = tmp_path / "export.zip"
        path.write_bytes(_archive({"Profile.csv": PROFILE_CSV}))
        assert import_linkedin_export(path).model.basics.name == "Jane Doe"


@pytest.mark.unit
class TestImportErrors:
    """Archives that can't be imported still return a usable model."""

    def test_not_a_zip(self):
        """Bytes that aren't an archive are reported."""
        result = import_linkedin_export(b"not a zip")
        assert result.has_errors is True
        assert result.errors == ["Failed to extract ZIP file"]
        assert result.model.work == []

    def test_not_a_linkedin_export(self):
        """Archives without any LinkedIn file are rejected."""
        result = import_linkedin_export(_archive({"notes.txt": "hello"}))
        assert result.errors == ["ZIP file does not appear to contain LinkedIn export data"]
        assert result.processed_files == []

    def test_only_unmapped_files(self):
        """Connections alone marks the export but yields nothing."""
        result = import_linkedin_export(_archive({"Connections.csv": "First Name\nJohn\n"}))
        assert result.errors == ["No recognizable LinkedIn data files found in ZIP"]
        assert result.has_errors is True

    def test_unreadable_file_is_skipped(self):
        """A file that isn't UTF-8 is reported; the rest is imported."""
        result = import_linkedin_export(
            _archive({"Profile.csv": b"\xff\xfe\x00broken", "Positions.csv": POSITIONS_CSV})
        )
        assert result.processed_files == ["Positions.csv"]
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Error processing Profile.csv:")
        assert len(result.model.work) == 2
