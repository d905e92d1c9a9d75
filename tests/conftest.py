"""Shared fixtures: canonical models with mixed visibility and default settings."""

import pytest

from lumen.contexts.modeling.resume_model import (
    AwardEntry,
    Basics,
    CertificateEntry,
    EducationEntry,
    ImageSettings,
    InterestEntry,
    LanguageEntry,
    Location,
    NamedSummary,
    Profile,
    ProjectEntry,
    PublicationEntry,
    ReferenceEntry,
    ResumeModel,
    SkillEntry,
    VolunteerEntry,
    WorkEntry,
)
from lumen.contexts.modeling.sub_items import PlainItem, TaggedItem
from lumen.utils.config import load_settings


@pytest.fixture
def settings(monkeypatch):
    """Built-in settings, unaffected by any LUMEN_CONFIG_PATH in the environment."""
    monkeypatch.delenv("LUMEN_CONFIG_PATH", raising=False)
    return load_settings()


@pytest.fixture
def mixed_model():
    """One or more entries in every section, some hidden, with mixed sub-item forms."""
    return ResumeModel(
        basics=Basics(
            name="Jane Q Doe",
            label="Platform Engineer",
            email="jane@example.com",
            summary="Builds reliable systems.",
            location=Location(city="Lisbon", country_code="PT"),
            profiles=[
                Profile(network="GitHub", username="janedoe", url="https://github.com/janedoe"),
                Profile(network="Mastodon", username="jane", visible=False),
            ],
        ),
        work=[
            WorkEntry(
                name="Acme",
                position="Staff Engineer",
                start_date="2021-01",
                location="Remote",
                highlights=[
                    TaggedItem("Cut deploy time in half"),
                    TaggedItem("Internal-only metric", visible=False),
                    PlainItem("Led on-call rotation"),
                ],
            ),
            WorkEntry(name="Globex", position="Engineer", visible=False),
        ],
        volunteer=[
            VolunteerEntry(
                organization="Code Club",
                position="Mentor",
                highlights=[PlainItem("Weekly sessions")],
            )
        ],
        education=[
            EducationEntry(
                institution="Tech University",
                area="Computer Science",
                study_type="BSc",
                courses=[TaggedItem("Compilers"), TaggedItem("Basket Weaving", visible=False)],
            )
        ],
        skills=[
            SkillEntry(
                name="Python",
                level="Expert",
                keywords=[PlainItem("asyncio"), TaggedItem("Twisted", visible=False)],
            ),
            SkillEntry(name="COBOL", visible=False),
        ],
        projects=[
            ProjectEntry(
                name="LUMEN",
                description="Résumé codec",
                project_type="application",
                highlights=[TaggedItem("Lossless backups")],
                keywords=[TaggedItem("json", visible=False)],
                roles=[PlainItem("Maintainer")],
                extras={"repository": "https://example.com/lumen"},
            )
        ],
        awards=[AwardEntry(title="Hackathon Winner", awarder="DevConf", visible=False)],
        certificates=[CertificateEntry(name="CKA", issuer="CNCF")],
        publications=[PublicationEntry(name="On Codecs", publisher="Blog")],
        languages=[LanguageEntry(language="English", fluency="Native")],
        interests=[
            InterestEntry(name="Climbing", keywords=[TaggedItem("bouldering", visible=False)])
        ],
        references=[ReferenceEntry(name="John Smith", reference="Great colleague", visible=False)],
        section_visibility={
            "basics": True,
            "work": True,
            "volunteer": False,
            "education": True,
            "skills": True,
            "projects": True,
            "awards": False,
            "certificates": True,
            "publications": True,
            "languages": True,
            "interests": True,
            "references": True,
        },
        meta={"theme": "elegant"},
        summaries=[
            NamedSummary(
                id="s1",
                target="Acme Corp",
                summary="Tailored for Acme.",
                created_at="2025-01-01T00:00:00.000Z",
            )
        ],
        active_summary_id="s1",
        icon=ImageSettings(data="icon.png", top=15, right=25, size=70),
    )
