"""
Canonical Résumé Model

Defines the in-memory representation used while editing. Every collection
entry carries its own visibility flag, and every sub-item (highlight, course,
keyword, role) is a PlainItem or TaggedItem from sub_items.py, so content and
visibility always travel together.

Entry classes describe their JSON shape declaratively:
- STRING_FIELDS: (attribute, JSON key) pairs, always present
- OPTIONAL_STRING_FIELDS: (attribute, JSON key) pairs, omitted when None
- SUB_ITEM_FIELDS: sub-item kinds (attribute name == JSON key)

Normalizer, encoder and decoder all walk these tables instead of naming
fields one by one.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Type

from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.defaults import SECTION_NAMES, get_default_section_visibility
from lumen.contexts.modeling.non_conforming import NonConformingData
from lumen.contexts.modeling.sub_items import SubItem

FieldTable = Tuple[Tuple[str, str], ...]


@dataclass
class ResumeEntry:
    """
    Base for every visibility-tagged collection entry.

    Attributes:
        visible: Item-level visibility (only an explicit False hides)
        extras: Input keys outside the known shape, carried through untouched
    """

    visible: bool = True
    extras: Dict[str, Any] = field(default_factory=dict)

    STRING_FIELDS: ClassVar[FieldTable] = ()
    OPTIONAL_STRING_FIELDS: ClassVar[FieldTable] = ()
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def known_keys(cls) -> set:
        """JSON keys this entry type understands (everything else is an extra)."""
        keys = {key for _, key in cls.STRING_FIELDS + cls.OPTIONAL_STRING_FIELDS}
        keys.update(cls.SUB_ITEM_FIELDS)
        keys.add("visible")
        return keys

    @classmethod
    def build(
        cls,
        strings: Dict[str, Optional[str]],
        sub_item_lists: Dict[str, List[SubItem]] = None,
        visible: bool = True,
        extras: Dict[str, Any] = None,
    ) -> "ResumeEntry":
        """
        Construct an entry from JSON-keyed values.

        Args:
            strings: JSON key -> string (None allowed for optional fields)
            sub_item_lists: Sub-item kind -> list of sub-items
            visible: Item-level visibility
            extras: Unknown keys to carry along (a "visible" key is dropped)
        """
        kwargs: Dict[str, Any] = {}
        for attribute, key in cls.STRING_FIELDS:
            kwargs[attribute] = strings.get(key) or ""
        for attribute, key in cls.OPTIONAL_STRING_FIELDS:
            kwargs[attribute] = strings.get(key)
        for kind in cls.SUB_ITEM_FIELDS:
            kwargs[kind] = list((sub_item_lists or {}).get(kind, []))

        extras = {k: v for k, v in (extras or {}).items() if k != "visible"}
        return cls(visible=visible is not False, extras=extras, **kwargs)

    def string_values(self) -> Dict[str, str]:
        """JSON key -> string value; optional fields left out when None."""
        values = {key: getattr(self, attribute) for attribute, key in self.STRING_FIELDS}
        for attribute, key in self.OPTIONAL_STRING_FIELDS:
            value = getattr(self, attribute)
            if value is not None:
                values[key] = value
        return values

    def sub_item_lists(self) -> Dict[str, List[SubItem]]:
        """Sub-item kind -> the entry's sub-items, in order."""
        return {kind: getattr(self, kind) for kind in self.SUB_ITEM_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        """Editor JSON form: content, sub-items in their own form, and visibility."""
        data = copy.deepcopy(self.extras)
        data.update(self.string_values())
        for kind, items in self.sub_item_lists().items():
            data[kind] = [sub_items.to_raw(item, kind) for item in items]
        data["visible"] = self.visible
        return data


@dataclass
class Profile(ResumeEntry):
    network: str = ""
    username: str = ""
    url: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("network", "network"),
        ("username", "username"),
        ("url", "url"),
    )


@dataclass
class WorkEntry(ResumeEntry):
    name: str = ""
    position: str = ""
    url: str = ""
    start_date: str = ""
    end_date: str = ""
    summary: str = ""
    location: Optional[str] = None
    description: Optional[str] = None
    highlights: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("name", "name"),
        ("position", "position"),
        ("url", "url"),
        ("start_date", "startDate"),
        ("end_date", "endDate"),
        ("summary", "summary"),
    )
    OPTIONAL_STRING_FIELDS: ClassVar[FieldTable] = (
        ("location", "location"),
        ("description", "description"),
    )
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("highlights",)


@dataclass
class VolunteerEntry(ResumeEntry):
    organization: str = ""
    position: str = ""
    url: str = ""
    start_date: str = ""
    end_date: str = ""
    summary: str = ""
    highlights: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("organization", "organization"),
        ("position", "position"),
        ("url", "url"),
        ("start_date", "startDate"),
        ("end_date", "endDate"),
        ("summary", "summary"),
    )
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("highlights",)


@dataclass
class EducationEntry(ResumeEntry):
    institution: str = ""
    url: str = ""
    area: str = ""
    study_type: str = ""
    start_date: str = ""
    end_date: str = ""
    score: str = ""
    courses: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("institution", "institution"),
        ("url", "url"),
        ("area", "area"),
        ("study_type", "studyType"),
        ("start_date", "startDate"),
        ("end_date", "endDate"),
        ("score", "score"),
    )
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("courses",)


@dataclass
class SkillEntry(ResumeEntry):
    name: str = ""
    level: str = ""
    keywords: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (("name", "name"), ("level", "level"))
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("keywords",)


@dataclass
class ProjectEntry(ResumeEntry):
    name: str = ""
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    url: str = ""
    entity: str = ""
    project_type: str = ""
    highlights: List[SubItem] = field(default_factory=list)
    keywords: List[SubItem] = field(default_factory=list)
    roles: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("name", "name"),
        ("description", "description"),
        ("start_date", "startDate"),
        ("end_date", "endDate"),
        ("url", "url"),
        ("entity", "entity"),
        ("project_type", "type"),
    )
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("highlights", "keywords", "roles")


@dataclass
class AwardEntry(ResumeEntry):
    title: str = ""
    date: str = ""
    awarder: str = ""
    summary: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("title", "title"),
        ("date", "date"),
        ("awarder", "awarder"),
        ("summary", "summary"),
    )


@dataclass
class CertificateEntry(ResumeEntry):
    name: str = ""
    date: str = ""
    issuer: str = ""
    url: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("name", "name"),
        ("date", "date"),
        ("issuer", "issuer"),
        ("url", "url"),
    )


@dataclass
class PublicationEntry(ResumeEntry):
    name: str = ""
    publisher: str = ""
    release_date: str = ""
    url: str = ""
    summary: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("name", "name"),
        ("publisher", "publisher"),
        ("release_date", "releaseDate"),
        ("url", "url"),
        ("summary", "summary"),
    )


@dataclass
class LanguageEntry(ResumeEntry):
    language: str = ""
    fluency: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (("language", "language"), ("fluency", "fluency"))


@dataclass
class InterestEntry(ResumeEntry):
    name: str = ""
    keywords: List[SubItem] = field(default_factory=list)

    STRING_FIELDS: ClassVar[FieldTable] = (("name", "name"),)
    SUB_ITEM_FIELDS: ClassVar[Tuple[str, ...]] = ("keywords",)


@dataclass
class ReferenceEntry(ResumeEntry):
    name: str = ""
    reference: str = ""

    STRING_FIELDS: ClassVar[FieldTable] = (("name", "name"), ("reference", "reference"))


# Section name -> entry type, in JSON Resume order
SECTION_ENTRY_TYPES: Dict[str, Type[ResumeEntry]] = {
    "work": WorkEntry,
    "volunteer": VolunteerEntry,
    "education": EducationEntry,
    "skills": SkillEntry,
    "projects": ProjectEntry,
    "awards": AwardEntry,
    "certificates": CertificateEntry,
    "publications": PublicationEntry,
    "languages": LanguageEntry,
    "interests": InterestEntry,
    "references": ReferenceEntry,
}


@dataclass
class Location:
    address: str = ""
    postal_code: str = ""
    city: str = ""
    country_code: str = ""
    region: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("address", "address"),
        ("postal_code", "postalCode"),
        ("city", "city"),
        ("country_code", "countryCode"),
        ("region", "region"),
    )

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extras)
        data.update({key: getattr(self, attribute) for attribute, key in self.STRING_FIELDS})
        return data


@dataclass
class Basics:
    name: str = ""
    label: str = ""
    image: str = ""
    email: str = ""
    phone: str = ""
    url: str = ""
    summary: str = ""
    location: Location = field(default_factory=Location)
    profiles: List[Profile] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    STRING_FIELDS: ClassVar[FieldTable] = (
        ("name", "name"),
        ("label", "label"),
        ("image", "image"),
        ("email", "email"),
        ("phone", "phone"),
        ("url", "url"),
        ("summary", "summary"),
    )

    @classmethod
    def known_keys(cls) -> set:
        return {key for _, key in cls.STRING_FIELDS} | {"location", "profiles"}

    def string_values(self) -> Dict[str, str]:
        return {key: getattr(self, attribute) for attribute, key in self.STRING_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extras)
        data.update(self.string_values())
        data["location"] = self.location.to_dict()
        data["profiles"] = [profile.to_dict() for profile in self.profiles]
        return data


@dataclass
class ImageSettings:
    """Placement of the icon or photo: image data plus offsets from the top-right corner."""

    data: str = ""
    top: float = 20
    right: float = 20
    size: float = 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "position": {"top": self.top, "right": self.right},
            "size": self.size,
        }


@dataclass
class NamedSummary:
    """A summary written for one target role or company."""

    id: str
    target: str = ""
    summary: str = ""
    created_at: str = ""
    last_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "target": self.target,
            "summary": self.summary,
            "createdAt": self.created_at,
        }
        if self.last_used is not None:
            data["lastUsed"] = self.last_used
        return data


@dataclass
class ResumeModel:
    """
    Fully-normalized résumé, the system of record during an editing session.

    Every list section is present (possibly empty) and section_visibility has
    an entry for every known section. Top-level keys outside the known shape
    are kept in extras. Replace the whole model after a decode or
    normalize instead of patching one in place.
    """

    basics: Basics = field(default_factory=Basics)
    work: List[WorkEntry] = field(default_factory=list)
    volunteer: List[VolunteerEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: List[SkillEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    awards: List[AwardEntry] = field(default_factory=list)
    certificates: List[CertificateEntry] = field(default_factory=list)
    publications: List[PublicationEntry] = field(default_factory=list)
    languages: List[LanguageEntry] = field(default_factory=list)
    interests: List[InterestEntry] = field(default_factory=list)
    references: List[ReferenceEntry] = field(default_factory=list)
    section_visibility: Dict[str, bool] = field(default_factory=get_default_section_visibility)
    non_conforming: Optional[NonConformingData] = None
    meta: Optional[Dict[str, Any]] = None
    summaries: List[NamedSummary] = field(default_factory=list)
    active_summary_id: Optional[str] = None
    icon: Optional[ImageSettings] = None
    photo: Optional[ImageSettings] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def entries(self, section: str) -> List[ResumeEntry]:
        """Entries of a list section, or basics.profiles for "profiles"."""
        if section == "profiles":
            return self.basics.profiles
        if section not in SECTION_ENTRY_TYPES:
            raise KeyError(f"Unknown section: {section}")
        return getattr(self, section)

    def iter_sections(self) -> Iterator[Tuple[str, List[ResumeEntry]]]:
        """(section name, entries) for every list section, in JSON Resume order."""
        for section in SECTION_NAMES:
            yield section, getattr(self, section)

    def copy(self) -> "ResumeModel":
        """Independent deep copy."""
        return copy.deepcopy(self)

    def with_tagged_sub_items(self) -> "ResumeModel":
        """
        Copy with every sub-item in TaggedItem form.

        Visibility-neutral: two models that differ only in sub-item form compare
        equal after this.
        """
        model = self.copy()
        for _, entries in model.iter_sections():
            for entry in entries:
                for kind, items in entry.sub_item_lists().items():
                    setattr(entry, kind, [sub_items.to_tagged(item) for item in items])
        return model

    def to_dict(self) -> Dict[str, Any]:
        """
        Editor JSON form, suitable for local storage and for normalize().

        Keeps visibility inline (the canonical representation), unlike the
        clean payload produced by the encoder.
        """
        data: Dict[str, Any] = copy.deepcopy(self.extras)
        data["basics"] = self.basics.to_dict()
        for section, entries in self.iter_sections():
            data[section] = [entry.to_dict() for entry in entries]
        data["sectionVisibility"] = dict(self.section_visibility)

        if self.non_conforming is not None:
            data["nonConformingData"] = self.non_conforming.to_dict()
        if self.meta is not None:
            data["meta"] = copy.deepcopy(self.meta)
        if self.summaries:
            data["summaries"] = [summary.to_dict() for summary in self.summaries]
        if self.active_summary_id is not None:
            data["activeSummaryId"] = self.active_summary_id
        if self.icon is not None:
            data["icon"] = self.icon.to_dict()
        if self.photo is not None:
            data["photo"] = self.photo.to_dict()
        return data

