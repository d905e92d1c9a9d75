"""
HR Open (LER-RS) import and export mapping.

Maps the subset of an HR Open résumé document that has a JSON Resume
counterpart onto the canonical model:

    person.name.formatted | given + family  -> basics.name
    person.communication / communication    -> basics.email, phone, url
    person.location.address                 -> basics.location
    narratives[type == "summary"].content   -> basics.summary
    employmentHistories                     -> work
    educationAndLearnings                   -> education
    skills                                  -> skills
    certifications                          -> certificates

Everything else in the document is ignored. The mapped object goes through
normalize(), so badly-typed values are coerced and recorded as usual.

from_model() maps the other way for export, keeping visible content only.
"""

from typing import Any, Dict, List

from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.normalizer import normalize
from lumen.contexts.modeling.resume_model import ResumeModel

HR_OPEN_TYPE = "http://schema.hropenstandards.org/4.4/recruiting/json/ler-rs/LER-RSType.json"


def is_hr_open(candidate: Any) -> bool:
    """HR Open documents are recognized by a person.name entry."""
    if not isinstance(candidate, dict):
        return False
    person = candidate.get("person")
    return isinstance(person, dict) and bool(person.get("name"))


def _obj(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _objects(value: Any) -> List[Dict[str, Any]]:
    return [item for item in value if isinstance(item, dict)] if isinstance(value, list) else []


def _first(*values: Any) -> Any:
    """First truthy value, or "" when there is none."""
    for value in values:
        if value:
            return value
    return ""


def _full_name(person: Dict[str, Any]) -> str:
    name = _obj(person.get("name"))
    if name.get("formatted"):
        return name["formatted"]
    parts = [name.get("given") or "", name.get("family") or ""]
    return " ".join(str(part) for part in parts).strip()


def _summary(document: Dict[str, Any]) -> Any:
    for narrative in _objects(document.get("narratives")):
        if narrative.get("type") == "summary":
            return narrative.get("content") or ""
    return ""


def to_json_resume(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map an HR Open document onto a JSON Resume shaped dict.

    Args:
        document: Parsed HR Open document

    Returns:
        Dict in the shape normalize() expects
    """
    person = _obj(document.get("person"))
    person_comm = _obj(person.get("communication"))
    comm = _obj(document.get("communication"))
    address = _obj(_obj(person.get("location")).get("address"))

    basics = {
        "name": _full_name(person),
        "label": "",
        "image": "",
        "email": _first(person_comm.get("email"), comm.get("email")),
        "phone": _first(person_comm.get("phone"), comm.get("phone")),
        "url": _first(person_comm.get("web"), comm.get("web")),
        "summary": _summary(document),
        "location": {
            "address": _first(address.get("line")),
            "city": _first(address.get("city")),
            "postalCode": _first(address.get("postalCode")),
            "region": _first(address.get("countrySubDivisions")),
            "countryCode": _first(address.get("country")),
        },
        "profiles": [],
    }

    work = []
    for history in _objects(document.get("employmentHistories")):
        organization = _obj(history.get("organization"))
        position = _obj(history.get("position"))
        work.append(
            {
                "name": _first(organization.get("name")),
                "location": _first(organization.get("location")),
                "description": _first(organization.get("description")),
                "position": _first(position.get("title")),
                "url": _first(organization.get("website")),
                "startDate": _first(position.get("startDate")),
                "endDate": _first(position.get("endDate")),
                "summary": _first(position.get("description")),
                "highlights": position.get("highlights") or [],
            }
        )

    education = []
    for learning in _objects(document.get("educationAndLearnings")):
        institution = _obj(learning.get("institution"))
        program = _obj(learning.get("program"))
        dates = _obj(learning.get("dates"))
        education.append(
            {
                "institution": _first(institution.get("name")),
                "url": _first(institution.get("url")),
                "area": _first(program.get("name")),
                "studyType": _first(program.get("type")),
                "startDate": _first(dates.get("start")),
                "endDate": _first(dates.get("end")),
                "score": _first(learning.get("score")),
                "courses": learning.get("courses") or [],
            }
        )

    skills = [
        {
            "name": _first(skill.get("name")),
            "level": _first(skill.get("proficiencyLevel")),
            "keywords": skill.get("keywords") or [],
        }
        for skill in _objects(document.get("skills"))
    ]

    certificates = [
        {
            "name": _first(certification.get("name")),
            "date": _first(certification.get("date")),
            "issuer": _first(certification.get("issuingAuthority")),
            "url": _first(certification.get("url")),
        }
        for certification in _objects(document.get("certifications"))
    ]

    return {
        "basics": basics,
        "work": work,
        "education": education,
        "skills": skills,
        "certificates": certificates,
    }


def convert_hr_open(document: Dict[str, Any]) -> ResumeModel:
    """
    Convert an HR Open document into a canonical model.

    Every mapped entry is visible; sections with no HR Open counterpart are empty.
    """
    return normalize(to_json_resume(document))


def _visible_texts(items) -> List[str]:
    return [sub_items.text(item) for item in items if sub_items.is_visible(item)]


def from_model(model: ResumeModel) -> Dict[str, Any]:
    """
    Map a canonical model onto an HR Open document.

    Only visible entries and visible sub-items are exported; sub-items become
    plain strings.
    """
    basics = model.basics
    location = basics.location
    name_parts = basics.name.split(" ")

    return {
        "type": HR_OPEN_TYPE,
        "person": {
            "name": {
                "formatted": basics.name,
                "given": name_parts[0],
                "family": " ".join(name_parts[1:]),
            },
            "communication": {"email": basics.email, "phone": basics.phone, "web": basics.url},
            "location": {
                "address": {
                    "line": location.address,
                    "city": location.city,
                    "postalCode": location.postal_code,
                    "countrySubDivisions": location.region,
                    "country": location.country_code,
                }
            },
        },
        "narratives": (
            [{"type": "summary", "content": basics.summary}] if basics.summary else []
        ),
        "employmentHistories": [
            {
                "organization": {
                    "name": work.name,
                    "website": work.url,
                    "location": work.location or "",
                    "description": work.description or "",
                },
                "position": {
                    "title": work.position,
                    "startDate": work.start_date,
                    "endDate": work.end_date,
                    "description": work.summary,
                    "highlights": _visible_texts(work.highlights),
                },
            }
            for work in model.work
            if work.visible
        ],
        "educationAndLearnings": [
            {
                "institution": {"name": education.institution, "url": education.url},
                "program": {"name": education.area, "type": education.study_type},
                "dates": {"start": education.start_date, "end": education.end_date},
                "score": education.score,
                "courses": _visible_texts(education.courses),
            }
            for education in model.education
            if education.visible
        ],
        "skills": [
            {
                "name": skill.name,
                "proficiencyLevel": skill.level,
                "keywords": _visible_texts(skill.keywords),
            }
            for skill in model.skills
            if skill.visible
        ],
        "certifications": [
            {
                "name": certificate.name,
                "issuingAuthority": certificate.issuer,
                "date": certificate.date,
                "url": certificate.url,
            }
            for certificate in model.certificates
            if certificate.visible
        ],
    }
