"""
LinkedIn data export import.

A LinkedIn "Get a copy of your data" archive is a ZIP of CSV files. The files
with a JSON Resume counterpart are mapped like this:

    Profile.csv         -> basics (name, label, summary, email, location.city)
    Positions.csv       -> work
    Education.csv       -> education
    Skills.csv          -> skills (level estimated from endorsement count)
    Languages.csv       -> languages
    Certifications.csv  -> certificates

Other files in the archive are ignored. Column headers are matched by name,
case-insensitively; unknown columns are kept under a camelCase key but not
mapped. The mapped object goes through normalize().
"""

import csv
import io
import re
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Union

from lumen.contexts.interchange.logger import _log_debug, _log_info, _log_warning
from lumen.contexts.modeling.normalizer import normalize
from lumen.contexts.modeling.resume_model import ResumeModel

# Any of these inside the archive marks it as a LinkedIn export
LINKEDIN_MARKER_FILES = (
    "profile.csv",
    "positions.csv",
    "education.csv",
    "skills.csv",
    "connections.csv",
)

# Header (lowercased) -> row key
COLUMN_NAMES = {
    "first name": "firstName",
    "firstname": "firstName",
    "last name": "lastName",
    "lastname": "lastName",
    "headline": "headline",
    "summary": "summary",
    "email address": "emailAddress",
    "email": "emailAddress",
    "geo location": "geoLocation",
    "industry": "industry",
    "company name": "companyName",
    "company": "companyName",
    "title": "title",
    "description": "description",
    "location": "location",
    "started on": "startDate",
    "start date": "startDate",
    "startdate": "startDate",
    "finished on": "endDate",
    "end date": "endDate",
    "enddate": "endDate",
    "school name": "schoolName",
    "school": "schoolName",
    "degree name": "degreeName",
    "degree": "degreeName",
    "field of study": "fieldOfStudy",
    "field": "fieldOfStudy",
    "name": "name",
    "endorsement count": "endorsementCount",
    "endorsements": "endorsementCount",
    "proficiency": "proficiency",
    "authority": "authority",
    "url": "url",
}

DATE_FORMATS = (
    "%b %Y",
    "%B %Y",
    "%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d %b %Y",
)

DEFAULT_FLUENCY = "Native speaker"

ArchiveSource = Union[str, Path, bytes, BinaryIO]


@dataclass
class LinkedInImportResult:
    """Result from import_linkedin_export(). model is always usable."""

    model: ResumeModel
    has_errors: bool = False
    errors: List[str] = field(default_factory=list)
    processed_files: List[str] = field(default_factory=list)


def column_key(header: str) -> str:
    """
    Row key for a CSV header.

    Known LinkedIn headers map to fixed keys; anything else becomes camelCase.

    Examples:
        >>> column_key("Started On")
        'startDate'
        >>> column_key("Connected On")
        'connectedOn'
    """
    header = header.strip()
    if header.lower() in COLUMN_NAMES:
        return COLUMN_NAMES[header.lower()]
    words = re.sub(r"[^\w\s]", "", header).split()
    if not words:
        return ""
    first, rest = words[0], words[1:]
    return first[:1].lower() + first[1:] + "".join(word[:1].upper() + word[1:] for word in rest)


def read_rows(text: str) -> List[Dict[str, str]]:
    """Parse CSV text into rows keyed by column_key(); blank rows are skipped."""
    reader = csv.reader(io.StringIO(text))
    try:
        headers = [column_key(header) for header in next(reader)]
    except StopIteration:
        return []

    rows = []
    for values in reader:
        if not any(value.strip() for value in values):
            continue
        rows.append(
            {
                key: (values[index].strip() if index < len(values) else "")
                for index, key in enumerate(headers)
                if key
            }
        )
    return rows


def convert_date(value: str) -> str:
    """
    LinkedIn date text as an ISO date, or "" when it can't be read.

    Examples:
        >>> convert_date("Jan 2020")
        '2020-01-01'
        >>> convert_date("2019")
        '2019-01-01'
    """
    value = value.strip()
    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format).strftime("%Y-%m-%d")
        except ValueError:
            continue
    return ""


def estimate_skill_level(endorsements: Any) -> str:
    """Skill level from an endorsement count (non-numeric counts as 0)."""
    try:
        count = int(endorsements)
    except (TypeError, ValueError):
        count = 0
    if count >= 50:
        return "Expert"
    if count >= 20:
        return "Advanced"
    if count >= 5:
        return "Intermediate"
    return "Beginner"


def _apply_profile(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    if not rows:
        return
    profile = rows[0]
    basics = resume["basics"]

    name = f"{profile.get('firstName', '')} {profile.get('lastName', '')}".strip()
    if name:
        basics["name"] = name
    for source, target in (
        ("headline", "label"),
        ("summary", "summary"),
        ("emailAddress", "email"),
    ):
        if profile.get(source):
            basics[target] = profile[source]
    if profile.get("geoLocation"):
        basics["location"] = {"city": profile["geoLocation"]}


def _apply_positions(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    work = []
    for row in rows:
        entry = {
            "name": row.get("companyName", ""),
            "position": row.get("title", ""),
            "startDate": convert_date(row.get("startDate", "")),
            "endDate": convert_date(row.get("endDate", "")),
            "summary": row.get("description", ""),
        }
        if row.get("location"):
            entry["location"] = row["location"]
        work.append(entry)
    resume["work"] = work


def _apply_education(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    resume["education"] = [
        {
            "institution": row.get("schoolName", ""),
            "area": row.get("fieldOfStudy", ""),
            "studyType": row.get("degreeName", ""),
            "startDate": convert_date(row.get("startDate", "")),
            "endDate": convert_date(row.get("endDate", "")),
        }
        for row in rows
    ]


def _apply_skills(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    resume["skills"] = [
        {"name": row["name"], "level": estimate_skill_level(row.get("endorsementCount"))}
        for row in rows
        if row.get("name")
    ]


def _apply_languages(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    resume["languages"] = [
        {"language": row["name"], "fluency": row.get("proficiency") or DEFAULT_FLUENCY}
        for row in rows
        if row.get("name")
    ]


def _apply_certifications(rows: List[Dict[str, str]], resume: Dict[str, Any]) -> None:
    resume["certificates"] = [
        {
            "name": row["name"],
            "date": convert_date(row.get("startDate", "")),
            "issuer": row.get("authority", ""),
            "url": row.get("url", ""),
        }
        for row in rows
        if row.get("name")
    ]


# File name suffix -> mapper, checked in this order
FILE_HANDLERS: Dict[str, Callable[[List[Dict[str, str]], Dict[str, Any]], None]] = {
    "profile.csv": _apply_profile,
    "positions.csv": _apply_positions,
    "education.csv": _apply_education,
    "skills.csv": _apply_skills,
    "languages.csv": _apply_languages,
    "certifications.csv": _apply_certifications,
}


def is_linkedin_export(names: List[str]) -> bool:
    """True when any archive member looks like a LinkedIn export file."""
    lowered = [name.lower() for name in names]
    return any(marker in name for marker in LINKEDIN_MARKER_FILES for name in lowered)


def _handler_for(name: str):
    lowered = name.lower()
    for suffix, handler in FILE_HANDLERS.items():
        if suffix in lowered:
            return handler
    return None


def _failed(message: str) -> LinkedInImportResult:
    _log_warning(f"LinkedIn import failed: {message}")
    return LinkedInImportResult(model=normalize({}), has_errors=True, errors=[message])


def import_linkedin_export(source: ArchiveSource) -> LinkedInImportResult:
    """
    Import a LinkedIn data export archive.

    Args:
        source: Path to the ZIP file, its bytes, or a binary file object

    Returns:
        LinkedInImportResult. A file that can't be read is reported in errors
        and skipped; the rest of the archive is still imported.

    Example:
        >>> result = import_linkedin_export(Path("Basic_LinkedInDataExport.zip"))
        >>> result.processed_files
        ['Profile.csv', 'Positions.csv']
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        archive = zipfile.ZipFile(source)
    except (zipfile.BadZipFile, OSError) as exc:
        _log_debug(f"Could not open archive: {exc}")
        return _failed("Failed to extract ZIP file")

    errors: List[str] = []
    processed: List[str] = []
    resume: Dict[str, Any] = {"basics": {}}

    with archive:
        names = [info.filename for info in archive.infolist() if not info.is_dir()]
        if not is_linkedin_export(names):
            return _failed("ZIP file does not appear to contain LinkedIn export data")

        for name in names:
            handler = _handler_for(name)
            if handler is None:
                continue
            try:
                rows = read_rows(archive.read(name).decode("utf-8-sig"))
            except (UnicodeDecodeError, csv.Error, zipfile.BadZipFile, RuntimeError) as exc:
                errors.append(f"Error processing {name}: {exc}")
                continue
            handler(rows, resume)
            processed.append(name)
            _log_debug(f"Read {len(rows)} row(s) from {name}")

    if not processed:
        errors.append("No recognizable LinkedIn data files found in ZIP")

    model = normalize(resume)
    if errors:
        _log_warning(f"LinkedIn import finished with {len(errors)} error(s)")
    else:
        _log_info(f"Imported LinkedIn export ({', '.join(processed)})")

    return LinkedInImportResult(
        model=model, has_errors=bool(errors), errors=errors, processed_files=processed
    )
