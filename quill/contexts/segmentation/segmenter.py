"""
Text segmentation for the Segmentation context.

Splits résumé or cover-letter text into named sections and extracts document
metadata. Pure functions only: nothing here reads files or keeps state.

The scan is a single line loop that flushes the previous section whenever a
header is recognized.
"""

from datetime import date
from typing import Optional

from quill.contexts.segmentation.document_structure import (
    ContactInfo,
    DocumentMetadata,
    DocumentType,
    ParsedSections,
    SegmentedDocument,
)
from quill.contexts.segmentation.logger import log_segmentation_result
from quill.contexts.segmentation.patterns import (
    MAX_EXPERIENCE_YEARS,
    MIN_PHONE_DIGITS,
    SKILL_SEPARATORS,
    TECHNICAL_KEYWORDS,
    ContactPatterns,
    ExperiencePatterns,
    keyword_pattern,
)
from quill.contexts.segmentation.section_patterns import (
    LIST_SECTIONS,
    match_section_header,
    parse_header,
    starts_new_item,
    strip_bullet,
)
from quill.utils.text_processing import count_words, normalize_whitespace, truncate_display

# Lines before the first header that still count as contact details
CONTACT_PREAMBLE_LINES = 5


def extract_sections(text: str) -> tuple[dict, list[str]]:
    """
    Split text into raw section line lists.

    Up to the first CONTACT_PREAMBLE_LINES lines before any header form the
    contact block. Later preamble lines are discarded with a warning. A section
    header seen twice extends the earlier section.

    Args:
        text: Whitespace-normalized document text

    Returns:
        Tuple of (section name -> list of stripped non-blank lines, warnings)
    """
    sections: dict[str, list[str]] = {}
    warnings = []
    current_section = None
    discarded = []

    for index, line in enumerate(text.split("\n")):
        stripped = line.strip()

        header = parse_header(stripped)
        if header:
            current_section, content = header
            sections.setdefault(current_section, [])
            if content:
                sections[current_section].append(content)
            continue

        if not stripped:
            continue

        if current_section is not None:
            sections[current_section].append(stripped)
        elif index < CONTACT_PREAMBLE_LINES:
            sections.setdefault("contact", []).append(stripped)
        else:
            discarded.append(stripped)

    if discarded:
        preamble_text = " ".join(discarded)
        warnings.append(
            f"Discarded preamble content before first heading: "
            f"'{truncate_display(preamble_text, 80)}'"
        )

    return sections, warnings


def lines_to_items(lines: list[str]) -> list[str]:
    """
    Group section lines into list items.

    A line starts a new item when it looks like a bullet, numbered entry, or
    begins with a year or "Month Year". Other lines continue the current item.

    Example:
        >>> lines_to_items(["- Built APIs", "in Python", "- Led team"])
        ['Built APIs in Python', 'Led team']
    """
    items = []
    for line in lines:
        if starts_new_item(line) or not items:
            items.append(strip_bullet(line))
        else:
            items[-1] = f"{items[-1]} {line}"
    return items


def build_sections(raw_sections: dict) -> ParsedSections:
    """Convert raw section lines to ParsedSections (text or item tuples)."""
    built = {}
    for name, lines in raw_sections.items():
        if name in LIST_SECTIONS:
            built[name] = lines_to_items(lines)
        else:
            built[name] = "\n".join(lines)
    return ParsedSections(built)


def _find_phone(text: str) -> Optional[str]:
    for match in ContactPatterns.PHONE.finditer(text):
        candidate = match.group(0).strip()
        if sum(ch.isdigit() for ch in candidate) >= MIN_PHONE_DIGITS:
            return candidate
    return None


def extract_metadata(text: str) -> DocumentMetadata:
    """Word/line counts and contact presence flags for the whole text."""
    if not text.strip():
        return DocumentMetadata()

    return DocumentMetadata(
        word_count=count_words(text),
        line_count=len(text.split("\n")),
        has_email=bool(ContactPatterns.EMAIL.search(text)),
        has_phone=_find_phone(text) is not None,
        has_linkedin=bool(ContactPatterns.LINKEDIN.search(text)),
        has_github=bool(ContactPatterns.GITHUB.search(text)),
    )


def extract_contact_info(text: str, sections: Optional[ParsedSections] = None) -> ContactInfo:
    """
    Extract contact details.

    The name is the first short line of the contact block (or the document)
    that reads like two to four capitalized words and carries no email, phone
    or URL.

    Args:
        text: Document text
        sections: Parsed sections, used to prefer the contact block for the name

    Returns:
        ContactInfo with any fields found
    """
    if not text or not text.strip():
        return ContactInfo()

    email = ContactPatterns.EMAIL.search(text)
    linkedin = ContactPatterns.LINKEDIN.search(text)
    github = ContactPatterns.GITHUB.search(text)

    candidates = []
    if sections is not None and sections.text_of("contact"):
        candidates = sections.items_of("contact")
    else:
        candidates = [line.strip() for line in text.split("\n")[:CONTACT_PREAMBLE_LINES]]

    name = None
    for line in candidates:
        if (
            ContactPatterns.EMAIL.search(line)
            or ContactPatterns.URL.search(line)
            or _find_phone(line)
        ):
            continue
        if ContactPatterns.NAME.match(line) and match_section_header(line) is None:
            name = line
            break

    return ContactInfo(
        name=name,
        email=email.group(0) if email else None,
        phone=_find_phone(text),
        linkedin=linkedin.group(0) if linkedin else None,
        github=github.group(0) if github else None,
    )


def extract_experience_years(
    text: str,
    sections: Optional[ParsedSections] = None,
    current_year: Optional[int] = None,
) -> int:
    """
    Estimate years of professional experience.

    Uses the span from the earliest year mentioned in the experience section
    (or the whole text when there is none) to current_year, capped at
    MAX_EXPERIENCE_YEARS. Falls back to an explicit "N years of experience"
    statement, then 0.
    """
    if not text:
        return 0

    current_year = current_year or date.today().year
    scope = sections.text_of("experience") if sections is not None else ""
    scope = scope or text

    years = [
        int(year)
        for year in ExperiencePatterns.YEAR.findall(scope)
        if int(year) <= current_year
    ]
    if years:
        return min(current_year - min(years), MAX_EXPERIENCE_YEARS)

    explicit = ExperiencePatterns.EXPLICIT_YEARS.search(text)
    if explicit:
        return min(int(explicit.group(1)), MAX_EXPERIENCE_YEARS)

    return 0


def extract_skills(text: str, sections: Optional[ParsedSections] = None) -> list[str]:
    """
    Collect skills from the skills section plus known technical keywords.

    Skills-section items are split on commas, semicolons, pipes and bullets;
    a "Category: a, b" prefix is dropped. Results are de-duplicated
    case-insensitively, preserving first-seen order.
    """
    found = []
    seen = set()

    def _add(skill: str) -> None:
        skill = skill.strip().strip(".")
        if skill and skill.lower() not in seen:
            seen.add(skill.lower())
            found.append(skill)

    if sections is not None:
        for item in sections.items_of("skills"):
            if ":" in item:
                item = item.split(":", 1)[1]
            for skill in SKILL_SEPARATORS.split(item):
                _add(skill)

    for keyword in TECHNICAL_KEYWORDS:
        if keyword_pattern(keyword).search(text or ""):
            _add(keyword)

    return found


def segment_document(text: Optional[str], document_type="resume") -> SegmentedDocument:
    """
    Split a document into sections and extract its metadata.

    Never raises on content: empty or None text yields an empty document with
    zeroed metadata, and text without recognizable headers yields only the
    contact block.

    Args:
        text: Raw document text
        document_type: DocumentType or loose string (unknown -> OTHER)

    Returns:
        SegmentedDocument
    """
    doc_type = DocumentType.coerce(document_type)
    normalized = normalize_whitespace(text or "")

    if not normalized.strip():
        return SegmentedDocument(text=normalized, document_type=doc_type)

    raw_sections, warnings = extract_sections(normalized)
    sections = build_sections(raw_sections)
    metadata = extract_metadata(normalized)
    contact = extract_contact_info(normalized, sections)

    log_segmentation_result(doc_type.value, list(sections.keys()), metadata.word_count, warnings)

    return SegmentedDocument(
        text=normalized,
        document_type=doc_type,
        sections=sections,
        metadata=metadata,
        contact=contact,
        warnings=tuple(warnings),
    )
