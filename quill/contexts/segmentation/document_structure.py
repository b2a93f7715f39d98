"""
Data structures for segmented documents.

SegmentedDocument is the read-only product of the segmentation context.
Construct it with SegmentedDocument.from_text(); the parsing itself lives in
segmenter.py, which returns raw parsed pieces this module assembles.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Optional, Union

from quill.contexts.segmentation.section_patterns import SECTION_ORDER, TEXT_SECTIONS

SectionContent = Union[str, tuple]


class DocumentType(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "DocumentType":
        """
        Map a loose value onto a DocumentType.

        Unknown or missing values become OTHER rather than raising, so callers
        get the generic rule subset.

        Example:
            >>> DocumentType.coerce("Cover-Letter")
            <DocumentType.COVER_LETTER: 'cover_letter'>
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        if normalized == "coverletter":
            normalized = "cover_letter"
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


class ParsedSections(Mapping):
    """
    Ordered, read-only mapping of section name to content.

    Text sections (contact, summary) map to a string. List sections map to a
    tuple of item strings. Sections appear in the order first encountered.
    """

    def __init__(self, sections: Optional[dict] = None):
        frozen = {}
        for name, content in (sections or {}).items():
            frozen[name] = content if isinstance(content, str) else tuple(content)
        self._sections = MappingProxyType(frozen)

    def __getitem__(self, name: str) -> SectionContent:
        return self._sections[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"ParsedSections({dict(self._sections)!r})"

    def text_of(self, name: str) -> str:
        """Section content as a single string ('' when absent)."""
        content = self._sections.get(name)
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        return "\n".join(content)

    def items_of(self, name: str) -> tuple:
        """Section content as items; a text section yields its non-blank lines."""
        content = self._sections.get(name)
        if content is None:
            return ()
        if isinstance(content, str):
            return tuple(line for line in content.split("\n") if line.strip())
        return content

    def present(self) -> list[str]:
        """Names of non-empty sections, in canonical order."""
        return [name for name in SECTION_ORDER if self.text_of(name).strip()]

    def to_dict(self) -> dict:
        return {
            name: (content if name in TEXT_SECTIONS else list(content))
            for name, content in self._sections.items()
        }


@dataclass(frozen=True)
class DocumentMetadata:
    word_count: int = 0
    line_count: int = 0
    has_email: bool = False
    has_phone: bool = False
    has_linkedin: bool = False
    has_github: bool = False

    def to_dict(self) -> dict:
        return {
            "word_count": self.word_count,
            "line_count": self.line_count,
            "has_email": self.has_email,
            "has_phone": self.has_phone,
            "has_linkedin": self.has_linkedin,
            "has_github": self.has_github,
        }


@dataclass(frozen=True)
class ContactInfo:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "linkedin": self.linkedin,
            "github": self.github,
        }


@dataclass(frozen=True)
class SegmentedDocument:
    """
    A document split into named sections with extracted metadata.

    Attributes:
        text: The analyzed text (whitespace-normalized, same length as the input)
        document_type: Resolved DocumentType
        sections: ParsedSections in document order
        metadata: Counts and contact presence flags
        contact: Extracted contact details
        warnings: Non-fatal parsing notes (e.g., discarded preamble)
    """

    text: str
    document_type: DocumentType
    sections: ParsedSections = field(default_factory=ParsedSections)
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    contact: ContactInfo = field(default_factory=ContactInfo)
    warnings: tuple = field(default_factory=tuple)

    @classmethod
    def from_text(cls, text: Optional[str], document_type="resume") -> "SegmentedDocument":
        """
        Segment raw text.

        Args:
            text: Raw document text (None is treated as empty)
            document_type: DocumentType or loose string

        Returns:
            SegmentedDocument instance
        """
        from quill.contexts.segmentation.segmenter import segment_document

        return segment_document(text, document_type)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def to_dict(self) -> dict:
        return {
            "document_type": self.document_type.value,
            "sections": self.sections.to_dict(),
            "metadata": self.metadata.to_dict(),
            "contact": self.contact.to_dict(),
            "warnings": list(self.warnings),
        }
