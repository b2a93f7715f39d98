"""
Segmentation Context

Responsibilities:
- Splits raw résumé/cover-letter text into named sections
- Groups list-like section lines into items
- Extracts metadata (counts, contact presence) and contact details

Owns: Section header recognition and document structure
Never: Judges writing quality or assigns scores
"""

from quill.contexts.segmentation.document_structure import (
    ContactInfo,
    DocumentMetadata,
    DocumentType,
    ParsedSections,
    SegmentedDocument,
)
from quill.contexts.segmentation.segmenter import (
    extract_contact_info,
    extract_experience_years,
    extract_metadata,
    extract_skills,
    segment_document,
)

__all__ = [
    "ContactInfo",
    "DocumentMetadata",
    "DocumentType",
    "ParsedSections",
    "SegmentedDocument",
    "extract_contact_info",
    "extract_experience_years",
    "extract_metadata",
    "extract_skills",
    "segment_document",
]
