"""
QUILL - Quality Inspection for Letters, Listings and resumes

A rule-driven document quality engine for résumés and cover letters. Free-form
text goes in; structured sections, writing-quality issues, multi-dimensional
scores and a human-in-the-loop review of suggested edits come out.

Architecture:
- Segmentation Context: Splits raw text into named sections and metadata
- Proofreading Context: Layered spelling, grammar, punctuation and style rules
- Matching Context: Job keyword matching and ATS compatibility scoring
- Scoring Context: Readability metrics and combined score aggregation
- Approval Context: Review workflow over suggested changes
"""

from loguru import logger

__version__ = "0.1.0"

# Silent as a library; scripts opt in through quill.utils.logger.setup_logger
logger.disable("quill")
