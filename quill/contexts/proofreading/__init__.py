"""
Proofreading Context

Responsibilities:
- Detects spelling, grammar, punctuation and style issues from fixed rule tables
- Gates checks per document type through a capability table
- Scores writing quality and proposes mechanical corrections

Owns: Rule tables and the grammar score
Never: Segments documents or weighs grammar against other dimensions
"""

from quill.contexts.proofreading.rule_engine import (
    AutoCorrection,
    Correction,
    GrammarReport,
    GrammarStatistics,
    GrammarSuggestion,
    GrammarWarning,
    RuleEngine,
    auto_correct,
    check_grammar,
)

__all__ = [
    "AutoCorrection",
    "Correction",
    "GrammarReport",
    "GrammarStatistics",
    "GrammarSuggestion",
    "GrammarWarning",
    "RuleEngine",
    "auto_correct",
    "check_grammar",
]
