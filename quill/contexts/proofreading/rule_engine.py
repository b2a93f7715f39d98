"""
Layered writing-quality checks for the Proofreading context.

RuleEngine runs four detection passes over a document (spelling, grammar,
punctuation, style), each driven by the immutable tables in rule_tables.py,
then derives warnings, suggestions, statistics and a 0-100 score.

Every Issue span is taken from the offsets of the match that produced it, so
repeated occurrences of the same text get distinct, correct spans. Issues
whose span would fall outside the text are dropped.

Example:
    >>> from quill.contexts.proofreading import check_grammar
    >>> report = check_grammar("We recieve feedback.", "resume")
    >>> report.issues[0].replacements
    ('receive',)
"""

import re
from bisect import bisect_right
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Iterable, Mapping, Optional

from quill.contexts.proofreading.logger import (
    _log_debug,
    log_check_result,
    log_suppressed_issue,
)
from quill.contexts.proofreading.rule_tables import (
    BULLET_LINE,
    CONTACT_LINE,
    DUPLICATE_SENTENCE_MIN_WORDS,
    GRAMMAR_RULES,
    MISSING_PERIOD_MIN_LENGTH,
    MISSPELLINGS,
    MIXED_TENSE_THRESHOLD,
    PUNCTUATION_RULES,
    REPEATED_WORD_PATTERN,
    REPEATED_WORD_WHITELIST,
    STYLE_RULES,
    TERMINAL_PUNCTUATION,
    WEAK_VERBS,
    AutoCorrectPatterns,
    PatternRule,
    WarningPatterns,
    is_enabled,
)
from quill.contexts.segmentation.document_structure import DocumentType
from quill.contexts.segmentation.section_patterns import match_section_header
from quill.utils.config import load_scoring_config
from quill.utils.issues import Issue, IssueType, Severity, Span
from quill.utils.text_processing import (
    iter_sentences,
    iter_words,
    match_case,
    normalize_whitespace,
)

# =============================================================================
# REPORT STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class GrammarWarning:
    """Document-wide observation that is not tied to one span."""

    type: str  # "consistency" or "style"
    text: str
    message: str
    suggestion: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "text": self.text,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class GrammarSuggestion:
    category: str
    suggestion: str
    priority: str  # "high" or "medium"
    examples: tuple = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "suggestion": self.suggestion,
            "priority": self.priority,
            "examples": list(self.examples),
        }


@dataclass(frozen=True)
class GrammarStatistics:
    total_words: int = 0
    total_sentences: int = 0
    errors_found: int = 0
    spelling_errors: int = 0
    grammar_errors: int = 0
    punctuation_errors: int = 0
    style_issues: int = 0
    critical: int = 0
    major: int = 0
    minor: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GrammarReport:
    """
    Result of check_grammar().

    Attributes:
        score: 0-100 grammar score
        is_valid: score >= the configured validity threshold
        issues: Issues in text order
        warnings: Document-wide GrammarWarnings
        suggestions: GrammarSuggestions derived from issue counts
        statistics: Word/sentence totals and per-type counts
    """

    score: int
    is_valid: bool
    issues: tuple = ()
    warnings: tuple = ()
    suggestions: tuple = ()
    statistics: GrammarStatistics = field(default_factory=GrammarStatistics)

    def issues_of(self, issue_type: IssueType) -> list[Issue]:
        return [issue for issue in self.issues if issue.type == issue_type]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "is_valid": self.is_valid,
            "issues": [issue.to_dict() for issue in self.issues],
            "warnings": [warning.to_dict() for warning in self.warnings],
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
            "statistics": self.statistics.to_dict(),
        }


@dataclass(frozen=True)
class Correction:
    original: str
    corrected: str
    span: Span
    rule_id: str

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "corrected": self.corrected,
            "span": self.span.to_dict(),
            "rule_id": self.rule_id,
        }


@dataclass(frozen=True)
class AutoCorrection:
    """Corrected text plus the edits applied, positioned in the input text."""

    corrected_text: str
    changes: tuple = ()

    def to_dict(self) -> dict:
        return {
            "corrected_text": self.corrected_text,
            "changes": [change.to_dict() for change in self.changes],
        }


# =============================================================================
# SUGGESTION CATALOG
# =============================================================================

SPELLING_SUGGESTION = GrammarSuggestion(
    category="spelling",
    suggestion="Run a spell checker before finalizing",
    priority="high",
)
GRAMMAR_SUGGESTION = GrammarSuggestion(
    category="grammar",
    suggestion="Review subject-verb agreement and tense consistency",
    priority="high",
    examples=("Was -> Were (plural subjects)", "Have -> Has (singular subjects)"),
)
ACTION_VERB_SUGGESTION = GrammarSuggestion(
    category="style",
    suggestion="Start bullet points with strong action verbs",
    priority="medium",
    examples=("Managed a team of 10 engineers", "Developed new customer acquisition strategy"),
)
QUANTIFY_SUGGESTION = GrammarSuggestion(
    category="style",
    suggestion="Quantify achievements where possible",
    priority="high",
    examples=("Reduced costs by $50K annually", "Improved efficiency by 30%"),
)
SPLIT_SENTENCES_SUGGESTION = GrammarSuggestion(
    category="readability",
    suggestion="Break long sentences into shorter, clearer statements",
    priority="medium",
)
CONSISTENCY_SUGGESTION = GrammarSuggestion(
    category="consistency",
    suggestion="Maintain consistent formatting and style throughout",
    priority="medium",
    examples=("Use the same date format everywhere", "Maintain consistent bullet point style"),
)

SPELLING_SUGGESTION_THRESHOLD = 3
GRAMMAR_SUGGESTION_THRESHOLD = 2


# =============================================================================
# RULE ENGINE
# =============================================================================


class RuleEngine:
    """
    Runs the rule tables against a document.

    Stateless between calls: one engine may serve any number of concurrent
    checks.

    Args:
        config: Scoring config mapping (defaults to the packaged scoring.yaml)
        misspellings: Misspelling -> correction table override
        pattern_rules: Ordered PatternRule tuple override (grammar + punctuation + style)
    """

    def __init__(
        self,
        config: Optional[Mapping] = None,
        misspellings: Optional[Mapping[str, str]] = None,
        pattern_rules: Optional[tuple] = None,
    ):
        config = config if config is not None else load_scoring_config()
        self.scoring = config["grammar"]
        self.misspellings = misspellings if misspellings is not None else MISSPELLINGS
        self.pattern_rules = (
            pattern_rules
            if pattern_rules is not None
            else GRAMMAR_RULES + PUNCTUATION_RULES + STYLE_RULES
        )

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def check(self, text: Optional[str], document_type="resume") -> GrammarReport:
        """
        Check a document and score it.

        Args:
            text: Document text (None or blank yields a clean empty report)
            document_type: DocumentType or loose string (unknown -> OTHER)

        Returns:
            GrammarReport
        """
        doc_type = DocumentType.coerce(document_type)
        text = normalize_whitespace(text or "")

        if not text.strip():
            return GrammarReport(
                score=self.scoring["base_score"],
                is_valid=self.scoring["base_score"] >= self.scoring["valid_threshold"],
            )

        issues = self.detect_issues(text, doc_type)
        warnings = self.generate_warnings(text, doc_type)
        suggestions = self.generate_suggestions(issues, warnings, doc_type)
        statistics = self.calculate_statistics(text, issues)
        score = self.calculate_score(issues, statistics)

        log_check_result(doc_type.value, len(issues), len(warnings), score)

        return GrammarReport(
            score=score,
            is_valid=score >= self.scoring["valid_threshold"],
            issues=tuple(issues),
            warnings=tuple(warnings),
            suggestions=tuple(suggestions),
            statistics=statistics,
        )

    def detect_issues(self, text: str, document_type: DocumentType) -> list[Issue]:
        """Run all enabled passes and return valid issues in text order."""
        line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]
        collected = []

        for issue in self._all_passes(text, document_type, line_starts):
            if issue.span.is_valid_for(text):
                collected.append(issue)
            else:
                log_suppressed_issue(issue.rule_id, issue.span.start, issue.span.end, len(text))

        # Stable sort keeps pass order for issues starting at the same offset
        return sorted(collected, key=lambda issue: issue.span.start)

    def _all_passes(self, text: str, document_type: DocumentType, line_starts: list):
        if is_enabled(document_type, "spelling"):
            yield from self.check_spelling(text, line_starts)
        if is_enabled(document_type, "repeated_word"):
            yield from self.check_repeated_words(text, line_starts)
        yield from self.check_patterns(text, document_type, line_starts)
        if is_enabled(document_type, "missing_period"):
            yield from self.check_missing_periods(text, line_starts)
        if is_enabled(document_type, "duplicate_sentence"):
            yield from self.check_duplicate_sentences(text, line_starts)

    # -------------------------------------------------------------------------
    # Detection passes
    # -------------------------------------------------------------------------

    def check_spelling(self, text: str, line_starts: list) -> Iterable[Issue]:
        for word, start, end in iter_words(text):
            correction = self.misspellings.get(word.lower())
            if correction is None:
                continue
            replacement = match_case(word, correction)
            yield Issue(
                type=IssueType.SPELLING,
                severity=Severity.CRITICAL,
                text=word,
                span=Span(start, end),
                message=f"Possible misspelling: '{word}'",
                suggestion=f"Replace with '{replacement}'",
                replacements=(replacement,),
                rule_id="spelling",
                line=_line_number(line_starts, start),
            )

    def check_repeated_words(self, text: str, line_starts: list) -> Iterable[Issue]:
        for match in REPEATED_WORD_PATTERN.finditer(text):
            word = match.group(1)
            if word.lower() in REPEATED_WORD_WHITELIST:
                continue
            yield Issue(
                type=IssueType.SPELLING,
                severity=Severity.MINOR,
                text=match.group(0),
                span=Span(match.start(), match.end()),
                message=f"Repeated word: '{word}'",
                suggestion=f"Remove the duplicate '{word}'",
                replacements=(word,),
                rule_id="repeated_word",
                line=_line_number(line_starts, match.start()),
            )

    def check_patterns(
        self, text: str, document_type: DocumentType, line_starts: list
    ) -> Iterable[Issue]:
        """Scan every enabled PatternRule over the full text, in table order."""
        for rule in self.pattern_rules:
            if not is_enabled(document_type, rule.check):
                continue
            for match in rule.pattern.finditer(text):
                if match.group(0).lower() in rule.ignore:
                    continue
                yield self._issue_from_match(rule, match, line_starts)

    def _issue_from_match(self, rule: PatternRule, match: re.Match, line_starts: list) -> Issue:
        fields = rule.template_fields(match)
        if rule.rule_id == "weak_verb":
            fields["strong"] = WEAK_VERBS.get(" ".join(match.group(0).lower().split()), "")

        start, end = match.span(rule.span_group)
        flagged = match.group(rule.span_group)
        replacements = ()
        if rule.replacement is not None:
            replacements = (match_case(flagged, rule.replacement.format(**fields)),)

        return Issue(
            type=rule.issue_type,
            severity=rule.severity,
            text=flagged,
            span=Span(start, end),
            message=rule.message.format(**fields),
            suggestion=rule.suggestion.format(**fields),
            replacements=replacements,
            rule_id=rule.rule_id,
            line=_line_number(line_starts, start),
        )

    def check_missing_periods(self, text: str, line_starts: list) -> Iterable[Issue]:
        """
        Flag long prose lines with no terminal punctuation.

        Bullet lines, section headers and contact-style lines are exempt.
        """
        for line_index, line_start in enumerate(line_starts):
            line_end = text.find("\n", line_start)
            line_end = len(text) if line_end == -1 else line_end
            line = text[line_start:line_end]
            trimmed = line.strip()

            if len(trimmed) <= MISSING_PERIOD_MIN_LENGTH:
                continue
            if trimmed.endswith(TERMINAL_PUNCTUATION) or BULLET_LINE.match(trimmed):
                continue
            if CONTACT_LINE.search(trimmed) or match_section_header(trimmed):
                continue

            last = line_start + len(line.rstrip()) - 1
            yield Issue(
                type=IssueType.PUNCTUATION,
                severity=Severity.MAJOR,
                text=text[last : last + 1],
                span=Span(last, last + 1),
                message="Sentence should end with punctuation",
                suggestion="Add a period at the end",
                replacements=(text[last : last + 1] + ".",),
                rule_id="missing_period",
                line=line_index + 1,
            )

    def check_duplicate_sentences(self, text: str, line_starts: list) -> Iterable[Issue]:
        """Flag every repeat of a sentence already seen earlier in the text."""
        seen = set()
        for sentence, start, end in iter_sentences(text):
            normalized = " ".join(sentence.lower().rstrip(".!?").split())
            if len(normalized.split()) < DUPLICATE_SENTENCE_MIN_WORDS:
                continue
            if normalized in seen:
                yield Issue(
                    type=IssueType.STYLE,
                    severity=Severity.CRITICAL,
                    text=sentence,
                    span=Span(start, end),
                    message="Duplicate sentence",
                    suggestion="Remove or rephrase the repeated sentence",
                    rule_id="duplicate_sentence",
                    line=_line_number(line_starts, start),
                )
            else:
                seen.add(normalized)

    # -------------------------------------------------------------------------
    # Warnings, suggestions, statistics, score
    # -------------------------------------------------------------------------

    def generate_warnings(self, text: str, document_type: DocumentType) -> list[GrammarWarning]:
        warnings = []

        if WarningPatterns.SERIAL_COMMA.search(text) and WarningPatterns.NO_SERIAL_COMMA.search(
            text
        ):
            warnings.append(
                GrammarWarning(
                    type="consistency",
                    text="Inconsistent comma usage",
                    message="Be consistent with Oxford comma usage throughout",
                    suggestion="Choose to always use or never use the Oxford comma",
                )
            )

        past = len(WarningPatterns.PAST_TENSE.findall(text))
        present = len(WarningPatterns.PRESENT_TENSE.findall(text))
        if past > MIXED_TENSE_THRESHOLD and present > MIXED_TENSE_THRESHOLD:
            warnings.append(
                GrammarWarning(
                    type="consistency",
                    text="Mixed tenses detected",
                    message="Maintain consistent tense throughout the document",
                    suggestion="Use past tense for previous roles, present for current",
                )
            )

        if is_enabled(document_type, "first_person") and WarningPatterns.FIRST_PERSON.search(text):
            warnings.append(
                GrammarWarning(
                    type="style",
                    text="First person pronouns",
                    message='Avoid using "I", "me", "my" in resumes',
                    suggestion="Start bullet points with action verbs instead",
                )
            )

        if is_enabled(document_type, "objective_section") and WarningPatterns.OBJECTIVE.search(
            text
        ):
            warnings.append(
                GrammarWarning(
                    type="style",
                    text="Objective section",
                    message="Objective sections are outdated",
                    suggestion="Replace with a professional summary",
                )
            )

        return warnings

    def generate_suggestions(
        self, issues: list[Issue], warnings: list[GrammarWarning], document_type: DocumentType
    ) -> list[GrammarSuggestion]:
        suggestions = []
        spelling = sum(1 for issue in issues if issue.type == IssueType.SPELLING)
        grammar = sum(1 for issue in issues if issue.type == IssueType.GRAMMAR)

        if spelling > SPELLING_SUGGESTION_THRESHOLD:
            suggestions.append(SPELLING_SUGGESTION)
        if grammar > GRAMMAR_SUGGESTION_THRESHOLD:
            suggestions.append(GRAMMAR_SUGGESTION)
        if document_type == DocumentType.RESUME:
            suggestions.extend([ACTION_VERB_SUGGESTION, QUANTIFY_SUGGESTION])
        if any(issue.rule_id == "run_on" for issue in issues):
            suggestions.append(SPLIT_SENTENCES_SUGGESTION)
        if any(warning.type == "consistency" for warning in warnings):
            suggestions.append(CONSISTENCY_SUGGESTION)

        return suggestions

    def calculate_statistics(self, text: str, issues: list[Issue]) -> GrammarStatistics:
        def _count(predicate) -> int:
            return sum(1 for issue in issues if predicate(issue))

        return GrammarStatistics(
            total_words=len(re.findall(r"\b\w+\b", text)),
            total_sentences=len([s for s in re.split(r"[.!?]+", text) if s.strip()]),
            errors_found=len(issues),
            spelling_errors=_count(lambda i: i.type == IssueType.SPELLING),
            grammar_errors=_count(lambda i: i.type == IssueType.GRAMMAR),
            punctuation_errors=_count(lambda i: i.type == IssueType.PUNCTUATION),
            style_issues=_count(lambda i: i.type == IssueType.STYLE),
            critical=_count(lambda i: i.severity == Severity.CRITICAL),
            major=_count(lambda i: i.severity == Severity.MAJOR),
            minor=_count(lambda i: i.severity == Severity.MINOR),
        )

    def calculate_score(self, issues: list[Issue], statistics: GrammarStatistics) -> int:
        """
        Score = base - severity penalties + clean-text bonuses - density penalty.

        Bonuses: clean spelling on a document longer than the minimum word
        count, and zero grammar issues. Density is issues per 100 words.
        Result is clamped to [0, 100].
        """
        penalties = self.scoring["penalties"]
        score = self.scoring["base_score"]

        for issue in issues:
            score -= penalties[issue.severity.value]

        if (
            statistics.total_words > self.scoring["clean_spelling_min_words"]
            and statistics.spelling_errors == 0
        ):
            score += self.scoring["clean_spelling_bonus"]

        if statistics.grammar_errors == 0:
            score += self.scoring["clean_grammar_bonus"]

        if statistics.total_words:
            density = len(issues) * 100 / statistics.total_words
            if density > self.scoring["density_threshold"]:
                score -= self.scoring["density_penalty"]

        return int(max(0, min(100, score)))

    # -------------------------------------------------------------------------
    # Auto-correct
    # -------------------------------------------------------------------------

    def auto_correct(self, text: Optional[str]) -> AutoCorrection:
        """
        Apply mechanical fixes: misspellings, a/an, repeated words, double
        spaces and a missing space after sentence punctuation.

        Edits are collected against the input and applied back to front;
        an edit overlapping one already accepted is skipped.

        Returns:
            AutoCorrection with corrected text and the accepted edits in text order
        """
        text = text or ""
        candidates = []

        for word, start, end in iter_words(text):
            correction = self.misspellings.get(word.lower())
            if correction:
                candidates.append(
                    Correction(word, match_case(word, correction), Span(start, end), "spelling")
                )

        for rule in GRAMMAR_RULES:
            if rule.rule_id not in ("article_an", "article_a"):
                continue
            for match in rule.pattern.finditer(text):
                fixed = match_case(
                    match.group(0), rule.replacement.format(**rule.template_fields(match))
                )
                candidates.append(
                    Correction(match.group(0), fixed, Span(*match.span()), rule.rule_id)
                )

        for match in REPEATED_WORD_PATTERN.finditer(text):
            if match.group(1).lower() not in REPEATED_WORD_WHITELIST:
                candidates.append(
                    Correction(match.group(0), match.group(1), Span(*match.span()), "repeated_word")
                )

        for match in AutoCorrectPatterns.DOUBLE_SPACE.finditer(text):
            candidates.append(Correction(match.group(0), " ", Span(*match.span()), "double_space"))

        for match in AutoCorrectPatterns.MISSING_SPACE.finditer(text):
            candidates.append(Correction("", " ", Span(*match.span()), "missing_space"))

        accepted = []
        occupied_until = -1
        for candidate in sorted(candidates, key=lambda c: (c.span.start, c.span.end)):
            if candidate.span.start < occupied_until:
                _log_debug(f"Skipping overlapping correction: {candidate.rule_id}")
                continue
            accepted.append(candidate)
            occupied_until = max(occupied_until, candidate.span.end)

        corrected = text
        for change in reversed(accepted):
            corrected = (
                corrected[: change.span.start] + change.corrected + corrected[change.span.end :]
            )

        return AutoCorrection(corrected_text=corrected, changes=tuple(accepted))


def _line_number(line_starts: list, offset: int) -> int:
    """1-based line number containing offset."""
    return bisect_right(line_starts, offset)


@lru_cache(maxsize=1)
def get_default_engine() -> RuleEngine:
    """Process-wide engine built from the packaged tables and config."""
    return RuleEngine()


def check_grammar(text: Optional[str], document_type="resume") -> GrammarReport:
    """Check text with the default RuleEngine (see RuleEngine.check)."""
    return get_default_engine().check(text, document_type)


def auto_correct(text: Optional[str]) -> AutoCorrection:
    """Auto-correct text with the default RuleEngine (see RuleEngine.auto_correct)."""
    return get_default_engine().auto_correct(text)
