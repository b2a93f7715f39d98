"""
Immutable rule tables for the proofreading context.

Everything the rule engine knows about English lives here as data: the
misspelling dictionary, ordered pattern rules, style vocabularies and the
document-type capability table. Tables are built once at import and never
mutated, so concurrent checks can share them without locking.

Pattern rules follow the frozen-dataclass convention from
segmentation/section_patterns.py. Message, suggestion and replacement
templates are str.format strings over the match: {match} is the whole match,
{g1}, {g2}, ... are its groups and {length} is the match length.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from quill.contexts.segmentation.document_structure import DocumentType
from quill.utils.issues import IssueType, Severity

# =============================================================================
# PATTERN RULE RECORD
# =============================================================================


@dataclass(frozen=True)
class PatternRule:
    """
    A single regex-driven check.

    Attributes:
        rule_id: Stable identifier reported on every Issue
        check: Capability name used to gate the rule per document type
        pattern: Compiled pattern scanned over the full text
        issue_type: IssueType of emitted issues
        severity: Severity of emitted issues
        message: Message template
        suggestion: Suggestion template
        replacement: Replacement template, or None when no mechanical fix exists
        span_group: Group whose offsets form the span (0 = whole match)
        ignore: Exact (lowercased) match texts that are never reported
    """

    rule_id: str
    check: str
    pattern: re.Pattern
    issue_type: IssueType
    severity: Severity
    message: str
    suggestion: str = ""
    replacement: Optional[str] = None
    span_group: int = 0
    ignore: frozenset = field(default_factory=frozenset)

    def template_fields(self, match: re.Match) -> dict:
        fields = {"match": match.group(0), "length": len(match.group(0))}
        for index, value in enumerate(match.groups(), 1):
            fields[f"g{index}"] = value or ""
        return fields


# =============================================================================
# SPELLING
# =============================================================================

MISSPELLINGS = MappingProxyType(
    {
        "recieve": "receive",
        "occured": "occurred",
        "seperate": "separate",
        "definately": "definitely",
        "enviroment": "environment",
        "managment": "management",
        "experiance": "experience",
        "proffesional": "professional",
        "responsibile": "responsible",
        "succesful": "successful",
        "acheive": "achieve",
        "aquire": "acquire",
        "beleive": "believe",
        "calender": "calendar",
        "collegue": "colleague",
        "concious": "conscious",
        "dissapoint": "disappoint",
        "existance": "existence",
        "foriegn": "foreign",
        "fourty": "forty",
        "goverment": "government",
        "harrass": "harass",
        "independant": "independent",
        "knowlege": "knowledge",
        "liason": "liaison",
        "maintainance": "maintenance",
        "neccessary": "necessary",
        "noticable": "noticeable",
        "occassion": "occasion",
        "paralell": "parallel",
        "persistant": "persistent",
        "preceed": "precede",
        "priviledge": "privilege",
        "questionaire": "questionnaire",
        "refered": "referred",
        "relevent": "relevant",
        "supercede": "supersede",
        "tendancy": "tendency",
        "unnecesary": "unnecessary",
        "untill": "until",
        "withold": "withhold",
        "thier": "their",
    }
)

# Words that legitimately repeat ("had had", "that that")
REPEATED_WORD_WHITELIST = frozenset({"had", "that", "very", "been"})

REPEATED_WORD_PATTERN = re.compile(r"\b(\w+)\s+(\1)\b", re.IGNORECASE)

# =============================================================================
# GRAMMAR AND PUNCTUATION RULES (ordered)
# =============================================================================

_I = re.IGNORECASE
_M = re.MULTILINE

GRAMMAR_RULES = (
    PatternRule(
        rule_id="double_negative",
        check="grammar",
        pattern=re.compile(
            r"\b(not|no|never|neither)\s+\w*\s*(not|no|never|nothing|nowhere)\b", _I
        ),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="Double negative: '{match}'",
        suggestion="Use a single negative",
    ),
    PatternRule(
        rule_id="apostrophe_its",
        check="grammar",
        pattern=re.compile(r"\b(it's)\s+\w+\s+(?:is|was|has)\b", _I),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="\"it's\" means \"it is\"; the possessive is \"its\"",
        suggestion="Replace \"it's\" with \"its\"",
        replacement="its",
        span_group=1,
    ),
    PatternRule(
        rule_id="mixed_tense",
        check="grammar",
        pattern=re.compile(r"\b(was|were)\s+\w+\s+(is|are)\b", _I),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="Tense shifts within one clause: '{match}'",
        suggestion="Keep the verbs in one tense",
    ),
    PatternRule(
        rule_id="article_an",
        check="grammar",
        pattern=re.compile(
            r"\b(a)\s+(?!(?:uni|use|usu|util|one|once|eu|ur)\w*)([aeiou]\w*)", _I
        ),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MINOR,
        message="Use \"an\" before a vowel sound: '{match}'",
        suggestion="Replace with \"an {g2}\"",
        replacement="an {g2}",
    ),
    PatternRule(
        rule_id="article_a",
        check="grammar",
        pattern=re.compile(
            r"\b(an)\s+(?!(?:hour|honest|honor|honour|heir|mba|mri|sql|html|fbi|faq|nda|llc|x)\w*)"
            r"([b-df-hj-np-tv-z]\w*)",
            _I,
        ),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MINOR,
        message="Use \"a\" before a consonant sound: '{match}'",
        suggestion="Replace with \"a {g2}\"",
        replacement="a {g2}",
    ),
    PatternRule(
        rule_id="their_there",
        check="grammar",
        pattern=re.compile(r"\b(their)\s+(is|are|was|were)\b", _I),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="\"{g1}\" is possessive: '{match}'",
        suggestion="Did you mean \"there {g2}\"?",
        replacement="there {g2}",
    ),
    PatternRule(
        rule_id="your_youre",
        check="grammar",
        pattern=re.compile(r"\b(your)\s+(welcome|going\s+to)\b", _I),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="\"{g1}\" is possessive: '{match}'",
        suggestion="Did you mean \"you're {g2}\"?",
        replacement="you're {g2}",
    ),
    PatternRule(
        rule_id="to_too",
        check="grammar",
        pattern=re.compile(r"\bway\s+(to)\s+(much|many|few|little|late|early)\b", _I),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MINOR,
        message="\"to\" should be \"too\": '{match}'",
        suggestion="Replace \"to\" with \"too\"",
        replacement="too",
        span_group=1,
    ),
    PatternRule(
        rule_id="redundancy",
        check="grammar",
        pattern=re.compile(
            r"\b(very\s+unique|most\s+optimal|more\s+better|past\s+history|future\s+plans)\b", _I
        ),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MINOR,
        message="Redundant phrase: '{match}'",
        suggestion="Remove the redundant modifier",
    ),
    PatternRule(
        rule_id="fragment",
        check="grammar",
        pattern=re.compile(
            r"^[A-Z][^.!?\n]*\b(which|because|although|since|when|while|if)[ ]*$", _M
        ),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="Sentence fragment ends with \"{g1}\"",
        suggestion="Complete the clause or join it to the next sentence",
    ),
    PatternRule(
        rule_id="run_on",
        check="grammar",
        pattern=re.compile(r"[^.!?\n]{150,}"),
        issue_type=IssueType.GRAMMAR,
        severity=Severity.MAJOR,
        message="Run-on sentence ({length} characters without a break)",
        suggestion="Split into shorter sentences",
    ),
    PatternRule(
        rule_id="oxford_comma",
        check="grammar",
        pattern=re.compile(r"\b(\w+),\s+(\w+)\s+and\s+(\w+)\b"),
        issue_type=IssueType.PUNCTUATION,
        severity=Severity.MINOR,
        message="Consider using an Oxford comma",
        suggestion="Add a comma before \"and\"",
        replacement="{g1}, {g2}, and {g3}",
    ),
)

PUNCTUATION_RULES = (
    PatternRule(
        rule_id="multiple_punctuation",
        check="punctuation",
        pattern=re.compile(r"[.!?]{2,}"),
        issue_type=IssueType.PUNCTUATION,
        severity=Severity.MINOR,
        message="Repeated punctuation: '{match}'",
        suggestion="Use a single punctuation mark",
        ignore=frozenset({"..."}),
    ),
    PatternRule(
        rule_id="comma_splice",
        check="punctuation",
        pattern=re.compile(
            r",\s+(?:i|he|she|it|we|they|this)\s+(?:am|is|are|was|were|have|has|had|will|can)\b"
        ),
        issue_type=IssueType.PUNCTUATION,
        severity=Severity.MINOR,
        message="Possible comma splice: '{match}'",
        suggestion="Use a period or semicolon between independent clauses",
    ),
    PatternRule(
        rule_id="introductory_comma",
        check="punctuation",
        pattern=re.compile(
            r"(?:^|(?<=[.!?] ))(However|Therefore|Moreover|Furthermore|Additionally|Finally"
            r"|First|Second|Third)(?=\s)",
            _M,
        ),
        issue_type=IssueType.PUNCTUATION,
        severity=Severity.MINOR,
        message="Missing comma after introductory \"{g1}\"",
        suggestion="Add a comma after \"{g1}\"",
        replacement="{g1},",
        span_group=1,
    ),
)

# Lines at least this long should end with terminal punctuation
MISSING_PERIOD_MIN_LENGTH = 20
TERMINAL_PUNCTUATION = (".", "!", "?", ":")
BULLET_LINE = re.compile(r"^[•\-\*]")
# Contact-style lines never need a period
CONTACT_LINE = re.compile(r"@|https?://|www\.|\|")

# =============================================================================
# STYLE VOCABULARIES
# =============================================================================

INFORMAL_WORDS = (
    "awesome",
    "cool",
    "stuff",
    "things",
    "gotten",
    "gonna",
    "wanna",
    "kinda",
    "sorta",
    "yeah",
    "yep",
    "nope",
    "ok",
    "okay",
)

CLICHES = (
    "think outside the box",
    "go the extra mile",
    "team player",
    "hard worker",
    "results-driven",
    "self-motivated",
    "detail-oriented",
    "excellent communication skills",
)

WEAK_VERBS = MappingProxyType(
    {
        "was responsible for": "managed",
        "did": "accomplished",
        "made": "created",
        "got": "obtained",
        "had": "possessed",
        "helped": "assisted",
    }
)


def _alternation(words) -> str:
    return "|".join(re.escape(word) for word in words)


STYLE_RULES = (
    PatternRule(
        rule_id="informal_language",
        check="informal_language",
        pattern=re.compile(rf"\b({_alternation(INFORMAL_WORDS)})\b", _I),
        issue_type=IssueType.STYLE,
        severity=Severity.MINOR,
        message="Informal word: '{match}'",
        suggestion="Use more professional language",
    ),
    PatternRule(
        rule_id="cliche",
        check="cliche",
        pattern=re.compile(rf"\b({_alternation(CLICHES)})\b", _I),
        issue_type=IssueType.STYLE,
        severity=Severity.MINOR,
        message="Overused phrase: '{match}'",
        suggestion="Show the quality with a concrete example instead",
    ),
    PatternRule(
        rule_id="weak_verb",
        check="weak_verb",
        pattern=re.compile(rf"\b({_alternation(WEAK_VERBS)})\b", _I),
        issue_type=IssueType.STYLE,
        severity=Severity.MINOR,
        message="Weak verb: '{match}'",
        suggestion="Consider a stronger verb such as \"{strong}\"",
        replacement="{strong}",
    ),
)

# Sentences shorter than this are not compared for duplication
DUPLICATE_SENTENCE_MIN_WORDS = 4

# =============================================================================
# WARNING PATTERNS
# =============================================================================


@dataclass(frozen=True)
class WarningPatterns:
    """Document-wide consistency and convention patterns."""

    SERIAL_COMMA: re.Pattern = re.compile(r",\s+and\b", _I)
    NO_SERIAL_COMMA: re.Pattern = re.compile(r"\w+,\s+\w+\s+and\s+\w+")
    PAST_TENSE: re.Pattern = re.compile(r"\b(?:was|were|had|did|worked|managed|led)\b", _I)
    PRESENT_TENSE: re.Pattern = re.compile(r"\b(?:is|are|have|do|work|manage|lead)\b", _I)
    FIRST_PERSON: re.Pattern = re.compile(r"\b(?:I|me|my|myself)\b", _I)
    OBJECTIVE: re.Pattern = re.compile(r"\bobjective:?\s", _I)


MIXED_TENSE_THRESHOLD = 5

# =============================================================================
# AUTO-CORRECT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class AutoCorrectPatterns:
    DOUBLE_SPACE: re.Pattern = re.compile(r"(?<=\S) {2,}(?=\S)")
    MISSING_SPACE: re.Pattern = re.compile(r"(?<=[a-z][.!?])(?=[A-Z][a-z])")


# =============================================================================
# DOCUMENT-TYPE CAPABILITY TABLE
# =============================================================================

ALL_CHECKS = (
    "spelling",
    "repeated_word",
    "grammar",
    "punctuation",
    "missing_period",
    "informal_language",
    "cliche",
    "weak_verb",
    "duplicate_sentence",
    "first_person",
    "objective_section",
)

_PROFESSIONAL_ONLY = {
    "informal_language": (DocumentType.RESUME, DocumentType.COVER_LETTER),
    "cliche": (DocumentType.RESUME, DocumentType.COVER_LETTER),
    "weak_verb": (DocumentType.RESUME, DocumentType.COVER_LETTER),
    "first_person": (DocumentType.RESUME,),
    "objective_section": (DocumentType.RESUME,),
}

CAPABILITIES = MappingProxyType(
    {
        (doc_type, check): doc_type in _PROFESSIONAL_ONLY.get(check, tuple(DocumentType))
        for doc_type in DocumentType
        for check in ALL_CHECKS
    }
)


def is_enabled(document_type: DocumentType, check: str) -> bool:
    """Look up whether a check runs for a document type (unknown checks are off)."""
    return CAPABILITIES.get((document_type, check), False)
