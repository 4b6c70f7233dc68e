"""Feedback parsing for reviewer stages.

Extracts structured change proposals from the free-form output of an AI
reviewer. Two strategies are tried in order:

1. Structured: the feedback (or else the first fenced code block in it) is
   JSON, either a list of proposal objects, an object holding a `proposals` or
   `bevindingen` list, or a fiscal reviewer's report object (validation
   findings, blind spots, implicit assumptions, biggest risk).
2. Text: the feedback is scanned line by line, recognising numbered items,
   bullets, keyword lines ("Toevoegen:", "Kritiek", "Reden:", ...) and
   before/after pairs.

When neither strategy yields anything, the whole feedback becomes a single
generic proposal, so callers always get at least one proposal back.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, NamedTuple

from box3review.config import get_default_specialist, get_default_stage
from box3review.proposals import (
    DEFAULT_REASONING,
    DEFAULT_SECTION,
    ChangeProposal,
    ChangeType,
    Severity,
    UserDecision,
)

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Algemene feedback van specialist"

# Keys that may hold the proposal list in a JSON object
_LIST_KEYS = ("proposals", "bevindingen")

# Top-level keys of the report objects written by the fiscal reviewers
_REPORT_KEYS = (
    "fiscaal_strategische_analyse",
    "fiscaal_technische_validatie",
    "blinde_vlekken",
    "impliciete_aannames",
    "grootste_risico",
)

_CONFIRMATION_MARKERS = ("correct toegepast", "correct berekend", "geen correctie")

BLIND_SPOT_REASONING = "Potentiële blinde vlek geïdentificeerd"
ASSUMPTION_REASONING = (
    "Impliciete aanname geïdentificeerd - voeg toe aan uitgangspunten"
)
RISK_REASONING = "Kritiek risico - #1 factor die conclusie kan ondergraven"

# Accepted aliases per target field, in precedence order
_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "specialist": ("specialist",),
    "change_type": ("changeType", "change_type", "type"),
    "section": ("section", "sectie"),
    "original": ("original", "old"),
    "proposed": ("proposed", "new", "suggestion"),
    "reasoning": ("reasoning", "reason", "rationale"),
    "severity": ("severity", "priority"),
    "user_decision": ("userDecision", "user_decision"),
    "user_note": ("userNote", "user_note"),
}

_CHANGE_TYPES: dict[str, ChangeType] = {
    "add": ChangeType.ADD,
    "toevoegen": ChangeType.ADD,
    "modify": ChangeType.MODIFY,
    "wijzig": ChangeType.MODIFY,
    "wijzigen": ChangeType.MODIFY,
    "delete": ChangeType.DELETE,
    "verwijder": ChangeType.DELETE,
    "verwijderen": ChangeType.DELETE,
    "restructure": ChangeType.RESTRUCTURE,
    "herstructureer": ChangeType.RESTRUCTURE,
    "herstructureren": ChangeType.RESTRUCTURE,
}

_CODE_FENCE = re.compile(r"```[ \t]*(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


# =============================================================================
# Field Mapping
# =============================================================================


def map_change_type(value: Any) -> ChangeType:
    """Map a Dutch or English change-type label to a ChangeType.

    Unknown labels map to MODIFY.
    """
    return _CHANGE_TYPES.get(str(value).strip().lower(), ChangeType.MODIFY)


def map_severity(value: Any) -> Severity:
    """Map a Dutch or English severity label to a Severity.

    Matching is by substring, so "KRITIEK - rekenfout" is critical.
    Unknown labels map to SUGGESTION.
    """
    label = str(value).lower()
    if "critical" in label or "kritiek" in label:
        return Severity.CRITICAL
    if "important" in label or "belangrijk" in label:
        return Severity.IMPORTANT
    return Severity.SUGGESTION


def _map_decision(value: Any) -> UserDecision | None:
    try:
        return UserDecision(str(value).strip().lower())
    except ValueError:
        logger.debug(f"Ignoring unknown user decision {value!r}")
        return None


def _join(existing: str, addition: str) -> str:
    return f"{existing} {addition}" if existing else addition


# =============================================================================
# Proposal Drafts
# =============================================================================


@dataclass
class _Draft:
    """Proposal under construction; empty fields are filled on finalize."""

    proposed: str = ""
    original: str = ""
    reasoning: str = ""
    section: str = DEFAULT_SECTION
    change_type: ChangeType = ChangeType.MODIFY
    severity: Severity = Severity.SUGGESTION
    id: str = ""
    specialist: str = ""
    user_decision: UserDecision | None = None
    user_note: str | None = None


def _finalize(
    draft: _Draft, specialist: str, stage_id: str, index: int
) -> ChangeProposal:
    return ChangeProposal(
        id=draft.id or f"{stage_id}-{index}",
        specialist=draft.specialist or specialist,
        change_type=draft.change_type or ChangeType.MODIFY,
        section=draft.section or DEFAULT_SECTION,
        original=draft.original or "",
        proposed=draft.proposed or "",
        reasoning=draft.reasoning or DEFAULT_REASONING,
        severity=draft.severity or Severity.SUGGESTION,
        user_decision=draft.user_decision,
        user_note=draft.user_note,
    )


# =============================================================================
# Structured (JSON) Strategy
# =============================================================================


def _json_candidates(raw_feedback: str) -> Iterator[str]:
    """Yield texts to try as JSON: the input itself, then its first fenced block."""
    text = raw_feedback.strip()
    if text.startswith(("{", "[")):
        yield text
    match = _CODE_FENCE.search(text)
    if match:
        yield match.group(1).strip()


def _load_json(candidate: str) -> Any:
    """Decode a JSON candidate, or return None when it does not decode."""
    if not candidate.startswith(("{", "[")):
        return None
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.debug(f"Feedback looks like JSON but does not parse: {e}")
        return None


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _pick(data: dict, field: str) -> Any:
    return _first(data, *_ALIASES[field])


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _draft_from_json(item: Any) -> _Draft | None:
    """Normalize one element of a JSON proposal list."""
    if isinstance(item, str):
        return _Draft(proposed=item)
    if not isinstance(item, dict):
        return None

    draft = _Draft(
        id=_text(_pick(item, "id")),
        specialist=_text(_pick(item, "specialist")),
        section=_text(_pick(item, "section")),
        original=_text(_pick(item, "original")),
        proposed=_text(_pick(item, "proposed")),
        reasoning=_text(_pick(item, "reasoning")),
        user_note=_pick(item, "user_note"),
    )

    change_type = _pick(item, "change_type")
    if change_type is not None:
        draft.change_type = map_change_type(change_type)

    severity = _pick(item, "severity")
    if severity is not None:
        draft.severity = map_severity(severity)

    decision = _pick(item, "user_decision")
    if decision is not None:
        draft.user_decision = _map_decision(decision)

    if draft.user_note is not None:
        draft.user_note = _text(draft.user_note)

    return draft


# =============================================================================
# Reviewer Report Objects
# =============================================================================


def _finding_severity(type_fout: Any) -> Severity:
    """Map a validation finding's error type to a Severity."""
    label = _text(type_fout).lower()
    if any(marker in label for marker in ("kritiek", "regel", "toepassingsfout")):
        return Severity.CRITICAL
    if any(marker in label for marker in ("cijfer", "hallucinatie", "onnauwkeurig")):
        return Severity.IMPORTANT
    return Severity.SUGGESTION


def _as_list(value: Any) -> list:
    if isinstance(value, list):
        return value
    return [value] if value else []


def _drafts_from_findings(block: Any, list_key: str, number_key: str) -> list[_Draft]:
    """Drafts for the findings of a fiscal validation block.

    Confirmations ("correct toegepast", "geen correctie", ...) are not changes
    and are skipped, as are findings with neither a problem nor a correction.
    """
    if not isinstance(block, dict):
        return []

    drafts = []
    for idx, finding in enumerate(_as_list(block.get(list_key))):
        if not isinstance(finding, dict) or not finding:
            continue

        locatie = _text(_first(finding, "locatie", "locatie_zin_paragraaf", "sectie"))
        probleem = _text(_first(finding, "probleem", "beschrijving"))
        correctie = _text(
            _first(finding, "correctie_aanbeveling", "correctie", "aanbeveling")
        )
        if not (probleem or correctie):
            continue
        combined = (correctie + probleem).lower()
        if any(marker in combined for marker in _CONFIRMATION_MARKERS):
            continue

        number = finding.get(number_key) or idx + 1
        drafts.append(
            _Draft(
                section=locatie[:150] or f"Bevinding {number}",
                original=locatie,
                proposed=correctie or probleem,
                reasoning=probleem,
                severity=_finding_severity(finding.get("type_fout")),
            )
        )
    return drafts


def _drafts_from_blind_spots(items: Any) -> list[_Draft]:
    drafts = []
    for idx, item in enumerate(_as_list(items)):
        if isinstance(item, str):
            title, description = item, ""
        elif isinstance(item, dict):
            title = _text(_first(item, "titel", "onderwerp", "categorie"))
            description = _text(_first(item, "beschrijving", "toelichting"))
        else:
            continue
        title = title or f"Blinde Vlek {idx + 1}"
        drafts.append(
            _Draft(
                change_type=ChangeType.ADD,
                section=title[:100],
                proposed=description or title,
                reasoning=BLIND_SPOT_REASONING,
                severity=Severity.IMPORTANT,
            )
        )
    return drafts


def _drafts_from_assumptions(items: Any) -> list[_Draft]:
    drafts = []
    for item in _as_list(items):
        if isinstance(item, dict):
            text = _text(_first(item, "aanname", "beschrijving")) or json.dumps(
                item, ensure_ascii=False
            )
        else:
            text = _text(item)
        if not text:
            continue
        drafts.append(
            _Draft(
                change_type=ChangeType.ADD,
                section="Impliciete Aannames",
                proposed=text,
                reasoning=ASSUMPTION_REASONING,
                severity=Severity.IMPORTANT,
            )
        )
    return drafts


def _drafts_from_risk(risk: Any) -> list[_Draft]:
    if isinstance(risk, dict):
        title = _text(_first(risk, "titel", "onderwerp")) or "Grootste Risico"
        description = _text(_first(risk, "omschrijving", "beschrijving", "toelichting"))
    else:
        title, description = "Grootste Risico", _text(risk)
    if not description:
        return []
    return [
        _Draft(
            change_type=ChangeType.ADD,
            section=title,
            proposed=description,
            reasoning=RISK_REASONING,
            severity=Severity.CRITICAL,
        )
    ]


def _drafts_from_report(report: dict) -> list[_Draft]:
    """Collect drafts from a fiscal reviewer's report object, section by section."""
    return (
        _drafts_from_findings(
            report.get("fiscaal_strategische_analyse"),
            "validatie_bevindingen",
            "bevinding_nummer",
        )
        + _drafts_from_findings(
            report.get("fiscaal_technische_validatie"), "bevindingen", "nummer"
        )
        + _drafts_from_blind_spots(report.get("blinde_vlekken"))
        + _drafts_from_assumptions(report.get("impliciete_aannames"))
        + _drafts_from_risk(report.get("grootste_risico"))
    )


# =============================================================================
# JSON Dispatch
# =============================================================================


def _proposals_from_json(
    parsed: Any, specialist: str, stage_id: str
) -> list[ChangeProposal]:
    items = None
    if isinstance(parsed, list):
        items = parsed
    elif isinstance(parsed, dict):
        for key in _LIST_KEYS:
            if isinstance(parsed.get(key), list):
                items = parsed[key]
                break

    if items is not None:
        proposals = []
        for idx, item in enumerate(items):
            draft = _draft_from_json(item)
            if draft is None:
                logger.debug(f"Skipping non-proposal element at index {idx}")
                continue
            proposals.append(_finalize(draft, specialist, stage_id, idx))
        return proposals

    if isinstance(parsed, dict) and any(parsed.get(key) for key in _REPORT_KEYS):
        drafts = _drafts_from_report(parsed)
        return [
            _finalize(draft, specialist, stage_id, idx)
            for idx, draft in enumerate(drafts)
        ]

    logger.debug("JSON feedback has no recognised proposal list")
    return []


def _parse_structured(
    raw_feedback: str, specialist: str, stage_id: str
) -> list[ChangeProposal]:
    for candidate in _json_candidates(raw_feedback):
        parsed = _load_json(candidate)
        if parsed is None:
            continue
        proposals = _proposals_from_json(parsed, specialist, stage_id)
        if proposals:
            return proposals
    return []


# =============================================================================
# Text Strategy
# =============================================================================


class _TextScan:
    """Accumulator threaded through the line scan: one open draft at most."""

    def __init__(self) -> None:
        self.current: _Draft | None = None
        self.drafts: list[_Draft] = []

    def flush(self) -> None:
        if self.current is not None:
            self.drafts.append(self.current)
            self.current = None

    def start(self, **fields: Any) -> None:
        self.flush()
        self.current = _Draft(**fields)


def _on_item(scan: _TextScan, match: re.Match) -> None:
    scan.start(proposed=match.group("text"))


def _on_section(scan: _TextScan, match: re.Match) -> None:
    scan.current.section = match.group("text")


def _on_change_type(scan: _TextScan, match: re.Match) -> None:
    scan.start(
        proposed=match.group("text"),
        change_type=map_change_type(match.group("keyword")),
    )


def _on_severity(scan: _TextScan, match: re.Match) -> None:
    severity = map_severity(match.group("keyword"))
    if scan.current is not None:
        scan.current.severity = severity
    else:
        scan.start(proposed=match.group("text"), severity=severity)


def _on_reason(scan: _TextScan, match: re.Match) -> None:
    scan.current.reasoning = _join(scan.current.reasoning, match.group("text"))


def _on_before_after(scan: _TextScan, match: re.Match) -> None:
    scan.current.original = match.group("original")
    scan.current.proposed = match.group("proposed")


def _on_text(scan: _TextScan, match: re.Match) -> None:
    line = match.group(0)
    draft = scan.current
    if not draft.proposed:
        draft.proposed = line
    elif not draft.reasoning:
        draft.reasoning = line
    else:
        draft.reasoning = _join(draft.reasoning, line)


class _LineRule(NamedTuple):
    name: str
    pattern: re.Pattern
    handler: Callable[[_TextScan, re.Match], None]
    needs_current: bool = False


_COLON = r"\s*:\s*"


def _keyword_line(keywords: str, separator: str = _COLON) -> re.Pattern:
    return re.compile(
        rf"^(?P<keyword>{keywords})(?:{separator})(?P<text>.+)$", re.IGNORECASE
    )


# Tried top to bottom; the first matching rule handles the line.
_LINE_RULES: tuple[_LineRule, ...] = (
    _LineRule("numbered", re.compile(r"^\d+\.\s+(?P<text>.+)$"), _on_item),
    _LineRule("bullet", re.compile(r"^(?:[-*]\s+|•\s*)(?P<text>.+)$"), _on_item),
    _LineRule(
        "section",
        _keyword_line("Sectie|Section|Paragraaf|Hoofdstuk"),
        _on_section,
        needs_current=True,
    ),
    _LineRule(
        "change_type",
        _keyword_line(
            "Toevoegen|Add|Wijzigen|Wijzig|Modify|Verwijderen|Verwijder|Delete"
            "|Herstructureren|Herstructureer|Restructure"
        ),
        _on_change_type,
    ),
    _LineRule(
        "severity",
        _keyword_line(
            "Kritiek|Critical|Belangrijk|Important|Suggestie|Suggestion",
            separator=rf"{_COLON}|\s+",
        ),
        _on_severity,
    ),
    _LineRule(
        "reason",
        _keyword_line("Reden|Reason|Rationale"),
        _on_reason,
        needs_current=True,
    ),
    _LineRule(
        "before_after",
        re.compile(
            r"^(?:Oud|Old|Before)\s*:\s*(?P<original>.+?)\s*(?:→|->)\s*"
            r"(?:Nieuw|New|After)\s*:\s*(?P<proposed>.+)$",
            re.IGNORECASE,
        ),
        _on_before_after,
        needs_current=True,
    ),
    _LineRule("text", re.compile(r"^.+$"), _on_text, needs_current=True),
)


def _parse_text(
    raw_feedback: str, specialist: str, stage_id: str
) -> list[ChangeProposal]:
    scan = _TextScan()

    for line in raw_feedback.splitlines():
        stripped = line.strip()
        if not stripped:
            scan.flush()
            continue

        for rule in _LINE_RULES:
            if rule.needs_current and scan.current is None:
                continue
            match = rule.pattern.match(stripped)
            if match:
                rule.handler(scan, match)
                break

    scan.flush()
    return [
        _finalize(draft, specialist, stage_id, idx)
        for idx, draft in enumerate(scan.drafts)
    ]


def _fallback(raw_feedback: str, specialist: str, stage_id: str) -> ChangeProposal:
    return ChangeProposal(
        id=f"{stage_id}-0",
        specialist=specialist,
        change_type=ChangeType.MODIFY,
        section=DEFAULT_SECTION,
        original="",
        proposed=raw_feedback,
        reasoning=FALLBACK_REASONING,
        severity=Severity.SUGGESTION,
    )


# =============================================================================
# Public Interface
# =============================================================================


class FeedbackParser:
    """Parse reviewer feedback into structured change proposals.

    The specialist label and stage id only tag the output; when omitted they
    come from the REVIEW_DEFAULT_SPECIALIST and REVIEW_DEFAULT_STAGE settings.

    Example:
        >>> parser = FeedbackParser(stage_id="4a_BronnenSpecialist")
        >>> proposals = parser.parse("1. Voeg de bron toe\\n\\n2. Herzie de tabel")
        >>> [p.id for p in proposals]
        ['4a_BronnenSpecialist-0', '4a_BronnenSpecialist-1']
    """

    def __init__(
        self, specialist: str | None = None, stage_id: str | None = None
    ) -> None:
        self.specialist = get_default_specialist(specialist)
        self.stage_id = get_default_stage(stage_id)

    def parse(
        self,
        raw_feedback: str,
        specialist: str | None = None,
        stage_id: str | None = None,
    ) -> list[ChangeProposal]:
        """Parse feedback into proposals.

        Args:
            raw_feedback: Reviewer output, free text or JSON.
            specialist: Label for the originating reviewer.
            stage_id: Stage id used as the proposal id prefix.

        Returns:
            Non-empty list of proposals in source order.
        """
        raw_feedback = raw_feedback or ""
        specialist = specialist or self.specialist
        stage_id = stage_id or self.stage_id

        proposals = _parse_structured(raw_feedback, specialist, stage_id)
        if proposals:
            logger.debug(f"{stage_id}: {len(proposals)} proposal(s) from JSON")
            return proposals

        proposals = _parse_text(raw_feedback, specialist, stage_id)
        if proposals:
            logger.debug(f"{stage_id}: {len(proposals)} proposal(s) from text")
            return proposals

        logger.debug(f"{stage_id}: no structure found, using fallback proposal")
        return [_fallback(raw_feedback, specialist, stage_id)]


def parse_feedback_to_proposals(
    raw_feedback: str, specialist: str, stage_id: str
) -> list[ChangeProposal]:
    """Parse raw reviewer feedback into a non-empty list of proposals."""
    return FeedbackParser(specialist=specialist, stage_id=stage_id).parse(
        raw_feedback
    )


__all__ = [
    "FALLBACK_REASONING",
    "FeedbackParser",
    "map_change_type",
    "map_severity",
    "parse_feedback_to_proposals",
]
