"""Tests for feedback module."""

import json

import pytest

from box3review.proposals import (
    DEFAULT_REASONING,
    ChangeProposal,
    ChangeType,
    Severity,
    UserDecision,
)

from . import FeedbackParser, parse_feedback_to_proposals
from .lib import FALLBACK_REASONING, map_change_type, map_severity

STAGE = "4a_BronnenSpecialist"
SPECIALIST = "Bronnen Review"


def parse(raw: str) -> list[ChangeProposal]:
    return parse_feedback_to_proposals(raw, SPECIALIST, STAGE)


class TestStructuredFeedback:
    """JSON feedback, as a list or wrapped in an object."""

    @pytest.mark.unit
    def test_top_level_list(self):
        raw = json.dumps(
            [
                {"proposed": "Voeg bron toe", "severity": "critical"},
                {"new": "Herzie tabel", "old": "Oude tabel", "type": "delete"},
            ]
        )
        proposals = parse(raw)

        assert len(proposals) == 2
        assert proposals[0].proposed == "Voeg bron toe"
        assert proposals[0].severity == Severity.CRITICAL
        assert proposals[0].id == f"{STAGE}-0"
        assert proposals[1].proposed == "Herzie tabel"
        assert proposals[1].original == "Oude tabel"
        assert proposals[1].change_type == ChangeType.DELETE
        assert proposals[1].id == f"{STAGE}-1"

    @pytest.mark.unit
    def test_proposals_object(self):
        raw = json.dumps(
            {
                "proposals": [
                    {
                        "suggestion": "Noem het heffingsvrij vermogen",
                        "rationale": "Ontbreekt in de berekening",
                        "priority": "Belangrijk",
                        "section": "Berekening",
                    }
                ]
            }
        )
        [proposal] = parse(raw)

        assert proposal.proposed == "Noem het heffingsvrij vermogen"
        assert proposal.reasoning == "Ontbreekt in de berekening"
        assert proposal.severity == Severity.IMPORTANT
        assert proposal.section == "Berekening"
        assert proposal.specialist == SPECIALIST

    @pytest.mark.unit
    def test_bevindingen_object(self):
        raw = json.dumps({"bevindingen": [{"proposed": "Corrigeer rendement"}]})
        [proposal] = parse(raw)
        assert proposal.proposed == "Corrigeer rendement"

    @pytest.mark.unit
    def test_alias_precedence(self):
        """The first alias in each set wins when several are present."""
        raw = json.dumps(
            [
                {
                    "proposed": "eerste",
                    "new": "tweede",
                    "suggestion": "derde",
                    "original": "orig",
                    "old": "oud",
                    "reasoning": "reden a",
                    "reason": "reden b",
                    "rationale": "reden c",
                    "severity": "suggestion",
                    "priority": "critical",
                }
            ]
        )
        [proposal] = parse(raw)

        assert proposal.proposed == "eerste"
        assert proposal.original == "orig"
        assert proposal.reasoning == "reden a"
        assert proposal.severity == Severity.SUGGESTION

    @pytest.mark.unit
    def test_empty_alias_falls_through(self):
        raw = json.dumps([{"proposed": "", "new": "tweede"}])
        assert parse(raw)[0].proposed == "tweede"

    @pytest.mark.unit
    def test_missing_fields_get_defaults(self):
        [proposal] = parse(json.dumps([{"proposed": "Iets"}]))

        assert proposal.section == "Algemeen"
        assert proposal.original == ""
        assert proposal.reasoning == DEFAULT_REASONING
        assert proposal.change_type == ChangeType.MODIFY
        assert proposal.severity == Severity.SUGGESTION

    @pytest.mark.unit
    def test_explicit_id_kept(self):
        [proposal] = parse(json.dumps([{"id": "custom-7", "proposed": "x"}]))
        assert proposal.id == "custom-7"

    @pytest.mark.unit
    def test_id_uses_element_position(self):
        raw = json.dumps([42, {"proposed": "na een getal"}])
        [proposal] = parse(raw)
        assert proposal.id == f"{STAGE}-1"

    @pytest.mark.unit
    def test_string_elements(self):
        proposals = parse(json.dumps(["Doe X", "Doe Y"]))
        assert [p.proposed for p in proposals] == ["Doe X", "Doe Y"]

    @pytest.mark.unit
    def test_fenced_json_block(self):
        raw = (
            "Hieronder de voorstellen:\n"
            "```json\n"
            '[{"proposed": "Pas tarief aan", "changeType": "modify"}]\n'
            "```\n"
            "Einde."
        )
        [proposal] = parse(raw)
        assert proposal.proposed == "Pas tarief aan"

    @pytest.mark.unit
    def test_unknown_decision_ignored(self):
        raw = json.dumps([{"proposed": "x", "userDecision": "later"}])
        assert parse(raw)[0].user_decision is None

    @pytest.mark.unit
    def test_malformed_json_falls_back_to_text(self):
        raw = '{"proposals": [ {"proposed": "kapot"'
        [proposal] = parse(raw)
        assert proposal.proposed == raw
        assert proposal.reasoning == FALLBACK_REASONING

    @pytest.mark.unit
    def test_unmatched_shape_falls_back(self):
        raw = '{"status": "geen_wijzigingen"}'
        [proposal] = parse(raw)
        assert proposal.proposed == raw

    @pytest.mark.unit
    def test_backticks_inside_json_values(self):
        raw = '[{"proposed": "Gebruik ```code``` blok", "severity": "critical"}]'
        [proposal] = parse(raw)
        assert proposal.proposed == "Gebruik ```code``` blok"
        assert proposal.severity == Severity.CRITICAL

    @pytest.mark.unit
    def test_unparseable_input_falls_back_to_fence(self):
        raw = '[zie hieronder]\n```json\n[{"proposed": "Uit blok"}]\n```'
        [proposal] = parse(raw)
        assert proposal.proposed == "Uit blok"

    @pytest.mark.unit
    def test_deeply_nested_json_does_not_raise(self):
        raw = "[" * 100000
        [proposal] = parse(raw)
        assert proposal.proposed == raw
        assert proposal.reasoning == FALLBACK_REASONING

    @pytest.mark.unit
    def test_round_trip(self):
        """JSON dump of proposals parses back to the same proposals."""
        originals = [
            ChangeProposal(
                id="4b-0",
                specialist="Fiscaal Technisch",
                change_type=ChangeType.ADD,
                section="Conclusie",
                original="",
                proposed="Voeg tegenbewijsregeling toe",
                reasoning="Hoge Raad 2024",
                severity=Severity.CRITICAL,
            ),
            ChangeProposal(
                id="4b-1",
                specialist="Fiscaal Technisch",
                change_type=ChangeType.RESTRUCTURE,
                section="Inleiding",
                original="Oude alinea",
                proposed="Nieuwe alinea",
                severity=Severity.IMPORTANT,
                user_decision=UserDecision.MODIFY,
                user_note="Eigen versie",
            ),
        ]
        raw = json.dumps([p.to_dict() for p in originals])

        assert [p.to_dict() for p in parse(raw)] == [p.to_dict() for p in originals]


class TestReviewerReports:
    """Report objects written by the fiscal reviewers."""

    @pytest.mark.unit
    def test_technical_validation_findings(self):
        raw = json.dumps(
            {
                "fiscaal_technische_validatie": {
                    "status": "Fouten gevonden",
                    "bevindingen": [
                        {
                            "nummer": 1,
                            "type_fout": "Regeltoepassingsfout",
                            "locatie": "Paragraaf 2, tweede zin",
                            "probleem": "Verkeerd heffingsvrij vermogen",
                            "correctie_aanbeveling": "Gebruik € 57.000",
                        },
                        {
                            "nummer": 2,
                            "type_fout": "Cijferfout",
                            "probleem": "Rendement klopt niet",
                        },
                        {
                            "nummer": 3,
                            "type_fout": "Controle",
                            "locatie": "Tabel 1",
                            "probleem": "Forfait correct toegepast",
                        },
                        {},
                    ],
                }
            }
        )
        first, second = parse(raw)

        assert first.severity == Severity.CRITICAL
        assert first.section == "Paragraaf 2, tweede zin"
        assert first.original == "Paragraaf 2, tweede zin"
        assert first.proposed == "Gebruik € 57.000"
        assert first.reasoning == "Verkeerd heffingsvrij vermogen"
        assert first.change_type == ChangeType.MODIFY

        assert second.severity == Severity.IMPORTANT
        assert second.section == "Bevinding 2"
        assert second.proposed == "Rendement klopt niet"
        assert [first.id, second.id] == [f"{STAGE}-0", f"{STAGE}-1"]

    @pytest.mark.unit
    def test_strategic_analysis_single_finding(self):
        raw = json.dumps(
            {
                "fiscaal_strategische_analyse": {
                    "validatie_bevindingen": {
                        "type_fout": "Onnauwkeurigheid",
                        "beschrijving": "Peildatum ontbreekt",
                    }
                }
            }
        )
        [proposal] = parse(raw)
        assert proposal.severity == Severity.IMPORTANT
        assert proposal.section == "Bevinding 1"
        assert proposal.proposed == "Peildatum ontbreekt"

    @pytest.mark.unit
    def test_scenario_analysis(self):
        raw = json.dumps(
            {
                "blinde_vlekken": [
                    "Partnerverdeling",
                    {"titel": "Groene beleggingen", "beschrijving": "Vrijstelling"},
                ],
                "impliciete_aannames": [
                    "Fiscaal partnerschap het hele jaar",
                    {"aanname": "Geen schulden"},
                ],
                "grootste_risico": {
                    "titel": "Tegenbewijs",
                    "omschrijving": "Werkelijk rendement kan lager zijn",
                },
            }
        )
        proposals = parse(raw)

        assert [p.proposed for p in proposals] == [
            "Partnerverdeling",
            "Vrijstelling",
            "Fiscaal partnerschap het hele jaar",
            "Geen schulden",
            "Werkelijk rendement kan lager zijn",
        ]
        assert all(p.change_type == ChangeType.ADD for p in proposals)
        assert [p.severity for p in proposals] == [Severity.IMPORTANT] * 4 + [
            Severity.CRITICAL
        ]
        assert proposals[1].section == "Groene beleggingen"
        assert proposals[2].section == "Impliciete Aannames"
        assert proposals[4].section == "Tegenbewijs"
        assert [p.id for p in proposals] == [f"{STAGE}-{i}" for i in range(5)]

    @pytest.mark.unit
    def test_risk_as_string(self):
        [proposal] = parse(json.dumps({"grootste_risico": "Box 3 arrest"}))
        assert proposal.section == "Grootste Risico"
        assert proposal.severity == Severity.CRITICAL

    @pytest.mark.unit
    def test_report_with_only_confirmations_falls_back(self):
        raw = json.dumps(
            {
                "fiscaal_technische_validatie": {
                    "status": "100% accuraat",
                    "bevindingen": [{"probleem": "Alles correct berekend"}],
                }
            }
        )
        [proposal] = parse(raw)
        assert proposal.proposed == raw
        assert proposal.reasoning == FALLBACK_REASONING


class TestTextFeedback:
    """Line-based parsing of free text feedback."""

    @pytest.mark.unit
    def test_numbered_items(self):
        proposals = parse_feedback_to_proposals("1. Doe X\n\n2. Doe Y", "s", "st")

        assert [p.proposed for p in proposals] == ["Doe X", "Doe Y"]
        assert [p.id for p in proposals] == ["st-0", "st-1"]
        assert all(p.change_type == ChangeType.MODIFY for p in proposals)

    @pytest.mark.unit
    def test_numbered_items_without_blank_line(self):
        proposals = parse("1. Doe X\n2. Doe Y")
        assert [p.proposed for p in proposals] == ["Doe X", "Doe Y"]

    @pytest.mark.unit
    def test_bullets(self):
        proposals = parse("- eerste punt\n* tweede punt\n• derde punt")
        assert [p.proposed for p in proposals] == [
            "eerste punt",
            "tweede punt",
            "derde punt",
        ]

    @pytest.mark.unit
    def test_severity_line_starts_proposal(self):
        [proposal] = parse("KRITIEK: herzie paragraaf 3")
        assert proposal.severity == Severity.CRITICAL
        assert proposal.proposed == "herzie paragraaf 3"

    @pytest.mark.unit
    def test_severity_line_updates_current(self):
        [proposal] = parse("1. Pas de tabel aan\nBelangrijk: cijfers kloppen niet")
        assert proposal.proposed == "Pas de tabel aan"
        assert proposal.severity == Severity.IMPORTANT

    @pytest.mark.unit
    def test_severity_line_without_colon(self):
        [proposal] = parse("KRITIEK herzie paragraaf 3")
        assert proposal.severity == Severity.CRITICAL
        assert proposal.proposed == "herzie paragraaf 3"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "keyword,expected",
        [
            ("Toevoegen", ChangeType.ADD),
            ("add", ChangeType.ADD),
            ("Wijzig", ChangeType.MODIFY),
            ("Wijzigen", ChangeType.MODIFY),
            ("VERWIJDER", ChangeType.DELETE),
            ("Delete", ChangeType.DELETE),
            ("verwijderen", ChangeType.DELETE),
            ("Herstructureer", ChangeType.RESTRUCTURE),
            ("Herstructureren", ChangeType.RESTRUCTURE),
        ],
    )
    def test_change_type_keywords(self, keyword, expected):
        [proposal] = parse(f"{keyword}: de alinea over box 3")
        assert proposal.change_type == expected
        assert proposal.proposed == "de alinea over box 3"

    @pytest.mark.unit
    def test_change_type_line_flushes_current(self):
        proposals = parse("1. Eerste voorstel\nToevoegen: tweede voorstel")
        assert len(proposals) == 2
        assert proposals[1].change_type == ChangeType.ADD

    @pytest.mark.unit
    def test_numbered_wins_over_keyword(self):
        [proposal] = parse("1. Toevoegen: nieuwe paragraaf")
        assert proposal.change_type == ChangeType.MODIFY
        assert proposal.proposed == "Toevoegen: nieuwe paragraaf"

    @pytest.mark.unit
    def test_section_header_updates_in_place(self):
        [proposal] = parse("1. Herzie berekening\nSectie: Vermogensmix")
        assert proposal.section == "Vermogensmix"

    @pytest.mark.unit
    def test_section_without_proposal_ignored(self):
        [proposal] = parse("Sectie: Vermogensmix")
        assert proposal.reasoning == FALLBACK_REASONING

    @pytest.mark.unit
    def test_reasoning_accumulates(self):
        [proposal] = parse(
            "1. Pas forfait aan\nReden: tarief 2023 is anders\nReason: see ruling"
        )
        assert proposal.reasoning == "tarief 2023 is anders see ruling"

    @pytest.mark.unit
    def test_before_after(self):
        [proposal] = parse("1. Tarief corrigeren\nOud: 31% → Nieuw: 32%")
        assert proposal.original == "31%"
        assert proposal.proposed == "32%"

    @pytest.mark.unit
    def test_before_after_ascii_arrow(self):
        [proposal] = parse("- Jaartal\nBefore: 2022 -> After: 2023")
        assert proposal.original == "2022"
        assert proposal.proposed == "2023"

    @pytest.mark.unit
    def test_continuation_lines(self):
        [proposal] = parse(
            "Toevoegen:  \n- Tegenbewijs\nomdat dit ontbreekt\nen relevant is"
        )
        assert proposal.proposed == "Tegenbewijs"
        assert proposal.reasoning == "omdat dit ontbreekt en relevant is"

    @pytest.mark.unit
    def test_before_after_replaces_proposed(self):
        [proposal] = parse("- x\nOud: a → Nieuw: b")
        assert proposal.proposed == "b"

    @pytest.mark.unit
    def test_defaults_filled(self):
        [proposal] = parse("- voorstel zonder reden")
        assert proposal.reasoning == DEFAULT_REASONING
        assert proposal.section == "Algemeen"
        assert proposal.specialist == SPECIALIST

    @pytest.mark.unit
    def test_windows_line_endings(self):
        proposals = parse("1. Doe X\r\n\r\n2. Doe Y\r\n")
        assert [p.proposed for p in proposals] == ["Doe X", "Doe Y"]


class TestFallback:
    """Feedback without recognisable structure."""

    @pytest.mark.unit
    def test_plain_text(self):
        raw = "Het rapport is helder geschreven.\nGoed werk."
        [proposal] = parse(raw)

        assert proposal.proposed == raw
        assert proposal.section == "Algemeen"
        assert proposal.severity == Severity.SUGGESTION
        assert proposal.change_type == ChangeType.MODIFY
        assert proposal.id == f"{STAGE}-0"
        assert proposal.reasoning == FALLBACK_REASONING

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["", "   ", "\n\n", "[]", "{}", "[1, 2]"])
    def test_never_empty(self, raw):
        assert len(parse(raw)) == 1


class TestFeedbackParser:
    """Tests for the FeedbackParser class."""

    @pytest.mark.unit
    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("REVIEW_DEFAULT_STAGE", "4c_ScenarioGatenAnalist")
        monkeypatch.setenv("REVIEW_DEFAULT_SPECIALIST", "Scenario Analyse")
        [proposal] = FeedbackParser().parse("- Benoem blinde vlek")

        assert proposal.id == "4c_ScenarioGatenAnalist-0"
        assert proposal.specialist == "Scenario Analyse"

    @pytest.mark.unit
    def test_call_arguments_override_instance(self):
        parser = FeedbackParser(specialist="a", stage_id="b")
        [proposal] = parser.parse("- x", specialist="c", stage_id="d")
        assert proposal.id == "d-0"
        assert proposal.specialist == "c"


class TestFieldMapping:
    """Tests for label mapping helpers."""

    @pytest.mark.unit
    def test_map_change_type(self):
        assert map_change_type("TOEVOEGEN") == ChangeType.ADD
        assert map_change_type("REPLACE") == ChangeType.MODIFY

    @pytest.mark.unit
    def test_map_severity(self):
        assert map_severity("KRITIEK - rekenfout") == Severity.CRITICAL
        assert map_severity("important") == Severity.IMPORTANT
        assert map_severity(3) == Severity.SUGGESTION


class TestReviewerSample:
    """End-to-end parse of a realistic reviewer output."""

    @pytest.mark.unit
    def test_sample(self, reviewer_feedback):
        proposals = parse(reviewer_feedback)

        assert len(proposals) == 3

        first, second, third = proposals
        assert first.section == "Berekening"
        assert first.reasoning == "Zonder bron is de berekening niet controleerbaar"

        assert second.severity == Severity.CRITICAL
        assert second.original == "€ 50.650"
        assert second.proposed == "€ 57.000"

        assert third.change_type == ChangeType.ADD
        assert third.proposed == "Paragraaf over de tegenbewijsregeling"
        assert [p.id for p in proposals] == [f"{STAGE}-{i}" for i in range(3)]
