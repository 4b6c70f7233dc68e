"""Workflow stage identifiers and display names.

Stage ids double as proposal id prefixes, and their display names label
the specialist that produced a set of proposals.
"""

STAGE_NAMES: dict[str, str] = {
    "1a_informatiecheck": "Informatie Analyse",
    "1b_informatiecheck_email": "Email Generatie",
    "2_complexiteitscheck": "Complexiteits Check",
    "3_generatie": "Basis Rapport",
    "4a_BronnenSpecialist": "Bronnen Review",
    "4b_FiscaalTechnischSpecialist": "Fiscaal Technisch",
    "4c_ScenarioGatenAnalist": "Scenario Analyse",
    "4e_DeAdvocaat": "Juridisch Review",
    "4f_HoofdCommunicatie": "Hoofd Communicatie",
    "6_change_summary": "Wijzigingen Samenvatting",
    "7_fiscale_briefing": "Fiscale Briefing",
    "editor": "Feedback Verwerker",
    "adjustment": "Rapport Aanpasser",
}

# Helper stages (editor, adjustment) and optional ones (6, 7) are not part
# of the main workflow order.
STAGE_ORDER: tuple[str, ...] = (
    "1a_informatiecheck",
    "1b_informatiecheck_email",
    "2_complexiteitscheck",
    "3_generatie",
    "4a_BronnenSpecialist",
    "4b_FiscaalTechnischSpecialist",
    "4c_ScenarioGatenAnalist",
    "4e_DeAdvocaat",
    "4f_HoofdCommunicatie",
)

# Stages whose output is reviewer feedback rather than report text
REVIEW_STAGES: tuple[str, ...] = (
    "4a_BronnenSpecialist",
    "4b_FiscaalTechnischSpecialist",
    "4c_ScenarioGatenAnalist",
    "4e_DeAdvocaat",
    "4f_HoofdCommunicatie",
)


def is_valid_stage_id(stage_id: str) -> bool:
    return stage_id in STAGE_NAMES


def is_review_stage(stage_id: str) -> bool:
    return stage_id in REVIEW_STAGES


def get_stage_name(stage_id: str) -> str:
    """Get the display name for a stage, or the id itself when unknown."""
    return STAGE_NAMES.get(stage_id, stage_id)


__all__ = [
    "STAGE_NAMES",
    "STAGE_ORDER",
    "REVIEW_STAGES",
    "is_valid_stage_id",
    "is_review_stage",
    "get_stage_name",
]
