"""
Plan Catalog — Known plans, their display defaults, and the downloads they unlock.
"""
from dataclasses import dataclass
from typing import Optional

from payledger.config import Settings


@dataclass(frozen=True)
class PlanInfo:
    key: str
    name: str
    duration: str


FALLBACK_PLAN_NAME = "Plan"
FALLBACK_PLAN_DURATION = "Plan"

# Only plans with canonical display metadata carry a real name/duration;
# the rest fall back to the generic labels when a claim omits them.
KNOWN_PLANS: dict[str, PlanInfo] = {
    "basic": PlanInfo("basic", FALLBACK_PLAN_NAME, FALLBACK_PLAN_DURATION),
    "intermediate": PlanInfo("intermediate", FALLBACK_PLAN_NAME, FALLBACK_PLAN_DURATION),
    "advanced": PlanInfo("advanced", FALLBACK_PLAN_NAME, FALLBACK_PLAN_DURATION),
    "styles-tones": PlanInfo("styles-tones", "Styles & Tones Package", "Lifetime"),
}

REVENUE_PLAN_KEYS = tuple(KNOWN_PLANS)


def resolve_display(
    plan: Optional[str],
    plan_name: Optional[str] = None,
    plan_duration: Optional[str] = None,
) -> tuple[str, str]:
    """Fill missing display fields from the plan's defaults."""
    info = KNOWN_PLANS.get(plan or "")
    default_name = info.name if info else FALLBACK_PLAN_NAME
    default_duration = info.duration if info else FALLBACK_PLAN_DURATION
    return plan_name or default_name, plan_duration or default_duration


@dataclass(frozen=True)
class Download:
    resource: str
    plan: str
    file_id: str
    file_name: str

    @property
    def url(self) -> str:
        return f"https://drive.google.com/uc?export=download&id={self.file_id}&confirm=t"


def downloads(settings: Settings) -> dict[str, Download]:
    """Downloadable resources keyed by route name."""
    return {
        "styles": Download("styles", "styles-tones", settings.STYLES_FILE_ID, settings.STYLES_FILE_NAME),
        "tones": Download("tones", "styles-tones", settings.TONES_FILE_ID, settings.TONES_FILE_NAME),
    }
