"""Pregnancy milestone table."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Milestone:
    week: int
    category: str  # early | milestone | late
    message: str

    @property
    def title(self) -> str:
        return f"Week {self.week} Milestone"


_MILESTONES: dict[int, Milestone] = {
    m.week: m
    for m in (
        Milestone(
            4,
            "early",
            "Your baby's heart is starting to beat! Consider taking prenatal vitamins if you haven't already.",
        ),
        Milestone(8, "early", "Your baby is now the size of a raspberry! Most major organs are forming."),
        Milestone(
            12,
            "milestone",
            "End of first trimester! Risk of miscarriage decreases significantly. "
            "Time for your first prenatal appointment if you haven't had one.",
        ),
        Milestone(
            16,
            "milestone",
            "You might start feeling baby's movements soon! Consider scheduling your anatomy scan.",
        ),
        Milestone(
            20,
            "milestone",
            "Halfway point! Time for your detailed anatomy scan to check baby's development.",
        ),
        Milestone(
            24,
            "milestone",
            "Your baby can now hear sounds from outside the womb! Start thinking about baby names.",
        ),
        Milestone(
            28,
            "milestone",
            "Welcome to the third trimester! Your baby's survival rate is very high if born now.",
        ),
        Milestone(32, "late", "Your baby is gaining weight rapidly. Consider preparing your birth plan."),
        Milestone(
            36,
            "milestone",
            "Your baby is considered full-term soon! Make sure your hospital bag is ready.",
        ),
        Milestone(40, "milestone", "You've reached your due date! Your baby could arrive any day now."),
    )
}


def get_milestone(week: int | None) -> Milestone | None:
    """Milestone for a gestational week, or None when the week has no entry."""
    if week is None:
        return None
    return _MILESTONES.get(week)
