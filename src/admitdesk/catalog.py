from __future__ import annotations

AVAILABLE_SCHOOLS: tuple[str, ...] = (
    "Harvard Business School",
    "Stanford GSB",
    "Wharton",
    "MIT Sloan",
    "Kellogg",
    "Columbia Business School",
    "Booth",
    "INSEAD",
    "Yale SOM",
    "Duke Fuqua",
    "NYU Stern",
    "Berkeley Haas",
    "LBS",
    "ISB",
    "IIM Ahmedabad",
    "IIM Bangalore",
    "IIM Calcutta",
)

ROUNDS: tuple[str, ...] = ("Round 1", "Round 2", "Round 3", "Early Decision", "Merit Fellowship")

DOCUMENT_TYPE_LABELS: dict[str, str] = {
    "resume": "Resume",
    "essay": "Essay",
    "lor": "Letter of Recommendation",
    "story": "Story/Experience",
    "other": "Other",
}

# Order of the groups on the client's document tab; stories live on their own tab.
DOCUMENT_TAB_ORDER: tuple[str, ...] = ("resume", "essay", "lor", "other")
