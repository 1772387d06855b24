from __future__ import annotations

from datetime import date

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from admitdesk.db.models import SchoolDeadline

# 2026-27 admissions cycle.
SCHOOL_DEADLINES: list[dict[str, object]] = [
    {"school": "Harvard Business School", "round": "Round 1", "date": date(2026, 9, 2)},
    {"school": "Harvard Business School", "round": "Round 2", "date": date(2027, 1, 5)},
    {"school": "Stanford GSB", "round": "Round 1", "date": date(2026, 9, 9)},
    {"school": "Stanford GSB", "round": "Round 2", "date": date(2027, 1, 6)},
    {"school": "Stanford GSB", "round": "Round 3", "date": date(2027, 4, 7)},
    {"school": "Wharton", "round": "Round 1", "date": date(2026, 9, 3)},
    {"school": "Wharton", "round": "Round 2", "date": date(2027, 1, 7)},
    {"school": "Wharton", "round": "Round 3", "date": date(2027, 4, 1)},
    {"school": "MIT Sloan", "round": "Round 1", "date": date(2026, 9, 29)},
    {"school": "MIT Sloan", "round": "Round 2", "date": date(2027, 1, 19)},
    {"school": "Kellogg", "round": "Round 1", "date": date(2026, 9, 16)},
    {"school": "Kellogg", "round": "Round 2", "date": date(2027, 1, 13)},
    {"school": "Kellogg", "round": "Round 3", "date": date(2027, 4, 7)},
    {"school": "Columbia Business School", "round": "Early Decision", "date": date(2026, 9, 25)},
    {"school": "Columbia Business School", "round": "Merit Fellowship", "date": date(2027, 1, 8)},
    {"school": "Columbia Business School", "round": "Round 2", "date": date(2027, 1, 8)},
    {"school": "Columbia Business School", "round": "Round 3", "date": date(2027, 4, 9)},
    {"school": "Booth", "round": "Round 1", "date": date(2026, 9, 24)},
    {"school": "Booth", "round": "Round 2", "date": date(2027, 1, 7)},
    {"school": "Booth", "round": "Round 3", "date": date(2027, 4, 1)},
    {"school": "INSEAD", "round": "Round 1", "date": date(2026, 9, 9)},
    {"school": "INSEAD", "round": "Round 2", "date": date(2026, 10, 28)},
    {"school": "INSEAD", "round": "Round 3", "date": date(2027, 1, 6)},
    {"school": "Yale SOM", "round": "Round 1", "date": date(2026, 9, 10)},
    {"school": "Yale SOM", "round": "Round 2", "date": date(2027, 1, 6)},
    {"school": "Duke Fuqua", "round": "Early Decision", "date": date(2026, 9, 8)},
    {"school": "Duke Fuqua", "round": "Round 1", "date": date(2026, 10, 7)},
    {"school": "Duke Fuqua", "round": "Round 2", "date": date(2027, 1, 5)},
    {"school": "NYU Stern", "round": "Round 1", "date": date(2026, 9, 15)},
    {"school": "NYU Stern", "round": "Round 2", "date": date(2026, 10, 15)},
    {"school": "NYU Stern", "round": "Round 3", "date": date(2027, 1, 15)},
    {"school": "Berkeley Haas", "round": "Round 1", "date": date(2026, 9, 25)},
    {"school": "Berkeley Haas", "round": "Round 2", "date": date(2027, 1, 8)},
    {"school": "LBS", "round": "Round 1", "date": date(2026, 9, 5)},
    {"school": "LBS", "round": "Round 2", "date": date(2026, 11, 3)},
    {"school": "LBS", "round": "Round 3", "date": date(2027, 1, 5)},
    {"school": "ISB", "round": "Round 1", "date": date(2026, 9, 15)},
    {"school": "ISB", "round": "Round 2", "date": date(2026, 11, 15)},
    {"school": "IIM Ahmedabad", "round": "Round 1", "date": date(2026, 11, 1)},
    {"school": "IIM Bangalore", "round": "Round 1", "date": date(2026, 11, 10)},
    {"school": "IIM Calcutta", "round": "Round 1", "date": date(2026, 11, 5)},
]


def seed_school_deadlines(session: Session) -> int:
    inserted = 0
    for row in SCHOOL_DEADLINES:
        school_name = str(row["school"])
        round_name = str(row["round"])
        existing = session.scalar(
            select(SchoolDeadline).where(
                and_(
                    SchoolDeadline.school_name == school_name,
                    SchoolDeadline.round_name == round_name,
                )
            )
        )
        if existing:
            continue
        session.add(
            SchoolDeadline(
                school_name=school_name,
                round_name=round_name,
                deadline_date=row["date"],
            )
        )
        inserted += 1

    session.commit()
    return inserted
