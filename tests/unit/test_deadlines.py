from datetime import date, timedelta
from types import SimpleNamespace

from admitdesk.core.deadlines import (
    annotate_deadlines,
    classify,
    days_until,
    relevant_deadlines,
    round_token,
)
from admitdesk.types import SchoolDeadlineRecord

TODAY = date(2026, 10, 19)


def _row(row_id: int, school: str, round_name: str, days_out: int) -> SchoolDeadlineRecord:
    return SchoolDeadlineRecord(
        id=row_id,
        school_name=school,
        round_name=round_name,
        deadline_date=TODAY + timedelta(days=days_out),
    )


def _profile(schools: list[str] | None, application_round: str | None) -> SimpleNamespace:
    return SimpleNamespace(target_schools=schools, application_round=application_round)


def test_round_token_strips_round_prefix_and_lowercases() -> None:
    assert round_token("Round 2") == "2"
    assert round_token("Early Decision") == "early decision"


def test_empty_schools_or_round_yield_nothing() -> None:
    table = [_row(1, "Wharton", "Round 1", 10)]
    assert relevant_deadlines(_profile([], "Round 1"), table) == []
    assert relevant_deadlines(_profile(["Wharton"], ""), table) == []
    assert relevant_deadlines(_profile([], ""), table) == []
    assert relevant_deadlines(_profile(None, None), table) == []
    assert relevant_deadlines(None, table) == []


def test_round_label_matches_by_substring() -> None:
    table = [_row(1, "Wharton", "Round 2", 10)]
    assert relevant_deadlines(_profile(["Wharton"], "Round 2"), table) == table
    assert relevant_deadlines(_profile(["Wharton"], "Early Decision"), table) == []


def test_substring_match_is_loose() -> None:
    # Token "1" also hits any round name containing a "1".
    table = [_row(1, "LBS", "Round 1", 5), _row(2, "LBS", "Round 11 (rolling)", 50)]
    assert [row.id for row in relevant_deadlines(_profile(["LBS"], "Round 1"), table)] == [1, 2]


def test_only_target_schools_are_kept_and_order_is_preserved() -> None:
    table = [
        _row(1, "Kellogg", "Round 1", -3),
        _row(2, "Booth", "Round 1", 4),
        _row(3, "INSEAD", "Round 1", 8),
        _row(4, "Kellogg", "Round 2", 60),
    ]
    result = relevant_deadlines(_profile(["INSEAD", "Kellogg"], "Round 1"), table)
    assert [row.id for row in result] == [1, 3]


def test_result_is_a_fresh_list() -> None:
    table = [_row(1, "Wharton", "Round 1", 10)]
    result = relevant_deadlines(_profile(["Wharton"], "Round 1"), table)
    result.append(_row(2, "Booth", "Round 1", 1))
    assert len(table) == 1


def test_days_until_uses_calendar_days() -> None:
    assert days_until(date(2026, 11, 2), TODAY) == 14
    assert days_until(TODAY, TODAY) == 0
    assert days_until(date(2026, 10, 18), TODAY) == -1


def test_urgency_boundaries() -> None:
    assert classify(14) == "urgent"
    assert classify(15) == "normal"
    assert classify(0) == "urgent"
    assert classify(-1) == "past"
    assert classify(20, urgent_window_days=30) == "urgent"


def test_annotated_rows_carry_urgency_and_hide_past_count() -> None:
    rows = [
        _row(1, "Wharton", "Round 1", -2),
        _row(2, "Wharton", "Round 2", 14),
        _row(3, "Wharton", "Round 3", 15),
    ]
    views = annotate_deadlines(rows, TODAY)
    assert [view.urgency for view in views] == ["past", "urgent", "normal"]
    assert views[0].days_left_label is None
    assert views[1].days_left_label == 14
    assert views[2].days_left == 15


def test_harvard_round_one_thirty_days_out() -> None:
    table = [
        _row(1, "Harvard Business School", "Round 1", 30),
        _row(2, "Harvard Business School", "Round 2", 120),
        _row(3, "Stanford GSB", "Round 1", 20),
    ]
    rows = relevant_deadlines(_profile(["Harvard Business School"], "Round 1"), table)
    views = annotate_deadlines(rows, TODAY)
    assert [row.id for row in rows] == [1]
    assert views[0].urgency == "normal"
    assert views[0].days_left == 30
