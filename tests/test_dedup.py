from ticketdesk.reports.dedup import dedup_key, dedupe_reports, same_key_set


def _r(rid, created, title="Weekly", created_by="u1", **params):
    return {
        "id": rid,
        "title": title,
        "type": "task",
        "createdBy": created_by,
        "createdAt": created,
        "parameters": params or {"departmentId": "d1"},
    }


def test_latest_record_wins_in_first_seen_order():
    reports = [
        _r("a", "2024-03-01T10:00:00Z"),
        _r("b", "2024-03-01T09:00:00Z", title="Other"),
        _r("c", "2024-03-03T10:00:00Z"),
        _r("d", "2024-03-02T10:00:00Z"),
    ]
    assert [r["id"] for r in dedupe_reports(reports)] == ["c", "b"]


def test_parameter_key_order_does_not_matter():
    first = _r("a", "2024-03-01T10:00:00Z", departmentId="d1", startDate="2024-01-01")
    second = _r("b", "2024-03-02T10:00:00Z", startDate="2024-01-01", departmentId="d1")
    assert dedup_key(first) == dedup_key(second)
    assert [r["id"] for r in dedupe_reports([first, second])] == ["b"]


def test_different_creator_or_parameters_are_distinct():
    reports = [
        _r("a", "2024-03-01T10:00:00Z"),
        _r("b", "2024-03-01T10:00:00Z", created_by="u2"),
        _r("c", "2024-03-01T10:00:00Z", departmentId="d2"),
    ]
    assert len(dedupe_reports(reports)) == 3


def test_equal_timestamps_keep_first_and_bad_timestamps_lose():
    first = _r("a", "2024-03-01T10:00:00Z")
    tie = _r("b", "2024-03-01T10:00:00Z")
    broken = _r("c", "not a date")
    assert [r["id"] for r in dedupe_reports([first, tie, broken])] == ["a"]


def test_non_dict_entries_are_skipped():
    assert dedupe_reports([None, "x", _r("a", "2024-03-01")]) == [_r("a", "2024-03-01")]


def test_same_key_set_ignores_order_and_duplicates():
    a = [_r("1", "2024-03-01"), _r("2", "2024-03-01", title="Other")]
    b = [_r("9", "2024-03-05", title="Other"), _r("8", "2024-03-02")]
    assert same_key_set(a, b)
    assert not same_key_set(a, a[:1])
