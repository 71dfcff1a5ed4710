from hssc_guru.services import test_service as service

BANK = [
    {"text": f"Haryana question {n}?", "options": ["A", "B", "C"], "correct_index": n % 3,
     "topic": "Haryana GK" if n % 2 else " haryana gk "}
    for n in range(6)
] + [
    {"text": "Untagged?", "options": ["A", "B"], "correct_index": 1},
    {"text": "Blank topic?", "options": ["A", "B"], "correct_index": 1, "topic": "  "},
]


def test_load_practice_set_matches_topic_case_insensitively(db) -> None:
    service.create_test(db, "bank", "Bank", BANK)

    picked = service.load_practice_set(db, "HARYANA gk", limit=4)
    assert len(picked) == 4
    assert all(q.text.startswith("Haryana question") for q in picked)

    # stable order, so a resumed practice sees the same questions
    assert [q.id for q in service.load_practice_set(db, "haryana gk", limit=4)] == [q.id for q in picked]

    assert len(service.load_practice_set(db, "haryana gk", limit=500)) == 6
    assert len(service.load_practice_set(db, "haryana gk", limit=0)) == 1
    assert service.load_practice_set(db, "civics") == []


def test_list_topics_skips_untagged_questions(db) -> None:
    service.create_test(db, "bank", "Bank", BANK)

    assert service.list_topics(db) == [("Haryana GK", 6)]


def test_practice_duration_is_a_minute_per_question() -> None:
    assert service.practice_duration(20) == 20
    assert service.practice_duration(1) == 5
    assert service.practice_duration(400) == 180
