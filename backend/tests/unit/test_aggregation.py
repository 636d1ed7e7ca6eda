from mdp_survey.models.question import (
    COMMUNICATION,
    INITIATIVE,
    JOB_KNOWLEDGE,
    QUALITY_OF_WORK,
)
from mdp_survey.services.aggregation import (
    area_extrema,
    cohort_averages,
    cohort_stats,
    participant_rollup,
    participant_view,
    top_performer,
)


def test_cohort_averages_of_nothing():
    averages = cohort_averages([])

    assert averages.overall == 0.0
    assert averages.by_area == {}
    assert averages.by_rotation == {}
    assert area_extrema(averages.by_area).strength is None


def test_cohort_averages_group_by_area_and_rotation(make_record):
    records = [
        make_record("Jane Doe", rotation=1, overall=4.0, scores=(4.0, 3.0, 5.0, 2.0)),
        make_record("John Roe", rotation=1, overall=3.0, scores=(3.0, 4.0, 3.0, 4.0)),
        make_record("Jane Doe", rotation=2, function_name="Digital Merch", overall=5.0),
    ]

    averages = cohort_averages(records)

    assert averages.overall == 4.0
    assert averages.by_area[JOB_KNOWLEDGE] == 4.0
    assert averages.by_area[QUALITY_OF_WORK] == 4.0
    assert averages.by_rotation == {1: 3.5, 2: 5.0}


def test_three_way_tie_is_reported(make_record):
    records = [
        make_record("Ann Lee", overall=4.5),
        make_record("Bo Park", overall=4.5),
        make_record("Cy Diaz", overall=4.5),
        make_record("Di Wu", overall=4.2),
    ]

    top = top_performer(records)

    assert top.names == ["Ann Lee", "Bo Park", "Cy Diaz"]
    assert top.is_tied is True
    assert top.score == 4.5
    assert top.name == "3 Associates Tied"


def test_top_performer_uses_each_participants_latest_score(make_record):
    records = [
        make_record("Jane Doe", rotation=1, overall=5.0, submitted_at="2025-01-01T09:00:00.000Z"),
        make_record("John Roe", rotation=1, overall=4.0, submitted_at="2025-01-02T09:00:00.000Z"),
        make_record(
            "Jane Doe",
            rotation=2,
            function_name="Replenishment",
            overall=3.0,
            submitted_at="2025-02-01T09:00:00.000Z",
        ),
    ]

    top = top_performer(records)

    assert top.names == ["John Roe"]
    assert top.is_tied is False
    assert top.name == "John Roe"


def test_top_performer_of_nothing():
    top = top_performer([])

    assert top.names == []
    assert top.score == 0.0
    assert top.is_tied is False


def test_area_extrema_prefers_canonical_order_on_ties():
    by_area = {
        JOB_KNOWLEDGE: 4.0,
        QUALITY_OF_WORK: 4.5,
        COMMUNICATION: 4.5,
        INITIATIVE: 3.5,
    }

    extrema = area_extrema(by_area)

    assert extrema.strength == QUALITY_OF_WORK
    assert extrema.development == INITIATIVE


def test_area_extrema_with_equal_scores_names_first_area():
    extrema = area_extrema({area: 3.0 for area in (INITIATIVE, JOB_KNOWLEDGE, COMMUNICATION)})

    assert extrema.strength == JOB_KNOWLEDGE
    assert extrema.development == JOB_KNOWLEDGE


def test_participant_rollup_ranks_by_average(make_record):
    records = [
        make_record("Jane Doe", rotation=1, overall=3.0),
        make_record("John Roe", rotation=1, overall=4.0),
        make_record("Jane Doe", rotation=2, function_name="Digital Merch", overall=4.0),
        make_record("Ann Lee", rotation=1, overall=4.0),
    ]

    rollup = participant_rollup(records)

    assert [summary.mdp_name for summary in rollup] == ["John Roe", "Ann Lee", "Jane Doe"]
    assert [summary.standing for summary in rollup] == [1, 2, 3]
    jane = rollup[2]
    assert jane.rotation_count == 2
    assert jane.average_overall == 3.5
    assert jane.functions == ["Planning", "Digital Merch"]
    assert jane.last_submitted == records[2].submitted_at


def test_cohort_stats(make_record):
    records = [
        make_record("Jane Doe", rotation=1, overall=3.0),
        make_record("Jane Doe", rotation=2, function_name="Digital Merch", overall=5.0),
        make_record("John Roe", rotation=1, overall=4.0),
    ]

    stats = cohort_stats(records)

    assert stats.total_responses == 3
    assert stats.unique_participants == 2
    assert stats.latest_rotation == 2
    assert stats.average_overall == 4.0
    assert cohort_stats([]).latest_rotation is None


def test_participant_view(make_record):
    records = [
        make_record(
            "Jane Doe",
            rotation=2,
            function_name="Digital Merch",
            overall=3.8,
            scores=(3.5, 4.0, 4.5, 3.0),
            submitted_at="2025-03-01T09:00:00.000Z",
        ),
        make_record("Jane Doe", rotation=1, overall=4.2, submitted_at="2025-01-01T09:00:00.000Z"),
        make_record("John Roe", rotation=1, overall=5.0),
    ]

    view = participant_view(records, "Jane Doe")

    assert [item.rotation for item in view.rotations] == [1, 2]
    assert view.latest.rotation == 2
    assert view.top_rotation.rotation == 1
    assert view.extrema.strength == COMMUNICATION
    assert view.extrema.development == INITIATIVE
    assert participant_view(records, "Nobody") is None
