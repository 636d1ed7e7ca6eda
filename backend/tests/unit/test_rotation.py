import pytest

from mdp_survey.errors import DuplicateFunctionError, DuplicateRotationError
from mdp_survey.services.rotation import assign_rotation, completed_functions, next_rotation


def test_first_submission_is_rotation_one():
    assert next_rotation([]) == 1
    assert assign_rotation("Jane Doe", "Planning", []) == 1


def test_rotation_follows_prior_count(make_record):
    history = [
        make_record(rotation=1, function_name="Planning"),
        make_record(rotation=2, function_name="Digital Merch"),
    ]

    assert assign_rotation("Jane Doe", "Replenishment", history) == 3


def test_repeated_function_is_rejected(make_record):
    history = [make_record(rotation=1, function_name="Planning")]

    with pytest.raises(DuplicateFunctionError) as exc:
        assign_rotation("Jane Doe", "Planning", history)

    assert str(exc.value) == (
        "Jane Doe has already completed the Planning function. Please select a different function."
    )
    assert exc.value.kind == "duplicate_function"


def test_existing_rotation_is_reported_before_repeated_function(make_record):
    # A gap left by a legacy record: one prior evaluation already stored as rotation 2.
    history = [make_record(rotation=2, function_name="Planning")]

    with pytest.raises(DuplicateRotationError) as exc:
        assign_rotation("Jane Doe", "Planning", history)

    assert str(exc.value) == (
        "Rotation 2 already exists for Jane Doe. Only one survey per rotation allowed."
    )


def test_completed_functions_keep_submission_order(make_record):
    history = [
        make_record(function_name="Member's Mark"),
        make_record(function_name="Planning"),
        make_record(function_name="Member's Mark"),
    ]

    assert completed_functions(history) == ["Member's Mark", "Planning"]
