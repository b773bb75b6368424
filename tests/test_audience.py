"""Targeting validation and audience resolution against the directory."""

from __future__ import annotations

import pytest

from campus_notify.application.use_cases.notifications import (
    NotificationValidationError,
    create_notification,
    resolve_audience,
    validate_targeting,
)
from campus_notify.domain.entities import TargetingSpec
from campus_notify.infrastructure.models import NotificationModel


def test_empty_targeting_is_rejected_and_nothing_is_stored(session) -> None:
    with pytest.raises(NotificationValidationError):
        create_notification(
            session,
            title="Hello",
            message="Nobody selected",
            notification_type="announcement",
            targeting=TargetingSpec(),
        )

    assert session.query(NotificationModel).count() == 0


@pytest.mark.parametrize(
    "targeting",
    [
        TargetingSpec.build(semesters=[0]),
        TargetingSpec.build(semesters=[9]),
        TargetingSpec.build(years=[5]),
        TargetingSpec.build(branch_ids=["  "]),
    ],
)
def test_out_of_range_filters_are_rejected(targeting) -> None:
    with pytest.raises(NotificationValidationError):
        validate_targeting(targeting)


def test_all_users_ignores_other_filters(session, make_user) -> None:
    active = [make_user(branch_id=branch) for branch in ("CSE", "ECE", "ME")]
    make_user(is_active=False)

    audience = resolve_audience(
        session, TargetingSpec.build(all_users=True, branch_ids=["CSE"])
    )

    assert audience == {user.id for user in active}


def test_filters_are_combined_with_and(session, make_user) -> None:
    cse_third = [make_user(branch_id="CSE", semester=3) for _ in range(40)]
    for _ in range(5):
        make_user(branch_id="ECE", semester=3)
    for _ in range(5):
        make_user(branch_id="CSE", semester=5)

    audience = resolve_audience(
        session, TargetingSpec.build(branch_ids=["CSE"], semesters=[3])
    )

    assert audience == {user.id for user in cse_third}


def test_values_within_one_filter_are_alternatives(session, make_user) -> None:
    first = make_user(year=1)
    second = make_user(year=2)
    make_user(year=3)

    audience = resolve_audience(session, TargetingSpec.build(years=[1, 2]))

    assert audience == {first.id, second.id}


def test_explicit_users_are_added_to_the_filtered_audience(session, make_user) -> None:
    ece = make_user(branch_id="ECE")
    cse = make_user(branch_id="CSE")
    make_user(branch_id="ME")

    audience = resolve_audience(
        session, TargetingSpec.build(branch_ids=["ECE"], user_ids=[cse.id])
    )

    assert audience == {ece.id, cse.id}


def test_explicit_users_must_exist_and_be_active(session, make_user) -> None:
    active = make_user()
    inactive = make_user(is_active=False)

    audience = resolve_audience(
        session, TargetingSpec.build(user_ids=[active.id, inactive.id, 9999])
    )

    assert audience == {active.id}
