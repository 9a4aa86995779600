from __future__ import annotations

from datetime import date
from fractions import Fraction

import pytest

from src.arts_center.arts_center.core.enums import EnrollmentStatus, FindingCode, PersonType, ProrationMode
from src.arts_center.arts_center.core.exceptions import DataQualityWarning, NotFoundError, ValidationError
from src.arts_center.arts_center.tuition.model import FeeSchedule
from src.arts_center.arts_center.tuition.policies.cutoff_day import CutoffDayPolicy
from src.arts_center.arts_center.tuition.policies.factory import ProrationPolicyFactory
from src.arts_center.arts_center.tuition.policies.full_month import FullMonthPolicy
from src.arts_center.arts_center.tuition.policies.linear import LinearProrationPolicy
from src.arts_center.arts_center.tuition.service import FeeEngine

FEES = FeeSchedule({"Piano": 800000})


@pytest.fixture
def engine(classes_repo, enrollments_repo, people_repo, piano_class):
    classes_repo.add(piano_class())
    people_repo.add(PersonType.STUDENT, 1, "Lê Bảo An")
    return FeeEngine(classes_repo, enrollments_repo, people=people_repo)


def test_full_month_bills_full_fee(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2024, 1, 1))

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 800000


def test_enrolled_since_last_year_bills_full_fee(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2023, 9, 5))

    assert engine.compute_monthly_fee(1, 1, 2, 2024, fee_schedule=FEES) == 800000


def test_missing_fee_bills_zero_with_warning(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2024, 1, 1))

    with pytest.warns(DataQualityWarning):
        quote = engine.quote(1, 1, 1, 2024, fee_schedule=FeeSchedule({"Vẽ": 500000}))

    assert quote.amount == 0
    assert [w.code for w in quote.warnings] == [FindingCode.MISSING_FEE]


def test_zero_fee_is_treated_as_missing(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2024, 1, 1))

    with pytest.warns(DataQualityWarning):
        assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FeeSchedule({"Piano": 0})) == 0


def test_not_enrolled_in_month_bills_zero(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2024, 3, 1))

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 0


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2024, 1, 15), None, 800000),
        (date(2024, 1, 16), None, 0),
        (date(2023, 12, 1), date(2024, 1, 14), 0),
        (date(2023, 12, 1), date(2024, 1, 15), 800000),
    ],
)
def test_default_cutoff_day_policy(engine, enrollments_repo, start, end, expected):
    enrollments_repo.add(1, 1, start, end_date=end)

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == expected


def test_linear_policy_rounds_half_up(classes_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class())
    engine = FeeEngine(classes_repo, enrollments_repo, policy=LinearProrationPolicy())
    enrollments_repo.add(1, 1, date(2024, 1, 17))

    quote = engine.quote(1, 1, 1, 2024, fee_schedule=FEES)

    assert quote.fraction == Fraction(15, 31)
    assert quote.amount == 387097  # 800000 * 15 / 31 = 387096.77


def test_linear_policy_does_not_bill_the_gap_between_rows(classes_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class())
    engine = FeeEngine(classes_repo, enrollments_repo, policy=LinearProrationPolicy())
    enrollments_repo.add(1, 1, date(2024, 1, 1), end_date=date(2024, 1, 10))
    enrollments_repo.add(1, 1, date(2024, 1, 22))

    quote = engine.quote(1, 1, 1, 2024, fee_schedule=FEES)

    assert quote.fraction == Fraction(20, 31)
    assert quote.amount == 516129  # 800000 * 20 / 31 = 516129.03


def test_billing_stops_at_class_end_date(classes_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class(end_date=date(2024, 1, 10)))
    engine = FeeEngine(classes_repo, enrollments_repo, policy=LinearProrationPolicy())
    enrollments_repo.add(1, 1, date(2023, 12, 1))

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 258065  # 800000 * 10 / 31 = 258064.52
    assert engine.compute_monthly_fee(1, 1, 2, 2024, fee_schedule=FEES) == 0


def test_inactive_row_is_not_billed(classes_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class())
    engine = FeeEngine(classes_repo, enrollments_repo, policy=LinearProrationPolicy())
    enrollments_repo.add(1, 1, date(2024, 1, 1), end_date=date(2024, 1, 20), status=EnrollmentStatus.INACTIVE)

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 0


def test_reenrollment_in_same_month_bills_once(classes_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class())
    engine = FeeEngine(classes_repo, enrollments_repo, policy=FullMonthPolicy())
    enrollments_repo.add(1, 1, date(2024, 1, 1), end_date=date(2024, 1, 10), status=EnrollmentStatus.INACTIVE)
    enrollments_repo.add(1, 1, date(2024, 1, 20))

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 800000


def test_trial_is_billed(engine, enrollments_repo):
    enrollments_repo.add(1, 1, date(2024, 1, 1), status=EnrollmentStatus.TRIAL)

    assert engine.compute_monthly_fee(1, 1, 1, 2024, fee_schedule=FEES) == 800000


def test_quote_validates_inputs(engine):
    with pytest.raises(ValidationError):
        engine.quote(1, 1, 13, 2024, fee_schedule=FEES)
    with pytest.raises(NotFoundError):
        engine.quote(1, 99, 1, 2024, fee_schedule=FEES)
    with pytest.raises(NotFoundError):
        engine.quote(42, 1, 1, 2024, fee_schedule=FEES)


def test_fully_covered_month_is_one_under_every_policy():
    bounds = dict(
        intervals=[(date(2024, 2, 1), date(2024, 2, 29))],
        month_start=date(2024, 2, 1),
        month_end=date(2024, 2, 29),
    )
    for policy in (FullMonthPolicy(), CutoffDayPolicy(), CutoffDayPolicy(1), LinearProrationPolicy()):
        assert policy.billable_fraction(**bounds) == 1


def test_policy_factory():
    factory = ProrationPolicyFactory(cutoff_day=10)

    assert isinstance(factory.for_mode("full_month"), FullMonthPolicy)
    assert isinstance(factory.for_mode(ProrationMode.LINEAR), LinearProrationPolicy)
    assert factory.for_mode("cutoff_day").cutoff_day == 10
    with pytest.raises(ValidationError):
        factory.for_mode("weekly")
    with pytest.raises(ValidationError):
        CutoffDayPolicy(0)


def test_fee_schedule_admin_input_uses_known_subjects():
    fees = FeeSchedule.of({"piano": 800000, "VẼ": 500000})

    assert fees.fee_for("Piano") == 800000
    assert "Vẽ" in fees
    with pytest.raises(ValidationError):
        FeeSchedule.of({"Karate": 1})
    with pytest.raises(TypeError):
        fees.fees["Piano"] = 1


def test_audit_fee_schedule_flags_each_subject_once(engine, classes_repo, piano_class):
    classes_repo.add(piano_class(class_id=2, name="Piano-B1"))
    classes_repo.add(piano_class(class_id=3, name="Vẽ-1", subject="Vẽ"))

    with pytest.warns(DataQualityWarning):
        findings = engine.audit_fee_schedule(FeeSchedule({"Vẽ": 500000}))

    assert [f.context["subject"] for f in findings] == ["Piano"]
