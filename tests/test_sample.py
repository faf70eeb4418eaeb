"""Tests for the static fixtures and the Faker-based generator."""

from datetime import date

from loan_tracker.models import InstallmentStatus, LoanStatus
from loan_tracker.sample import SampleDataGenerator, fixtures

TODAY = date(2024, 9, 10)


class TestFixtures:
    def test_counts(self) -> None:
        assert len(fixtures.companies()) == 3
        assert len(fixtures.loans()) == 6
        assert len(fixtures.installments()) == 12
        assert len(fixtures.consortiums()) == 6
        assert len(fixtures.users()) == 3

    def test_references_resolve(self) -> None:
        company_ids = {c.id for c in fixtures.companies()}
        loan_ids = {loan.id for loan in fixtures.loans()}

        assert all(loan.company_id in company_ids for loan in fixtures.loans())
        assert all(item.loan_id in loan_ids for item in fixtures.installments())
        assert all(c.company_id in company_ids for c in fixtures.consortiums())

    def test_fresh_objects(self) -> None:
        assert fixtures.companies()[0] is not fixtures.companies()[0]


class TestSampleDataGenerator:
    def test_counts(self, seed: int) -> None:
        dataset = SampleDataGenerator(seed=seed, today=TODAY).generate(
            companies=2, loans_per_company=3, consortiums_per_company=1, users=4
        )

        counts = dataset.counts()
        assert counts["companies"] == 2
        assert counts["loans"] == 6
        assert counts["consortiums"] == 2
        assert counts["user_profiles"] == 4
        assert counts["installments"] == sum(loan.installments for loan in dataset.loans)

    def test_deterministic_with_seed(self, seed: int) -> None:
        first = SampleDataGenerator(seed=seed, today=TODAY).generate()
        second = SampleDataGenerator(seed=seed, today=TODAY).generate()

        assert first == second

    def test_referential_consistency(self, seed: int) -> None:
        dataset = SampleDataGenerator(seed=seed, today=TODAY).generate()
        company_ids = {c.id for c in dataset.companies}
        loan_ids = {loan.id for loan in dataset.loans}

        assert all(loan.company_id in company_ids for loan in dataset.loans)
        assert all(item.loan_id in loan_ids for item in dataset.installments)
        assert all(c.company_id in company_ids for c in dataset.consortiums)
        assert len({item.id for item in dataset.installments}) == len(dataset.installments)

    def test_loans_are_reconciled(self, seed: int) -> None:
        dataset = SampleDataGenerator(seed=seed, today=TODAY).generate()

        for loan in dataset.loans:
            schedule = [i for i in dataset.installments if i.loan_id == loan.id]
            paid = [i for i in schedule if i.status == InstallmentStatus.PAID]
            assert loan.status == LoanStatus.ACTIVE
            assert loan.paid_installments == len(paid)
            assert loan.paid_installments + loan.remaining_installments == loan.installments

    def test_future_installments_pending(self, seed: int) -> None:
        dataset = SampleDataGenerator(seed=seed, today=TODAY).generate()

        assert all(
            i.status == InstallmentStatus.PENDING for i in dataset.installments if i.due_date > TODAY
        )

    def test_consortium_counts_add_up(self, seed: int) -> None:
        dataset = SampleDataGenerator(seed=seed, today=TODAY).generate()

        for c in dataset.consortiums:
            assert c.paid_installments + c.installments_to_pay == c.total_installments
