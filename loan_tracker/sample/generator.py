"""Faker-based generator for larger demo datasets."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterator

from dateutil.relativedelta import relativedelta
from faker import Faker

from loan_tracker.finance import effective_annual_rate, reconcile_loan, simulate_loan
from loan_tracker.finance.schedule import build_schedule, local_today
from loan_tracker.models import (
    Company,
    Consortium,
    ConsortiumCategory,
    Installment,
    InstallmentStatus,
    Loan,
    LoanStatus,
    Role,
    UserProfile,
)

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS)


@dataclass
class SampleDataset:
    """Related records produced by one generator run."""

    companies: list[Company] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    installments: list[Installment] = field(default_factory=list)
    consortiums: list[Consortium] = field(default_factory=list)
    users: list[UserProfile] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "companies": len(self.companies),
            "loans": len(self.loans),
            "installments": len(self.installments),
            "consortiums": len(self.consortiums),
            "user_profiles": len(self.users),
        }


class SampleDataGenerator:
    """Generate companies with loans, schedules and consortium quotas.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``pt_BR``).
    today : date | None
        Reference date for schedules and statuses; defaults to today in the
        business timezone.
    """

    BANKS = ["Bradesco", "Itaú", "Santander", "Banco do Brasil", "Caixa", "Sicredi"]
    ADMINISTRATORS = ["Bradesco", "Itaú", "Santander", "Porto Seguro", "Embracon", "Rodobens"]

    # Monthly rate ranges in percent, and term choices, per operation
    OPERATIONS = {
        "Capital de Giro FGI": ((0.9, 1.6), [24, 36, 48]),
        "BNDES": ((0.6, 1.0), [36, 48, 60]),
        "CDC": ((0.7, 1.3), [24, 36]),
        "Finame": ((0.5, 0.9), [48, 60]),
    }

    # Probability that a past-due installment was paid
    PAID_PROBABILITY = 0.9

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "pt_BR",
        today: date | None = None,
    ) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)
        self.today = today or local_today()

    def generate_company(self) -> Company:
        """Generate a company with a CNPJ and a Brazilian address."""
        name = self.fake.company()
        return Company(
            id=self.fake.uuid4(),
            name=name,
            nickname=name.split()[0],
            tax_id=self.fake.cnpj(),
            address=f"{self.fake.street_address()} - {self.fake.city()}/{self.fake.estado_sigla()}",
        )

    def generate_loan(self, company_id: str) -> tuple[Loan, list[Installment]]:
        """Generate an active loan and its installment schedule.

        Installments due before ``today`` are mostly paid, the rest overdue;
        the loan's counters are reconciled with the schedule.
        """
        operation = random.choice(list(self.OPERATIONS))
        rates, terms = self.OPERATIONS[operation]

        principal = Decimal(random.randint(50, 800) * 1000)
        term = random.choice(terms)
        rate = Decimal(str(round(random.uniform(*rates), 2)))
        simulation = simulate_loan(principal, term, rate)

        start_date = self.today - relativedelta(months=random.randint(1, term - 1))
        number = f"{random.randint(100, 999)}/{random.randint(1000, 9999)}/{random.randint(1000, 9999)}"

        loan = Loan(
            id=self.fake.uuid4(),
            company_id=company_id,
            reference=f"{operation} {number}",
            bank=random.choice(self.BANKS),
            total_value=_money(simulation.total_amount),
            start_date=start_date,
            end_date=start_date + relativedelta(months=term - 1),
            status=LoanStatus.ACTIVE,
            operation=operation,
            operation_number=number,
            financed_value=principal,
            interest_value=_money(simulation.total_interest),
            installments=term,
            installment_value=_money(simulation.installment_value),
            installment_value_no_interest=_money(principal / term),
            interest_per_installment=_money(simulation.interest_per_installment),
            nominal_rate=rate,
            effective_annual_rate=_money(effective_annual_rate(rate)),
            as_of_date=self.today,
            contract_start=start_date - relativedelta(months=1),
        )

        schedule = [self._settle_past(item) for item in build_schedule(loan, self.today, self.fake.uuid4)]
        return reconcile_loan(loan, schedule), schedule

    def _settle_past(self, installment: Installment) -> Installment:
        if installment.status == InstallmentStatus.OVERDUE and random.random() < self.PAID_PROBABILITY:
            return replace(installment, status=InstallmentStatus.PAID)
        return installment

    def generate_consortium(self, company_id: str) -> Consortium:
        """Generate a consortium quota part-way through its term."""
        total = random.choice([50, 60, 80, 100, 120])
        paid = random.randint(1, total - 1)
        installment_value = _money(Decimal(str(random.uniform(800, 6000))))
        to_pay = total - paid
        category = random.choice(list(ConsortiumCategory))
        return Consortium(
            id=self.fake.uuid4(),
            company_id=company_id,
            observation=f"{category.value.replace('_', ' ').title()} {self.fake.license_plate()}",
            group_code=str(random.randint(10000, 99999)),
            quota=str(random.randint(1, 400)),
            administrator=random.choice(self.ADMINISTRATORS),
            category=category.value,
            current_installment_value=installment_value,
            total_installments=total,
            credit_to_receive=_money(installment_value * total * Decimal("0.8")),
            outstanding_balance=installment_value * to_pay,
            amount_paid=installment_value * paid,
            amount_to_pay=installment_value * to_pay,
            installments_to_pay=to_pay,
            paid_installments=paid,
        )

    def generate_users(self, count: int) -> Iterator[UserProfile]:
        roles = list(Role)
        for index in range(count):
            yield UserProfile(
                id=self.fake.uuid4(),
                name=self.fake.name(),
                email=self.fake.unique.email(),
                role=roles[index % len(roles)],
            )

    def generate(
        self,
        companies: int = 3,
        loans_per_company: int = 2,
        consortiums_per_company: int = 2,
        users: int = 3,
    ) -> SampleDataset:
        """Generate a complete, referentially consistent dataset.

        Parameters
        ----------
        companies : int
            Number of companies.
        loans_per_company : int
            Loans generated for each company.
        consortiums_per_company : int
            Consortium quotas generated for each company.
        users : int
            Number of user profiles.

        Returns
        -------
        SampleDataset
            Generated records.
        """
        dataset = SampleDataset()
        for _ in range(companies):
            company = self.generate_company()
            dataset.companies.append(company)
            for _ in range(loans_per_company):
                loan, schedule = self.generate_loan(company.id)
                dataset.loans.append(loan)
                dataset.installments.extend(schedule)
            for _ in range(consortiums_per_company):
                dataset.consortiums.append(self.generate_consortium(company.id))
        dataset.users.extend(self.generate_users(users))
        return dataset
