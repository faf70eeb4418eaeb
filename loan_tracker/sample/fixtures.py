"""Static sample dataset served when no backend is configured.

Functions return fresh objects on every call so callers may mutate them.
"""

from datetime import date
from decimal import Decimal as D

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

AS_OF = date(2024, 9, 1)


def companies() -> list[Company]:
    return [
        Company(
            id="empresa-logica-distribuicoes",
            name="Lógica Distribuições",
            nickname="Lógica Dist",
            tax_id="12.345.678/0001-90",
            address="Rua das Inovações, 123 - São Paulo/SP",
        ),
        Company(
            id="empresa-logica-distribuidora",
            name="Lógica Distribuidora",
            nickname="Distribuidora",
            tax_id="34.567.890/0001-12",
            address="Av. Tecnologia, 987 - Campinas/SP",
        ),
        Company(
            id="empresa-logica-transporte",
            name="Lógica Distribuidora Transporte A.",
            nickname="Transporte A.",
            tax_id="45.678.901/0001-23",
            address="Rod. BR-050, Km 123 - Uberaba/MG",
        ),
    ]


def _loan(**kwargs) -> Loan:
    kwargs.setdefault("status", LoanStatus.ACTIVE)
    kwargs.setdefault("as_of_date", AS_OF)
    kwargs.setdefault("financed_value", kwargs["total_value"])
    return Loan(**kwargs)


def loans() -> list[Loan]:
    return [
        _loan(
            id="loan-fgi-237",
            company_id="empresa-logica-distribuicoes",
            reference="Capital de Giro FGI 237/1497/2806",
            bank="Bradesco",
            total_value=D("731292.36"),
            start_date=date(2023, 8, 15),
            end_date=date(2027, 5, 15),
            operation="Capital de Giro FGI",
            operation_number="237/1497/2806",
            upfront_value=D("524013.85"),
            interest_value=D("207278.51"),
            installments=46,
            installment_value=D("15897.66"),
            installment_value_no_interest=D("11391.61"),
            interest_per_installment=D("4506.05"),
            nominal_rate=D("1.25"),
            effective_annual_rate=D("16.08"),
            paid_installments=28,
            remaining_installments=18,
            amount_paid=D("445134.48"),
            amount_to_pay=D("286157.88"),
            contract_start=date(2023, 7, 16),
        ),
        _loan(
            id="loan-fgi-282",
            company_id="empresa-logica-distribuicoes",
            reference="Capital de Giro FGI 282/1499/3047",
            bank="Bradesco",
            total_value=D("470871.54"),
            start_date=date(2024, 1, 25),
            end_date=date(2027, 12, 25),
            operation="Capital de Giro FGI",
            operation_number="282/1499/3047",
            upfront_value=D("336860.38"),
            interest_value=D("134011.16"),
            installments=48,
            installment_value=D("9814.83"),
            installment_value_no_interest=D("7022.93"),
            interest_per_installment=D("2791.90"),
            nominal_rate=D("1.10"),
            effective_annual_rate=D("14.32"),
            paid_installments=11,
            remaining_installments=37,
            amount_paid=D("105779.64"),
            amount_to_pay=D("365091.90"),
            contract_start=date(2023, 12, 26),
        ),
        _loan(
            id="loan-bndes-282",
            company_id="empresa-logica-distribuicoes",
            reference="BNDES 282/3043/2268",
            bank="Bradesco Matriz",
            total_value=D("269997.60"),
            start_date=date(2023, 6, 15),
            end_date=date(2026, 5, 15),
            operation="BNDES",
            operation_number="282/3043/2268",
            interest_value=D("58425.60"),
            installments=36,
            installment_value=D("7499.93"),
            installment_value_no_interest=D("5877.00"),
            interest_per_installment=D("1622.93"),
            nominal_rate=D("0.95"),
            effective_annual_rate=D("12.00"),
            paid_installments=13,
            remaining_installments=23,
            amount_paid=D("96227.80"),
            amount_to_pay=D("173769.80"),
            contract_start=date(2023, 5, 8),
        ),
        _loan(
            id="loan-cdc-297",
            company_id="empresa-logica-distribuidora",
            reference="CDC 297/00174/2291",
            bank="Bradesco Matriz",
            total_value=D("590000.00"),
            start_date=date(2020, 12, 25),
            end_date=date(2023, 11, 25),
            operation="CDC",
            operation_number="297/00174/2291",
            interest_value=D("102960.00"),
            installments=36,
            installment_value=D("16415.28"),
            installment_value_no_interest=D("13555.28"),
            interest_per_installment=D("2860.00"),
            nominal_rate=D("0.80"),
            effective_annual_rate=D("10.02"),
            paid_installments=18,
            remaining_installments=18,
            amount_paid=D("295490.00"),
            amount_to_pay=D("294510.00"),
            contract_start=date(2020, 11, 20),
        ),
        _loan(
            id="loan-bndes-269",
            company_id="empresa-logica-distribuidora",
            reference="BNDES 269/3332/1649",
            bank="Bradesco Transporte",
            total_value=D("581922.00"),
            start_date=date(2022, 1, 14),
            end_date=date(2026, 12, 14),
            operation="BNDES",
            operation_number="269/3332/1649",
            interest_value=D("129282.00"),
            installments=60,
            installment_value=D("9698.70"),
            installment_value_no_interest=D("7544.00"),
            interest_per_installment=D("2154.70"),
            nominal_rate=D("0.78"),
            effective_annual_rate=D("9.75"),
            paid_installments=30,
            remaining_installments=30,
            amount_paid=D("290961.00"),
            amount_to_pay=D("290961.00"),
            contract_start=date(2021, 12, 14),
        ),
        _loan(
            id="loan-cdc-278",
            company_id="empresa-logica-transporte",
            reference="CDC 278/3302/5517",
            bank="Bradesco Transporte",
            total_value=D("247000.00"),
            start_date=date(2021, 11, 7),
            end_date=date(2024, 10, 7),
            operation="CDC (Produtor)",
            operation_number="278/3302/5517",
            interest_value=D("39360.00"),
            installments=36,
            installment_value=D("7134.56"),
            installment_value_no_interest=D("6041.23"),
            interest_per_installment=D("1093.33"),
            nominal_rate=D("0.68"),
            effective_annual_rate=D("8.45"),
            paid_installments=17,
            remaining_installments=19,
            amount_paid=D("123500.00"),
            amount_to_pay=D("123500.00"),
            contract_start=date(2021, 10, 7),
        ),
    ]


def installments() -> list[Installment]:
    rows = [
        ("loan-fgi-237", 28, date(2024, 7, 26), "15897.66", "4506.05", InstallmentStatus.PAID),
        ("loan-fgi-237", 29, date(2024, 8, 26), "15897.66", "4012.11", InstallmentStatus.PENDING),
        ("loan-fgi-282", 11, date(2024, 8, 25), "9814.83", "2791.90", InstallmentStatus.PAID),
        ("loan-fgi-282", 12, date(2024, 9, 25), "9814.83", "2791.90", InstallmentStatus.PENDING),
        ("loan-bndes-282", 13, date(2024, 7, 15), "7499.93", "1622.93", InstallmentStatus.PAID),
        ("loan-bndes-282", 14, date(2024, 8, 15), "7499.93", "1622.93", InstallmentStatus.PENDING),
        ("loan-cdc-297", 18, date(2024, 7, 25), "16415.28", "2860.00", InstallmentStatus.PAID),
        ("loan-cdc-297", 19, date(2024, 8, 25), "16415.28", "2860.00", InstallmentStatus.PENDING),
        ("loan-bndes-269", 31, date(2024, 7, 14), "9698.70", "2154.70", InstallmentStatus.PAID),
        ("loan-bndes-269", 32, date(2024, 8, 14), "9698.70", "2154.70", InstallmentStatus.PENDING),
        ("loan-cdc-278", 18, date(2024, 7, 7), "7134.56", "1093.33", InstallmentStatus.PAID),
        ("loan-cdc-278", 19, date(2024, 8, 7), "7134.56", "1093.33", InstallmentStatus.PENDING),
    ]
    return [
        Installment(
            id=f"inst-{loan_id}-{sequence}",
            loan_id=loan_id,
            sequence=sequence,
            due_date=due_date,
            value=D(value),
            interest=D(interest),
            status=status,
        )
        for loan_id, sequence, due_date, value, interest, status in rows
    ]


def consortiums() -> list[Consortium]:
    rows = [
        # id, observation, group, quota, balance, installment, count, administrator, credit, category
        ("consortium-pvc-0g90", "Caminhão placa PVC-0G90", "10274", "221", "8228.75", "1408.37", 6,
         "Bradesco", "0", ConsortiumCategory.VEHICLE),
        ("consortium-virtus-lincoln", "Virtus Lincoln", "40063", "101", "22527.18", "949.51", 24,
         "Bradesco", "0", ConsortiumCategory.VEHICLE),
        ("consortium-compass-leandro", "Compass Leandro", "70196", "166", "86224.75", "5373.60", 23,
         "Santander", "0", ConsortiumCategory.VEHICLE),
        ("consortium-pwo-1f23", "Caminhão placa PWO-1F23", "10724", "222", "130564.26", "3264.68", 40,
         "Itaú (Matriz)", "185586.06", ConsortiumCategory.MACHINERY),
        ("consortium-mercedes-188", "Mercedes Leandro 188", "33231", "188", "204772.00", "3656.00", 56,
         "Santander", "0", ConsortiumCategory.VEHICLE),
        ("consortium-mercedes-242", "Mercedes Leandro 242", "33552", "242", "611605.21", "2407.47", 56,
         "Bama", "0", ConsortiumCategory.VEHICLE),
    ]
    return [
        Consortium(
            id=cid,
            company_id="empresa-logica-distribuicoes",
            observation=observation,
            group_code=group,
            quota=quota,
            outstanding_balance=D(balance),
            current_installment_value=D(installment),
            installments_to_pay=count,
            administrator=administrator,
            credit_to_receive=D(credit),
            category=category.value,
            total_installments=count,
            amount_to_pay=D(balance),
        )
        for cid, observation, group, quota, balance, installment, count, administrator, credit, category in rows
    ]


def users() -> list[UserProfile]:
    return [
        UserProfile(id="1", name="Ana Souza", email="ana@logica.com", role=Role.MASTER),
        UserProfile(id="2", name="Bruno Lima", email="bruno@logica.com", role=Role.MANAGER),
        UserProfile(id="3", name="Carla Dias", email="carla@logica.com", role=Role.FINANCE),
    ]
