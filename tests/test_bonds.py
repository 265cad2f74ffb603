from __future__ import annotations

from datetime import date
import unittest

from hrms_engine.errors import BondValidationError
from hrms_engine.models import BondStatus, BondType
from hrms_engine.schemas import Bond
from hrms_engine.services.bonds import bond_info, bond_status, schedule_bonds, validate_bond_chain

JOINING = date(2024, 3, 10)
CHAIN = [
    Bond(bond_type=BondType.INTERNSHIP, period_months=2, salary=10000, order=0),
    Bond(bond_type=BondType.JOB, period_months=12, salary=30000, order=1),
]


class ScheduleBondsTests(unittest.TestCase):
    def test_chain_starts_day_after_previous_end(self) -> None:
        scheduled = schedule_bonds(JOINING, CHAIN)

        self.assertEqual(len(scheduled), 2)
        self.assertEqual(scheduled[0].start_date, date(2024, 3, 10))
        self.assertEqual(scheduled[0].end_date, date(2024, 5, 10))
        self.assertEqual(scheduled[1].start_date, date(2024, 5, 11))
        self.assertEqual(scheduled[1].end_date, date(2025, 5, 11))

    def test_non_positive_period_is_skipped(self) -> None:
        bonds = [
            Bond(bond_type=BondType.OTHER, period_months=0, order=0),
            Bond(bond_type=BondType.JOB, period_months=6, order=1),
        ]
        with self.assertLogs("hrms_engine.bonds", level="WARNING"):
            scheduled = schedule_bonds(JOINING, bonds)

        self.assertEqual(len(scheduled), 1)
        self.assertEqual(scheduled[0].bond.bond_type, BondType.JOB)
        self.assertEqual(scheduled[0].start_date, JOINING)

    def test_bonds_are_chained_in_order_field_sequence(self) -> None:
        bonds = [
            Bond(bond_type=BondType.JOB, period_months=12, order=2),
            Bond(bond_type=BondType.INTERNSHIP, period_months=2, order=1),
        ]
        scheduled = schedule_bonds("10-03-2024", bonds)
        self.assertEqual([item.bond.bond_type for item in scheduled], [BondType.INTERNSHIP, BondType.JOB])

    def test_invalid_joining_date_gives_empty_chain(self) -> None:
        with self.assertLogs("hrms_engine.bonds", level="WARNING"):
            self.assertEqual(schedule_bonds("31-02-2024", CHAIN), [])

    def test_status_boundaries(self) -> None:
        start, end = date(2024, 3, 10), date(2024, 5, 10)
        self.assertEqual(bond_status(start, end, date(2024, 3, 9)), BondStatus.FUTURE)
        self.assertEqual(bond_status(start, end, date(2024, 3, 10)), BondStatus.ACTIVE)
        self.assertEqual(bond_status(start, end, date(2024, 5, 9)), BondStatus.ACTIVE)
        self.assertEqual(bond_status(start, end, date(2024, 5, 10)), BondStatus.EXPIRED)


class BondInfoTests(unittest.TestCase):
    def test_active_internship(self) -> None:
        info = bond_info(JOINING, CHAIN, date(2024, 4, 1))

        self.assertIsNotNone(info.current_bond)
        self.assertEqual(info.current_bond.bond_type, BondType.INTERNSHIP)
        self.assertEqual(info.current_bond_remaining.months, 1)
        self.assertEqual(info.current_bond_remaining.days, 9)
        self.assertEqual(info.current_bond_remaining.display, "1 month 9 days")
        self.assertEqual(info.bonds[1].status, BondStatus.FUTURE)
        self.assertEqual(info.bonds[1].remaining.display, "Starts in 40 days")
        self.assertEqual(
            (info.total_remaining.years, info.total_remaining.months, info.total_remaining.days),
            (1, 1, 10),
        )
        self.assertEqual(info.total_remaining.display, "1 year 1 month 10 days")
        self.assertEqual(info.current_salary, 10000)
        self.assertEqual(info.finish_date, date(2025, 5, 11))
        self.assertEqual(info.first_completion_date, date(2024, 5, 10))
        self.assertEqual(info.first_completion_bond_type, BondType.INTERNSHIP)

    def test_gap_day_between_bonds_has_no_current_bond(self) -> None:
        info = bond_info(JOINING, CHAIN, date(2024, 5, 10))

        self.assertIsNone(info.current_bond)
        self.assertEqual(info.bonds[0].status, BondStatus.EXPIRED)
        self.assertEqual(info.bonds[0].remaining.display, "Expired today")
        self.assertEqual(info.current_bond_remaining.display, "Starts in 1 day")
        self.assertEqual(info.current_salary, 0.0)
        self.assertEqual(info.first_completion_bond_type, BondType.JOB)

    def test_all_expired_uses_sentinel(self) -> None:
        info = bond_info(JOINING, CHAIN, date(2025, 6, 20))

        self.assertIsNone(info.current_bond)
        self.assertEqual(info.total_remaining.display, "-")
        self.assertEqual(info.current_bond_remaining.display, "Completed")
        self.assertEqual(info.bonds[1].remaining.display, "Expired 1 month 9 days ago")
        self.assertEqual(info.first_completion_date, date(2025, 5, 11))

    def test_no_bonds(self) -> None:
        info = bond_info(JOINING, [], date(2024, 4, 1))
        self.assertEqual(info.bonds, [])
        self.assertEqual(info.total_remaining.display, "-")


class ValidateBondChainTests(unittest.TestCase):
    def test_valid_chain_is_returned_sorted(self) -> None:
        ordered = validate_bond_chain(list(reversed(CHAIN)))
        self.assertEqual([bond.order for bond in ordered], [0, 1])

    def test_rejects_non_positive_period(self) -> None:
        with self.assertRaises(BondValidationError) as ctx:
            validate_bond_chain([Bond(bond_type=BondType.JOB, period_months=0)])
        self.assertEqual(ctx.exception.code, "INVALID_BOND")
        self.assertEqual(ctx.exception.index, 0)

    def test_rejects_negative_salary(self) -> None:
        with self.assertRaises(BondValidationError):
            validate_bond_chain([Bond(bond_type=BondType.JOB, period_months=3, salary=-1)])


if __name__ == "__main__":
    unittest.main()
