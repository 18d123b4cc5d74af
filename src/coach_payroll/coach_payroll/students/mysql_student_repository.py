from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date, to_decimal
from .model import RenewalEvent, Student, TransferEvent
from .repository import StudentRepository

_STUDENT_COLUMNS = """
    student_id, full_name, package_start_date, package_end_date,
    coach_id, package_months, is_active
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        full_name=r["full_name"],
        package_start_date=to_date(r["package_start_date"]),
        package_end_date=to_date(r["package_end_date"]),
        current_coach_id=int(r["coach_id"]),
        package_months=int(r.get("package_months") or 1),
        is_active=bool(r["is_active"]),
    )


def _student_filter(student_id: Optional[int]) -> tuple[str, tuple]:
    if student_id is None:
        return "", ()
    return "WHERE student_id=%s", (int(student_id),)


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_all_including_archived(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students ORDER BY student_id")
            return [_to_student(r) for r in fetchall(cur)]

    def list_transfers(self, student_id: Optional[int] = None) -> Sequence[TransferEvent]:
        where, params = _student_filter(student_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT transfer_id, student_id, old_coach_id, new_coach_id, transfer_date, notes, created_at
                FROM coach_transfers
                {where}
                ORDER BY transfer_date ASC, transfer_id ASC
                """,
                params,
            )
            return [
                TransferEvent(
                    transfer_id=int(r["transfer_id"]),
                    student_id=int(r["student_id"]),
                    old_coach_id=int(r["old_coach_id"]),
                    new_coach_id=int(r["new_coach_id"]),
                    transfer_date=to_date(r["transfer_date"]),
                    notes=r.get("notes"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def list_renewals(self, student_id: Optional[int] = None) -> Sequence[RenewalEvent]:
        where, params = _student_filter(student_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT renewal_id, student_id, payment_date, previous_end_date, new_end_date,
                       package_duration_months, amount, notes, recorded_by
                FROM student_payments
                {where}
                ORDER BY payment_date ASC, renewal_id ASC
                """,
                params,
            )
            return [
                RenewalEvent(
                    renewal_id=int(r["renewal_id"]),
                    student_id=int(r["student_id"]),
                    payment_date=to_date(r["payment_date"]),
                    previous_end_date=to_date(r.get("previous_end_date")),
                    new_end_date=to_date(r["new_end_date"]),
                    duration_months=int(r["package_duration_months"]),
                    amount=to_decimal(r["amount"]),
                    notes=r.get("notes"),
                    recorded_by=r.get("recorded_by"),
                )
                for r in fetchall(cur)
            ]

    def record_transfer(self, event: TransferEvent) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO coach_transfers(student_id, old_coach_id, new_coach_id, transfer_date, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(event.student_id),
                    int(event.old_coach_id),
                    int(event.new_coach_id),
                    event.transfer_date,
                    event.notes,
                ),
            )
            transfer_id = int(cur.lastrowid)
            cur.execute(
                "UPDATE students SET coach_id=%s WHERE student_id=%s",
                (int(event.new_coach_id), int(event.student_id)),
            )
            return transfer_id

    def record_renewal(self, event: RenewalEvent, *, package_months: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_payments(
                    student_id, amount, payment_date, package_duration_months,
                    previous_end_date, new_end_date, notes, recorded_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(event.student_id),
                    event.amount,
                    event.payment_date,
                    int(event.duration_months),
                    event.previous_end_date,
                    event.new_end_date,
                    event.notes,
                    event.recorded_by,
                ),
            )
            renewal_id = int(cur.lastrowid)
            cur.execute(
                """
                UPDATE students
                SET package_end_date=%s, package_months=%s, is_active=1, last_payment_date=%s
                WHERE student_id=%s
                """,
                (event.new_end_date, int(package_months), event.payment_date, int(event.student_id)),
            )
            return renewal_id

    def archive(self, *, student_id: int, leave_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET package_end_date=%s, is_active=0 WHERE student_id=%s",
                (leave_date, int(student_id)),
            )
            return cur.rowcount > 0
