from __future__ import annotations

from dataclasses import dataclass

from .coaches.mysql_coach_repository import MySQLCoachRepository
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentLifecycleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    settings_repo: MySQLSettingsRepository
    coaches_repo: MySQLCoachRepository
    students_repo: MySQLStudentRepository
    payrolls_repo: MySQLPayrollRepository

    payroll_service: PayrollService
    student_service: StudentLifecycleService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    settings_repo = MySQLSettingsRepository(conn)
    coaches_repo = MySQLCoachRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)

    payroll_service = PayrollService(
        settings_repo,
        coaches_repo,
        students_repo,
        payrolls_repo,
        calculator=StandardPayrollCalculator(),
    )
    student_service = StudentLifecycleService(students_repo, coaches_repo)

    return Container(
        conn=conn,
        settings_repo=settings_repo,
        coaches_repo=coaches_repo,
        students_repo=students_repo,
        payrolls_repo=payrolls_repo,
        payroll_service=payroll_service,
        student_service=student_service,
    )
