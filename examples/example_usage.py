"""Example: drive the payroll service directly (no Flask).

Controllers stay thin; calculation and distribution live in the services.
"""

import importlib

from config import get_settings_module

from src.coach_payroll.coach_payroll.common.logging_config import configure_logging
from src.coach_payroll.coach_payroll.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    configure_logging("INFO")
    container = build_container(db_config=settings.DB_CONFIG)

    for row in container.payroll_service.calculate_payroll("2025-02"):
        print(row.coach_id, row.total_amount, row.student_count, row.status.value)

    cycle, preview = container.payroll_service.estimate_current_cycle()
    print(f"running cycle {cycle.start}..{cycle.end}:", sum(r.total_amount for r in preview))


if __name__ == "__main__":
    main()
