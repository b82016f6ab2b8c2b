"""Example: drive the service layer directly (no Flask).

Checks an employee in and out at a store, then drafts the month's payroll.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.payroll_engine.payroll_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    attendance = container.attendance_service
    attendance.check_in_with_verification(1, 1, 37.5665, 126.9780)
    record = attendance.check_out_with_verification(1, 1, 37.5665, 126.9780)
    print(f"worked {record.working_hours:.2f}h")

    today = date.today()
    start = today.replace(day=1)
    payroll = container.payroll_service.calculate(1, 1, start, today)
    print(f"draft payroll #{payroll.payroll_id}: gross={payroll.gross_wage} net={payroll.net_wage}")


if __name__ == "__main__":
    main()
