"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.student_attendance.student_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    ledger = container.attendance_service.load_for_date(today)
    print(f"{today}: {len(ledger.entries)} marked, closed={container.attendance_service.is_day_closed(today)}")
    print(container.history_service.dashboard_stats(today))


if __name__ == "__main__":
    main()
