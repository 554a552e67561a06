"""Seed script for the leave request service.

Populates the database with a handful of demo leave requests:
- 6 employees, one request each (submissions are limited to one per day)
- a mix of leave types, with dates relative to today
- 2 requests approved and 1 rejected, the rest left pending

Every row goes through the same validation and store code the API uses.

Usage:
    python seed.py
"""

import asyncio
import os
import sys
from datetime import date, timedelta

from sqlalchemy import func, select

# Ensure the project root is on the path when running from a checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from leave_api.core.database import async_session_factory, create_tables
from leave_api.core.exceptions import LeaveServiceError
from leave_api.core.logging_config import setup_logging
from leave_api.models import LeaveRequest
from leave_api.services.leave_store import LeaveRequestStore
from leave_api.services.validation import validate_leave_submission


# ── Seed Data Definitions ────────────────────────────────────────────────────

# (employee_id, name, leave type, start offset, end offset, reason, decision)
REQUESTS_DATA = [
    ("ATS0101", "Sarah Chen", "Annual Leave", 7, 11, "Family trip to the coast", "approved"),
    ("ATS0102", "Michael Roberts", "Sick Leave", -2, 0, "Flu and fever", "approved"),
    ("ATS0103", "Emily Johnson", "Personal Leave", 14, 15, "Moving to a new apartment", None),
    ("ATS0104", "James Wilson", "Paternity Leave", 3, 16, "Birth of my first child", None),
    ("ATS0105", "Priya Patel", "Maternity Leave", 20, 140, "Maternity leave before due date", None),
    ("ATS0106", "David Kim", "Annual Leave", 1, 2, "Attending a wedding", "rejected"),
]


# ── Main Seed Function ────────────────────────────────────────────────────────

async def seed():
    """Seed the database with demo leave requests."""
    await create_tables()
    today = date.today()

    async with async_session_factory() as db:
        # Skip if the table already has data
        existing = (await db.execute(select(func.count(LeaveRequest.id)))).scalar() or 0
        if existing:
            print(f"leave_requests already holds {existing} rows. Skipping seed.")
            return

        store = LeaveRequestStore(db)
        created = 0
        for employee_id, name, leave_type, start, end, reason, decision in REQUESTS_DATA:
            try:
                data = validate_leave_submission(
                    employee_id=employee_id,
                    employee_name=name,
                    leave_type=leave_type,
                    start_date=(today + timedelta(days=start)).isoformat(),
                    end_date=(today + timedelta(days=end)).isoformat(),
                    reason=reason,
                )
                leave_request = await store.create(data)
                if decision:
                    await store.update_status(leave_request.id, decision)
            except LeaveServiceError as exc:
                print(f"   skipped {employee_id}: {exc.message}")
                continue
            created += 1
            print(f"   {employee_id} {leave_type:<16} {decision or 'pending'}")

        await db.commit()
        print(f"\nSeeded {created} leave requests.")


# ── Entry Point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
