"""In-memory stand-ins for the MySQL repositories."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

from src.absensi.absensi.attendance.model import AttendanceRecord, ClockOutPatch, NewAttendance
from src.absensi.absensi.audit.model import AuditEntry
from src.absensi.absensi.core.enums import LeaveType, RequestStatus, Role
from src.absensi.absensi.core.exceptions import Conflict, StorageError
from src.absensi.absensi.leave.model import LeaveRequest
from src.absensi.absensi.settings.model import SystemSettings
from src.absensi.absensi.users.model import Profile


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


class InMemorySettings:
    def __init__(self, settings: Optional[SystemSettings] = None):
        self.settings = settings or SystemSettings()
        self.reads = 0

    def get(self) -> SystemSettings:
        self.reads += 1
        return self.settings


class InMemoryAttendance:
    """Keeps the (user_id, work_date) unique key like the real table."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.fail_update_ids: set[int] = set()

    def find_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._rows.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def insert(self, record: NewAttendance) -> AttendanceRecord:
        with self._lock:
            if self.find_for_user_and_date(record.user_id, record.work_date):
                raise Conflict("Duplicate entry for uq_attendance_user_day")
            self._id += 1
            row = AttendanceRecord(
                record_id=self._id,
                user_id=record.user_id,
                work_date=record.work_date,
                clock_in=record.clock_in,
                clock_out=None,
                status=record.status,
                notes=record.notes,
                clock_in_location=record.clock_in_location,
                clock_in_lat=record.clock_in_lat,
                clock_in_lng=record.clock_in_lng,
            )
            self._rows[row.record_id] = row
            return row

    def update_clock_out(self, record_id: int, patch: ClockOutPatch) -> Optional[AttendanceRecord]:
        if record_id in self.fail_update_ids:
            raise StorageError("Lost connection to MySQL server")
        with self._lock:
            row = self._rows.get(record_id)
            if row is None or row.clock_out is not None:
                return None
            row = replace(
                row,
                clock_out=patch.clock_out,
                status=patch.status,
                work_hours=patch.work_hours,
                notes=patch.notes,
                clock_out_location=patch.clock_out_location,
                clock_out_lat=patch.clock_out_lat,
                clock_out_lng=patch.clock_out_lng,
            )
            self._rows[record_id] = row
            return row

    def query_range(self, *, start_date: date, end_date: date, user_id: Optional[int] = None):
        rows = [
            r
            for r in self._rows.values()
            if start_date <= r.work_date <= end_date and (user_id is None or r.user_id == user_id)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.user_id))

    def find_all_open_for_date(self, work_date: date):
        return [r for r in self._rows.values() if r.work_date == work_date and r.clock_out is None]

    def get_recent_for_user(self, user_id: int, limit: int):
        rows = [r for r in self._rows.values() if r.user_id == user_id]
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows[:limit]

    def all(self) -> list[AttendanceRecord]:
        return list(self._rows.values())


class InMemoryLeaves:
    def __init__(self):
        self._rows: dict[int, LeaveRequest] = {}
        self._id = 0

    def add(self, *, user_id, start_date, end_date, leave_type=LeaveType.ANNUAL, status=RequestStatus.APPROVED, reason="x"):
        self._id += 1
        leave = LeaveRequest(
            request_id=self._id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
            status=status,
        )
        self._rows[leave.request_id] = leave
        return leave

    def create(self, *, user_id, start_date, end_date, leave_type, reason):
        return self.add(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            status=RequestStatus.PENDING,
            reason=reason,
        )

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self._rows.get(int(request_id))

    def decide(self, *, request_id, status, decided_by, admin_note=None) -> bool:
        leave = self._rows.get(int(request_id))
        if not leave or leave.status != RequestStatus.PENDING:
            return False
        self._rows[leave.request_id] = replace(
            leave,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2026, 3, 2, 3, 0, tzinfo=timezone.utc),
            admin_note=admin_note,
        )
        return True

    def find_approved_overlapping(self, *, start_date, end_date, user_id=None, leave_type=None):
        return [
            leave
            for leave in self._rows.values()
            if leave.status == RequestStatus.APPROVED
            and leave.start_date <= end_date
            and leave.end_date >= start_date
            and (user_id is None or leave.user_id == user_id)
            and (leave_type is None or leave.leave_type == leave_type)
        ]

    def list_for_user(self, user_id, *, limit=200):
        return [leave for leave in self._rows.values() if leave.user_id == user_id][:limit]


class InMemoryProfiles:
    def __init__(self, *profiles: Profile):
        self._by_id = {p.user_id: p for p in profiles}

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        return self._by_id.get(user_id)

    def list_active(self):
        return [p for p in self._by_id.values() if p.is_active and p.role == Role.EMPLOYEE]


class InMemoryAuditLogs:
    def __init__(self, *, fail: bool = False):
        self.entries: list[AuditEntry] = []
        self.fail = fail

    def insert(self, entry: AuditEntry) -> None:
        if self.fail:
            raise StorageError("audit_logs is read-only")
        self.entries.append(entry)

    def actions(self) -> list[str]:
        return [e.action.value for e in self.entries]
