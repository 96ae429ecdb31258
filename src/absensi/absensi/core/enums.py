from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization checks."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "karyawan"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance row."""

    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "early_leave"


# Clock-out may only keep the status or move present -> early_leave.
CLOCK_OUT_TRANSITIONS: dict[AttendanceStatus, frozenset[AttendanceStatus]] = {
    AttendanceStatus.PRESENT: frozenset({AttendanceStatus.PRESENT, AttendanceStatus.EARLY_LEAVE}),
    AttendanceStatus.LATE: frozenset({AttendanceStatus.LATE}),
    AttendanceStatus.EARLY_LEAVE: frozenset({AttendanceStatus.EARLY_LEAVE}),
}


class DayStatus(str, Enum):
    """Derived status of one calendar day in a reconciled period."""

    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    ABSENT = "absent"
    LEAVE = "leave"
    PERMISSION = "permission"
    SICK = "sick"
    WEEKEND = "weekend"
    FUTURE = "future"
    PENDING = "pending"
    NOT_EMPLOYED = "not_employed"


ATTENDED_DAY_STATUSES = frozenset({DayStatus.PRESENT, DayStatus.LATE, DayStatus.EARLY_LEAVE})


class LeaveType(str, Enum):
    ANNUAL = "cuti"
    SICK = "sakit"
    PERMISSION = "izin"


LEAVE_TYPE_DAY_STATUS: dict[LeaveType, DayStatus] = {
    LeaveType.ANNUAL: DayStatus.LEAVE,
    LeaveType.SICK: DayStatus.SICK,
    LeaveType.PERMISSION: DayStatus.PERMISSION,
}


class RequestStatus(str, Enum):
    """Approval flow state of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AuditAction(str, Enum):
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    AUTO_CLOCK_OUT = "AUTO_CLOCK_OUT"
    LEAVE_SUBMIT = "LEAVE_SUBMIT"
    LEAVE_APPROVE = "LEAVE_APPROVE"
    LEAVE_REJECT = "LEAVE_REJECT"
