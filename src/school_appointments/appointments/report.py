from __future__ import annotations

import io
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import pandas as pd

from ..common.datetime_utils import coerce_date, format_date
from ..common.text import to_proper
from ..core.enums import AppointmentStatus
from ..core.exceptions import ValidationError
from .repository import AppointmentRepository

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ReportRow:
    code: str
    student_id: str
    name: str
    reasons: list[str]
    status: str
    date_time: str

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "student_id": self.student_id,
            "name": self.name,
            "reasons": list(self.reasons),
            "status": self.status,
            "date_time": self.date_time,
        }


@dataclass(frozen=True)
class AppointmentReport:
    start: date
    end: date
    status: Optional[AppointmentStatus]
    counts: "OrderedDict[str, int]" = field(default_factory=OrderedDict)
    rows: list[ReportRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "from": format_date(self.start),
            "to": format_date(self.end),
            "status": self.status.value if self.status else None,
            "counts": dict(self.counts),
            "rows": [r.to_dict() for r in self.rows],
        }

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "Code": r.code,
                    "SID": r.student_id,
                    "Name": r.name,
                    "Reasons": ", ".join(r.reasons),
                    "Status": r.status,
                    "Date & Time": r.date_time,
                }
                for r in self.rows
            ],
            columns=["Code", "SID", "Name", "Reasons", "Status", "Date & Time"],
        )

    def to_xlsx(self) -> bytes:
        summary = pd.DataFrame(
            [("From Date", format_date(self.start)), ("To Date", format_date(self.end))]
            + [(label, count) for label, count in self.counts.items()],
            columns=["Field", "Value"],
        )
        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            summary.to_excel(writer, index=False, sheet_name="Summary")
            self.to_dataframe().to_excel(writer, index=False, sheet_name="Appointments")
        return out.getvalue()


class ReportService:
    """Use case: appointment report over an inclusive date range."""

    def __init__(self, appointments: AppointmentRepository):
        self._appointments = appointments

    def build(self, *, start, end, status=None) -> AppointmentReport:
        try:
            start, end = coerce_date(start), coerce_date(end)
        except ValueError:
            raise ValidationError("Invalid date range.")
        if start is None or end is None:
            raise ValidationError("Please select the from and to dates.")
        if start > end:
            raise ValidationError("The from date must not be after the to date.")

        wanted = None
        if status:
            try:
                wanted = AppointmentStatus.parse(status)
            except ValueError:
                raise ValidationError(f"Unknown status: {status}")

        details = self._appointments.list_details_between(start, end)

        counts: "OrderedDict[str, int]" = OrderedDict()
        for s in AppointmentStatus:
            if wanted is None or s == wanted:
                counts[s.label] = sum(1 for d in details if d.appointment.status == s)

        rows = []
        for d in details:
            a = d.appointment
            if wanted is not None and a.status != wanted:
                continue
            rows.append(
                ReportRow(
                    code=a.qrcode,
                    student_id=(d.user.student_id or "") if d.user else "",
                    name=d.student_name,
                    reasons=list(a.reasons),
                    status=to_proper(a.status.value),
                    date_time=f"{format_date(a.appointment_date)} | {a.appointment_time}",
                )
            )

        return AppointmentReport(start=start, end=end, status=wanted, counts=counts, rows=rows)
