from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered student.

    `phone` doubles as the scan key encoded in the student's QR code.
    """

    student_id: str
    name: str
    phone: str
    father_phone: Optional[str] = None
    mother_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    year_of_study: Optional[str] = None
    address: Optional[str] = None
    church_father_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentInput:
    """Editable student fields, as submitted by the roster form."""

    name: str
    phone: str
    father_phone: Optional[str] = None
    mother_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    year_of_study: Optional[str] = None
    address: Optional[str] = None
    church_father_name: Optional[str] = None
