from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ViewName(str, Enum):
    home = "home"
    doctors = "doctors"
    patients = "patients"


class DoctorRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    contact: str = ""
    schedule: str = ""
    availability: str = ""


class PatientRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    age: str = ""
    gender: str = ""
    dateofbirth: str = ""
    contact: str = ""
    systolic: str = ""
    diastolic: str = ""
    spo2: str = ""
    heartrate: str = ""
    temperature: str = ""
    results: str = ""
    doctor: str = ""


class RenderedTable(BaseModel):
    view: ViewName
    columns: List[str]
    rows: List[List[str]] = Field(default_factory=list)
    message: Optional[str] = Field(default=None, examples=["No doctor data found."])


class ViewResponse(BaseModel):
    view: ViewName
    polling: bool
    table: Optional[RenderedTable] = None


class RefreshResponse(BaseModel):
    doctors: int
    patients: int


class NormalizeSummary(BaseModel):
    rows: int
    columns: int


class NormalizeResponse(BaseModel):
    encoding: str = Field(default="utf-8")
    header: List[str] = Field(default_factory=list)
    records: List[Dict[str, str]] = Field(default_factory=list)
    summary: NormalizeSummary


class HealthResponse(BaseModel):
    ok: bool = True
