# app/models/registry.py
"""
Import every model so `Base.metadata` is complete (Alembic, create_all in tests).
"""
from app.models.base import Base
from app.models.user import User
from app.models.patient import Patient, PatientProfile
from app.models.patient_registration import PatientRegistration
from app.models.medicine import Medicine
from app.models.prescription import Prescription, PrescriptionItem
from app.models.lab_test import LabTest, LabTestDefinition
from app.models.discharge_summary import DischargeSummary
from app.models.medical_history import MedicalHistory
from app.models.consultation import Consultation
from app.models.surgical_case_sheet import SurgicalCaseSheet
from app.models.identifier_counter import IdentifierCounter
from app.models.activity import Activity
from app.models.hospital_settings import HospitalSettings

__all__ = [
    "Base",
    "User",
    "Patient",
    "PatientProfile",
    "PatientRegistration",
    "Medicine",
    "Prescription",
    "PrescriptionItem",
    "LabTest",
    "LabTestDefinition",
    "DischargeSummary",
    "MedicalHistory",
    "Consultation",
    "SurgicalCaseSheet",
    "IdentifierCounter",
    "Activity",
    "HospitalSettings",
]
