# app/api/v1/router.py
from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    consultations,
    dashboard,
    discharge_summaries,
    doctors,
    lab_test_definitions,
    lab_tests,
    medical_history,
    medicines,
    patient_registrations,
    patients,
    prescriptions,
    surgical_case_sheets,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(patients.profile_router, prefix="/patient-profile", tags=["patient-profile"])
api_router.include_router(
    patient_registrations.router, prefix="/patients-registration", tags=["patients-registration"]
)
api_router.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["prescriptions"])
api_router.include_router(lab_tests.router, prefix="/lab-tests", tags=["lab-tests"])
api_router.include_router(
    lab_test_definitions.router, prefix="/lab-test-definitions", tags=["lab-test-definitions"]
)
api_router.include_router(
    discharge_summaries.router, prefix="/discharge-summaries", tags=["discharge-summaries"]
)
api_router.include_router(medical_history.router, prefix="/medical-history", tags=["medical-history"])
api_router.include_router(consultations.router, prefix="/consultations", tags=["consultations"])
api_router.include_router(
    surgical_case_sheets.router, prefix="/surgical-case-sheets", tags=["surgical-case-sheets"]
)
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(doctors.current_router, prefix="/current-doctor", tags=["doctors"])
api_router.include_router(dashboard.stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(dashboard.activities_router, prefix="/activities", tags=["activities"])
api_router.include_router(dashboard.settings_router, prefix="/hospital-settings", tags=["hospital-settings"])
