#!/usr/bin/env python3
# scripts/populate_lab_tests.py
"""
Load the standard lab test catalogue into lab_test_definitions.
Idempotent: tests that already exist (by name) are skipped, never overwritten.

  python -m scripts.populate_lab_tests
"""

from __future__ import annotations

import argparse
import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.models.lab_test import LabTestDefinition

logger = logging.getLogger("scripts.populate_lab_tests")

# (test name, category, price)
LAB_TEST_CATALOGUE: list[tuple[str, str, str]] = [
    ("24 Hrs URINARY PROTEINS", "Pathology", "700.00"),
    ("ABSOLUTE EOSINOPHIL COUNT(AEC)", "Hematology", "600.00"),
    ("AFB (Acid Fast Bacilli) CULTURE", "Microbiology", "800.00"),
    ("ALBUMIN", "Biochemistry", "200.00"),
    ("ANTENATAL PROFILE(ANC PROFILE)", "Pathology", "1500.00"),
    ("APTT", "Hematology", "600.00"),
    ("ASO TITRE", "Biochemistry", "300.00"),
    ("SERUM AMYLASE", "Biochemistry", "400.00"),
    ("SERUM BILIRUBIN", "Biochemistry", "200.00"),
    ("BT CT (Bleeding Time, Clotting Time)", "Hematology", "100.00"),
    ("BLOOD GROUP", "Hematology", "100.00"),
    ("BLOOD UREA", "Biochemistry", "200.00"),
    ("SERUM CALCIUM", "Biochemistry", "200.00"),
    ("CBP (Complete Blood Picture)", "Hematology", "300.00"),
    ("CRP (C-Reactive Protein)", "Biochemistry", "300.00"),
    ("URINE CULTURE & SENSIVITY", "Microbiology", "750.00"),
    ("DENGUE IgG, IgM & NS1", "Microbiology", "1500.00"),
    ("ESR (Erythrocyte Sedimentation Rate)", "Hematology", "100.00"),
    ("FBS (Fasting Blood Sugar)", "Biochemistry", "50.00"),
    ("FERRITIN", "Biochemistry", "1000.00"),
    ("HbA1c", "Biochemistry", "500.00"),
    ("HAEMOGLOBIN", "Hematology", "100.00"),
    ("ECG (Electrocardiogram)", "Cardiology", "400.00"),
    ("CUE (Complete Urine Examination)", "Pathology", "100.00"),
    ("HBsAg (Hepatitis B Surface Antigen)", "Microbiology", "200.00"),
    ("HCV (Hepatitis C Virus)", "Microbiology", "600.00"),
    ("HIV", "Microbiology", "300.00"),
    ("LIPID PROFILE TEST", "Biochemistry", "500.00"),
    ("LIVER FUNCTION TEST(LFT)", "Biochemistry", "500.00"),
    ("MALARIAL PARASITE (PV & PF)", "Microbiology", "300.00"),
    ("PLATELET COUNT", "Hematology", "200.00"),
    ("POST LUNCH BLOOD SUGAR", "Biochemistry", "70.00"),
    ("URINE FOR PREGNANCY TEST", "Pathology", "100.00"),
    ("PT (Prothrombin Time)", "Hematology", "500.00"),
    ("RBS (Random Blood Sugar)", "Biochemistry", "50.00"),
    ("S.G.O.T. (SGOT/AST)", "Biochemistry", "200.00"),
    ("S.G.P.T. (SGPT/ALT)", "Biochemistry", "200.00"),
    ("SERUM CREATININE", "Biochemistry", "200.00"),
    ("SERUM SODIUM", "Biochemistry", "200.00"),
    ("SERUM POTASSIUM", "Biochemistry", "200.00"),
    ("STOOL EXAMINATION", "Pathology", "200.00"),
    ("THYROID PROFILE (T3 T4 & TSH)", "Biochemistry", "500.00"),
    ("TSH (Thyroid Stimulating Hormone)", "Biochemistry", "300.00"),
    ("SERUM URIC ACID", "Biochemistry", "200.00"),
    ("VITAMIN D3", "Biochemistry", "650.00"),
    ("WIDAL TEST WITH MP", "Microbiology", "400.00"),
    ("ULTRA SOUND WHOLE ABDOMEN", "Radiology", "600.00"),
    ("X-RAY CHEST PA VIEW", "Radiology", "500.00"),
    ("X-RAY KUB", "Radiology", "500.00"),
    ("X-RAY IVP", "Radiology", "2300.00"),
]


def populate_lab_tests(db: Session) -> tuple[int, int]:
    """Returns (inserted, skipped)."""
    existing = {name for (name,) in db.query(LabTestDefinition.test_name).all()}

    inserted = 0
    for test_name, category, price in LAB_TEST_CATALOGUE:
        if test_name in existing:
            continue
        db.add(
            LabTestDefinition(
                test_name=test_name,
                category=category,
                price=Decimal(price),
                is_active=True,
            )
        )
        inserted += 1

    db.commit()
    return inserted, len(LAB_TEST_CATALOGUE) - inserted


def main() -> None:
    configure_logging()
    argparse.ArgumentParser(description="Populate the lab test catalogue").parse_args()

    db: Session = SessionLocal()
    try:
        inserted, skipped = populate_lab_tests(db)
        logger.info("Lab test catalogue: %d inserted, %d already present", inserted, skipped)
    except Exception:
        db.rollback()
        logger.exception("Populating lab tests failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
