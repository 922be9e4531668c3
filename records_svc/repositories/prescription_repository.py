"""
Repository for prescription reference lookups.

All SQL touching prescription_reference reads lives here; the multi-table
update lives in PatientRepository because it changes patient-side rows.
"""
import logging
from typing import Optional, List, Dict, Any

from records_svc.repositories.base import Database

logger = logging.getLogger(__name__)

# Escape character used for LIKE patterns built from user input
LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class PrescriptionRepository:
    """Repository for prescription and reference-number queries."""

    def __init__(self, db: Database):
        self._db = db

    def get_by_reference(self, reference_number: str) -> Optional[Dict[str, Any]]:
        """
        Get a prescription joined with its patient, doctor and medicine.

        Args:
            reference_number: Exact reference number.

        Returns:
            Optional[dict]: Prescription dictionary or None if not found.
        """
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                """
                SELECT
                    pr.reference_number,
                    p.name AS patient_name,
                    p.age,
                    p.gender,
                    p.contact,
                    d.name AS doctor_name,
                    m.name AS medicine_name,
                    pr.description
                FROM prescription_reference pr
                INNER JOIN patient p ON pr.patient_id = p.id
                INNER JOIN doctor d ON pr.doctor_id = d.id
                INNER JOIN medicine m ON pr.medicine_id = m.id
                WHERE pr.reference_number = ?
                """,
                (reference_number,)
            ).fetchone()
        finally:
            conn.close()

        return dict(row) if row else None

    def search_references(self, text: str) -> List[str]:
        """
        Find every reference number containing ``text``.

        Args:
            text: Substring to look for. Wildcard characters match literally;
                an empty string matches every reference.

        Returns:
            List[str]: Matching reference numbers, sorted ascending.
        """
        pattern = f"%{escape_like(text)}%"
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT reference_number FROM prescription_reference
                WHERE reference_number LIKE ? ESCAPE '{LIKE_ESCAPE}'
                ORDER BY reference_number ASC
                """,
                (pattern,)
            ).fetchall()
        finally:
            conn.close()

        return [row["reference_number"] for row in rows]
