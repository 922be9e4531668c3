"""
Repository for patient database operations.

This module contains all database access for patient-related operations,
including the multi-table update keyed off a prescription reference.

Architecture:
    PatientRepository is the data access layer for patients.
    It should be injected via records_svc.core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import logging
from typing import Optional, Dict, Any

from records_svc.repositories.base import Database

logger = logging.getLogger(__name__)


class PatientRepository:
    """
    Repository for patient reads and updates.

    It should be instantiated via records_svc.core.dependencies.get_patient_repository().
    """

    def __init__(self, db: Database):
        """
        Initialize the patient repository.

        Args:
            db: Database instance for data access.
        """
        self._db = db

    def get_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Get a patient by exact name.

        Names are not unique; the row with the lowest id wins.

        Args:
            name: The patient's name.

        Returns:
            Optional[dict]: Patient dictionary or None if not found.
        """
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                """
                SELECT name, age, gender, contact FROM patient
                WHERE name = ?
                ORDER BY id ASC
                LIMIT 1
                """,
                (name,)
            ).fetchone()
        finally:
            conn.close()

        return dict(row) if row else None

    def get_page(self, page: int, page_size: int) -> Dict[str, Any]:
        """
        Get one page of patients joined with their prescription details.

        There is one row per prescription reference, ordered by reference number.

        Args:
            page: 1-based page number.
            page_size: Rows per page.

        Returns:
            dict with ``rows`` (list of row dicts) and ``total_count``
            (number of references across all pages).
        """
        offset = (page - 1) * page_size
        conn = self._db.get_connection()
        try:
            total_count = conn.execute(
                "SELECT COUNT(*) FROM prescription_reference"
            ).fetchone()[0]

            rows = conn.execute(
                """
                SELECT
                    pr.reference_number,
                    p.name,
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
                ORDER BY pr.reference_number ASC
                LIMIT ? OFFSET ?
                """,
                (page_size, offset)
            ).fetchall()
        finally:
            conn.close()

        return {
            "rows": [dict(row) for row in rows],
            "total_count": total_count,
        }

    def update_details(
        self,
        reference_number: str,
        patient_fields: Dict[str, Any],
        doctor_name: Optional[str] = None,
        medicine_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bool:
        """
        Update the patient, doctor and medicine rows behind a prescription reference.

        Runs as one transaction: the ids are looked up by reference number,
        then each table is updated only when it has something to change.
        Patient columns use COALESCE so a None value keeps the stored one.
        The foreign keys on the reference row are never touched.

        Args:
            reference_number: Reference whose linked rows should change.
            patient_fields: Mapping with any of name/age/gender/contact;
                None values leave the column unchanged.
            doctor_name: New doctor name, or None to leave it unchanged.
            medicine_name: New medicine name, or None to leave it unchanged.
            description: New prescription notes, or None to leave them unchanged.

        Returns:
            bool: True once committed, False if no reference matched
                (the transaction is rolled back in that case).

        Raises:
            sqlite3.Error: If any statement fails. The transaction is rolled back
                before the error propagates.
        """
        conn = self._db.get_connection()
        # Explicit BEGIN/COMMIT instead of sqlite3's implicit transactions
        conn.isolation_level = None

        try:
            conn.execute("BEGIN IMMEDIATE")
            logger.debug("Transaction started", extra={"reference_number": reference_number})

            try:
                ids = conn.execute(
                    """
                    SELECT pr.id, pr.patient_id, pr.doctor_id, pr.medicine_id
                    FROM prescription_reference pr
                    WHERE pr.reference_number = ?
                    """,
                    (reference_number,)
                ).fetchone()

                if ids is None:
                    conn.execute("ROLLBACK")
                    logger.info(
                        "No reference found, transaction rolled back",
                        extra={"reference_number": reference_number}
                    )
                    return False

                if any(value is not None for value in patient_fields.values()):
                    conn.execute(
                        """
                        UPDATE patient
                        SET name = COALESCE(?, name),
                            age = COALESCE(?, age),
                            gender = COALESCE(?, gender),
                            contact = COALESCE(?, contact)
                        WHERE id = ?
                        """,
                        (
                            patient_fields.get("name"),
                            patient_fields.get("age"),
                            patient_fields.get("gender"),
                            patient_fields.get("contact"),
                            ids["patient_id"],
                        )
                    )

                if doctor_name is not None:
                    conn.execute(
                        "UPDATE doctor SET name = ? WHERE id = ?",
                        (doctor_name, ids["doctor_id"])
                    )

                if medicine_name is not None:
                    conn.execute(
                        "UPDATE medicine SET name = COALESCE(?, name) WHERE id = ?",
                        (medicine_name, ids["medicine_id"])
                    )

                if description is not None:
                    conn.execute(
                        "UPDATE prescription_reference SET description = ? WHERE id = ?",
                        (description, ids["id"])
                    )

                conn.execute("COMMIT")
                logger.info(
                    "Transaction committed",
                    extra={"reference_number": reference_number}
                )
                return True

            except Exception:
                # SQLite may already have rolled back (SQLITE_FULL, IOERR, RAISE(ROLLBACK))
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                logger.error(
                    "Error during transaction, rolled back",
                    extra={"reference_number": reference_number}
                )
                raise
        finally:
            conn.close()
