#!/usr/bin/env python3
"""
Database management script for the Records Service.

Usage:
    python -m records_svc.manage_db init [--db-path PATH]
    python -m records_svc.manage_db seed [--db-path PATH]
    python -m records_svc.manage_db status [--db-path PATH]

Commands:
    init      Create the schema (idempotent)
    seed      Create the schema and insert demo patients, doctors, medicines
              and prescription references. Skipped if references already exist.
    status    Print row counts per table
"""
import argparse
import sys
from typing import Dict, List, Optional, Tuple

from records_svc.core.config import DATABASE_PATH
from records_svc.repositories.base import Database

TABLES = ("patient", "doctor", "medicine", "prescription_reference")

# (reference_number, (patient name, age, gender, contact), doctor, medicine, description)
DEMO_PRESCRIPTIONS: List[Tuple[str, Tuple[str, int, str, str], str, str, str]] = [
    ("RX-1001", ("Nimal Perera", 54, "Male", "0712345678"), "Dr. Silva", "Metformin", "500mg twice daily"),
    ("RX-1002", ("Kamala Fernando", 37, "Female", "0778765432"), "Dr. Jayawardena", "Amoxicillin", "250mg three times daily for 7 days"),
    ("RX-1003", ("Ruwan Dias", 29, "Male", "0701122334"), "Dr. Silva", "Paracetamol", "As needed for fever"),
    ("RX-2001", ("Sanduni Wickrama", 62, "Female", "0719988776"), "Dr. Gunasekara", "Atorvastatin", "20mg at night"),
]


def table_counts(db: Database) -> Dict[str, int]:
    """Count rows in every table."""
    conn = db.get_connection()
    try:
        return {
            table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            for table in TABLES
        }
    finally:
        conn.close()


def seed_database(db: Database) -> int:
    """
    Insert the demo prescriptions in one transaction.

    Each reference gets its own patient, doctor and medicine row.

    Returns:
        int: Number of references inserted (0 if the table was not empty).
    """
    conn = db.get_connection()
    try:
        existing = conn.execute("SELECT COUNT(*) FROM prescription_reference").fetchone()[0]
        if existing:
            return 0

        for reference_number, patient, doctor, medicine, description in DEMO_PRESCRIPTIONS:
            patient_id = conn.execute(
                "INSERT INTO patient (name, age, gender, contact) VALUES (?, ?, ?, ?)",
                patient
            ).lastrowid
            doctor_id = conn.execute(
                "INSERT INTO doctor (name) VALUES (?)", (doctor,)
            ).lastrowid
            medicine_id = conn.execute(
                "INSERT INTO medicine (name) VALUES (?)", (medicine,)
            ).lastrowid
            conn.execute(
                """
                INSERT INTO prescription_reference
                (reference_number, patient_id, doctor_id, medicine_id, description)
                VALUES (?, ?, ?, ?, ?)
                """,
                (reference_number, patient_id, doctor_id, medicine_id, description)
            )

        conn.commit()
        return len(DEMO_PRESCRIPTIONS)
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Manage the Records Service database")
    parser.add_argument("command", choices=["init", "seed", "status"])
    parser.add_argument(
        "--db-path",
        default=DATABASE_PATH,
        help=f"Path to database file (default: {DATABASE_PATH})"
    )
    args = parser.parse_args(argv)

    db = Database(db_path=args.db_path)
    print(f"Database path: {db.db_path}")

    if args.command == "seed":
        inserted = seed_database(db)
        if inserted:
            print(f"✅ Inserted {inserted} demo prescriptions")
        else:
            print("ℹ️  Prescription references already present - seed skipped")
    elif args.command == "init":
        print("✅ Schema ready")

    for table, count in table_counts(db).items():
        print(f"   {table}: {count} rows")

    return 0


if __name__ == "__main__":
    sys.exit(main())
