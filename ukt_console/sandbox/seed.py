import logging
import os

from sqlalchemy.orm import Session

from ukt_console.sandbox.models import CategoryHistory, Student, UKTCategory
from ukt_console.sandbox.security import create_access_token

logger = logging.getLogger(__name__)

DEV_USER_ID = 1
DEFAULT_CATEGORIES = [
    ("UKT 1", 500000),
    ("UKT 2", 1000000),
    ("UKT 3", 2400000),
]
DEFAULT_STUDENTS = [
    ("230101001", "Budi Santoso", "budi@example.ac.id"),
    ("230101002", "Sari Wulandari", "sari@example.ac.id"),
]


def ensure_dev_data(db: Session) -> None:
    """
    Seed categories and students for local development when the database is empty.
    Skips execution when running under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return
    if db.query(UKTCategory).first() is not None:
        return

    categories = [UKTCategory(nama_kategori=name, nominal=nominal) for name, nominal in DEFAULT_CATEGORIES]
    db.add_all(categories)
    db.flush()
    for user_id, (nim, nama, email) in enumerate(DEFAULT_STUDENTS, start=1):
        db.add(Student(nim=nim, user_id=user_id, nama=nama, email=email, image="default.png", status_aktif="AKTIF"))
        db.add(CategoryHistory(nim=nim, id_kategori_ukt=categories[user_id].id_kategori_ukt, tanggal_perubahan="2023-08-01"))
    db.commit()
    logger.info("Seeded %d categories and %d students", len(DEFAULT_CATEGORIES), len(DEFAULT_STUDENTS))


def dev_token() -> str:
    return create_access_token(DEV_USER_ID)
