import httpx
import pytest

from ukt_console.app.core.auth import AuthContext
from ukt_console.app.services.session import ConsoleSession
from ukt_console.sandbox.db import Base, SessionLocal, engine
from ukt_console.sandbox.main import app
from ukt_console.sandbox.models import CategoryHistory, Student, UKTCategory
from ukt_console.sandbox.security import create_access_token

SANDBOX_API = "http://sandbox/api"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def token() -> str:
    return create_access_token(user_id=1)


@pytest.fixture
async def console(anyio_backend, token):
    session = ConsoleSession(AuthContext(token), base_url=SANDBOX_API, transport=httpx.ASGITransport(app=app))
    yield session
    await session.aclose()


class SandboxSeed:
    def __init__(self, db):
        self.db = db

    def student(self, nim: str, nama: str, user_id: int, status_aktif: str = "AKTIF", **fields) -> Student:
        fields.setdefault("email", f"{nim.lower()}@example.ac.id")
        return self._add(Student(nim=nim, nama=nama, user_id=user_id, status_aktif=status_aktif, **fields))

    def category(self, nama_kategori: str, nominal: int) -> UKTCategory:
        return self._add(UKTCategory(nama_kategori=nama_kategori, nominal=nominal))

    def history(self, nim: str, id_kategori_ukt: int, tanggal_perubahan: str) -> CategoryHistory:
        return self._add(CategoryHistory(nim=nim, id_kategori_ukt=id_kategori_ukt, tanggal_perubahan=tanggal_perubahan))

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj


@pytest.fixture
def seed():
    db = SessionLocal()
    try:
        yield SandboxSeed(db)
    finally:
        db.close()
