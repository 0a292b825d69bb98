import httpx
import pytest

from ukt_console.app.core.auth import AuthContext
from ukt_console.app.core.errors import FetchError, OperationNotAllowed, ValidationError
from ukt_console.app.services.session import ConsoleSession

pytestmark = pytest.mark.anyio


@pytest.fixture
def history(seed):
    seed.student("A1", "Budi", 1)
    seed.student("A2", "Sari", 2)
    low = seed.category("UKT 1", 500000)
    high = seed.category("UKT 2", 1000000)
    seed.history("A1", low.id_kategori_ukt, "2023-08-01")
    seed.history("A2", high.id_kategori_ukt, "2024-02-01")
    return {"low": low.id_kategori_ukt, "high": high.id_kategori_ukt}


async def test_grid_shows_student_and_category_names(console, history):
    await console.category_history.mount()
    rows = console.category_history.grid()
    assert [(r["nim"], r["nama_mahasiswa"], r["nama_kategori"]) for r in rows] == [
        ("A1", "Budi", "UKT 1"),
        ("A2", "Sari", "UKT 2"),
    ]
    assert rows[0]["tanggal_perubahan"] == "01/08/2023"


async def test_filters_by_text_student_and_category(console, history):
    screen = console.category_history
    await screen.mount()
    assert [r.nim for r in screen.filtered("sari")] == ["A2"]
    assert [r.nim for r in screen.filtered("ukt 1")] == ["A1"]
    assert [r.nim for r in screen.filtered(nim="A2")] == ["A2"]
    assert [r.nim for r in screen.filtered(category=history["low"])] == ["A1"]
    assert [r.nim for r in screen.filtered("", nim="", category="")] == ["A1", "A2"]


async def test_history_for_student_and_date_range(console, history):
    screen = console.category_history
    assert [r.nim for r in await screen.history_for_nim("A1")] == ["A1"]
    between = await screen.history_between("2024-01-01T00:00:00.000Z", "2024-12-31")
    assert [r.nim for r in between] == ["A2"]


async def test_record_category_change(console, history):
    screen = console.category_history
    await screen.mount()
    screen.open_create()
    screen.form.update(nim="A1", id_kategori_ukt=str(history["high"]), tanggal_perubahan="2024-08-01")
    await screen.submit()
    await console.cache.settle()

    assert [r.nim for r in await screen.history_for_nim("A1")] == ["A1", "A1"]
    assert len(screen.rows) == 3


async def test_unknown_category_is_rejected(console, history):
    screen = console.category_history
    screen.open_create()
    screen.form.update(nim="A1", id_kategori_ukt="99")
    with pytest.raises(ValidationError) as exc_info:
        await screen.submit()
    assert exc_info.value.field == "id_kategori_ukt"


async def test_entries_cannot_be_edited_but_can_be_deleted(console, history):
    screen = console.category_history
    await screen.load()
    with pytest.raises(OperationNotAllowed):
        screen.open_edit(screen.rows[0])
    assert await screen.remove(screen.rows[0].id_riwayat) is True
    await console.cache.settle()
    assert len(screen.rows) == 1


async def test_failed_lookup_is_reported(anyio_backend):
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "Server Error"}))
    async with ConsoleSession(AuthContext("t"), base_url="http://billing.test/api", transport=transport) as session:
        with pytest.raises(FetchError):
            await session.category_history.history_for_nim("A1")
        assert session.notifier.last.message == "Failed to load category-history: HTTP 500"
