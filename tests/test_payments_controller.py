import json

import httpx
import pytest

from ukt_console.app.core.auth import AuthContext
from ukt_console.app.core.errors import ValidationError
from ukt_console.app.schemas.payment import ProofUpload
from ukt_console.app.services.session import ConsoleSession

pytestmark = pytest.mark.anyio

STORED_PROOF = "bukti_pembayaran/ab12cd34_proof.png"


class FakeBilling:
    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = (request.method, request.url.path)
        if route == ("GET", "/api/tagihan"):
            return httpx.Response(200, json={"data": {"data": [{"id_tagihan": 5, "nim": "A1", "semester": 2}]}})
        if route == ("GET", "/api/pembayaran"):
            return httpx.Response(
                200,
                json={
                    "data": [
                        {
                            "id_pembayaran": 9,
                            "id_tagihan": 5,
                            "tanggal_bayar": "2024-01-02T00:00:00.000000Z",
                            "bukti_pembayaran": STORED_PROOF,
                            "status_verifikasi": "MENUNGGU",
                        }
                    ]
                },
            )
        if request.method in ("POST", "PUT"):
            return httpx.Response(200, json={"status": "success", "data": {"id_pembayaran": 9}})
        return httpx.Response(404, json={"message": "Not found"})

    def mutations(self):
        return [r for r in self.requests if r.method in ("POST", "PUT")]


@pytest.fixture
def backend():
    return FakeBilling()


@pytest.fixture
async def session(anyio_backend, backend):
    session = ConsoleSession(AuthContext("t0ken"), base_url="http://billing.test/api", transport=httpx.MockTransport(backend))
    yield session
    await session.aclose()


async def test_new_proof_is_sent_as_multipart(session, backend):
    payments = session.payments
    payments.open_create()
    payments.form.update(
        id_tagihan="5",
        tanggal_bayar="2024-01-02",
        bukti_pembayaran=ProofUpload("proof.png", b"\x89PNG", "image/png"),
    )
    await payments.submit()

    (request,) = backend.mutations()
    assert request.method == "POST"
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="bukti_pembayaran"; filename="proof.png"' in request.content
    assert b"menunggu" in request.content
    assert b'name="id_tagihan"' in request.content


async def test_edit_with_stored_proof_is_sent_as_json(session, backend):
    payments = session.payments
    await payments.load()
    payments.open_edit(payments.find(9))
    assert payments.form.values["tanggal_bayar"] == "2024-01-02"
    payments.set("status_verifikasi", "TERVERIFIKASI")
    await payments.submit()

    (request,) = backend.mutations()
    assert request.method == "PUT"
    assert request.url.path == "/api/pembayaran/9"
    assert json.loads(request.content) == {
        "id_tagihan": 5,
        "tanggal_bayar": "2024-01-02",
        "bukti_pembayaran": STORED_PROOF,
        "status_verifikasi": "terverifikasi",
    }


async def test_unknown_bill_blocks_submission(session, backend):
    session.payments.open_create()
    session.payments.form.update(id_tagihan="77", tanggal_bayar="2024-01-02", bukti_pembayaran=STORED_PROOF)
    with pytest.raises(ValidationError) as exc_info:
        await session.payments.submit()
    assert exc_info.value.field == "id_tagihan"
    assert backend.mutations() == []


async def test_unknown_verification_status_blocks_submission(session, backend):
    session.payments.open_create()
    session.payments.form.update(
        id_tagihan="5", tanggal_bayar="2024-01-02", bukti_pembayaran=STORED_PROOF, status_verifikasi="MAYBE"
    )
    with pytest.raises(ValidationError):
        await session.payments.submit()
    assert backend.mutations() == []


async def test_proof_is_required(session, backend):
    session.payments.open_create()
    session.payments.form.update(id_tagihan="5", tanggal_bayar="2024-01-02")
    with pytest.raises(ValidationError) as exc_info:
        await session.payments.submit()
    assert exc_info.value.field == "bukti_pembayaran"


async def test_grid_links_proof_and_bill(session):
    await session.payments.mount()
    (row,) = session.payments.grid()
    assert row["id_tagihan"] == "Bill #5 - 2"
    assert row["semester"] == 2
    assert row["tanggal_bayar"] == "02/01/2024"
    assert row["bukti_pembayaran"] == f"http://billing.test/api/storage/{STORED_PROOF}"


def test_proof_upload_from_path(tmp_path):
    path = tmp_path / "receipt.pdf"
    path.write_bytes(b"%PDF-1.4")
    upload = ProofUpload.from_path(path)
    assert upload.filename == "receipt.pdf"
    assert upload.content == b"%PDF-1.4"
    assert upload.content_type == "application/pdf"
