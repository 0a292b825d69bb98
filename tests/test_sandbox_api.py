from fastapi.testclient import TestClient

from ukt_console.sandbox.main import app


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_student(client: TestClient, token: str, nim: str, nama: str, **fields):
    payload = {"nim": nim, "nama": nama, "email": f"{nim.lower()}@example.ac.id", **fields}
    return client.post("/api/mahasiswa", json=payload, headers=auth(token))


def create_category(client: TestClient, token: str, nama: str, nominal: int) -> int:
    resp = client.post("/api/kategori-ukt", json={"nama_kategori": nama, "nominal": nominal}, headers=auth(token))
    assert resp.status_code == 201
    return resp.json()["data"]["id_kategori_ukt"]


def test_root_and_health():
    client = TestClient(app)
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "ok"}


def test_routes_require_bearer_token():
    client = TestClient(app)
    resp = client.get("/api/mahasiswa")
    assert resp.status_code == 401
    assert resp.json() == {"status": "error", "message": "Unauthenticated."}

    resp = client.get("/api/tagihan", headers=auth("invalid.token.value"))
    assert resp.status_code == 401


def test_create_and_list_students(token):
    client = TestClient(app)
    resp = create_student(client, token, "A1", "Budi", tanggal_lahir="2000-01-31T00:00:00.000Z", alamat="")
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["user_id"] == 1
    assert data["status_aktif"] == "AKTIF"
    assert data["alamat"] is None
    assert create_student(client, token, "A2", "Sari").json()["data"]["user_id"] == 2

    flat = client.get("/api/mahasiswa", headers=auth(token)).json()
    assert [row["nim"] for row in flat["data"]] == ["A1", "A2"]

    page = client.get("/api/masters", headers=auth(token)).json()
    assert page["data"]["total"] == 2
    assert [row["nama"] for row in page["data"]["data"]] == ["Budi", "Sari"]


def test_duplicate_nim_is_a_field_error(token):
    client = TestClient(app)
    create_student(client, token, "A1", "Budi")
    resp = create_student(client, token, "A1", "Budi Lagi")
    assert resp.status_code == 422
    body = resp.json()
    assert body["status"] == "error"
    assert body["errors"] == {"nim": ["The nim has already been taken."]}


def test_request_validation_uses_error_envelope(token):
    client = TestClient(app)
    resp = client.post("/api/mahasiswa", json={"nim": "A1", "email": "a1@example.ac.id"}, headers=auth(token))
    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "The given data was invalid."
    assert body["errors"]["nama"][0].startswith("nama:")


def test_update_and_delete_student(token):
    client = TestClient(app)
    create_student(client, token, "A1", "Budi")
    resp = client.put("/api/mahasiswa/A1", json={"nama": "Budi Santoso", "no_hp": "0812"}, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"]["nama"] == "Budi Santoso"
    assert resp.json()["data"]["email"] == "a1@example.ac.id"

    assert client.delete("/api/mahasiswa/A1", headers=auth(token)).status_code == 200
    assert client.delete("/api/mahasiswa/A1", headers=auth(token)).status_code == 404


def test_referenced_category_cannot_be_deleted(token):
    client = TestClient(app)
    category_id = create_category(client, token, "UKT 1", 500000)
    create_student(client, token, "A1", "Budi")
    client.post(
        "/api/riwayat-kategori-ukt",
        json={"nim": "A1", "id_kategori_ukt": category_id, "tanggal_perubahan": "2023-08-01"},
        headers=auth(token),
    )
    resp = client.delete(f"/api/kategori-ukt/{category_id}", headers=auth(token))
    assert resp.status_code == 409
    assert resp.json()["status"] == "error"


def test_bills_reject_unknown_references_and_duplicates(token):
    client = TestClient(app)
    category_id = create_category(client, token, "UKT 3", 2400000)
    create_student(client, token, "A1", "Budi")
    bill = {
        "nim": "A1",
        "user_id": 1,
        "kategori_ukt_id": category_id,
        "semester": 1,
        "tahun_akademik": "2023/2024",
        "tanggal_jatuh_tempo": "2023-09-30",
        "nominal": 2400000,
    }
    resp = client.post("/api/tagihan", json=bill, headers=auth(token))
    assert resp.status_code == 201
    assert resp.json()["data"]["status_pembayaran"] == "belum_lunas"

    duplicate = client.post("/api/tagihan", json=bill, headers=auth(token))
    assert duplicate.status_code == 200
    assert duplicate.json()["status"] == "error"

    unknown = client.post("/api/tagihan", json={**bill, "nim": "Z9", "kategori_ukt_id": 99}, headers=auth(token))
    assert unknown.status_code == 422
    assert set(unknown.json()["errors"]) == {"nim", "kategori_ukt_id"}

    listing = client.get("/api/tagihan", headers=auth(token)).json()
    assert listing["data"]["total"] == 1


def test_generate_bills_for_active_students(token):
    client = TestClient(app)
    low = create_category(client, token, "UKT 1", 500000)
    high = create_category(client, token, "UKT 3", 2400000)
    create_student(client, token, "A1", "Budi")
    create_student(client, token, "A2", "Sari", status_aktif="TIDAK AKTIF")
    create_student(client, token, "A3", "Rina")
    for nim, category_id, day in (("A1", low, "2023-08-01"), ("A1", high, "2024-01-15"), ("A2", low, "2023-08-01")):
        client.post(
            "/api/riwayat-kategori-ukt",
            json={"nim": nim, "id_kategori_ukt": category_id, "tanggal_perubahan": day},
            headers=auth(token),
        )

    resp = client.post("/api/tagihan/generate", json={"semester": "2023/2024-2"}, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"] == {"created": 1}

    bills = client.get("/api/tagihan", headers=auth(token)).json()["data"]["data"]
    assert [(b["nim"], b["semester"], b["tahun_akademik"], b["nominal"]) for b in bills] == [
        ("A1", 2, "2023/2024", 2400000)
    ]

    again = client.post("/api/tagihan/generate", json={"semester": "2023/2024-2"}, headers=auth(token))
    assert again.json()["data"] == {"created": 0}

    bad = client.post("/api/tagihan/generate", json={"semester": "semester dua"}, headers=auth(token))
    assert bad.status_code == 422


def test_status_log_updates_student_status(token):
    client = TestClient(app)
    create_student(client, token, "A1", "Budi")
    resp = client.post(
        "/api/log-status-mahasiswa",
        json={"nim": "A1", "status_baru": "TIDAK AKTIF"},
        headers=auth(token),
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["status_awal"] == "AKTIF"

    student = client.get("/api/mahasiswa", headers=auth(token)).json()["data"][0]
    assert student["status_aktif"] == "TIDAK AKTIF"
    logs = client.get("/api/log-status-mahasiswa", headers=auth(token)).json()["data"]
    assert len(logs) == 1


def test_status_log_rejects_unknown_status(token):
    client = TestClient(app)
    create_student(client, token, "A1", "Budi")
    resp = client.post("/api/log-status-mahasiswa", json={"nim": "A1", "status_baru": "CUTI"}, headers=auth(token))
    assert resp.status_code == 422
    assert "status_baru" in resp.json()["errors"]


def test_payment_multipart_upload_stores_proof_path(token):
    client = TestClient(app)
    category_id = create_category(client, token, "UKT 1", 500000)
    create_student(client, token, "A1", "Budi")
    bill = client.post(
        "/api/tagihan",
        json={"nim": "A1", "kategori_ukt_id": category_id, "semester": 1, "tahun_akademik": "2023/2024", "nominal": 500000},
        headers=auth(token),
    ).json()["data"]

    resp = client.post(
        "/api/pembayaran",
        data={"id_tagihan": str(bill["id_tagihan"]), "tanggal_bayar": "2023-09-01", "status_verifikasi": "menunggu"},
        files={"bukti_pembayaran": ("proof.png", b"\x89PNG", "image/png")},
        headers=auth(token),
    )
    assert resp.status_code == 201
    payment = resp.json()["data"]
    assert payment["bukti_pembayaran"].startswith("bukti_pembayaran/")
    assert payment["bukti_pembayaran"].endswith("_proof.png")
    assert payment["status_verifikasi"] == "MENUNGGU"

    verified = client.put(
        f"/api/pembayaran/{payment['id_pembayaran']}",
        json={"id_tagihan": bill["id_tagihan"], "tanggal_bayar": "2023-09-01", "status_verifikasi": "terverifikasi"},
        headers=auth(token),
    )
    assert verified.status_code == 200
    assert verified.json()["data"]["status_verifikasi"] == "TERVERIFIKASI"
    assert verified.json()["data"]["bukti_pembayaran"] == payment["bukti_pembayaran"]


def test_payment_requires_proof_and_known_bill(token):
    client = TestClient(app)
    resp = client.post("/api/pembayaran", json={"id_tagihan": 99, "tanggal_bayar": "2023-09-01"}, headers=auth(token))
    assert resp.status_code == 422
    assert "id_tagihan" in resp.json()["errors"]

    bad_status = client.post(
        "/api/pembayaran",
        json={"id_tagihan": 1, "tanggal_bayar": "2023-09-01", "status_verifikasi": "maybe"},
        headers=auth(token),
    )
    assert bad_status.status_code == 422
    assert "status_verifikasi" in bad_status.json()["errors"]


def test_category_history_queries(token):
    client = TestClient(app)
    category_id = create_category(client, token, "UKT 1", 500000)
    create_student(client, token, "A1", "Budi")
    create_student(client, token, "A2", "Sari")
    for nim, day in (("A1", "2023-08-01"), ("A2", "2024-02-01")):
        resp = client.post(
            "/api/riwayat-kategori-ukt",
            json={"nim": nim, "id_kategori_ukt": category_id, "tanggal_perubahan": day},
            headers=auth(token),
        )
        assert resp.status_code == 201

    by_nim = client.get("/api/riwayat-kategori-ukt/nim/A2", headers=auth(token)).json()["data"]
    assert [row["nim"] for row in by_nim] == ["A2"]

    between = client.get(
        "/api/riwayat-kategori-ukt/date-range",
        params={"start_date": "2023-01-01", "end_date": "2023-12-31"},
        headers=auth(token),
    ).json()["data"]
    assert [row["nim"] for row in between] == ["A1"]

    unknown = client.post(
        "/api/riwayat-kategori-ukt",
        json={"nim": "Z9", "id_kategori_ukt": category_id, "tanggal_perubahan": "2024-01-01"},
        headers=auth(token),
    )
    assert unknown.status_code == 422
