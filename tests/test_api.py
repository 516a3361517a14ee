import httpx
from fastapi.testclient import TestClient

from clinicsheets.config import Settings
from clinicsheets.main import create_app

DOCTORS_CSV = b"Name,Contact,Schedule,Availability\nDr. Ada,555-0100,Mon-Fri,Yes\nDr. Bo,555-0101,Sat,No\n"
PATIENTS_CSV = b"Name,Age,Systolic BP,Diastolic BP\nEve,41,120,80\nName,Age,Systolic BP,Diastolic BP\n"


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/doctors":
        return httpx.Response(200, content=DOCTORS_CSV)
    if request.url.path == "/patients":
        return httpx.Response(200, content=PATIENTS_CSV)
    return httpx.Response(404)


def make_client(**overrides):
    settings = Settings(
        doctors_url="https://sheets.example/doctors?output=csv",
        patients_url="https://sheets.example/patients?output=csv",
        refresh_on_startup=False,
        **overrides,
    )
    return TestClient(create_app(settings, transport=httpx.MockTransport(handler)))


def test_health():
    with make_client() as client:
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"ok": True}


def test_views_before_refresh_show_loading():
    with make_client() as client:
        r = client.get("/views/patients")
        assert r.status_code == 200
        table = r.json()["table"]
        assert table["rows"] == []
        assert table["message"] == "Loading patient data..."


def test_switch_views_and_search():
    with make_client() as client:
        r = client.post("/refresh")
        assert r.json() == {"doctors": 2, "patients": 1}

        r = client.get("/views/doctors")
        data = r.json()
        assert data["view"] == "doctors"
        assert data["polling"] is True
        assert data["table"]["columns"] == ["name", "contact", "schedule", "availability"]
        assert len(data["table"]["rows"]) == 2

        r = client.get("/views/patients/table", params={"q": "eve"})
        row = r.json()["rows"][0]
        assert row[:2] == ["Eve", "41"]
        assert row[5:7] == ["120", "80"]

        r = client.get("/views/home")
        assert r.json() == {"view": "home", "polling": False, "table": None}


def test_search_home_and_unknown_view():
    with make_client() as client:
        assert client.get("/views/home/table").status_code == 404
        assert client.get("/views/billing").status_code == 422


def test_normalize_upload():
    raw = "Name,Systolic BP\nName,Systolic BP\nPaul,120\n,\n".encode("latin-1")

    with make_client() as client:
        files = {"file": ("patients.csv", raw, "text/csv")}
        r = client.post("/normalize", files=files)
        assert r.status_code == 200

        data = r.json()
        assert data["header"] == ["name", "systolic"]
        assert data["records"] == [{"name": "Paul", "systolic": "120"}]
        assert data["summary"] == {"rows": 1, "columns": 2}


def test_normalize_rejects_non_csv():
    with make_client() as client:
        files = {"file": ("patients.xlsx", b"x", "application/octet-stream")}
        r = client.post("/normalize", files=files)
        assert r.status_code == 422
