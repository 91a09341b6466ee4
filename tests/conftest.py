from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from studynode import app
from studynode.config import settings


@pytest.fixture()
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(settings, "studynode_data_dir", tmp_path)
    monkeypatch.setattr(settings, "llm_provider", "openai")
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "groq_api_key", "")
    return tmp_path


@pytest.fixture()
def client(data_dir: Path):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def note(client: TestClient) -> dict:
    resp = client.post(
        "/notes/",
        json={"title": "Cells", "content": "Mitochondria are the powerhouse of the cell."},
    )
    assert resp.status_code == 201
    return resp.json()
