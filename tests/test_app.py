import pytest
from fastapi.testclient import TestClient

import app as browse_app
from conftest import write_raw


@pytest.fixture
def client(repo, monkeypatch):
    monkeypatch.setattr(browse_app, "GIT_DIR", str(repo.git_dir))
    return TestClient(browse_app.app)


def test_homepage(client):
    assert client.get("/").status_code == 200


def test_commit_json(client, repo):
    res = client.get(f"/objects/{repo.merge}")
    assert res.status_code == 200
    body = res.json()
    assert body["kind"] == "commit"
    assert body["tree"] == repo.root
    assert body["parents"] == [repo.second, repo.side]
    assert body["author"]["name"] == "Smith"
    assert body["author"]["date"] == "2020-03-29T17:18:20+03:00"
    assert body["message"] == "merge side\n"


def test_tree_json(client, repo):
    body = client.get(f"/objects/{repo.root}").json()
    assert [e["name"] for e in body["entries"]] == ["README.md", "src"]


def test_blob_json(client, repo):
    body = client.get(f"/objects/{repo.readme}").json()
    assert body == {"hash": repo.readme, "kind": "blob", "size": 9, "text": "# readme\n"}


def test_cat(client, repo):
    res = client.get(f"/objects/{repo.src}/cat")
    assert res.text == f"*TREE*\n100644 {repo.main} main"


def test_branches(client, repo):
    assert client.get("/branches").json() == [
        {"name": "dev", "commit": repo.second, "current": False},
        {"name": "main", "commit": repo.merge, "current": True},
    ]


def test_log(client, repo):
    body = client.get("/log/main").json()
    assert [(e["hash"], e["merged"]) for e in body] == [
        (repo.merge, False),
        (repo.side, True),
        (repo.second, False),
        (repo.initial, False),
    ]


def test_files(client, repo):
    assert client.get(f"/commits/{repo.merge}/files").json() == ["README.md", "src/main"]


def test_not_found(client):
    res = client.get(f"/objects/{'0' * 40}")
    assert res.status_code == 404
    assert res.json()["error"] == "NotFoundError"


def test_unknown_branch(client):
    assert client.get("/log/nope").status_code == 404


def test_unknown_kind(client, repo):
    object_id = write_raw(repo.git_dir, b"tag 3\0abc")
    assert client.get(f"/objects/{object_id}").status_code == 422


def test_corrupt(client, repo):
    assert client.get(f"/commits/{repo.root}/files").status_code == 500
