from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
import logging
import os
from logging import debug, info

from gitinternals import (
    BlobObject,
    CommitObject,
    CorruptObjectError,
    GitObject,
    GitObjectError,
    NotFoundError,
    Person,
    TreeObject,
    commit_files,
    format_object,
    list_branches,
    resolve_branch,
    traverse_history,
)
from gitinternals.cli import LOG_FORMAT, open_store

GIT_DIR = os.environ.get("GITINTERNALS_GIT_DIR", ".git")
LOG_LEVEL = os.environ.get("GITINTERNALS_LOG_LEVEL", "INFO")

logging.basicConfig(level=LOG_LEVEL.upper(), format=LOG_FORMAT)

app = FastAPI(title="gitinternals")

info(f"Serving objects from {GIT_DIR}")


# A fresh caching store per request: shared sub-trees are decompressed once
# per request and nothing outlives it
def get_store():
    return open_store(GIT_DIR, cache=True)


@app.exception_handler(GitObjectError)
async def git_error_handler(request: Request, exc: GitObjectError):
    debug(f"{request.url.path}: {exc!r}")
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, CorruptObjectError):
        status = 500
    else:
        status = 422
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status)


def person_json(person: Person) -> dict:
    return {
        "name": person.name,
        "email": person.email,
        "role": person.role,
        "timestamp": person.timestamp,
        "offset": person.offset,
        "date": person.date.isoformat(),
    }


def commit_json(commit: CommitObject) -> dict:
    return {
        "tree": commit.tree,
        "parents": commit.parents,
        "author": person_json(commit.author),
        "committer": person_json(commit.committer),
        "message": commit.message,
    }


def object_json(obj: GitObject) -> dict:
    res = {"hash": obj.hash, "kind": obj.kind.name.lower()}
    match obj:
        case CommitObject():
            res.update(commit_json(obj))
        case TreeObject():
            res["entries"] = [
                {"mode": e.mode, "name": e.name, "hash": e.hash} for e in obj.entries
            ]
        case BlobObject():
            res["size"] = len(obj.contents)
            res["text"] = obj.text
    return res


# Just for testing
@app.get("/")
def homepage():
    return PlainTextResponse("gitinternals up\n")


@app.get("/objects/{object_id}")
def get_object(object_id: str, store=Depends(get_store)):
    return object_json(store.get_object(object_id))


@app.get("/objects/{object_id}/cat")
def cat_object(object_id: str, store=Depends(get_store)):
    return PlainTextResponse(format_object(store.get_object(object_id)))


@app.get("/branches")
def branches(store=Depends(get_store)):
    return [
        {"name": b.name, "commit": b.commit, "current": b.current}
        for b in list_branches(store)
    ]


@app.get("/log/{branch}")
def log(branch: str, store=Depends(get_store)):
    return [
        {"hash": entry.hash, "merged": entry.merged, **commit_json(entry.commit)}
        for entry in traverse_history(store, resolve_branch(store, branch))
    ]


@app.get("/commits/{commit_id}/files")
def files(commit_id: str, store=Depends(get_store)):
    return list(commit_files(store, commit_id))
