import argparse
import logging
import sys
from logging import debug

from .errors import GitObjectError
from .refs import list_branches, resolve_branch
from .remote import DumbHttpStore
from .render import format_branches, format_log, format_object, format_paths
from .store import LooseObjectStore, ObjectStore
from .traverse import commit_files, traverse_history

LOG_FORMAT = "%(levelname)s:\t%(message)s"

COMMANDS = ("cat-file", "list-branches", "log", "commit-tree")

PROMPTS = {
    "cat-file": "Enter git object hash:",
    "log": "Enter branch name:",
    "commit-tree": "Enter commit-hash:",
}


def open_store(location: str, cache: bool = False) -> ObjectStore:
    if location.startswith(("http://", "https://")):
        return DumbHttpStore(location, cache=cache)
    return LooseObjectStore(location, cache=cache)


def prompt(text: str) -> str:
    print(text)
    return input().strip()


def cat_file(store: ObjectStore, object_id: str, raw: bool = False) -> str:
    if raw:
        return "\n".join(str(line) for line in store.read_raw(object_id).split(b"\n"))
    return format_object(store.get_object(object_id))


def run(store: ObjectStore, command: str, target: str | None = None, raw=False) -> str | None:
    """Run one command and return its output, or None for an unknown command."""
    if command in PROMPTS and not target:
        target = prompt(PROMPTS[command])

    match command:
        case "cat-file":
            return cat_file(store, target, raw=raw)
        case "list-branches":
            return format_branches(list_branches(store))
        case "log":
            return format_log(traverse_history(store, resolve_branch(store, target)))
        case "commit-tree":
            return format_paths(commit_files(store, target))
        case _:
            debug(f"Unknown command {command!r}")
            return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "gitinternals", description="Inspect the loose objects of a git repository"
    )
    parser.add_argument("git_dir", nargs="?", help=".git directory or dumb HTTP URL")
    parser.add_argument("command", nargs="?", help=", ".join(COMMANDS))
    parser.add_argument("target", nargs="?", help="Object id, branch name or commit id")
    parser.add_argument(
        "--raw", action="store_true", help="cat-file: print the decompressed object"
    )
    parser.add_argument(
        "--cache", action="store_true", help="Cache decoded objects for this run"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT
    )

    git_dir = args.git_dir or prompt("Enter .git directory location:")
    command = args.command or prompt("Enter command:")

    try:
        output = run(open_store(git_dir, cache=args.cache), command, args.target, args.raw)
    except GitObjectError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if output is not None:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
