# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# COMMANDS:
# ---------
# 1. Decode a JSON document and print its DynamicValue tree:
#    python -m dvutility.cli decode payload.json
#    cat payload.json | python -m dvutility.cli decode
#
# 2. Store a JSON document under a file name:
#    python -m dvutility.cli store settings.json payload.json --dir durable
#
# 3. Print a stored document:
#    python -m dvutility.cli show settings.json --dir durable
#
# 4. Remove / list / clear:
#    python -m dvutility.cli rm settings.json --dir cache
#    python -m dvutility.cli ls --dir cache
#    python -m dvutility.cli clear --dir cache --confirm
#
# 5. Show where a directory resolves to:
#    python -m dvutility.cli where --dir durable
#
# ==============================================

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import get_config
from .decoding import DynamicValue, DynamicValueDecoder, reject_constant
from .exceptions import DecodingError, DVUtilityError, format_path
from .logging_config import setup_logging
from .persistence import OperationStatus, ScopedFileStore, StorageDirectory

logger = logging.getLogger(__name__)


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _directory(args) -> StorageDirectory:
    return StorageDirectory(args.dir)


def render_tree(value: DynamicValue) -> List[str]:
    """One line per node: path, kind and (for scalars) the value."""
    lines = []
    for path, node in value.iter_nodes():
        if node.is_container:
            lines.append(f"{format_path(path)}  {node.kind.value}[{len(node)}]")
        else:
            lines.append(f"{format_path(path)}  {node.kind.value}  {node.value!r}")
    return lines


def cmd_decode(args, store: ScopedFileStore) -> int:
    try:
        value = DynamicValueDecoder().decode(_read_input(args.file))
    except DecodingError as e:
        print(f"error: {e.description} at {e.path_string}", file=sys.stderr)
        return 1
    for line in render_tree(value):
        print(line)
    return 0


def cmd_store(args, store: ScopedFileStore) -> int:
    try:
        payload = json.loads(_read_input(args.file), parse_constant=reject_constant)
    except ValueError as e:
        print(f"error: input is not valid JSON: {e}", file=sys.stderr)
        return 1
    result = store.try_store(payload, _directory(args), args.name)
    if result.failed:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    print(result.value)
    return 0


def cmd_show(args, store: ScopedFileStore) -> int:
    result = store.try_retrieve(args.name, _directory(args), object)
    if result.status is OperationStatus.EMPTY:
        print(f"{args.name}: not found", file=sys.stderr)
        return 1
    if result.failed:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    print(json.dumps(result.value, ensure_ascii=False, indent=2))
    return 0


def cmd_rm(args, store: ScopedFileStore) -> int:
    if not store.remove(args.name, _directory(args)):
        print(f"{args.name}: not found", file=sys.stderr)
    return 0


def cmd_ls(args, store: ScopedFileStore) -> int:
    for name in store.list_files(_directory(args)):
        print(name)
    return 0


def cmd_clear(args, store: ScopedFileStore) -> int:
    if not args.confirm:
        print("Refusing to clear without --confirm", file=sys.stderr)
        return 2
    result = store.try_clear(_directory(args))
    if result.failed:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    print(f"Removed {result.value or 0} entries")
    return 0


def cmd_where(args, store: ScopedFileStore) -> int:
    path = store.resolve_directory_path(_directory(args))
    if path is None:
        print("No path available", file=sys.stderr)
        return 1
    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dvutility", description="Dynamic JSON decoding and scoped file storage")
    sub = parser.add_subparsers(dest="command", required=True)

    dir_choices = [d.value for d in StorageDirectory]

    def add_dir(p):
        p.add_argument("--dir", choices=dir_choices, default=StorageDirectory.CACHE.value)

    p = sub.add_parser("decode", help="Decode JSON and print its value tree")
    p.add_argument("file", nargs="?", help="JSON file, stdin when omitted")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("store", help="Store a JSON document")
    p.add_argument("name")
    p.add_argument("file", nargs="?", help="JSON file, stdin when omitted")
    add_dir(p)
    p.set_defaults(func=cmd_store)

    p = sub.add_parser("show", help="Print a stored document")
    p.add_argument("name")
    add_dir(p)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("rm", help="Remove a stored file")
    p.add_argument("name")
    add_dir(p)
    p.set_defaults(func=cmd_rm)

    p = sub.add_parser("ls", help="List stored files")
    add_dir(p)
    p.set_defaults(func=cmd_ls)

    p = sub.add_parser("clear", help="Remove every stored file")
    p.add_argument("--confirm", action="store_true")
    add_dir(p)
    p.set_defaults(func=cmd_clear)

    p = sub.add_parser("where", help="Print the resolved directory path")
    add_dir(p)
    p.set_defaults(func=cmd_where)

    return parser


def main(argv: Optional[List[str]] = None, store: Optional[ScopedFileStore] = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    setup_logging(config.logging.level, config.logging.log_file)

    store = store or ScopedFileStore.from_config(config)
    try:
        return args.func(args, store)
    except DVUtilityError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
