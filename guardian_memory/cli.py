#!/usr/bin/env python3
"""Command line access to the memory engine.

Examples:
    guardian-memory query "guardian precision" --limit 3
    guardian-memory stats --file us-complete.txt
    guardian-memory related "the quick brown fox jumps" --depth 2
    guardian-memory learn "wrong answer" "right answer"
"""

import argparse
import json
import sys
from typing import List, Optional

from .memory.core.lexical_memory import LexicalMemory
from .memory.core.memory_manager import MemoryManager
from .memory.exceptions import GuardianMemoryError
from .memory.storage.memory_file import MemoryFileStore
from .utils.config import UnifiedConfig, ConfigError
from .utils.logging import get_smart_logger

logger = get_smart_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--file", help="Corpus file (defaults to MEMORY_PATH or the known locations)")
    common.add_argument("--config", default="guardian_config.json", help="JSON configuration file")

    parser = argparse.ArgumentParser(
        prog="guardian-memory",
        description="Query and maintain the Guardian line memory"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser("query", parents=[common], help="Find the best matching line")
    query_parser.add_argument("text")
    query_parser.add_argument("--limit", type=int, default=None)

    subparsers.add_parser("stats", parents=[common], help="Show index statistics")

    related_parser = subparsers.add_parser("related", parents=[common],
                                           help="Show lines associated with a stored line")
    related_parser.add_argument("line")
    related_parser.add_argument("--depth", type=int, default=1)
    related_parser.add_argument("--limit", type=int, default=None)

    learn_parser = subparsers.add_parser("learn", parents=[common], help="Store a correction rule")
    learn_parser.add_argument("mistake")
    learn_parser.add_argument("correction")

    return parser


def open_manager(config: UnifiedConfig, file_path: Optional[str]) -> MemoryManager:
    """Create a manager loaded from the chosen or discovered corpus file."""
    engine = LexicalMemory(config.to_memory_config())
    if file_path:
        store = MemoryFileStore(file_path)
    else:
        store = MemoryFileStore.discover(config.candidate_paths)
        if store is None and config.memory_path:
            # Nothing exists yet; learned lines will create the configured file
            store = MemoryFileStore(config.memory_path)

    manager = MemoryManager(engine, store)
    manager.reload()
    return manager


def run(args: argparse.Namespace) -> dict:
    config = UnifiedConfig(args.config)
    manager = open_manager(config, args.file)
    engine = manager.engine

    if args.command == "query":
        return engine.query(args.text, args.limit).to_response()

    if args.command == "stats":
        stats = engine.get_statistics()
        stats["source"] = str(manager.store.path) if manager.store else None
        return stats

    if args.command == "related":
        node = engine.find_node(args.line)
        if node is None:
            return {"found": False, "related": []}
        return {
            "found": True,
            "node": node.to_dict(),
            "related": [
                {"node_id": other.node_id, "content": other.content,
                 "hops": hops, "strength": round(strength, 4)}
                for other, hops, strength in engine.related(node.node_id, args.depth, args.limit)
            ],
        }

    learned = manager.learn_correction(args.mistake, args.correction)
    return {"node_id": learned.node_id, "line": learned.line, "persisted": learned.persisted}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        result = run(args)
    except (GuardianMemoryError, ConfigError) as e:
        logger.error("cli_command_failed",
                     command=args.command,
                     error=str(e),
                     error_type=type(e).__name__)
        print(json.dumps({"error": str(e), "error_type": type(e).__name__}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
