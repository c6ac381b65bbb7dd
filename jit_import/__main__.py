#!/usr/bin/env python3
"""
Command-line inspection of model archives.

    python -m jit_import inspect model.pt
    python -m jit_import records model.pt
"""

import argparse
import logging
import sys
from typing import Optional

from .configs import ImportConfig
from .container import ContainerReader
from .errors import ArchiveError
from .importer import load
from .modules import ScriptModule


def format_tree(module: ScriptModule, name: str = "<root>") -> list[str]:
    """Render a loaded module tree, one line per module, parameter and buffer."""
    lines = [f"{name}{' (optimized)' if module.is_optimized() else ''}"]

    def _recurse(mod: ScriptModule, prefix: str) -> None:
        entries: list[tuple[str, Optional[ScriptModule]]] = []
        for pname, param in mod.named_parameters(recurse=False):
            entries.append((f"{pname}: parameter {list(param.shape)} {param.dtype}", None))
        for bname, buf in mod.named_buffers(recurse=False):
            entries.append((f"{bname}: buffer {list(buf.shape)} {buf.dtype}", None))
        for cname, child in mod.named_children():
            label = f"{cname}{' (optimized)' if child.is_optimized() else ''}"
            entries.append((label, child))

        for idx, (label, child) in enumerate(entries):
            last = idx == len(entries) - 1
            lines.append(prefix + ("└── " if last else "├── ") + label)
            if child is not None:
                _recurse(child, prefix + ("    " if last else "│   "))

    _recurse(module, "")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jit_import", description="Inspect model archives."
    )
    parser.add_argument("--config", help="YAML file with ImportConfig options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    inspect_parser = sub.add_parser("inspect", help="Load and print the module tree")
    inspect_parser.add_argument("archive")
    records_parser = sub.add_parser("records", help="List record keys and sizes")
    records_parser.add_argument("archive")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ImportConfig.from_yaml(args.config) if args.config else ImportConfig.from_env()

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else config.log_level,
        format="[jit-import] %(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "inspect":
            print("\n".join(format_tree(load(args.archive, config))))
        else:
            with ContainerReader.open(args.archive, config.max_file_format_version) as reader:
                keys = reader.keys()
                for key in keys:
                    size = reader.record_size(key)
                    kind = "metadata" if key == keys[-1] else "storage"
                    print(f"{key:>12}  {size:>12}  {kind}")
    except ArchiveError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
