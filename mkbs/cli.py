"""
MKBS Command Line Interface (CLI)
=================================

Interactive terminal program you run like:

    python -m mkbs.cli --data "values.csv" --keys "queries.csv"

It demonstrates:
- Argument parsing (argparse)
- A REPL loop (Read-Eval-Print Loop) for commands
- Mapping user commands to session methods (keys, search, export, report)

The CLI does not modify the input files. It loads them once and works on an
in-memory key list.
"""

from __future__ import annotations
import argparse, shlex
from typing import List, Optional
from .loader import load_column, load_sorted, parse_value
from .engine import MODES
from .session import SearchSession

HELP = """
Commands:
  help
  stats
  undo
  redo

  keys <v1> <v2> ...               (example: keys 3 17 42)
  keys file "<path>" [column]      (example: keys file "queries.csv" id)
  sortkeys

  search [fast|exhaustive] [workers]
  show [n]
  misses [n]

  export csv "<path.csv>"
  export json "<path.json>"
  bench [rounds]
  report "<path.docx>"
  quit

Keys typed on the command line are read as int, then float, else text.
Keys must be in ascending order before searching (use sortkeys).
"""

# Commands that do not change state and are kept out of the command log
_READ_ONLY = ("help", "show", "misses", "stats", "quit", "exit")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the MKBS CLI.

    1) Load the sorted data column (and optionally a key column)
    2) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="mkbs", description="Multi-key binary search console")
    ap.add_argument("--data", required=True, help="CSV / Excel / text file with the sorted values")
    ap.add_argument("--column", default=None, help="Column of --data to use (default: first)")
    ap.add_argument("--keys", default=None, help="File with the query keys")
    ap.add_argument("--keys-column", default=None, help="Column of --keys to use (default: first)")
    ap.add_argument("--sort-data", action="store_true", help="Sort the data column after loading")
    args = ap.parse_args(argv)

    print("Loading data...")
    data = load_sorted(args.data, args.column, sort=args.sort_data)
    session = SearchSession(data=data, data_path=args.data)
    if args.keys:
        session.set_keys(load_column(args.keys, args.keys_column))
        session.keys_path = args.keys

    print(f"Loaded {len(data)} values, {len(session.keys)} keys. Type 'help' for commands.")
    while True:
        try:
            line = input("mkbs> ")
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 not in _READ_ONLY:
                    session.command_log.append(stripped)
        except EOFError:
            break
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        try:
            handle(session, stripped)
        except Exception as e:
            print(f"Error: {e}")


def handle(session: SearchSession, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        print(f"Data values: {len(session.data)} | Keys: {len(session.keys)}")
        if session.state.outcomes is not None:
            s = session.summary()
            print(f"Last search ({session.state.last_mode}): found={s['found']} "
                  f"missing={s['missing_with_hint']} unresolved={s['unresolved']}")
        return

    if cmd == "undo":
        print("Undone." if session.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if session.redo() else "Nothing to redo.")
        return

    if cmd == "keys":
        if len(parts) >= 3 and parts[1].lower() == "file":
            path = parts[2]
            column = parts[3] if len(parts) >= 4 else None
            session.set_keys(load_column(path, column))
            session.keys_path = path
        else:
            session.set_keys([parse_value(p) for p in parts[1:]])
            session.keys_path = None
        print(f"Keys set. Count={len(session.keys)}")
        return

    if cmd == "sortkeys":
        session.sort_keys()
        print(f"Keys sorted. Count={len(session.keys)}")
        return

    if cmd == "search":
        mode = parts[1].lower() if len(parts) >= 2 else "fast"
        if mode not in MODES:
            raise ValueError("search mode must be: fast | exhaustive")
        workers = int(parts[2]) if len(parts) >= 3 else None
        session.search(mode, workers=workers)
        s = session.summary()
        print(f"Searched {s['keys']} keys ({mode}): found={s['found']} "
              f"missing={s['missing_with_hint']} unresolved={s['unresolved']}")
        return

    if cmd in ("show", "misses"):
        n = int(parts[1]) if len(parts) >= 2 else 10
        rows = session.results() if cmd == "show" else session.misses()
        _print_rows(rows[:n])
        if len(rows) > n:
            print(f"... ({len(rows)} total, showing {n})")
        return

    if cmd == "export":
        # export <csv|json> "<path>"
        if len(parts) < 3:
            print('Usage: export csv "out.csv"  OR  export json "out.json"')
            return
        fmt = parts[1].lower()
        out_path = parts[2]
        if fmt == "csv":
            session.export_csv(out_path)
            print(f"Exported CSV to {out_path}")
            return
        if fmt == "json":
            session.export_json(out_path)
            print(f"Exported JSON to {out_path}")
            return
        print("Unknown export format. Use: csv or json")
        return

    if cmd == "bench":
        rounds = int(parts[1]) if len(parts) >= 2 else 10
        res = session.bench(rounds)
        for name in ("naive", "fast", "exhaustive"):
            print(f"{name:<10} {res[name + '_ms']:.3f}ms | cmps={int(res[name + '_cmps'])}")
        return

    if cmd == "report":
        from .report import generate_docx_report
        if len(parts) < 2:
            print('Usage: report "out.docx"')
            return
        path = generate_docx_report(session, parts[1])
        print(f"Report written to {path}")
        return

    print("Unknown command. Type 'help'.")
    return


def _print_rows(rows):
    for i, k, o in rows:
        if o.found:
            print(f"[{i}] {k!r} -> found at {o.position}")
        elif o.position is None:
            print(f"[{i}] {k!r} -> missing (no hint)")
        else:
            print(f"[{i}] {k!r} -> missing, insert at {o.position}")


if __name__ == "__main__":
    main()
