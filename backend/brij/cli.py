import argparse
import json
import sys
from pathlib import Path

from .config import load_env
from .validation import validate


def _read_text(path: Path) -> tuple[str | None, str | None]:
    try:
        return path.read_text(encoding="utf-8"), None
    except FileNotFoundError:
        return None, f"File not found: {path}"
    except (OSError, UnicodeDecodeError) as exc:
        return None, f"Unreadable file {path}: {exc}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate brij rule set documents.")
    parser.add_argument("paths", nargs="+", help="Rule set JSON files to validate")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum rule nesting depth")
    args = parser.parse_args(argv)

    load_env()

    exit_code = 0
    reports = {}
    for raw_path in args.paths:
        path = Path(raw_path)
        content, read_error = _read_text(path)
        if read_error is not None:
            print(read_error, file=sys.stderr)
            reports[str(path)] = {"error": read_error}
            exit_code = 2
            continue

        result = validate(content, max_depth=args.max_depth)
        reports[str(path)] = result.as_dict()
        if result.critical is not None:
            exit_code = 2
        elif not result.valid:
            exit_code = max(exit_code, 1)

        if args.json:
            continue
        if result.valid:
            print(f"OK: {path}")
        elif result.critical is not None:
            print(f"Invalid rule set document {path}: {result.critical}")
        else:
            print(f"Invalid rule set document {path}:")
            for error in result.errors:
                print(f"- {error}")

    if args.json:
        print(json.dumps(reports, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
