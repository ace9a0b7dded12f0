#!/usr/bin/env python3
"""Debug script to trace the tagged-text tokenizer on a single input."""

import argparse
import sys

from ptml import MarkupError, parse, to_test_format


def debug_input(text, strict=False):
    print(f"=== Input: {text!r} ===")
    print("\nTrace:")
    try:
        result = parse(text, strict=strict, debug=True)
    except MarkupError as e:
        print(f"\n!!! {type(e).__name__} at offset {e.position} !!!")
        print(f"  {e.error}")
        print(f"  {e.text}")
        print(f"  {' ' * (e.offset - 1)}^")
        return False

    print("\nResult:")
    print(to_test_format(result))
    return True


def main():
    parser = argparse.ArgumentParser(description="Trace the tagged-text tokenizer on one input")
    parser.add_argument("text", nargs="?", help="Tagged text to parse (default: read stdin)")
    parser.add_argument("--strict", action="store_true", help="Raise on malformed input instead of falling back")
    args = parser.parse_args()

    text = args.text if args.text is not None else sys.stdin.read()
    ok = debug_input(text, strict=args.strict)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
