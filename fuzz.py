#!/usr/bin/env python3
"""
Random fuzzer for the tagged-text parser.
Generates valid and malformed markup and checks the parser's invariants.
"""

import argparse
import random
import string
import sys
import time
import traceback

from ptml import MarkupError, parse, to_markup

TAGS = ["b", "i", "u", "s", "color", "size", "font", "ruby", "B", "Color", "h1", "x2"]

ATTRIBUTES = ["red", "#ff0000", "12", "1.5", "a=b", "x/y", "<", "=", "/", " spaced value ", "あ"]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f",  # Control chars
    chr(0xFFFD),  # Replacement character
    chr(0xA0),  # Non-breaking space
    chr(0x2028), chr(0x2029),  # Line/paragraph separators
    chr(0x200B), chr(0x200D),  # Zero-width chars
    chr(0xFEFF),  # BOM
    chr(0x1F600),  # Astral plane
]

DELIMITERS = ["<", ">", "/", "=", "</", "<>", "</>", "<=", "==", ">>"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def fuzz_text():
    """Generate plain text, sometimes with stray delimiters."""
    strategies = [
        lambda: random_string(0, 30),
        lambda: " ".join(random_string(1, 8) for _ in range(random.randint(1, 5))),
        lambda: random.choice(SPECIAL_CHARS) * random.randint(1, 3),
        lambda: random_string(1, 5) + random.choice([">", "/", "="]) + random_string(0, 5),
        lambda: "\n".join(random_string(0, 10) for _ in range(3)),
    ]
    return random.choice(strategies)()


def fuzz_tag_name():
    """Generate valid and malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS) + random_string(1, 3),
        lambda: "",
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),
        lambda: random.choice(TAGS) + " ",
        lambda: random.choice(TAGS) + "-x",
        lambda: "été",
    ]
    weights = [50, 10, 10, 3, 3, 3, 3, 5]
    return random.choices(strategies, weights=weights)[0]()


def fuzz_open_tag(name=None):
    name = fuzz_tag_name() if name is None else name
    if random.random() < 0.4:
        value = random.choice(ATTRIBUTES) if random.random() < 0.9 else ""
        return f"<{name}={value}>"
    return f"<{name}>"


def fuzz_close_tag(name=None):
    name = fuzz_tag_name() if name is None else name
    if random.random() < 0.05:
        return f"</{name}"
    return f"</{name}>"


def fuzz_nested_structure(depth=0, max_depth=6):
    """Generate well-formed nesting with random case changes on the end tag."""
    name = random.choice(TAGS)
    parts = [fuzz_open_tag(name)]
    for _ in range(random.randint(0, 3)):
        if depth < max_depth and random.random() < 0.5:
            parts.append(fuzz_nested_structure(depth + 1, max_depth))
        else:
            parts.append(fuzz_text())
    end_name = name.swapcase() if random.random() < 0.2 else name
    parts.append(fuzz_close_tag(end_name))
    return "".join(parts)


def fuzz_misnested():
    """Generate crossing or dangling tags."""
    a, b = random.sample(TAGS, 2)
    strategies = [
        lambda: f"<{a}><{b}>{fuzz_text()}</{a}></{b}>",
        lambda: f"<{a}>{fuzz_text()}",
        lambda: f"{fuzz_text()}</{a}>",
        lambda: f"<{a}={random.choice(ATTRIBUTES)}{fuzz_text()}",
        lambda: f"<{a}=>{fuzz_text()}</{a}>",
    ]
    return random.choice(strategies)()


def fuzz_deeply_nested():
    depth = random.randint(20, 200)
    names = [random.choice(TAGS) for _ in range(depth)]
    return "".join(f"<{n}>" for n in names) + fuzz_text() + "".join(f"</{n}>" for n in reversed(names))


def generate_fuzzed_markup():
    """Generate one fuzzed tagged-text string."""
    parts = []
    num_elements = random.randint(1, 15)
    for _ in range(num_elements):
        element_type = random.choices(
            [
                fuzz_text,
                fuzz_nested_structure,
                fuzz_open_tag,
                fuzz_close_tag,
                fuzz_misnested,
                fuzz_deeply_nested,
                lambda: random.choice(DELIMITERS),
            ],
            weights=[25, 40, 5, 5, 8, 1, 4],
        )[0]
        parts.append(element_type())
    return "".join(parts)


def check_invariants(text):
    """Return a description of the first broken invariant, or None."""
    plain_text, decorations = parse(text)

    try:
        strict_result = parse(text, strict=True)
    except MarkupError:
        if plain_text != text or decorations:
            return "lenient result differs from the identity fallback for a strict failure"
        return None

    if strict_result != (plain_text, decorations):
        return "strict and lenient results differ"
    for decoration in decorations:
        if not 0 <= decoration.start <= decoration.end <= len(plain_text):
            return f"{decoration!r} out of bounds for plain text of length {len(plain_text)}"
    if "<" not in text and (plain_text != text or decorations):
        return "tag-free text was not returned unchanged"
    if "<" in plain_text:
        return "plain text contains a tag delimiter"

    reparsed = parse(to_markup(plain_text, decorations), strict=True)
    if reparsed.plain_text != plain_text or reparsed.decorations != decorations:
        return "to_markup output does not parse back to the same result"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the parser."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    violations = []
    hangs = []
    successes = 0

    print(f"Fuzzing ptml with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        text = generate_fuzzed_markup()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            problem = check_invariants(text)
            elapsed = time.perf_counter() - start
        except Exception as e:  # noqa: BLE001
            crashes.append({
                "test_num": i,
                "text": text,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if problem is not None:
            violations.append({"test_num": i, "text": text, "problem": problem})
            if verbose:
                print(f"  VIOLATION: Test {i}: {problem}")
        elif elapsed > 1.0:
            hangs.append({"test_num": i, "text": text, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        else:
            successes += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: ptml")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Hangs (>1s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/max(elapsed_total, 1e-9):.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  Text: {crash['text'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if violations:
        print(f"\n{'='*60}")
        print("VIOLATION DETAILS:")
        print(f"{'='*60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']}: {violation['problem']}")
            print(f"  Text: {violation['text'][:200]!r}...")

    if save_failures and (crashes or violations or hangs):
        filename = f"fuzz_failures_ptml_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"Text:\n{crash['text']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} ===\n")
                f.write(f"{violation['problem']}\nText:\n{violation['text']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"Text:\n{hang['text']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not violations and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the tagged-text parser with valid and malformed input")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed inputs (no parsing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_markup())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
