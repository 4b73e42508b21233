#!/usr/bin/env python3
"""
Random fuzzer for the flathtml converter.
Generates invalid/malformed markup and checks that conversion never fails
and that its output keeps the documented shape.
"""

import argparse
import random
import string
import sys
import time
import traceback

from flathtml import TextStream, html_to_text
from flathtml.constants import WHITESPACE_CHARS

TAGS = [
    "div", "span", "p", "a", "b", "i", "table", "tr", "td", "ul", "ol", "li",
    "script", "style", "br", "br/", "br /", "hr", "h1", "h2", "h3", "h4", "h5", "h6",
    "pre", "code", "blockquote", "title", "head", "body", "html", "noscript",
]

SPECIAL_CHARS = [
    "\x00", "\x01", "\x0b", "\x0c", "\x1c", "\x7f",  # Control chars
    "\ufffd",  # Replacement character
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b", "\u3000",  # Zero-width space, ideographic space
    "\ufeff",  # BOM
]

ENTITIES = [
    "&amp;", "&lt;", "&gt;", "&quot;", "&apos;", "&nbsp;", "&copy;", "&reg;",
    "&trade;", "&mdash;", "&ndash;", "&hellip;", "&bull;",
    "&", "&amp", "&ampamp;", "&am", "&#", "&#x", "&#123", "&#x1f;", "&#10;",
    "&#xdeadbeef;", "&#99999999;", "&#-1;", "&#x;", "&#X41;", "&unknown;",
    "&AMP;", "&#0;", "&#xD800;", "&#x10FFFF;", "&#x110000;", "&;",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    """Generate random whitespace (including weird ones)."""
    ws = [" ", "\t", "\n", "\r", "\f", "\v", "\u00a0", "\u3000", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


def fuzz_tag_name():
    """Generate tag names in odd spellings."""
    tag = random.choice(TAGS)
    variants = [
        tag,
        tag.upper(),
        tag.capitalize(),
        tag + random_whitespace(),
        random_whitespace() + tag,
        tag + "/",
        random_string(1, 8),
        "",
    ]
    return random.choice(variants)


def fuzz_open_tag():
    name = fuzz_tag_name()
    variants = [
        f"<{name}>",
        f"<{name}",  # Unterminated
        f"<{name} {random_string(1, 5)}='{random_string()}'>",
        f"<{name} data-x=\"&amp;{random_string()}\">",
        f"<<{name}>",
        f"<{name}<{name}>",
    ]
    return random.choice(variants)


def fuzz_close_tag():
    name = fuzz_tag_name()
    variants = [
        f"</{name}>",
        f"</{name}",
        f"</ {name}>",
        f"</{name}{random_whitespace()}>",
    ]
    return random.choice(variants)


def fuzz_raw_body():
    """Generate script/style bodies, closed or not."""
    tag = random.choice(["script", "style", "SCRIPT", "Style"])
    content = random.choice([random_string(0, 30), random.choice(ENTITIES), "a < b && c > d"])
    variants = [
        f"<{tag}>{content}</{tag}>",
        f"<{tag}>{content}",
        f"<{tag}>{content}</{tag}",
        f"<{tag} type='x'>{content}</{tag}>",
        f"<script><style>{content}</script>{content}</style>",
    ]
    return random.choice(variants)


def fuzz_text():
    """Generate text content with edge cases."""
    strategies = [
        lambda: random_string(1, 50),
        lambda: random.choice(ENTITIES),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 10))),
        lambda: "&" + random_string(1, 10),  # Incomplete entity
        lambda: random_string() + ">" + random_string(),  # Stray >
        lambda: random_string() + ";",  # Stray ; closing an earlier &
        lambda: "\r\n" * random.randint(1, 5),
        lambda: " " * random.randint(10, 100),
        random_whitespace,
    ]
    return random.choice(strategies)()


def fuzz_nested_structure(depth=0, max_depth=6):
    """Generate nested (possibly invalid) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = random.choice(TAGS)
    children = [fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3))]
    return f"<{tag}>{''.join(children)}</{tag}>"


def generate_fuzzed_html():
    """Generate a complete fuzzed document."""
    parts = []
    num_elements = random.randint(1, 20)
    for _ in range(num_elements):
        element_type = random.choices(
            [fuzz_open_tag, fuzz_close_tag, fuzz_raw_body, fuzz_text, fuzz_nested_structure],
            weights=[20, 10, 5, 30, 10],
        )[0]
        parts.append(element_type())
    return "".join(parts)


def check_invariants(html, text):
    """Return a description of the first broken output invariant, or None."""
    if text != text.strip(WHITESPACE_CHARS):
        return "output not trimmed"
    if "\n\n" in text:
        return "consecutive newlines in output"

    stream = TextStream()
    pos = 0
    while pos < len(html):
        size = random.randint(1, 8)
        stream.feed(html[pos : pos + size])
        pos += size
    chunked = stream.close()
    if chunked != text:
        return f"chunked conversion differs: {chunked!r}"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the converter."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    hangs = []
    violations = []
    successes = 0

    print(f"Fuzzing flathtml with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            text = html_to_text(html)
            elapsed = time.perf_counter() - start

            # Conversion is linear; anything over a second is a hang
            if elapsed > 1.0:
                hangs.append({"test_num": i, "html": html, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
                continue

            problem = check_invariants(html, text)
            if problem:
                violations.append({"test_num": i, "html": html, "problem": problem})
                if verbose:
                    print(f"  VIOLATION: Test {i}: {problem}")
            else:
                successes += 1

        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: flathtml")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Hangs (>1s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    if elapsed_total > 0:
        print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if violations:
        print(f"\n{'='*60}")
        print("INVARIANT VIOLATIONS:")
        print(f"{'='*60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']}: {violation['problem']}")
            print(f"  HTML: {violation['html'][:200]!r}...")

    if save_failures and (crashes or hangs or violations):
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']}: {violation['problem']} ===\n")
                f.write(f"HTML:\n{violation['html']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs and not violations


def main():
    parser = argparse.ArgumentParser(description="Fuzz the flathtml converter with malformed markup")
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
        help="Just print N sample fuzzed documents (no conversion)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
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
