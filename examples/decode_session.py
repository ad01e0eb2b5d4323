"""
Demo: Interactive Decoding Session

Replays a user typing a model number character by character, then shows
warnings, highlighting, reverse search and a model-type switch.
"""

from model_decoder import DecoderContext
from model_decoder.visualize import marker_line


def print_result(result):
    """Print decoded attributes, notices and warnings."""
    for a in result.attributes:
        print(f"  {a.position:5s} {a.code:4s} {a.name:30s} {a.description}")
    for notice in result.notices:
        print(f"  [{notice.code.value}] {notice.message}")
    for warning in result.warnings:
        print(f"  [{warning.severity.value}] {warning.message} -> {warning.hint}")


def demo_session():
    context = DecoderContext("rn")
    target = "RN-006-1-0-G-A-0-E-0-6:C-5-A-0-2"

    print("=" * 80)
    print("  TYPING REPLAY")
    print("=" * 80)
    for end in (2, 6, 10, 22, len(target)):
        result = context.decode(target[:end])
        status = "complete" if result.is_complete else f"{len(result.attributes)}/{result.expected_segments}"
        print(f"\n{result.normalized!r} ({status})")
        print_result(result)

    print("\n" + "=" * 80)
    print("  HIGHLIGHTING")
    print("=" * 80)
    categories = ["VOLTAGE", "B1", "B3"]
    marks = context.highlight(categories)
    print(f"\nReference: {context.config.reference_string}")
    print(f"           {marker_line(marks)}")
    live = context.highlight_live(categories)
    print(f"Live:      {context.last_result.normalized}")
    print(f"           {marker_line(live)}")

    print("\n" + "=" * 80)
    print("  REVERSE SEARCH")
    print("=" * 80)
    for query in ("economizer", "merv 13", ""):
        matches = context.search(query)
        print(f"\n{query!r}: {len(matches)} matches")
        for m in matches:
            print(f"  {m.position:5s} {m.code:4s} {m.description}")

    print("\n" + "=" * 80)
    print("  MODEL TYPE SWITCH")
    print("=" * 80)
    context.switch_model_type("rq")
    print(f"\nActive: {context.config.title}")
    print_result(context.decode(context.config.reference_string))


if __name__ == "__main__":
    demo_session()
