"""
Demo: Clean JSON Output

Shows the JSON output format for a few representative model numbers.
"""

from model_decoder import decode_to_dict, decode_to_json


def demo_json_output():
    """Demonstrate JSON output for typical inputs."""

    print("=" * 80)
    print("  CLEAN JSON OUTPUT DEMO")
    print("=" * 80)

    test_cases = [
        ("RN reference unit", "rn", "RN-025-3-0-E-A-0-G-0-4:A-3-A-0-1"),
        ("RN electric heat at 208V", "rn", "RN-025-8-0-E-A-0-E-0-4"),
        ("RN single phase conflict", "rn", "RN-025-1-0-E-A-0-E-0-5"),
        ("RQ reference unit", "rq", "RQ-004-8-0-E-G-0-2:A-0-1"),
        ("Partial entry", "rn", "RN-040-4"),
    ]

    for title, model_type, model_number in test_cases:
        print(f"\n{title}")
        print("-" * 80)
        print(f"Input: {model_number}")
        print("\nJSON Output:")
        print(decode_to_json(model_number, model_type=model_type, include_notices=True))

    # Show dictionary format
    print("\n\n" + "=" * 80)
    print("  DICTIONARY FORMAT EXAMPLE")
    print("=" * 80)

    model_number = "RN-025-3-0-E-A-0-G-0-4:A-3-A-0-1"
    data = decode_to_dict(model_number)

    print(f"\nModel Number: {model_number}")
    print("\nDecoded Fields:")
    for name, value in data["Attributes"].items():
        print(f"  {name:30s}: {value['code']:4s} {value['description']}")


if __name__ == "__main__":
    demo_json_output()
