#!/usr/bin/env python3
"""
Quick Start Guide for XML to JSON conversion.

Walks through the three API levels: the one-call ``convert`` function, the
configured converter with diagnostics, and driving the reader and builder
directly.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_to_json import (
    ConverterConfig,
    JSONTreeBuilder,
    XMLEventReader,
    XMLToJSONConverter,
    convert,
)

CATALOG = """<?xml version="1.0" encoding="utf-8"?>
<catalog>
  <book id="123" genre="fiction">
    <title>My Book</title>
    <author>John Doe</author>
    <price currency="USD">19.99</price>
  </book>
  <book id="456">
    <title>Another Book</title>
    <note><![CDATA[Contains <markup> & more]]></note>
  </book>
</catalog>"""

BROKEN = b"<order><id>42</id><customer>Jane</order><total>\xff</total>"


def quick_start_example():
    """Level 1: one call from XML to a JSON-ready value."""
    print("QUICK START - XML to JSON")
    print("=" * 45)

    value = convert(CATALOG)
    print(json.dumps(value, indent=2))


def diagnostics_example():
    """Level 2: configured conversion of damaged input, with diagnostics."""
    print("\nDiagnostics for damaged input")
    print("-" * 30)

    converter = XMLToJSONConverter(ConverterConfig.default(), correlation_id="demo-1")
    result = converter.convert_with_result(BROKEN)

    print(f"Value: {json.dumps(result.value)}")
    print(f"Lossless: {result.is_lossless}")
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic.severity.name}: {diagnostic.message}")
    print(f"Summary: {result.summary()}")


def building_blocks_example():
    """Level 3: drive the event reader and tree builder yourself."""
    print("\nEvents and tree building")
    print("-" * 30)

    reader = XMLEventReader("<e>a <x>b</x> c <x>d</x></e>")
    builder = JSONTreeBuilder()
    print(f"Value: {builder.build(reader)}")
    print(f"Elements converted: {builder.elements_converted}")


if __name__ == "__main__":
    quick_start_example()
    diagnostics_example()
    building_blocks_example()
