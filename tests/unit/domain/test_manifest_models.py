from __future__ import annotations

"""
Unit tests for the Manifest parser.

Verifies header parsing, case-insensitive lookup, continuation lines and
termination of the main section at the first blank line.
"""

from classpath_scanner.domain.manifest_models import parse_manifest


def test_parse_empty_manifest() -> None:
    manifest = parse_manifest("")
    assert len(manifest) == 0
    assert manifest.get("Class-Path") is None


def test_parse_main_attributes_case_insensitive() -> None:
    manifest = parse_manifest("Manifest-Version: 1.0\nClass-Path: a.jar b.jar\n")

    assert manifest.get("Class-Path") == "a.jar b.jar"
    assert manifest.get("class-path") == "a.jar b.jar"
    assert "MANIFEST-VERSION" in manifest
    assert list(manifest) == ["Manifest-Version", "Class-Path"]


def test_parse_empty_value() -> None:
    manifest = parse_manifest("Class-Path: \n")
    assert manifest.get("Class-Path") == ""


def test_parse_continuation_lines_and_crlf() -> None:
    content = b"Manifest-Version: 1.0\r\nClass-Path: lib/first.jar lib/sec\r\n ond.jar\r\n"
    manifest = parse_manifest(content)
    assert manifest.get("Class-Path") == "lib/first.jar lib/second.jar"


def test_parse_stops_at_first_blank_line() -> None:
    content = (
        "Manifest-Version: 1.0\n"
        "\n"
        "Name: com/example/\n"
        "Class-Path: ignored.jar\n"
    )
    manifest = parse_manifest(content)
    assert manifest.get("Class-Path") is None
    assert manifest.get("Manifest-Version") == "1.0"


def test_parse_skips_malformed_lines() -> None:
    manifest = parse_manifest("garbage line\nClass-Path: a.jar\n")
    assert manifest.get("Class-Path") == "a.jar"
    assert len(manifest) == 1
