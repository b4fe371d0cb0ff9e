import pytest

from .core_types import ParseError, SemanticVersion
from .version import (
    MINIMUM_VERSION,
    meets_minimum_version,
    parse_lenient_version,
    truncate_version_text,
)


# --- Tests for truncate_version_text ---


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0.15.6", "0.15.6"),
        ("0.15.6\n", "0.15.6"),
        ("0.15.6-2", "0.15.6"),
        ("0.15.6 [development build; commit: abc]", "0.15.6"),
        ("0.15.6-rc.1 [development build]", "0.15.6"),
        ("-0.15.6", ""),
        (" 0.15.6", ""),
        ("0.15.6\nPureScript compiler", "0.15.6"),
        ("0.15.6\t(nightly)", "0.15.6"),
        ("", ""),
    ],
)
def test_truncate_version_text(raw, expected):
    assert truncate_version_text(raw) == expected


# --- Tests for parse_lenient_version ---


def test_parse_development_build():
    version = parse_lenient_version(
        truncate_version_text("0.15.6 [development build; commit: abc]")
    )
    assert version == SemanticVersion(0, 15, 6)


def test_parse_prerelease_suffix():
    assert parse_lenient_version(truncate_version_text("0.15.6-2")) == SemanticVersion(
        0, 15, 6
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0.15.4", (0, 15, 4)),
        ("1.2.3.4", (1, 2, 3)),  # extra components are ignored
        ("v0.15.10", (0, 15, 10)),
        ("=0.14.0", (0, 14, 0)),
        ("10.20.30", (10, 20, 30)),
    ],
)
def test_parse_valid_versions(text, expected):
    assert parse_lenient_version(text).core == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "0.15",
        "0",
        "a.b.c",
        "0.15.x",
        "0..4",
        "purs",
        "0.15.6beta",
        "\u0660.\u0661\u0665.\u0664",  # Arabic-Indic digits
    ],
)
def test_parse_invalid_versions(text):
    with pytest.raises(ParseError) as exc_info:
        parse_lenient_version(text)
    assert exc_info.value.text == text
    assert exc_info.value.error_code == "INVALID_VERSION"


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_lenient_version("not a version")


# --- Tests for SemanticVersion ---


def test_semantic_version_ignores_metadata_in_comparison():
    assert SemanticVersion(0, 15, 6, prerelease="2") == SemanticVersion(0, 15, 6)
    assert SemanticVersion(0, 15, 6, build="abc") < SemanticVersion(0, 15, 7)


def test_semantic_version_str():
    assert str(SemanticVersion(0, 15, 4)) == "0.15.4"
    assert str(SemanticVersion(0, 15, 4, prerelease="2", build="x")) == "0.15.4-2+x"


def test_semantic_version_rejects_negative_components():
    with pytest.raises(ValueError):
        SemanticVersion(0, -1, 0)


# --- Tests for the minimum version policy ---


def test_minimum_version_constant():
    assert str(MINIMUM_VERSION) == "0.15.4"


@pytest.mark.parametrize(
    "version, accepted",
    [
        (SemanticVersion(0, 15, 3), False),
        (SemanticVersion(0, 15, 4), True),
        (SemanticVersion(0, 15, 15), True),
        (SemanticVersion(0, 16, 0), False),  # newer, but patch < 4
        (SemanticVersion(0, 16, 4), True),
        (SemanticVersion(0, 14, 9), False),
        (SemanticVersion(1, 15, 4), True),  # major is not examined
    ],
)
def test_meets_minimum_version_literal_policy(version, accepted):
    assert meets_minimum_version(version) is accepted
