import string

from hypothesis import given
from hypothesis import strategies as st

import sprout.text as text


def test_slugify_normalizes_title() -> None:
    assert text.slugify("  Fix the Login_Button  crash!! ") == "fix-the-login-button-crash"


def test_slugify_drops_non_ascii_and_collapses_hyphens() -> None:
    assert text.slugify("Café -- résumé") == "caf-rsum"
    assert text.slugify("!!!") == ""


def test_slugify_truncates_without_trailing_hyphen() -> None:
    slug = text.slugify("alpha beta gamma", max_len=11)

    assert slug == "alpha-beta"


@given(st.text(max_size=120))
def test_slugify_output_is_filesystem_safe(value: str) -> None:
    slug = text.slugify(value)

    assert set(slug) <= set(string.ascii_lowercase + string.digits + "-")
    assert not slug.startswith("-")
    assert not slug.endswith("-")
    assert "--" not in slug
    assert len(slug) <= text.SLUG_MAX_LEN


def test_interpolate_replaces_known_and_keeps_unknown() -> None:
    result = text.interpolate(
        "code {worktree} --branch {branch} {unknown}",
        {"worktree": "/w/IOS-1", "branch": "IOS-1"},
    )

    assert result == "code /w/IOS-1 --branch IOS-1 {unknown}"


def test_interpolate_does_not_rescan_substituted_values() -> None:
    result = text.interpolate("{title}", {"title": "use {branch}", "branch": "x"})

    assert result == "use {branch}"


def test_interpolate_ignores_braced_whitespace() -> None:
    assert text.interpolate("{ branch }", {"branch": "x"}) == "{ branch }"


def test_truncate_keeps_short_values() -> None:
    assert text.truncate("short", 10) == "short"
    assert text.truncate("a" * 20, 10) == "aaaaaaa..."
