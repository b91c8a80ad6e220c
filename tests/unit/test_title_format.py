import pytest

from issue_drafter.core.title_format import (
    TitleFormatSpec,
    apply_title_format,
    parse_title_format,
    title_follows_format,
    title_format_patterns,
)

FORMATS = [
    "feat(ui): Title",
    "bug(api): Title, feat(ui): Title",
    "",
    None,
    "no pattern here",
    "fix(core) Title",
    "feat(ui kit): Title",
    "feat(web.app): Title",
    "v2(ui): Title",
    "feat(): Title",
]
TITLES = ["Fix bug", "feat(ui): Already done", "BUG(Api): shouting", "a", "Login: broken on Safari"]


def test_apply_format_prefixes_plain_title():
    assert apply_title_format("Fix bug", "feat(ui): Title") == "feat(ui): Fix bug"


def test_apply_format_uses_only_first_pattern():
    assert apply_title_format("Fix bug", "bug(api): Title, feat(ui): Title") == "bug(api): Fix bug"


@pytest.mark.parametrize("fmt", ["", None])
def test_apply_format_without_format_is_noop(fmt):
    assert apply_title_format("Fix bug", fmt) == "Fix bug"


@pytest.mark.parametrize("fmt", ["no pattern here", "fix(core) Title", "fix core): Title"])
def test_malformed_format_is_noop(fmt):
    assert apply_title_format("Fix bug", fmt) == "Fix bug"


@pytest.mark.parametrize("title", ["feat(ui): Already done", "BUG(Api): shouting", "chore(build-tools): bump"])
@pytest.mark.parametrize("fmt", FORMATS)
def test_formatted_titles_are_untouched(title, fmt):
    assert apply_title_format(title, fmt) == title


@pytest.mark.parametrize("title", TITLES)
@pytest.mark.parametrize("fmt", FORMATS)
def test_apply_format_is_idempotent(title, fmt):
    once = apply_title_format(title, fmt)
    assert apply_title_format(once, fmt) == once


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        ("feat(ui kit): Title", "feat(ui kit): Fix bug"),
        ("feat(web.app): Title", "feat(web.app): Fix bug"),
        ("v2(ui): Title", "v2(ui): Fix bug"),
        ("feat(): Title", "feat(): Fix bug"),
    ],
)
def test_loose_format_prefix_is_not_added_twice(fmt, expected):
    once = apply_title_format("Fix bug", fmt)
    assert once == expected
    assert apply_title_format(once, fmt) == expected


def test_title_with_colon_but_no_scope_still_gets_prefix():
    assert apply_title_format("Login: broken", "bug(auth): Title") == "bug(auth): Login: broken"


def test_scope_and_prefix_are_trimmed():
    assert parse_title_format("  feat ( ui ) : Title") == TitleFormatSpec(type_prefix="feat", scope="ui")


def test_title_follows_format():
    assert title_follows_format("fix(ui-kit): x")
    assert not title_follows_format("fix(ui kit): x")
    assert not title_follows_format("")


def test_patterns_split_and_drop_blanks():
    assert title_format_patterns("feat(ui): T, , bug(api): T") == ["feat(ui): T", "bug(api): T"]
    assert title_format_patterns(None) == []
