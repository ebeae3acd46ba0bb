import pytest

from batchpick.reference_parser import parse_commit_reference, project_code_from_path

SHA = "0123456789abcdef0123456789abcdef01234567"


def test_gitlab_style_url():
    ref = parse_commit_reference(f"https://host/a/b/-/commit/{SHA}")
    assert ref.project_code == "b"
    assert ref.commit_id == SHA
    assert ref.repo_base_url == "https://host/a/b"


def test_github_style_url():
    ref = parse_commit_reference(f"https://github.com/u/r/commit/{SHA}")
    assert ref.project_code == "r"
    assert ref.commit_id == SHA
    assert ref.repo_base_url == "https://github.com/u/r"


def test_nested_group_keeps_full_path():
    ref = parse_commit_reference("http://gitlab.local/top/sub/proj/-/commit/ABC123")
    assert ref.repo_base_url == "http://gitlab.local/top/sub/proj"
    assert ref.project_code == "proj"
    assert ref.commit_id == "ABC123"


def test_whitespace_and_git_suffix_are_stripped():
    line = f"   https://host/a/b/-/commit/{SHA}.git  "
    ref = parse_commit_reference(line)
    assert ref.raw_input == f"https://host/a/b/-/commit/{SHA}.git"
    assert ref.commit_id == SHA


def test_separator_style_never_leaves_dash_in_base_url():
    ref = parse_commit_reference(f"https://host/a/b/-/commit/{SHA}")
    assert not ref.repo_base_url.endswith("/-")


@pytest.mark.parametrize(
    "line",
    [
        "not-a-url",
        "",
        f"ftp://host/a/b/commit/{SHA}",
        "https://host/a/b/-/commit/xyz",
        f"https://host/a/b/-/commit/{SHA}/extra",
        f"https://host/a/b/tree/{SHA}",
        f"see https://host/a/b/commit/{SHA}",
    ],
)
def test_unrecognised_lines_return_none(line):
    assert parse_commit_reference(line) is None


def test_parsing_is_idempotent():
    line = f"https://host/a/b/-/commit/{SHA}"
    assert parse_commit_reference(line) == parse_commit_reference(line)


def test_project_code_skips_dash_segments():
    assert project_code_from_path("group/proj/-") == "proj"
    assert project_code_from_path("-") is None
