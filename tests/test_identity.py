import pytest

from batchpick.identity import is_same_project, normalize_remote_url


@pytest.mark.parametrize(
    "origin",
    [
        "https://git.example.com/group/app",
        "https://git.example.com/group/app.git",
        "HTTPS://Git.Example.com/Group/App.git",
        "  https://git.example.com/group/app.git\n",
    ],
)
def test_same_project_ignores_suffix_and_case(origin):
    assert is_same_project("https://git.example.com/group/app", origin)


def test_different_repository():
    assert not is_same_project(
        "https://git.example.com/group/app", "https://git.example.com/fork/app.git"
    )


def test_ssh_origin_is_cross_project():
    assert not is_same_project(
        "https://git.example.com/group/app", "git@git.example.com:group/app.git"
    )


def test_missing_origin_is_cross_project():
    assert not is_same_project("https://git.example.com/group/app", None)
    assert not is_same_project("https://git.example.com/group/app", "")


def test_normalize_remote_url():
    assert normalize_remote_url(" https://H/A.git ") == "https://h/a"
