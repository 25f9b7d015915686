import pytest

from debgraph.modules.depends import InvalidDependencyName, first_alternatives, flatten, parse_depends


def test_parse_groups_and_alternatives():
    groups = parse_depends("libc6 (>= 2.7), libssl1.0.0 | libssl0.9.8")
    assert groups == (("libc6",), ("libssl1.0.0", "libssl0.9.8"))
    assert flatten(groups) == ("libc6", "libssl1.0.0", "libssl0.9.8")


def test_strips_architecture_and_restrictions():
    groups = parse_depends("  python3:any (>= 3.9~), libstdc++6 [amd64], perl:native  ")
    assert flatten(groups) == ("python3", "libstdc++6", "perl")


@pytest.mark.parametrize("text", ["", "   ", "\n", None])
def test_empty_declaration(text):
    assert parse_depends(text) == ()


@pytest.mark.parametrize("text", ["(>= 1.0)", "libc6, (>= 2.0)", "libc6, , perl", "a | | b", "libc6,"])
def test_missing_name_aborts_whole_declaration(text):
    with pytest.raises(InvalidDependencyName) as exc:
        parse_depends(text)
    assert exc.value.text == text.strip()
    assert exc.value.package is None


def test_error_can_be_tagged_with_package():
    with pytest.raises(InvalidDependencyName) as exc:
        parse_depends("(>= 1.0)")
    tagged = exc.value.for_package("foo")
    assert tagged.package == "foo"
    assert "foo" in str(tagged)
    assert isinstance(tagged, ValueError)


def test_first_alternatives_prefers_installed():
    groups = parse_depends("libc6, default-mta | mail-transport-agent, exim4 | postfix")
    installed = {"postfix"}
    assert first_alternatives(groups, installed.__contains__) == ("libc6", "default-mta", "postfix")
