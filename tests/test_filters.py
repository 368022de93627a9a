import pytest

from zeget.filters import (
    Filter,
    FilterAction,
    all_handler,
    any_handler,
    extension_handler,
    has_handler,
    none_handler,
    parse_definition,
    parse_definitions,
)
from zeget.github import Asset

ASSET1 = Asset(name="file1.txt")
ASSET2 = Asset(name="file2.exe")


def test_any_handler():
    assert any_handler(ASSET1, ["file1.txt", "file2.exe"]) is True
    assert any_handler(ASSET2, ["file1.txt", "file2.exe"]) is True
    assert any_handler(ASSET1, ["file2.exe"]) is False


def test_all_handler():
    assert all_handler(ASSET1, ["file1.txt", "file1.txt"]) is True
    assert all_handler(ASSET2, ["file2.exe", "file2.exe"]) is True
    assert all_handler(ASSET1, ["file1.txt", "file2.exe"]) is False


def test_has_handler():
    assert has_handler(ASSET1, ["file1.txt"]) is True
    assert has_handler(ASSET2, ["file2.exe"]) is True
    assert has_handler(ASSET1, ["file2.exe"]) is False


def test_none_handler():
    assert none_handler(ASSET1, ["file2.exe"]) is True
    assert none_handler(ASSET2, ["file1.txt"]) is True
    assert none_handler(ASSET1, ["file1.txt"]) is False


def test_extension_handler():
    assert extension_handler(ASSET1, [".txt"]) is True
    assert extension_handler(ASSET2, [".exe"]) is True
    assert extension_handler(ASSET1, [".exe"]) is False


def test_handlers_ignore_case():
    assert any_handler(Asset(name="FILE1.TXT"), ["file1.txt"]) is True
    assert extension_handler(Asset(name="tool.ZIP"), [".zip"]) is True


@pytest.mark.parametrize(
    "name, expected",
    [("dir.d/tool", False), ("dir/.bashrc", True)],
)
def test_extension_uses_last_path_element(name, expected):
    assert extension_handler(Asset(name=name), [".d", ".bashrc"]) is expected


def test_create_filter():
    handler = lambda item, args: True  # noqa: E731
    created = Filter.create("test", handler, FilterAction.INCLUDE, "arg1", "arg2")
    assert created.name == "test"
    assert created.action == FilterAction.INCLUDE
    assert created.args == ["arg1", "arg2"]
    assert created.definition == "test(arg1,arg2)"


def test_apply():
    created = Filter.create("test", lambda item, args: item.name == "test", FilterAction.INCLUDE)
    assert created.apply(Asset(name="test")) is True
    assert created.apply(Asset(name="other")) is False


def test_with_args():
    created = Filter.create("test", lambda item, args: True, FilterAction.INCLUDE)
    returned = created.with_args("newArg1", "newArg2")
    assert returned is created
    assert created.args == ["newArg1", "newArg2"]


def test_parsed_filter_actions_and_handlers():
    none_filter = parse_definition("none(file1.txt)")
    assert none_filter.action == FilterAction.EXCLUDE
    assert none_filter.apply(ASSET1) is False
    assert none_filter.apply(ASSET2) is True

    ext_filter = parse_definition("ext(.exe)")
    assert ext_filter.action == FilterAction.INCLUDE
    assert ext_filter.handler is extension_handler


def test_parse_definitions():
    parsed = parse_definitions("all(file1.txt);none(file2.exe)")
    assert [item.name for item in parsed] == ["all", "none"]
    assert parsed[1].action == FilterAction.EXCLUDE


def test_parse_definition():
    parsed = parse_definition("all(file1.txt)")
    assert parsed.name == "all"
    assert parsed.args == ["file1.txt"]
    assert parsed.definition == "all(file1.txt)"


def test_parse_definition_multiple_args_applies():
    parsed = parse_definition("ext(.zip,.tar)")
    assert parsed.args == [".zip", ".tar"]
    assert parsed.apply(Asset(name="tool.tar")) is True


def test_parse_invalid_definition():
    assert parse_definition("invalid()") is None
    assert parse_definition("no parentheses") is None


def test_parse_definitions_drops_invalid():
    parsed = parse_definitions("bogus(x);any(a,b)")
    assert [item.name for item in parsed] == ["any"]