"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    CancelCommand,
    DeleteCommand,
    FetchCommand,
    ListCommand,
    NotificationsCommand,
    SetPrivacyCommand,
    TokenCommand,
    ToggleCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command


def test_parse_list():
    assert parse_command("list") == ListCommand()


def test_parse_is_case_insensitive_for_command_name():
    assert parse_command("LIST") == ListCommand()
    assert parse_command("Notifications") == NotificationsCommand()


def test_parse_upload_quoted_path():
    """Quoted paths keep their spaces."""
    cmd = parse_command('upload "my docs/annual report.pdf"')
    assert cmd == UploadCommand(path="my docs/annual report.pdf")


def test_parse_upload_unquoted_path_with_spaces():
    """Unquoted words are joined back into one path."""
    cmd = parse_command("upload my report.pdf")
    assert cmd == UploadCommand(path="my report.pdf")


def test_parse_upload_without_path():
    with pytest.raises(ParseError, match="upload requires a file"):
        parse_command("upload")


def test_parse_toggle():
    assert parse_command("toggle abc123") == ToggleCommand(file_id="abc123")


@pytest.mark.parametrize("name,public", [("public", True), ("private", False)])
def test_parse_set_privacy(name, public):
    cmd = parse_command(f"{name} abc123")
    assert isinstance(cmd, SetPrivacyCommand)
    assert cmd.file_id == "abc123"
    assert cmd.public is public
    assert cmd.command == name


def test_parse_delete():
    assert parse_command("delete abc123") == DeleteCommand(file_id="abc123")


def test_parse_cancel_upload():
    assert parse_command("cancel upload") == CancelCommand(target="upload")


def test_parse_token_keeps_case():
    assert parse_command("token AbC.dEf") == TokenCommand(token="AbC.dEf")


@pytest.mark.parametrize("line", ["delete", "share a b", "toggle"])
def test_parse_wrong_argument_count(line):
    with pytest.raises(ParseError, match="requires exactly 1 argument"):
        parse_command(line)


def test_parse_list_with_arguments():
    with pytest.raises(ParseError, match="takes no arguments"):
        parse_command("list everything")


def test_parse_unknown_command():
    with pytest.raises(ParseError, match="Unknown command: frobnicate"):
        parse_command("frobnicate")


def test_parse_empty_input():
    with pytest.raises(ParseError, match="Empty command"):
        parse_command("   ")


def test_parse_unbalanced_quotes():
    with pytest.raises(ParseError, match="Invalid syntax"):
        parse_command('upload "unterminated')


def test_parse_fetch():
    assert parse_command("fetch abc123") == FetchCommand(file_id="abc123")
    assert parse_command('fetch abc123 "~/My Downloads"') == FetchCommand(file_id="abc123", dest="~/My Downloads")


@pytest.mark.parametrize("line", ["fetch", "fetch a b c"])
def test_parse_fetch_wrong_argument_count(line):
    with pytest.raises(ParseError, match="fetch requires a file id"):
        parse_command(line)
