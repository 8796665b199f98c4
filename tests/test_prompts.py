"""Tests for goodgit.prompts."""

import pytest

from goodgit.errors import NoChoicesError


def test_text_reasks_on_empty(scripted):
    prompter = scripted(["", "  ", "Jane"])
    assert prompter.text("Enter your username") == "Jane"
    assert len(prompter.asked) == 3


def test_text_default(scripted):
    prompter = scripted([""])
    assert prompter.text("Remote", default="origin") == "origin"


def test_select_by_number(scripted):
    prompter = scripted(["2"])
    assert prompter.select("Select the SSH key", ["personal", "work"]) == "work"
    assert "  1) personal" in prompter.printed


def test_select_by_name(scripted):
    prompter = scripted(["personal"])
    assert prompter.select("Select", ["personal", "work"]) == "personal"


def test_select_reasks_on_invalid(scripted):
    prompter = scripted(["0", "3", "nope", "1"])
    assert prompter.select("Select", ["personal", "work"]) == "personal"
    assert len(prompter.asked) == 4


def test_select_without_choices(scripted):
    with pytest.raises(NoChoicesError):
        scripted([]).select("Select", [])
