"""Unit tests for core/embeds.py"""

import pytest

from mdsite.core.embeds import preprocess_obsidian_markdown


def test_embed_with_alt_root_relative():
    """Root-relative embeds gain a leading slash."""
    assert preprocess_obsidian_markdown("![[diagram.png|A diagram]]", True) == "![A diagram](/diagram.png)"


@pytest.mark.parametrize("source,expected", [
    ("![[./img/a.png]]", "![](img/a.png)"),
    ("![[img\\a.png]]", "![](img/a.png)"),
    ("![[/a.png]]", "![](a.png)"),
    ("![[  spaced.png | Alt text ]]", "![Alt text](spaced.png)"),
])
def test_embed_target_normalization(source, expected):
    """Targets are trimmed, slash-normalized, and stripped of leading '/' or './'."""
    assert preprocess_obsidian_markdown(source) == expected


def test_embed_with_whitespace_in_target():
    """Targets with spaces are wrapped so they remain a valid link destination."""
    assert preprocess_obsidian_markdown("![[my pic.png]]", True) == "![](</my pic.png>)"


def test_multiple_embeds_in_text():
    text = "Before ![[a.png]] middle ![[b.png|B]] after"
    assert preprocess_obsidian_markdown(text) == "Before ![](a.png) middle ![B](b.png) after"


@pytest.mark.parametrize("text", [
    "no embeds here",
    "![[unterminated",
    "[[wikilink]]",
    "![regular](image.png)",
])
def test_unmatched_text_passes_through(text):
    assert preprocess_obsidian_markdown(text, True) == text
