"""Unit tests for core/render.py"""

from PIL import Image

from mdsite.core.render import image_size, render_markdown
from mdsite.core.resolve import ABOUT_ROUTES


def _png(path, size=(12, 7)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, "white").save(path)
    return path


# --- headings ---

def test_heading_gets_slug_id():
    result = render_markdown("# Title\n", "a.md")
    assert '<h1 id="title">Title</h1>' in result.html


def test_repeated_headings_get_unique_ids():
    result = render_markdown("## Intro\n\n## Intro\n\n## Intro\n", "a.md")
    assert [h.id for h in result.headings] == ["intro", "intro-1", "intro-2"]
    assert 'id="intro-2"' in result.html


def test_only_level_two_and_three_headings_are_collected():
    result = render_markdown("# Top\n\n## Setup\n\n### Linux\n\n#### Notes\n", "a.md")
    assert [(h.level, h.text) for h in result.headings] == [(2, "Setup"), (3, "Linux")]


def test_heading_text_uses_plain_inline_text():
    result = render_markdown("## Use `pip` **now**\n", "a.md")
    assert result.headings[0].text == "Use pip now"
    assert result.headings[0].id == "use-pip-now"


def test_punctuation_only_heading_falls_back_to_section():
    result = render_markdown("## ???\n", "a.md")
    assert result.headings[0].id == "section"


def test_heading_counters_do_not_leak_between_renders():
    render_markdown("## Intro\n", "a.md")
    assert render_markdown("## Intro\n", "b.md").headings[0].id == "intro"


# --- code ---

def test_fenced_code_block_container():
    html = render_markdown("```python\nprint('<hi>')\n```\n", "a.md").html
    assert '<div class="docs-code-block">' in html
    assert '<span class="docs-code-lang">PYTHON</span>' in html
    assert 'aria-label="Copy code"' in html
    assert "<pre class=\"docs-code-pre\"><code>print('&lt;hi&gt;')</code></pre>" in html


def test_fence_without_language_has_no_label():
    html = render_markdown("```\nplain\n```\n", "a.md").html
    assert "docs-code-lang" not in html
    assert "<code>plain</code>" in html


def test_indented_code_block_uses_same_container():
    html = render_markdown("    indented\n", "a.md").html
    assert '<div class="docs-code-block">' in html
    assert "<code>indented</code>" in html


def test_inline_code():
    html = render_markdown("Compare `x < y` here.\n", "a.md").html
    assert '<code class="docs-inline-code">x &lt; y</code>' in html


# --- links ---

def test_relative_doc_link():
    html = render_markdown("[Other](other.md)\n", "guide/a.md").html
    assert '<a href="/docs/guide/other">Other</a>' in html


def test_external_link_opens_new_tab():
    html = render_markdown('[Site](https://example.com "Home")\n', "a.md").html
    assert '<a href="https://example.com" target="_blank" rel="noreferrer noopener" title="Home">Site</a>' in html


def test_link_keeps_nested_formatting():
    html = render_markdown("[**bold** link](b.md)\n", "a.md").html
    assert '<a href="/docs/b"><strong>bold</strong> link</a>' in html


def test_link_escaping_root_is_untouched():
    html = render_markdown("[x](../../../etc/passwd)\n", "sub/b.md").html
    assert 'href="../../../etc/passwd"' in html


def test_extensionless_link_uses_known_documents():
    html = render_markdown("[Setup](setup)\n", "a.md", doc_paths={"setup.md"}).html
    assert 'href="/docs/setup"' in html


def test_raw_html_javascript_link_is_sanitized():
    html = render_markdown('Click <a href="javascript:alert(1)">x</a>\n', "a.md").html
    assert "javascript:" not in html
    assert "<a>x</a>" in html


# --- images ---

def test_image_with_dimensions(tmp_path):
    _png(tmp_path / "guide" / "img" / "a.png")
    html = render_markdown("![Alt text](img/a.png)\n", "guide/a.md", tmp_path).html
    assert 'class="docs-image"' in html
    assert 'src="/api/docs-asset/guide/img/a.png"' in html
    assert 'alt="Alt text"' in html
    assert 'width="12"' in html and 'height="7"' in html
    assert 'loading="lazy"' in html


def test_missing_image_has_no_dimensions(tmp_path):
    html = render_markdown("![x](missing.png)\n", "a.md", tmp_path).html
    assert 'src="/api/docs-asset/missing.png"' in html
    assert "width=" not in html


def test_corrupt_image_is_ignored(tmp_path):
    (tmp_path / "bad.png").write_bytes(b"not an image")
    html = render_markdown("![x](bad.png)\n", "a.md", tmp_path).html
    assert "width=" not in html


def test_image_size_helper(tmp_path):
    assert image_size(_png(tmp_path / "a.png", (3, 4))) == (3, 4)
    assert image_size(None) is None
    assert image_size(tmp_path / "nope.png") is None


def test_obsidian_embed_resolves_from_root(tmp_path):
    _png(tmp_path / "diagram.png")
    html = render_markdown("![[diagram.png|Flow]]\n", "guide/a.md", tmp_path).html
    assert 'src="/api/docs-asset/diagram.png"' in html
    assert 'alt="Flow"' in html
    assert 'width="12"' in html


def test_about_routes_for_single_page(tmp_path):
    html = render_markdown(
        "[Docs](other.md) ![Logo](logo.png)\n", "about.md", tmp_path,
        routes=ABOUT_ROUTES, root_relative=False,
    ).html
    assert 'href="/about"' in html
    assert 'src="/about-asset/logo.png"' in html


# --- sanitizing ---

def test_raw_html_script_removed():
    html = render_markdown("<script>alert(1)</script>\n\nSafe text\n", "a.md").html
    assert "<script" not in html
    assert "alert(1)" not in html
    assert "<p>Safe text</p>" in html


def test_table_rendering():
    html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n", "a.md").html
    assert "<table>" in html
    assert "<td>1</td>" in html


def test_rendering_is_deterministic(tmp_path):
    """Rendering the same document twice yields identical HTML and headings."""
    _png(tmp_path / "guide" / "img" / "a.png")
    source = (
        "# Guide\n\n## Intro\n\nSee [setup](setup.md).\n\n"
        "![Shot](img/a.png)\n\n## Intro\n\n```bash\necho hi\n```\n\n### Intro\n"
    )
    first = render_markdown(source, "guide/a.md", tmp_path, {"guide/setup.md"})
    second = render_markdown(source, "guide/a.md", tmp_path, {"guide/setup.md"})
    assert first.html == second.html
    assert first.headings == second.headings
    assert [h.id for h in first.headings] == ["intro", "intro-1", "intro-2"]
