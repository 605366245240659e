"""Unit tests for linkmeta.extractor."""

from __future__ import annotations

import pytest

from linkmeta.config import ExtractorSettings
from linkmeta.extractor import (
    DESCRIPTION_RULES,
    THUMBNAIL_RULES,
    TITLE_RULES,
    clean_text,
    extract_fields,
    first_match,
    resolve_url,
    title_from_url,
)
from linkmeta.models.metadata import DomainHint

PAGE = "https://example.com/posts/1"


def _page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


# ---------------------------------------------------------------------------
# clean_text
# ---------------------------------------------------------------------------


class TestCleanText:
    def test_decodes_known_entities(self) -> None:
        assert clean_text("Tom&nbsp;&amp;&nbsp;Jerry&#39;s &quot;show&quot;") == (
            "Tom & Jerry's \"show\""
        )

    def test_collapses_whitespace(self) -> None:
        assert clean_text("  Hello \n\t  world  ") == "Hello world"

    def test_no_double_decoding(self) -> None:
        assert clean_text("&amp;quot;") == "&quot;"

    def test_unknown_entities_kept(self) -> None:
        assert clean_text("a &lt; b") == "a &lt; b"

    def test_none_and_empty(self) -> None:
        assert clean_text(None) == ""
        assert clean_text("") == ""


# ---------------------------------------------------------------------------
# Rule chains
# ---------------------------------------------------------------------------


class TestTitleRules:
    def test_og_title_preferred(self) -> None:
        html = _page(
            '<title>Page Title</title><meta property="og:title" content="OG Title">',
            "<h1>Heading</h1>",
        )
        assert first_match(TITLE_RULES, html) == "OG Title"

    def test_twitter_title_before_title_element(self) -> None:
        html = _page('<title>Page Title</title><meta name="twitter:title" content="Card Title">')
        assert first_match(TITLE_RULES, html) == "Card Title"

    def test_title_element(self) -> None:
        assert first_match(TITLE_RULES, _page("<title>Page Title</title>")) == "Page Title"

    def test_h1_last_resort(self) -> None:
        html = _page(body='<h1 class="big">Heading</h1>')
        assert first_match(TITLE_RULES, html) == "Heading"

    def test_empty_og_title_skipped(self) -> None:
        html = _page('<meta property="og:title" content="  "><title>Page Title</title>')
        assert first_match(TITLE_RULES, html) == "Page Title"

    def test_content_before_property(self) -> None:
        html = _page('<meta content="Reversed" property="og:title" />')
        assert first_match(TITLE_RULES, html) == "Reversed"

    def test_apostrophe_inside_double_quotes(self) -> None:
        html = _page('<meta property="og:title" content="Don\'t Panic">')
        assert first_match(TITLE_RULES, html) == "Don't Panic"

    def test_case_insensitive_tags(self) -> None:
        assert first_match(TITLE_RULES, "<TITLE>Shouting</TITLE>") == "Shouting"

    def test_no_match(self) -> None:
        assert first_match(TITLE_RULES, "<div>nothing</div>") == ""


class TestDescriptionRules:
    def test_chain_order(self) -> None:
        html = _page(
            '<meta name="description" content="Plain">'
            '<meta name="twitter:description" content="Card">'
            '<meta property="og:description" content="OG">'
        )
        assert first_match(DESCRIPTION_RULES, html) == "OG"

    def test_description_meta_not_confused_with_og(self) -> None:
        html = _page('<meta name="description" content="Plain">')
        assert first_match(DESCRIPTION_RULES, html) == "Plain"

    def test_short_paragraph_ignored(self) -> None:
        html = _page(body="<p>Too short</p><p>This paragraph is long enough to count.</p>")
        assert first_match(DESCRIPTION_RULES, html) == "This paragraph is long enough to count."

    def test_pre_is_not_a_paragraph(self) -> None:
        html = _page(body="<pre>some preformatted block of code</pre>")
        assert first_match(DESCRIPTION_RULES, html) == ""


class TestThumbnailRules:
    def test_og_image_preferred(self) -> None:
        html = _page(
            '<meta name="twitter:image" content="/card.png">'
            '<meta property="og:image" content="/og.png">',
            '<img src="/first.png">',
        )
        assert first_match(THUMBNAIL_RULES, html) == "/og.png"

    def test_first_img(self) -> None:
        html = _page(body='<img alt="x" src="/a.png"><img src="/b.png">')
        assert first_match(THUMBNAIL_RULES, html) == "/a.png"

    def test_data_src_not_taken_as_src(self) -> None:
        html = _page(body='<img data-src="/lazy.png" src="/real.png">')
        assert first_match(THUMBNAIL_RULES, html) == "/real.png"


class TestMixedMarkup:
    """Several tags with differing attribute order or empty attributes."""

    def test_title_after_other_meta(self) -> None:
        html = (
            '<meta name="twitter:card" content="summary">'
            '<meta content="Hello" property="og:title"><title>Fallback</title>'
        )
        assert first_match(TITLE_RULES, html) == "Hello"

    def test_title_after_reversed_meta(self) -> None:
        html = _page(
            '<meta content="width=device-width" name="viewport">'
            '<meta property="og:title" content="Hello">'
        )
        assert first_match(TITLE_RULES, html) == "Hello"

    def test_description_after_other_meta(self) -> None:
        html = _page(
            '<meta name="twitter:card" content="summary_large_image">'
            '<meta content="OG text" property="og:description">'
        )
        assert first_match(DESCRIPTION_RULES, html) == "OG text"

    def test_plain_description_after_viewport(self) -> None:
        html = _page(
            '<meta name="viewport" content="width=device-width">'
            '<meta content="About us" name="description">'
        )
        assert first_match(DESCRIPTION_RULES, html) == "About us"

    def test_image_after_other_meta(self) -> None:
        html = _page(
            '<meta name="twitter:card" content="summary">'
            '<meta content="/og.png" property="og:image">'
        )
        assert first_match(THUMBNAIL_RULES, html) == "/og.png"

    def test_empty_og_image_falls_to_img(self) -> None:
        html = _page('<meta property="og:image" content="">', '<img src="/b.png">')
        assert first_match(THUMBNAIL_RULES, html) == "/b.png"

    def test_empty_img_src_skipped(self) -> None:
        result = extract_fields('<img src=""><img src="/img/a.png">', PAGE)
        assert result.thumbnail == "https://example.com/img/a.png"

    def test_values_never_contain_markup(self) -> None:
        html = (
            '<meta name="twitter:card" content="summary">'
            '<meta content="Hello" property="og:title">'
            "<meta name='twitter:site' content='@site'>"
            "<meta content='A description' name='description'>"
            '<img src=""><img src="/img/a.png">'
        )
        result = extract_fields(html, PAGE)
        assert result.title == "Hello"
        assert result.description == "A description"
        assert result.thumbnail == "https://example.com/img/a.png"


# ---------------------------------------------------------------------------
# resolve_url
# ---------------------------------------------------------------------------


class TestResolveUrl:
    def test_absolute_kept(self) -> None:
        assert resolve_url("https://cdn.test/a.png", PAGE) == "https://cdn.test/a.png"

    def test_root_relative(self) -> None:
        assert resolve_url("/img/a.png", PAGE) == "https://example.com/img/a.png"

    def test_path_relative(self) -> None:
        assert resolve_url("a.png", PAGE) == "https://example.com/posts/a.png"

    def test_protocol_relative(self) -> None:
        assert resolve_url("//cdn.test/a.png", PAGE) == "https://cdn.test/a.png"

    def test_unresolvable_gives_placeholder(self) -> None:
        assert resolve_url("/img/a.png", "not a url") == "/placeholder.svg"

    def test_empty_gives_placeholder(self) -> None:
        assert resolve_url("", PAGE) == "/placeholder.svg"


# ---------------------------------------------------------------------------
# title_from_url
# ---------------------------------------------------------------------------


class TestTitleFromUrl:
    def test_slug_with_extension(self) -> None:
        assert title_from_url("https://example.com/my-cool_article.html") == "My Cool Article"

    def test_trailing_slash(self) -> None:
        assert title_from_url("https://example.com/blog/hello-world/") == "Hello World"

    def test_bare_host(self) -> None:
        assert title_from_url("https://www.example.com/") == "example.com"

    def test_social_post_uses_username(self) -> None:
        assert title_from_url("https://x.com/jack/status/20") == "@jack on Twitter"
        assert title_from_url("https://www.twitter.com/jack") == "@jack on Twitter"

    def test_truncated(self) -> None:
        title = title_from_url("https://example.com/" + "-".join(["word"] * 60), 100)
        assert len(title) == 100

    @pytest.mark.parametrize("raw", ["", "not a url", "http://[broken"])
    def test_malformed_returns_raw(self, raw: str) -> None:
        assert title_from_url(raw) == raw

    def test_malformed_truncated(self) -> None:
        assert title_from_url("x" * 300, 100) == "x" * 100


# ---------------------------------------------------------------------------
# extract_fields
# ---------------------------------------------------------------------------


class TestExtractFields:
    def test_full_page(self) -> None:
        html = _page(
            '<meta property="og:title" content="Hello &amp; Welcome">'
            '<meta property="og:description" content="A   fine\n page">'
            '<meta property="og:image" content="/img/a.png">'
        )
        result = extract_fields(html, PAGE)
        assert result.title == "Hello & Welcome"
        assert result.description == "A fine page"
        assert result.thumbnail == "https://example.com/img/a.png"

    def test_hint_fills_unresolved_fields(self) -> None:
        hint = DomainHint(title="Hint", description="Hint desc", thumbnail="https://h/logo.png")
        result = extract_fields(_page(body="<div></div>"), PAGE, hint)
        assert result.title == "Hint"
        assert result.description == "Hint desc"
        assert result.thumbnail == "https://h/logo.png"

    def test_page_values_beat_hint(self) -> None:
        hint = DomainHint(title="Hint", thumbnail="https://h/logo.png")
        html = _page("<title>Real</title>", '<img src="https://cdn.test/x.png">')
        result = extract_fields(html, PAGE, hint)
        assert result.title == "Real"
        assert result.thumbnail == "https://cdn.test/x.png"

    def test_no_hint_fallbacks(self) -> None:
        result = extract_fields("<html></html>", "https://example.com/my-cool_article.html")
        assert result.title == "My Cool Article"
        assert result.description == ""
        assert result.thumbnail == "/placeholder.svg"

    def test_truncation_limits(self) -> None:
        html = _page(
            f"<title>{'T' * 300}</title>"
            f'<meta name="description" content="{"D" * 600}">'
        )
        result = extract_fields(html, PAGE)
        assert len(result.title) == 100
        assert len(result.description) == 250

    def test_hint_values_truncated_too(self) -> None:
        settings = ExtractorSettings(title_max_length=5, description_max_length=3)
        hint = DomainHint(title="Long hint title", description="Long description")
        result = extract_fields("", PAGE, hint, settings=settings)
        assert result.title == "Long "
        assert result.description == "Lon"

    def test_content_beyond_scan_limit_ignored(self) -> None:
        settings = ExtractorSettings(html_scan_limit=50)
        html = " " * 60 + "<title>Too far</title>"
        result = extract_fields(html, "https://example.com/near-title", settings=settings)
        assert result.title == "Near Title"
