"""Tests for PostRenderer and image URL resolution."""

import pytest

from blogsmith.config.models import RenderConfig, SiteConfig
from blogsmith.render import PostRenderer, resolve_image_url

from conftest import make_post


@pytest.fixture
def renderer():
    return PostRenderer(RenderConfig(), SiteConfig())


# ---------------------------------------------------------------------------
# resolve_image_url
# ---------------------------------------------------------------------------


class TestResolveImageUrl:
    def test_relative_to_post_directory(self):
        assert resolve_image_url("img.png", "_posts/a.md") == "/_posts/img.png"

    def test_parent_directory(self):
        assert resolve_image_url("../images/x.png", "_posts/a.md") == "/images/x.png"

    def test_root_relative_gets_base_url(self):
        assert resolve_image_url("/assets/x.png", "_posts/a.md", "/blog/") == "/blog/assets/x.png"

    def test_relative_gets_base_url(self):
        assert resolve_image_url("x.png", "a.md", "https://example.com/blog/") == (
            "https://example.com/blog/x.png"
        )

    def test_site_placeholder_is_site_root(self):
        assert resolve_image_url("{{ site.baseurl }}/assets/x.png", "a.md", "/blog/") == (
            "/blog/assets/x.png"
        )

    @pytest.mark.parametrize(
        "url",
        ["https://cdn.example.com/x.png", "//cdn.example.com/x.png", "data:image/png;base64,AAAA"],
    )
    def test_absolute_urls_unchanged(self, url):
        assert resolve_image_url(url, "_posts/a.md") == url

    def test_escaping_content_root_left_alone(self):
        assert resolve_image_url("../../x.png", "_posts/a.md") == "../../x.png"

    def test_dot_segments_normalized(self):
        assert resolve_image_url("./img/../pic.png", "a.md") == "/pic.png"


# ---------------------------------------------------------------------------
# PostRenderer
# ---------------------------------------------------------------------------


class TestRenderBody:
    def test_paragraph(self, renderer):
        assert renderer.render_body("Hello *world*") == "<p>Hello <em>world</em></p>\n"

    def test_code_block_escaped_verbatim(self, renderer):
        body = "```python\nprint('<hi>') **not bold** ![x](y.png)\n```\n"
        html = renderer.render_body(body, "_posts/a.md")
        assert '<pre><code class="language-python">' in html
        assert "print('&lt;hi&gt;') **not bold** ![x](y.png)" in html
        assert "<strong>" not in html
        assert "<img" not in html

    def test_code_block_without_language(self, renderer):
        html = renderer.render_body("```\nx = 1\n```\n")
        assert "<pre><code>x = 1\n</code></pre>" in html

    def test_indented_code_block_verbatim(self, renderer):
        html = renderer.render_body("Text\n\n    a < b && c\n")
        assert "<pre><code>a &lt; b &amp;&amp; c" in html
        assert "<p>a" not in html

    def test_image_resolved(self, renderer):
        html = renderer.render_body("![diagram](../images/d.png)", "_posts/a.md")
        assert 'src="/images/d.png"' in html
        assert 'alt="diagram"' in html

    def test_image_with_base_url(self):
        r = PostRenderer(RenderConfig(), SiteConfig(base_url="/blog"))
        html = r.render_body("![x](/assets/x.png)", "a.md")
        assert 'src="/blog/assets/x.png"' in html

    def test_absolute_image_kept(self, renderer):
        html = renderer.render_body("![x](https://example.com/x.png)", "a.md")
        assert 'src="https://example.com/x.png"' in html

    def test_raw_html_passthrough(self, renderer):
        html = renderer.render_body('<div class="note">careful</div>\n')
        assert '<div class="note">careful</div>' in html

    def test_table_plugin(self, renderer):
        html = renderer.render_body("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table>" in html

    def test_idempotent(self, renderer):
        body = "# Title\n\n![i](img.png)\n\n```sh\necho hi\n```\n"
        first = renderer.render_body(body, "_posts/a.md")
        second = renderer.render_body(body, "_posts/a.md")
        assert first == second


class TestExcerpt:
    def test_first_paragraph_plain_text(self, renderer):
        html = renderer.render_body("First *para* &amp; more.\n\nSecond.")
        assert renderer.excerpt(html) == "First para & more."

    def test_truncated_on_word_boundary(self):
        r = PostRenderer(RenderConfig(excerpt_length=10))
        assert r.excerpt("<p>one two three four</p>") == "one two…"

    def test_zero_length_disables_excerpt(self):
        r = PostRenderer(RenderConfig(excerpt_length=0))
        assert r.excerpt("<p>one two three</p>") == ""

    def test_no_paragraph(self, renderer):
        assert renderer.excerpt("<pre><code>x</code></pre>") == ""


class TestRender:
    def test_render_post(self, renderer):
        post = make_post("_posts/a.md", body="Hello.\n")
        rp = renderer.render(post)
        assert rp.post == post
        assert rp.html == "<p>Hello.</p>\n"
        assert rp.excerpt == "Hello."

    def test_render_same_post_twice_identical(self, renderer):
        post = make_post("_posts/a.md", body="![x](x.png)\n\n`code`\n")
        assert renderer.render(post) == renderer.render(post)

    def test_render_all_preserves_order(self):
        r = PostRenderer(RenderConfig(workers=4))
        posts = [make_post(f"p{i}.md", body=f"Post number {i}.\n") for i in range(20)]
        rendered = r.render_all(posts)
        assert [rp.post.source_path for rp in rendered] == [p.source_path for p in posts]
        assert rendered[7].html == "<p>Post number 7.</p>\n"

    def test_render_all_single_worker_matches_pool(self):
        posts = [make_post(f"p{i}.md", body=f"![i](img{i}.png)\n") for i in range(5)]
        serial = PostRenderer(RenderConfig(workers=1)).render_all(posts)
        pooled = PostRenderer(RenderConfig(workers=3)).render_all(posts)
        assert serial == pooled

    def test_render_all_empty(self, renderer):
        assert renderer.render_all([]) == []
