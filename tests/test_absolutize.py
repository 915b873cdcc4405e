"""Tests for the URL absolutization pass."""

from __future__ import annotations

from bs4 import BeautifulSoup

from urlmd.extractors.absolutize import absolutize_urls

BASE = "https://example.com/blog/post"

HTML = """
<html><head>
  <meta property="og:image" content="/img/cover.jpg">
  <meta property="og:image:secure_url" content="img/cover-secure.jpg">
  <meta property="og:description" content="/not/a/url">
  <link rel="stylesheet" href="/css/site.css">
</head><body>
  <a href="../archive">Archive</a>
  <a href="https://other.org/page">Other</a>
  <a href="#top">Top</a>
  <img src="pics/a.png">
  <img data-src="pics/lazy.png">
  <a href="http://[::1">Broken</a>
</body></html>
"""


def _soup() -> BeautifulSoup:
    return BeautifulSoup(HTML, "lxml")


class TestAbsolutize:
    def test_img_src(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        assert soup.find("img")["src"] == "https://example.com/blog/pics/a.png"

    def test_anchor_href(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        hrefs = [a["href"] for a in soup.find_all("a")]
        assert "https://example.com/archive" in hrefs
        assert "https://other.org/page" in hrefs
        assert "https://example.com/blog/post#top" in hrefs

    def test_link_href(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        assert soup.find("link")["href"] == "https://example.com/css/site.css"

    def test_og_image_meta(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        assert soup.find("meta", property="og:image")["content"] == "https://example.com/img/cover.jpg"
        assert (
            soup.find("meta", property="og:image:secure_url")["content"]
            == "https://example.com/blog/img/cover-secure.jpg"
        )

    def test_other_meta_untouched(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        assert soup.find("meta", property="og:description")["content"] == "/not/a/url"

    def test_non_src_attributes_untouched(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        assert soup.find("img", attrs={"data-src": True})["data-src"] == "pics/lazy.png"

    def test_malformed_value_left_alone(self):
        soup = _soup()
        absolutize_urls(soup, BASE)
        broken = soup.find("a", string="Broken")
        assert broken["href"] == "http://[::1"

    def test_idempotent(self):
        soup = _soup()
        first = absolutize_urls(soup, BASE)
        snapshot = str(soup)
        second = absolutize_urls(soup, BASE)
        assert first > 0
        assert second == 0
        assert str(soup) == snapshot
