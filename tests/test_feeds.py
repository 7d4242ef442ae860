from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path

from gazette.config import Config
from gazette.content import Document, DocumentMetadata
from gazette.feeds import RSSGenerator, SitemapEntry, SitemapGenerator


def make_post(title, slug, published):
    return Document(
        metadata=DocumentMetadata(title=title, slug=slug, date="x"),
        raw_body="",
        source_path=Path(f"{slug}.md"),
        rendered_body="<p>Full & body</p>",
        rendered_excerpt="<p>Short</p>",
        publish_time=published,
        route_slug=f"/{slug}",
    )


def test_rss_feed(tmp_path):
    config = Config(project_root=tmp_path)
    config.url.base = "https://example.com"
    posts = [
        make_post("Newer <one>", "newer", datetime(2024, 2, 1, tzinfo=timezone.utc)),
        make_post("Older", "older", datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ]
    generator = RSSGenerator()
    xml = generator.generate(posts, config)

    assert generator.filename == "atom.xml"
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<title>Gazette</title>" in xml
    assert "<link>https://example.com/newer</link>" in xml
    assert "Newer &lt;one&gt;" in xml
    assert "&lt;p&gt;Short&lt;/p&gt;" in xml
    assert "&lt;p&gt;Full &amp; body&lt;/p&gt;" in xml
    pub_date = xml.split("<pubDate>", 1)[1].split("</pubDate>", 1)[0]
    assert parsedate_to_datetime(pub_date) == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert xml.index("/newer") < xml.index("/older")


def test_sitemap():
    entries = [
        SitemapEntry(loc="https://example.com/", lastmod=datetime(2024, 1, 1), priority=1.0),
        SitemapEntry(loc="https://example.com/a?b&c", lastmod=datetime(2024, 1, 1), priority=0.8),
    ]
    xml = SitemapGenerator().generate(entries, None)
    assert xml.count("<url>") == 2
    assert "<priority>1.0</priority>" in xml
    assert "<changefreq>weekly</changefreq>" in xml
    assert "<lastmod>2024-01-01T00:00:00+00:00</lastmod>" in xml
    assert "https://example.com/a?b&amp;c" in xml
