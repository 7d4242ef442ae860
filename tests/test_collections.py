from datetime import datetime
from pathlib import Path

from gazette.collections import build_archives, build_tags
from gazette.config import UrlConfig
from gazette.content import Document, DocumentMetadata


def make_post(tags=(), published=datetime(2024, 1, 1)):
    meta = DocumentMetadata(
        title="T", slug="t", date=published.strftime("%Y-%m-%d"), tags=list(tags)
    )
    return Document(
        metadata=meta, raw_body="", source_path=Path("t.md"), publish_time=published
    )


def test_tags_ordered_by_post_count():
    posts = [make_post(["A", "B"]), make_post(["B", "C"]), make_post(["B", "A"])]
    tags = build_tags(posts, UrlConfig())

    assert [t.name for t in tags] == ["B", "A", "C"]
    assert [len(t) for t in tags] == [3, 2, 1]
    assert tags[0].posts_index == [0, 1, 2]
    assert tags[1].posts_index == [0, 2]


def test_tag_urls_and_page_formats():
    tags = build_tags([make_post(["python"])], UrlConfig())
    assert tags[0].url == "/tag/python"
    assert tags[0].page_format == "/tag/python/page/:page"


def test_tag_ties_keep_first_seen_order():
    tags = build_tags([make_post(["z", "a"]), make_post(["m"])], UrlConfig())
    assert [t.name for t in tags] == ["z", "a", "m"]


def test_duplicate_tag_on_one_post_counts_once():
    tags = build_tags([make_post(["x", "x"])], UrlConfig())
    assert tags[0].posts_index == [0]


def test_no_tags():
    assert build_tags([make_post()], UrlConfig()) == []


def test_archives_grouped_by_year_descending():
    posts = [
        make_post(published=datetime(2023, 5, 1)),
        make_post(published=datetime(2022, 8, 1)),
        make_post(published=datetime(2022, 2, 1)),
        make_post(published=datetime(2021, 1, 1)),
    ]
    archives = build_archives(posts)
    assert [a.year for a in archives] == [2023, 2022, 2021]
    assert [a.posts_index for a in archives] == [[0], [1, 2], [3]]
