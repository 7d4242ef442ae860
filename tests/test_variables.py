import dataclasses
from datetime import datetime
from pathlib import Path

import pytest

from gazette.collections import build_tags
from gazette.config import Author, Config
from gazette.content import Document, DocumentMetadata
from gazette.errors import ProjectionError
from gazette.pagination import Pagination
from gazette.variables import TemplateVariables


def resolved_post(config, tags=(), author="admin"):
    meta = DocumentMetadata(
        title="Hello",
        slug="hello",
        date="2024-01-02",
        updated="2024-01-03",
        tags=list(tags),
        language="en",
        comments=True,
        author=author,
        extra={"cover": "x.png"},
    )
    return Document(
        metadata=meta,
        raw_body="Body",
        source_path=Path("hello.md"),
        rendered_body="<p>Body</p>",
        rendered_excerpt="<p>Body</p>",
        publish_time=datetime(2024, 1, 2),
        updated_time=datetime(2024, 1, 3),
        resolved_author=config.get_author(author),
        route_slug="/2024/01/02/hello",
    )


def test_global_vars_shared_base(tmp_path):
    config = Config(project_root=tmp_path)
    post = resolved_post(config, tags=["python"])
    tags = build_tags([post], config.url)
    variables = TemplateVariables(config, tags, [post])

    base = variables.clone_global()
    assert base.site.title == "Gazette"
    assert base.site.root_url == "/"
    assert base.site.full_url == "http://localhost:19292/"
    assert [n.url for n in base.navs] == ["/about"]
    assert [t.name for t in base.tags] == ["python"]
    assert base.post is None and base.posts is None

    projected = variables.project_post(post)
    derived = variables.global_with(post=projected)
    assert derived.post is projected
    assert variables.clone_global().post is None


def test_records_are_immutable(tmp_path):
    config = Config(project_root=tmp_path)
    variables = TemplateVariables(config, [], [])
    base = variables.clone_global()
    with pytest.raises(dataclasses.FrozenInstanceError):
        base.post = None
    with pytest.raises(TypeError):
        variables.project_post(resolved_post(config)).meta["cover"] = "y.png"


def test_project_post_fields(tmp_path):
    config = Config(project_root=tmp_path)
    post = resolved_post(config, tags=["python"])
    variables = TemplateVariables(config, build_tags([post], config.url), [post])
    projected = variables.project_post(post)

    assert projected.permalink == "/2024/01/02/hello"
    assert projected.updated == "2024-01-03"
    assert str(projected.content) == "<p>Body</p>"
    assert projected.tags[0] is variables.get_tag("python")
    assert projected.tags[0].url == "/tag/python"
    assert projected.tags[0].posts_count == 1
    assert projected.author.name == "admin"
    assert projected.meta["cover"] == "x.png"


def test_tag_unknown_to_posts(tmp_path):
    config = Config(project_root=tmp_path)
    page = resolved_post(config, tags=["misc"])
    variables = TemplateVariables(config, [], [page])
    tag = variables.project_post(page).tags[0]
    assert tag.url == "/tag/misc"
    assert tag.posts_count == 0
    assert variables.get_tag("misc") is None


def test_author_cache(tmp_path):
    config = Config(project_root=tmp_path)
    config.authors["bob"] = Author(
        name="Bob", email="bob@example.com", use_gravatar=True, social={"github": "https://github.com/bob"}
    )
    first = resolved_post(config, author="bob")
    second = resolved_post(config, author="bob")
    variables = TemplateVariables(config, [], [first, second])

    a = variables.project_post(first).author
    b = variables.project_post(second).author
    assert a is b
    assert a.name == "Bob"
    assert a.has_social
    assert a.avatar.startswith("https://www.gravatar.com/avatar/")


def test_unresolved_document_raises(tmp_path):
    config = Config(project_root=tmp_path)
    post = resolved_post(config)
    post.metadata.language = None
    variables = TemplateVariables(config, [], [])
    with pytest.raises(ProjectionError):
        variables.project_post(post)

    post = resolved_post(config)
    post.resolved_author = None
    with pytest.raises(ProjectionError):
        variables.project_post(post)


def test_project_pagination_roots_urls(tmp_path):
    config = Config(project_root=tmp_path)
    config.url.root = "/blog/"
    variables = TemplateVariables(config, [], [])
    window = Pagination(25, 10).window(2, config.url.post_page_format)
    projected = variables.project_pagination(window)
    assert projected.current_url == "/blog/page/2"
    assert projected.prev_url == "/blog/page/1"
    assert projected.next_url == "/blog/page/3"
    assert projected.total_pages == 3
