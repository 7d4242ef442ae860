from pathlib import Path

import pytest

from gazette.config import Config, load_config
from gazette.errors import ConfigError, OutputPathError


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path)
    assert config.site.title == "Gazette"
    assert config.url.base == "http://localhost:19292"
    assert config.url.per_page_size == 10
    assert config.output_dir == tmp_path / "dist"
    assert config.posts_dir == tmp_path / "source" / "posts"
    assert config.theme_dir == tmp_path / "themes" / "default"
    assert config.server.port == 19292
    assert [n.name for n in config.nav] == ["About"]


def test_load_sections(tmp_path):
    (tmp_path / "gazette.yaml").write_text(
        """\
site:
  title: My Blog
  unknown_key: ignored
url:
  root: /blog/
  per_page_size: 5
directory:
  output: public
nav:
  - {name: Home, url: /}
authors:
  jo:
    email: jo@example.com
""",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.site.title == "My Blog"
    assert config.url.per_page_size == 5
    assert config.output_dir == tmp_path / "public"
    assert [(n.name, n.url) for n in config.nav] == [("Home", "/")]
    assert config.get_author("jo").name == "jo"
    assert config.get_author("jo").email == "jo@example.com"
    assert config.root_url("about") == "/blog/about"


@pytest.mark.parametrize(
    "text",
    [
        "site: [1, 2]\n",
        "- just\n- a list\n",
        "url:\n  per_page_size: 0\n",
        "site: {title: [unclosed\n",
        "nav: [About]\n",
        "nav:\n  - name: About\n",
        "authors:\n  bob: Bob\n",
        "url:\n  per_page_size: '5'\n",
        "url:\n  per_page_size: true\n",
    ],
)
def test_invalid_config(tmp_path, text):
    (tmp_path / "gazette.yaml").write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_author_falls_back(tmp_path):
    author = Config(project_root=tmp_path).get_author("ghost")
    assert author.name == "ghost"
    assert author.avatar_url == ""


def test_gravatar_url(tmp_path):
    config = Config(project_root=tmp_path)
    config.authors["a"] = config.get_author("a")
    config.authors["a"].email = "a@example.com"
    config.authors["a"].use_gravatar = True
    assert config.get_author("a").avatar_url.startswith("https://www.gravatar.com/avatar/")
    assert len(config.get_author("a").avatar_url.rsplit("/", 1)[1]) == 32


def test_paths_and_urls(tmp_path):
    config = Config(project_root=tmp_path)
    out = tmp_path / "dist"
    assert config.dist_html_path("/2024/01/02/hi", out) == out / "2024/01/02/hi/index.html"
    assert config.dist_html_path("index.html", out) == out / "index.html"
    assert config.dist_html_path("/feed.xml", out) == out / "feed.xml"
    assert config.dist_path("atom.xml", out) == out / "atom.xml"
    assert config.full_url("/about") == "http://localhost:19292/about"
    assert config.asset_dirs(out) == [
        (tmp_path / "assets", out / "assets"),
        (tmp_path / "themes" / "default" / "static", out / "static"),
    ]
    assert isinstance(config.project_root, Path)


def test_dist_path_stays_inside_output(tmp_path):
    config = Config(project_root=tmp_path)
    out = tmp_path / "dist"
    assert config.dist_path("/", out) == out
    assert config.dist_html_path("/tag/a/b", out) == out / "tag/a/b/index.html"
    with pytest.raises(OutputPathError):
        config.dist_path("../escaped", out)
    with pytest.raises(OutputPathError):
        config.dist_html_path("/tag/../../escaped", out)
