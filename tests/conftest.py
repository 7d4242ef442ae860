from pathlib import Path

import pytest

THEME = {
    "post.html": (
        "<h1>{{ post.title }}</h1><p class=\"author\">{{ post.author.name }}</p>"
        "{{ post.content }}"
        "{% for tag in post.tags %}<a class=\"tag\" href=\"{{ tag.url }}\">{{ tag.name }}</a>{% endfor %}"
    ),
    "page.html": "<h1>{{ page.title }}</h1>{{ page.content }}",
    "posts.html": (
        "{% if current_tag %}<h1>{{ current_tag.name }}</h1>{% endif %}"
        "{% for post in posts %}<article><a href=\"{{ post.permalink }}\">{{ post.title }}</a>"
        "{{ post.brief }}<time>{{ post.datetime | date_format }}</time></article>{% endfor %}"
        "<nav>{{ pagination.current }}/{{ pagination.total_pages }}"
        "{% if pagination.has_next %}<a rel=\"next\" href=\"{{ pagination.next_url }}\">next</a>{% endif %}"
        "</nav>"
    ),
    "404.html": "<h1>Not found</h1><p>{{ site.title }}</p>",
    "archives.html": (
        "{% for archive in archives %}<h2>{{ archive.year }}</h2>"
        "{% for post in archive.posts %}<li>{{ post.title }}</li>{% endfor %}{% endfor %}"
    ),
}

CONFIG = """\
site:
  title: Test Blog
  author: alice
url:
  base: https://blog.example.com
  per_page_size: 2
authors:
  alice:
    name: Alice
    email: alice@example.com
    use_gravatar: true
"""


@pytest.fixture
def project(tmp_path) -> Path:
    """A project with a complete theme and empty content directories."""
    root = tmp_path / "blog"
    theme = root / "themes" / "default"
    theme.mkdir(parents=True)
    for name, text in THEME.items():
        (theme / name).write_text(text, encoding="utf-8")
    (root / "source" / "posts").mkdir(parents=True)
    (root / "source" / "pages").mkdir(parents=True)
    (root / "gazette.yaml").write_text(CONFIG, encoding="utf-8")
    return root


@pytest.fixture
def write_doc():
    """Return a helper writing a YAML front matter document."""

    def _write(directory: Path, name: str, title: str, date: str, tags=None, body="Body", slug=None, **extra):
        lines = ["---", f"title: {title}", f"slug: {slug or Path(name).stem}", f"date: \"{date}\""]
        if tags is not None:
            lines.append(f"tags: [{', '.join(tags)}]")
        lines.extend(f"{key}: {value}" for key, value in extra.items())
        lines.append("---")
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n\n" + body + "\n", encoding="utf-8")
        return path

    return _write
