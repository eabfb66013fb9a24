from pathlib import Path
import textwrap

import pytest
from typer.testing import CliRunner

from tarotbuild.build import BundleOutput
from tarotbuild.config import BuildConfig
from tarotbuild.pipeline import executor

INDEX_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <link rel="stylesheet" href="{{CSS_FILE}}">
</head>
<body>
  <div id="root"></div>
  <script type="module" src="{{JS_FILE}}"></script>
</body>
</html>
"""

SPREAD_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <title>{{META_TITLE}}</title>
  <meta name="description" content="{{META_DESCRIPTION}}">
  <meta name="keywords" content="{{META_KEYWORDS}}">
  <link rel="canonical" href="{{CANONICAL_URL}}">
  <link rel="stylesheet" href="{{CSS_FILE}}">
</head>
<body>
  <h1>{{SPREAD_NAME}}</h1>
  <p><a href="{{CATEGORY_URL}}">{{CATEGORY_ICON}} {{CATEGORY_NAME}}</a> · {{CARD_COUNT}} cards</p>
  <p>{{INTRODUCTION}}</p>
  <div class="badges">{{KEYWORD_BADGES}}</div>
  {{POSITION_LIST}}
  <section>{{WHEN_TO_USE}}</section>
  <section>{{HOW_TO_READ}}</section>
  <script type="module" src="{{JS_FILE}}"></script>
</body>
</html>
"""

CATEGORY_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <title>{{META_TITLE}}</title>
  <meta name="description" content="{{META_DESCRIPTION}}">
  <link rel="stylesheet" href="{{CSS_FILE}}">
</head>
<body>
  <h1>{{CATEGORY_ICON}} {{CATEGORY_NAME}}</h1>
  <p>{{CATEGORY_DESCRIPTION}}</p>
  <p>{{SPREAD_COUNT}} spreads</p>
  {{SPREAD_CARDS}}
  <script type="module" src="{{JS_FILE}}"></script>
</body>
</html>
"""

CONTENT = """
[[category]]
id = "love"
name = "Love & Relationships"
icon = "♥"
slug = "love"
description = "Spreads for matters of the heart, from new connections to long partnerships."

[[category]]
id = "career"
name = "Career"
icon = "★"
description = "Work, ambition and the path ahead."

[[spread]]
id = "two-hearts"
name = "Two Hearts"
category = "love"
card_count = 2
introduction = "A quick look at both sides of a relationship."
when_to_use = "When you want clarity on how two people see each other."
how_to_read = "Compare the two cards side by side."
keywords = ["love", "partnership"]
positions = ["You", "Them"]

[[spread]]
id = "celtic-cross"
name = "Celtic Cross"
category = "career"
card_count = 10
introduction = "The Celtic Cross is the classic ten-card layout that explores a situation from every angle: its roots, the forces around it, hopes and fears, and the most likely outcome if nothing changes in the weeks ahead."
keywords = ["classic", "in-depth"]
positions = ["Present", "Challenge", "Past", "Future", "Above", "Below", "Advice", "External", "Hopes", "Outcome"]

[[spread]]
id = "crossroads"
name = "Crossroads"
category = "career"
card_count = 3
introduction = "Weigh two paths."
"""

BUNDLE = BundleOutput(script=b"console.log('tarot');", stylesheet=b"body{color:#333}")


def write_project(root: Path, *, site_url: str | None = "https://tarot.example") -> Path:
    (root / "src").mkdir(parents=True, exist_ok=True)
    (root / "src" / "main.jsx").write_text("export default function App() { return null; }\n", encoding="utf-8")
    (root / "src" / "index.css").write_text("body { color: #333; }\n", encoding="utf-8")
    (root / "templates").mkdir(exist_ok=True)
    (root / "content").mkdir(exist_ok=True)
    (root / "index.template.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    (root / "templates" / "spread.template.html").write_text(SPREAD_TEMPLATE, encoding="utf-8")
    (root / "templates" / "category.template.html").write_text(CATEGORY_TEMPLATE, encoding="utf-8")
    (root / "content" / "spreads.toml").write_text(textwrap.dedent(CONTENT).strip() + "\n", encoding="utf-8")
    lines = ['site_name = "Test Tarot"']
    if site_url:
        lines.append(f'site_url = "{site_url}"')
    path = root / "tarotbuild.toml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> dict:
    """
    Lay out a minimal site project and return its paths.
    """
    root = tmp_path / "site"
    root.mkdir()
    config_path = write_project(root)
    return {"root": root, "config": config_path}


@pytest.fixture
def build_config(project: dict) -> BuildConfig:
    return BuildConfig(root=project["root"], site_name="Test Tarot", site_url="https://tarot.example")


@pytest.fixture
def fake_bundler(monkeypatch: pytest.MonkeyPatch) -> list:
    """
    Replace the esbuild call with a fixed bundle; records each config it was given.
    """
    calls: list = []

    async def fake_bundle_assets(config):
        calls.append(config)
        return BUNDLE

    monkeypatch.setattr(executor, "bundle_assets", fake_bundle_assets)
    return calls
