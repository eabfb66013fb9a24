import logging

import pytest

from tarotbuild.content import load_content
from tarotbuild.errors import TemplateError
from tarotbuild.render import PageTemplate, pages, render_tokens
from tarotbuild.render.pages import (
    CATEGORY_TOKENS,
    INDEX_TOKENS,
    SPREAD_TOKENS,
    SiteTemplates,
    load_templates,
    verify_templates,
)


def test_replaces_every_occurrence() -> None:
    text = "<a href='{{JS_FILE}}'>{{JS_FILE}}</a>{{CSS_FILE}}"
    rendered = render_tokens(text, {"JS_FILE": "app.js", "CSS_FILE": "app.css"})
    assert rendered == "<a href='app.js'>app.js</a>app.css"


def test_unknown_tokens_left_verbatim() -> None:
    text = "{{JS_FILE}} {{NOT_SUPPLIED}} {{ lower }} {{lower}}"
    assert render_tokens(text, {"JS_FILE": "x.js"}) == "x.js {{NOT_SUPPLIED}} {{ lower }} {{lower}}"


def test_substituted_values_are_not_rescanned() -> None:
    assert render_tokens("{{A}}{{B}}", {"A": "{{B}}", "B": "b"}) == "{{B}}b"


def test_tokens_lists_placeholders() -> None:
    template = PageTemplate(name="t.html", text="{{A}} {{B_2}} {{A}} {{c}}")
    assert template.tokens == frozenset({"A", "B_2"})


def test_render_requires_declared_tokens() -> None:
    template = PageTemplate(name="t.html", text="{{A}}", required=frozenset({"A", "B"}))
    with pytest.raises(TemplateError) as exc:
        template.render({"A": "a"})
    assert "B" in str(exc.value)
    assert template.render({"A": "a", "B": "b"}) == "a"


def test_load_missing_template(tmp_path) -> None:
    with pytest.raises(TemplateError):
        PageTemplate.load(tmp_path / "missing.html")


DECLARED = {"index": INDEX_TOKENS, "spread": SPREAD_TOKENS, "category": CATEGORY_TOKENS}


def _templates(index: str, spread: str = "{{JS_FILE}}{{CSS_FILE}}", category: str = "{{JS_FILE}}{{CSS_FILE}}"):
    return SiteTemplates(
        index=PageTemplate(name="index.template.html", text=index, required=INDEX_TOKENS),
        spread=PageTemplate(name="spread.template.html", text=spread, required=SPREAD_TOKENS),
        category=PageTemplate(name="category.template.html", text=category, required=CATEGORY_TOKENS),
    )


def test_verify_rejects_index_without_asset_tokens() -> None:
    with pytest.raises(TemplateError) as exc:
        verify_templates(_templates("<script src='{{JS_FILE}}'></script>"), DECLARED)
    assert "CSS_FILE" in str(exc.value)


def test_verify_only_warns_for_spread_without_asset_tokens(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    verify_templates(_templates("{{JS_FILE}}{{CSS_FILE}}", spread="<h1>{{SPREAD_NAME}}</h1>"), DECLARED)
    assert "spread.template.html: template never references CSS_FILE, JS_FILE" in caplog.text


def test_verify_warns_about_unfilled_tokens(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    verify_templates(_templates("{{JS_FILE}}{{CSS_FILE}}{{SPREAD_NAME}}"), DECLARED)
    assert "SPREAD_NAME" in caplog.text


def test_verify_rejects_renderer_missing_declared_token() -> None:
    supplied = dict(DECLARED, category=CATEGORY_TOKENS - {"SPREAD_CARDS"})
    with pytest.raises(TemplateError) as exc:
        verify_templates(_templates("{{JS_FILE}}{{CSS_FILE}}"), supplied)
    assert "SPREAD_CARDS" in str(exc.value)


def test_load_templates_accepts_fixture_project(project: dict, build_config) -> None:
    content = load_content(project["root"] / "content" / "spreads.toml")
    templates = load_templates(build_config, content)
    assert templates.spread.required == SPREAD_TOKENS
    assert pages.renderer_tokens(build_config, content)["spread"] == SPREAD_TOKENS


def test_load_templates_fails_when_renderer_drops_a_token(
    project: dict,
    build_config,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    real_spread_values = pages.spread_values

    def spread_values_without_how_to_read(*args, **kwargs):
        values = real_spread_values(*args, **kwargs)
        values.pop("HOW_TO_READ")
        return values

    monkeypatch.setattr(pages, "spread_values", spread_values_without_how_to_read)
    content = load_content(project["root"] / "content" / "spreads.toml")

    with pytest.raises(TemplateError) as exc:
        load_templates(build_config, content)
    assert "HOW_TO_READ" in str(exc.value)
