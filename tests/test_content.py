from pathlib import Path
import logging
import textwrap

import pytest

from tarotbuild.content import load_content
from tarotbuild.errors import ContentError


def _write_content(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "spreads.toml"
    path.write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
    return path


def test_loads_fixture_content(project: dict) -> None:
    table = load_content(project["root"] / "content" / "spreads.toml")

    assert [spread.id for spread in table.spreads] == ["two-hearts", "celtic-cross", "crossroads"]
    assert [category.slug for category in table.categories] == ["love", "career"]
    career = table.categories[1]
    assert [spread.slug for spread in table.spreads_in(career)] == ["celtic-cross", "crossroads"]
    assert table.category_for(table.spreads[0]).name == "Love & Relationships"
    assert table.spreads[0].positions == ("You", "Them")


def test_slug_defaults_to_slugified_name(tmp_path: Path) -> None:
    path = _write_content(
        tmp_path,
        """
        [[category]]
        id = "general"
        name = "General Guidance"

        [[spread]]
        id = "one"
        name = "Card of the Day!"
        category = "general"
        card_count = 1
        introduction = "One card."
        """,
    )
    table = load_content(path)
    assert table.spreads[0].slug == "card-of-the-day"
    assert table.categories[0].slug == "general-guidance"


def test_rejects_unknown_category(tmp_path: Path) -> None:
    path = _write_content(
        tmp_path,
        """
        [[spread]]
        id = "one"
        name = "One"
        category = "nowhere"
        card_count = 1
        introduction = "One card."
        """,
    )
    with pytest.raises(ContentError) as exc:
        load_content(path)
    assert "nowhere" in str(exc.value)


def test_rejects_duplicate_slugs(tmp_path: Path) -> None:
    path = _write_content(
        tmp_path,
        """
        [[category]]
        id = "general"
        name = "General"

        [[spread]]
        id = "a"
        name = "Same"
        category = "general"
        card_count = 1
        introduction = "x"

        [[spread]]
        id = "b"
        name = "Same"
        category = "general"
        card_count = 1
        introduction = "y"
        """,
    )
    with pytest.raises(ContentError) as exc:
        load_content(path)
    assert "duplicate spread slug" in str(exc.value)


def test_rejects_position_count_mismatch(tmp_path: Path) -> None:
    path = _write_content(
        tmp_path,
        """
        [[category]]
        id = "general"
        name = "General"

        [[spread]]
        id = "three"
        name = "Three"
        category = "general"
        card_count = 3
        introduction = "x"
        positions = ["Past", "Present"]
        """,
    )
    with pytest.raises(ContentError) as exc:
        load_content(path)
    assert "positions" in str(exc.value)


def test_rejects_plural_blocks(tmp_path: Path) -> None:
    path = _write_content(
        tmp_path,
        """
        [[spreads]]
        id = "one"
        """,
    )
    with pytest.raises(ContentError) as exc:
        load_content(path)
    assert "[[spread]]" in str(exc.value)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ContentError):
        load_content(tmp_path / "absent.toml")


def test_warns_on_empty_category(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write_content(
        tmp_path,
        """
        [[category]]
        id = "empty"
        name = "Empty"
        """,
    )
    caplog.set_level(logging.WARNING)
    load_content(path)
    assert "has no spreads" in caplog.text
