"""Tests for the interactive study loop and the generate command."""

import json
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from flashdeck.domain.errors import GenerationError
from flashdeck.domain.models import GeneratedCard
from flashdeck.interface.cli import app

runner = CliRunner()


def _demo_cards(data_path):
    doc = json.loads(data_path.read_text())
    return next(d for d in doc["decks"] if d["id"] == "demo-deck")["cards"]


# --- Study ---


def test_study_rates_every_due_card(data_path):
    result = runner.invoke(app, ["study", "demo-deck"], input="\n3\n" * 4)

    assert result.exit_code == 0, result.output
    assert "[1/4]" in result.stdout
    assert "[4/4]" in result.stdout
    assert "1) Again (Now)  2) Hard (1d)  3) Good (5d)  4) Easy (14d)" in result.stdout
    assert "Session complete!" in result.stdout
    assert "You studied 4 cards." in result.stdout

    cards = _demo_cards(data_path)
    assert [c["interval"] for c in cards] == [5, 5, 5, 5]
    assert all(c["lastDifficulty"] == "Good" for c in cards)


def test_second_session_is_empty(data_path):
    runner.invoke(app, ["study", "demo-deck"], input="\n4\n" * 4)
    result = runner.invoke(app, ["study", "demo-deck"])
    assert result.exit_code == 0
    assert "All caught up!" in result.stdout


def test_done_and_invalid_choices(data_path):
    # First card: a bad key, then done. Second card: Again. Then quit.
    result = runner.invoke(app, ["study", "demo-deck"], input="\nx\nd\n\n1\nq\n")
    assert result.exit_code == 0
    assert "Choose 1-4, d or q." in result.stdout
    assert "Session left early" in result.stdout

    cards = _demo_cards(data_path)
    assert sum(1 for c in cards if c["isDone"]) == 1
    assert sum(1 for c in cards if c.get("lastDifficulty") == "Again") == 1
    assert all(c["interval"] == 0 for c in cards)


def test_study_missing_deck(data_path):
    result = runner.invoke(app, ["study", "nope"])
    assert result.exit_code == 1
    assert "Not found" in result.output


# --- Generate ---


@patch("flashdeck.application.factory.get_card_generator")
def test_generate_topic(mock_factory, data_path):
    generator = AsyncMock()
    generator.generate_from_topic.return_value = [
        GeneratedCard("H2O?", "Water"),
        GeneratedCard("NaCl?", "Salt"),
    ]
    mock_factory.return_value = generator

    result = runner.invoke(app, ["generate", "demo-deck", "--topic", "Chemistry", "--count", "2"])

    assert result.exit_code == 0, result.output
    assert "Added 2 cards" in result.stdout
    generator.generate_from_topic.assert_awaited_once_with("Chemistry", 2, None)
    generator.aclose.assert_awaited_once()
    assert [c["front"] for c in _demo_cards(data_path)][-2:] == ["H2O?", "NaCl?"]


@patch("flashdeck.application.factory.get_card_generator")
def test_generate_from_text_file(mock_factory, data_path, tmp_path):
    source = tmp_path / "notes.txt"
    source.write_text("Mitochondria make ATP.")
    generator = AsyncMock()
    generator.generate_from_text.return_value = [GeneratedCard("ATP maker?", "Mitochondria")]
    mock_factory.return_value = generator

    result = runner.invoke(app, ["generate", "demo-deck", "--text-file", str(source)])

    assert result.exit_code == 0, result.output
    generator.generate_from_text.assert_awaited_once_with("Mitochondria make ATP.", 5, None)


@patch("flashdeck.application.factory.get_card_generator")
def test_generate_failure(mock_factory, data_path):
    generator = AsyncMock()
    generator.generate_from_words.side_effect = GenerationError("API key is missing.")
    mock_factory.return_value = generator

    result = runner.invoke(app, ["generate", "demo-deck", "--words", "uno, dos"])

    assert result.exit_code == 1
    assert "Generation failed" in result.output
    generator.aclose.assert_awaited_once()


def test_generate_needs_exactly_one_source(data_path):
    result = runner.invoke(app, ["generate", "demo-deck"])
    assert result.exit_code == 2
    result = runner.invoke(app, ["generate", "demo-deck", "--topic", "a", "--words", "b"])
    assert result.exit_code == 2


def test_generate_text_and_text_file_conflict(data_path, tmp_path):
    source = tmp_path / "notes.txt"
    source.write_text("Mitochondria make ATP.")
    result = runner.invoke(
        app, ["generate", "demo-deck", "--text", "inline", "--text-file", str(source)]
    )
    assert result.exit_code == 2


def test_generate_text_file_must_be_readable(data_path, tmp_path):
    result = runner.invoke(app, ["generate", "demo-deck", "--text-file", str(tmp_path / "nope")])
    assert result.exit_code == 2
    assert "Traceback" not in result.output

    binary = tmp_path / "notes.bin"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    result = runner.invoke(app, ["generate", "demo-deck", "--text-file", str(binary)])
    assert result.exit_code == 2
    assert "cannot read" in result.output


@patch("flashdeck.application.factory.get_card_generator")
def test_generate_zero_count_is_rejected(mock_factory, data_path):
    generator = AsyncMock()
    mock_factory.return_value = generator

    result = runner.invoke(app, ["generate", "demo-deck", "--topic", "Chemistry", "--count", "0"])

    assert result.exit_code == 1
    assert "Invalid input" in result.output
    generator.generate_from_topic.assert_not_awaited()
