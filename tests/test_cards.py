import pytest

from notation.cards import ALL_CARDS, Card, card_meta, normalize_card, parse_label, split_board


def test_picker_grid_has_every_card_once():
    labels = [card.label for card in ALL_CARDS]
    assert len(labels) == 52
    assert len(set(labels)) == 52
    assert labels[:3] == ["2s", "3s", "4s"]
    assert labels[-1] == "Ad"


def test_card_display_attributes():
    ten = Card("T", "h")
    assert ten.display == "10♥"
    assert ten.color == "red"
    assert Card("A", "c").color == "black"
    assert Card("K", "s").symbol == "♠"


def test_card_rejects_bad_rank_and_suit():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("1", "h")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("A", "x")


@pytest.mark.parametrize(
    "raw, expected",
    [(" as ", "As"), ("kD", "Kd"), ("10h", "Th"), ("T c", "Tc"), ("", ""), (None, ""), ("q", "Q")],
)
def test_normalize_card(raw, expected):
    assert normalize_card(raw) == expected


def test_split_board_pairs_characters():
    assert split_board("AsKd7c") == ["As", "Kd", "7c"]
    assert split_board(" 2c ") == ["2c"]
    assert split_board("AsK") == ["As"]
    assert split_board("") == []


def test_card_meta_ignores_unknown_codes():
    assert card_meta("ah") == Card("A", "h")
    assert card_meta("Zz") is None
    assert card_meta("A") is None


def test_parse_label_requires_two_characters():
    assert parse_label("9d").label == "9d"
    with pytest.raises(ValueError, match="Invalid card label"):
        parse_label("")
