from __future__ import annotations

import pytest

from locale_translator.exceptions import PlaceholderMismatchError
from locale_translator.protection import (
    DO_NOT_TRANSLATE,
    is_protected_term,
    protect_placeholders,
    restore_placeholders,
    split_protected,
)
from locale_translator.translation.processor import translate_text_guarded


def test_protect_replaces_variables_left_to_right() -> None:
    text, tokens = protect_placeholders("Hi {{first}} {{last}}, {{first}} again")

    assert text == "Hi __VAR0__ __VAR1__, __VAR2__ again"
    assert list(tokens.items()) == [
        ("__VAR0__", "{{first}}"),
        ("__VAR1__", "{{last}}"),
        ("__VAR2__", "{{first}}"),
    ]


def test_protect_ignores_single_braces_and_plain_text() -> None:
    text, tokens = protect_placeholders("Price: {amount} only")

    assert text == "Price: {amount} only"
    assert tokens == {}


def test_worked_example_round_trip() -> None:
    outbound = []

    def remote(text: str) -> str:
        outbound.append(text)
        return text.replace("Hello", "Hallo")

    assert translate_text_guarded("Hello {{name}}", remote) == "Hallo {{name}}"
    assert outbound == ["Hello __VAR0__"]


@pytest.mark.parametrize(
    "source, remote_output, expected",
    [
        ("{{count}} items", "__VAR0__ Artikel", "{{count}} Artikel"),
        ("From {{a}} to {{b}}", "Von __VAR0__ bis __VAR1__", "Von {{a}} bis {{b}}"),
        ("{{ spaced var }}!", "¡__VAR0__!", "¡{{ spaced var }}!"),
    ],
)
def test_restoration_keeps_variable_text_regardless_of_surrounding_text(source, remote_output, expected) -> None:
    assert translate_text_guarded(source, lambda _: remote_output) == expected


def test_restoration_handles_more_than_ten_markers() -> None:
    source = " ".join(f"{{{{v{i}}}}}" for i in range(12))
    text, tokens = protect_placeholders(source)

    assert restore_placeholders(text, tokens) == source


def test_dropped_marker_is_left_alone_in_lenient_mode() -> None:
    _, tokens = protect_placeholders("{{a}} and {{b}}")

    assert restore_placeholders("__VAR0__ und", tokens) == "{{a}} und"


def test_duplicated_marker_only_restores_first_occurrence() -> None:
    _, tokens = protect_placeholders("{{a}}")

    assert restore_placeholders("__VAR0__ __VAR0__", tokens) == "{{a}} __VAR0__"


def test_strict_mode_raises_on_mismatch() -> None:
    _, tokens = protect_placeholders("{{a}} and {{b}}")

    with pytest.raises(PlaceholderMismatchError) as exc_info:
        restore_placeholders("__VAR1__ only", tokens, strict=True)

    assert exc_info.value.details["missing"] == ["__VAR0__"]


def test_skip_list_is_exact_and_case_sensitive() -> None:
    assert "Cart" in DO_NOT_TRANSLATE
    assert is_protected_term("Add to cart")
    assert not is_protected_term("CART")
    assert not is_protected_term("Go to Cart")


def test_split_protected_keeps_skip_list_and_empty_values() -> None:
    to_send, kept = split_protected({"a": "Cart", "b": "Hello", "c": "  ", "d": "SKU"})

    assert to_send == {"b": "Hello"}
    assert kept == {"a": "Cart", "c": "  ", "d": "SKU"}
