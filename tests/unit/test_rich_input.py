"""Unit tests for certflow.console — Choice and RichInputService."""
from __future__ import annotations

import io

import pytest
from rich.console import Console

from certflow.console import Choice, InputService, RichInputService


def _service(answers: str) -> tuple[RichInputService, io.StringIO]:
    output = io.StringIO()
    console = Console(file=output, width=120, color_system=None)
    return RichInputService(console, stream=io.StringIO(answers)), output


def _creator(default: str | None = None, disabled: dict[str, str] | None = None):
    disabled = disabled or {}

    def creator(value: str) -> Choice[str]:
        return Choice(
            item=value,
            description=value.title(),
            default=value == default,
            disabled=(value in disabled, disabled.get(value)),
        )

    return creator


class TestChoice:
    def test_defaults(self) -> None:
        choice = Choice("x", "X")
        assert not choice.default
        assert not choice.is_disabled
        assert choice.disabled_reason is None

    def test_disabled_reason(self) -> None:
        choice = Choice("x", "X", disabled=(True, "nope"))
        assert choice.is_disabled
        assert choice.disabled_reason == "nope"


class TestRichInputService:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(RichInputService(Console(file=io.StringIO())), InputService)

    def test_choose_required_by_number(self) -> None:
        service, output = _service("2\n")
        picked = service.choose_required("Colour?", ["red", "green"], _creator())
        assert picked == "green"
        assert "1: Red" in output.getvalue()
        assert "Colour?" in output.getvalue()

    def test_blank_answer_takes_default(self) -> None:
        service, _ = _service("\n")
        assert service.choose_required("Colour?", ["red", "green"], _creator("green")) == "green"

    def test_default_is_marked(self) -> None:
        service, output = _service("1\n")
        service.choose_required("Colour?", ["red", "green"], _creator("green"))
        assert "Green <- default" in output.getvalue()

    def test_choose_optional_cancel(self) -> None:
        service, output = _service("c\n")
        assert service.choose_optional("Colour?", ["red"], _creator(), "Abort") is None
        assert "C: Abort" in output.getvalue()

    def test_cancel_not_accepted_for_required(self) -> None:
        service, output = _service("c\n1\n")
        assert service.choose_required("Colour?", ["red"], _creator()) == "red"
        assert "Invalid choice" in output.getvalue()

    def test_disabled_option_reprompts(self) -> None:
        service, output = _service("1\n2\n")
        picked = service.choose_required(
            "Colour?", ["red", "green"], _creator(disabled={"red": "sold out"})
        )
        assert picked == "green"
        text = output.getvalue()
        assert "(sold out)" in text
        assert "Option not available: sold out" in text

    def test_out_of_range_reprompts(self) -> None:
        service, output = _service("9\nx\n1\n")
        assert service.choose_required("Colour?", ["red"], _creator()) == "red"
        assert output.getvalue().count("Invalid choice") == 2

    def test_markup_in_labels_is_escaped(self) -> None:
        service, output = _service("1\n")

        def creator(value: str) -> Choice[str]:
            return Choice(value, "[http-01] Serve files")

        service.choose_required("Validation?", ["x"], creator)
        assert "[http-01] Serve files" in output.getvalue()

    def test_required_without_selectable_options_raises(self) -> None:
        service, _ = _service("")
        with pytest.raises(ValueError):
            service.choose_required("Colour?", ["red"], _creator(disabled={"red": "gone"}))

    def test_show_with_and_without_label(self) -> None:
        service, output = _service("")
        service.create_space()
        service.show("Target", "example.com")
        service.show(None, "Plain [text]")
        text = output.getvalue()
        assert "Target: example.com" in text
        assert "Plain [text]" in text
