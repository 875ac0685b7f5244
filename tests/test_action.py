"""Tests for perch.actions.action — the Action base class."""

import pytest

from perch.actions.action import Action, build_action
from perch.errors import ConfigurationError


class Mailer:
    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, to: str) -> str:
        self.sent.append(to)
        return f"sent to {to}"


class SendWelcome(Action):
    def __init__(self, mailer: Mailer | None = None) -> None:
        self.mailer = mailer or Mailer()

    def handle(self, email: str) -> str:
        return self.mailer.send(email)


class NeedsMailer(Action):
    def __init__(self, mailer: Mailer) -> None:
        self.mailer = mailer

    def handle(self) -> Mailer:
        return self.mailer


class TestMake:
    def test_defaults(self) -> None:
        action = SendWelcome.make()
        assert isinstance(action, SendWelcome)
        assert isinstance(action.mailer, Mailer)

    def test_overrides(self) -> None:
        mailer = Mailer()
        action = SendWelcome.make(mailer=mailer)
        assert action.mailer is mailer

    def test_required_parameter_without_value(self) -> None:
        with pytest.raises(ConfigurationError, match="no value for 'mailer'"):
            NeedsMailer.make()

    def test_unknown_override_is_rejected(self) -> None:
        with pytest.raises(TypeError):
            SendWelcome.make(unknown=1)

    def test_no_constructor(self) -> None:
        class Ping(Action):
            def handle(self) -> str:
                return "pong"

        assert Ping.make().handle() == "pong"


class TestRun:
    def test_run_is_make_then_handle(self) -> None:
        assert SendWelcome.run("ada@example.com") == "sent to ada@example.com"

    def test_run_passes_keywords(self) -> None:
        assert SendWelcome.run(email="bob@example.com") == "sent to bob@example.com"


class TestBuildAction:
    def test_provider_by_annotation(self) -> None:
        shared = Mailer()
        action = build_action(NeedsMailer, {Mailer: lambda: shared})
        assert action.handle() is shared

    def test_override_beats_provider(self) -> None:
        shared, local = Mailer(), Mailer()
        action = build_action(NeedsMailer, {Mailer: lambda: shared}, {"mailer": local})
        assert action.mailer is local

    def test_works_for_plain_classes(self) -> None:
        class Plain:
            def __init__(self, mailer: Mailer, retries: int = 3) -> None:
                self.mailer = mailer
                self.retries = retries

        shared = Mailer()
        plain = build_action(Plain, {Mailer: lambda: shared})
        assert plain.mailer is shared
        assert plain.retries == 3

    def test_base_class_adds_no_conventions(self) -> None:
        for name in ("routes", "authorize", "rules", "json_response", "html_response"):
            assert not hasattr(Action, name)
