"""Tests for the Rich CLI: rendering and the chat loop (prompts patched)."""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from fitcoach.agent.chat import ChatOrchestrator
from fitcoach.agent.errors import FailureKind, RemoteGenerationFailure
from fitcoach.agent.response_parser import classify_content
from fitcoach.interface import cli
from fitcoach.memory.sessions import ConversationTurn


@pytest.fixture
def output(monkeypatch):
    buffer = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buffer, width=120))
    return buffer


# ── Rendering ───────────────────────────────────────────────────────

class TestRendering:

    def test_workout_plan_table(self, output):
        plan = classify_content("Monday: Upper Body\n- Push-ups - 3 sets x 12 reps\nTuesday\n- Squats - 4 sets of 10 reps")
        cli.render_content(plan)
        text = output.getvalue()
        assert "Monday - Upper Body" in text
        assert "Push" in text
        assert "Squats" in text

    def test_tips_panel(self, output):
        cli.render_content(classify_content("Tips:\n1. Drink water\n2. Sleep well\n3. Stretch daily"))
        text = output.getvalue()
        assert "1. Drink water" in text
        assert "3. Stretch daily" in text

    def test_plain_text_with_markup_chars(self, output):
        cli.render_content(classify_content("Keep going [you got this]"))
        assert "[you got this]" in output.getvalue()


# ── Chat Loop ───────────────────────────────────────────────────────

class TestChatLoop:

    def test_exchange_awards_coin(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        orchestrator = ChatOrchestrator(sessions, generator)
        with patch.object(cli.Prompt, "ask", side_effect=["Build me a weekly routine", "/coins", "/quit"]):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert profiles.coins("u1") == 1
        assert "Sounds good!" in output.getvalue()
        assert "Coins: 1" in output.getvalue()

    def test_failure_keeps_running(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        generator.generate.side_effect = RemoteGenerationFailure(FailureKind.TRANSPORT, "timed out")
        orchestrator = ChatOrchestrator(sessions, generator)
        with patch.object(cli.Prompt, "ask", side_effect=["Build me a weekly routine", "/quit"]):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert cli.FAILURE_NOTICE in output.getvalue()
        assert profiles.coins("u1") == 0

    def test_history_command(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        orchestrator = ChatOrchestrator(sessions, generator)
        with patch.object(cli.Prompt, "ask", side_effect=["I have knee pain", "/history", "/quit"]):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert "I have knee pain" in output.getvalue()
        generator.generate.assert_not_called()

    def test_open_rejects_other_users_session(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        foreign = sessions.start_session("u2")
        orchestrator = ChatOrchestrator(sessions, generator)
        prompts = [f"/open {foreign}", "/open u1/../u2/notes", "Build me a weekly routine", "/quit"]
        with patch.object(cli.Prompt, "ask", side_effect=prompts):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert "does not belong" in output.getvalue()
        assert sessions.load_session(foreign) == []
        assert len(sessions.load_session(sessions.current_session("u1"))) == 2

    def test_open_own_session_continues_it(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        earlier = sessions.start_session("u1")
        sessions.append_turns(earlier, [ConversationTurn("user", "old question")])
        sessions.start_session("u1")
        orchestrator = ChatOrchestrator(sessions, generator)
        with patch.object(cli.Prompt, "ask", side_effect=[f"/open {earlier}", "Build me a weekly routine", "/quit"]):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert "old question" in output.getvalue()
        assert len(sessions.load_session(earlier)) == 3

    def test_personality_command(self, output, profiles, sessions, generator):
        profiles.get_or_create("u1", "goal_finisher")
        orchestrator = ChatOrchestrator(sessions, generator)
        with patch.object(cli.Prompt, "ask", side_effect=["/personality", "/quit"]), \
             patch.object(cli.IntPrompt, "ask", return_value=2):
            cli.chat_loop(orchestrator, profiles, sessions, "u1")

        assert profiles.load("u1").personality == "creative_explorer"
        assert "Creative Explorer" in output.getvalue()
