import time

import pytest

from photoalbum.models import Rotation
from photoalbum.sequencer import ChannelError
from photoalbum.session import CAPTION_PROMPT, ROTATION_PROMPT, InteractiveSession

from conftest import ScriptedInput


def test_questions_are_asked_only_when_requested():
    scripted = ScriptedInput(["1", "sunset"])
    session = InteractiveSession(scripted)

    time.sleep(0.05)
    assert scripted.prompts == []

    assert session.ask_rotation() is Rotation.CLOCKWISE
    assert scripted.prompts == [ROTATION_PROMPT]

    time.sleep(0.05)
    assert scripted.prompts == [ROTATION_PROMPT]

    assert session.ask_caption() == "sunset"
    assert scripted.prompts == [ROTATION_PROMPT, CAPTION_PROMPT]


@pytest.mark.parametrize(
    "answer, expected",
    [("1", Rotation.CLOCKWISE), ("2", Rotation.COUNTER_CLOCKWISE), ("3", Rotation.NONE), ("", Rotation.NONE), ("left", Rotation.NONE)],
)
def test_rotation_answers(answer, expected):
    with InteractiveSession(ScriptedInput([answer, "x"])) as session:
        assert session.ask_rotation() is expected
        session.ask_caption()


def test_caption_is_truncated_but_not_escaped():
    caption = "<b>Tom & Jerry</b> " + "z" * 80
    with InteractiveSession(ScriptedInput(["3", caption]), caption_max_length=49) as session:
        session.ask_rotation()
        result = session.ask_caption()

    assert result == caption[:49]
    assert result.startswith("<b>Tom & Jerry</b>")


def test_truncated_answer_is_a_warning():
    messages = []
    scripted = ScriptedInput(["3", "x" * 60])
    with InteractiveSession(scripted, caption_max_length=49, log_callback=messages.append, name="#1 a.png") as session:
        session.ask_rotation()
        assert session.ask_caption() == "x" * 49

    assert len(messages) == 1
    assert "#1 a.png" in messages[0]
    assert "longer than 49 characters" in messages[0]


def test_answer_at_the_limit_is_kept_silently():
    messages = []
    with InteractiveSession(ScriptedInput(["1", "y" * 49]), log_callback=messages.append) as session:
        assert session.ask_rotation() is Rotation.CLOCKWISE
        assert session.ask_caption() == "y" * 49

    assert messages == []


def test_end_of_input_is_an_empty_answer_with_warning():
    messages = []
    with InteractiveSession(ScriptedInput([]), log_callback=messages.append) as session:
        assert session.ask_rotation() is Rotation.NONE
        assert session.ask_caption() == ""

    assert len(messages) == 2
    assert "No input" in messages[0]


def test_input_failure_raises_channel_error():
    def broken(prompt):
        raise RuntimeError("terminal went away")

    session = InteractiveSession(broken)
    with pytest.raises(ChannelError, match="terminal went away"):
        session.ask_rotation()
    session.close()


def test_helper_is_joined_after_second_answer():
    session = InteractiveSession(ScriptedInput(["2", "done"]))
    session.ask_rotation()
    session.ask_caption()

    assert not session._thread.is_alive()


def test_close_before_questions_releases_helper():
    scripted = ScriptedInput(["1", "never asked"])
    session = InteractiveSession(scripted)
    session.close()

    assert not session._thread.is_alive()
    assert scripted.prompts == []


def test_third_question_is_refused():
    with InteractiveSession(ScriptedInput(["3", "cap"])) as session:
        session.ask_rotation()
        session.ask_caption()
        with pytest.raises(ChannelError, match="already been asked"):
            session.ask_caption()
