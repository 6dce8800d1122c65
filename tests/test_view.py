from dataclasses import replace

from session import Session, TypeChar, update
from view import DEFAULT_THEME, Frame, Run, Theme, diff_segments, render


def frame_lines(frame: Frame) -> list[str]:
    height = max(run.y for run in frame.runs) + 1
    width = max(run.x + len(run.text) for run in frame.runs)
    grid = [[" "] * width for _ in range(height)]
    for run in frame.runs:
        grid[run.y][run.x : run.x + len(run.text)] = run.text
    return ["".join(row).rstrip() for row in grid]


def input_runs(frame: Frame) -> list[Run]:
    label = next(run for run in frame.runs if run.text == DEFAULT_THEME.input_label)
    return sorted(
        (run for run in frame.runs if run.y == label.y and run.x > label.x and run.role != "border"),
        key=lambda run: run.x,
    )


def test_render_is_pure() -> None:
    session = Session(target="hello world", typed="helo", started_at=1.0, width=80, height=24)
    assert render(session) == render(session)


def test_blink_only_changes_cursor() -> None:
    session = Session(target="hello world", typed="hel", started_at=1.0, width=80, height=24)
    on = render(replace(session, blink=True))
    off = render(replace(session, blink=False))
    changed = [(a, b) for a, b in zip(on.runs, off.runs) if a != b]
    assert len(changed) == 1
    cursor_on, cursor_off = changed[0]
    assert cursor_on.role == cursor_off.role == "cursor"
    assert cursor_on.text == DEFAULT_THEME.cursor_on
    assert cursor_off.text == DEFAULT_THEME.cursor_off


def test_diff_marks_correct_and_incorrect() -> None:
    session = Session(target="hello", typed="hx", started_at=1.0, blink=True)
    assert diff_segments(session, DEFAULT_THEME) == [
        ("h", "correct"),
        ("x", "incorrect"),
        ("|", "cursor"),
        ("l", "plain"),
        ("l", "plain"),
        ("o", "plain"),
    ]


def test_no_cursor_once_input_reaches_target_length() -> None:
    session = Session(target="hi", typed="hx", started_at=1.0, blink=True)
    roles = [role for _, role in diff_segments(session, DEFAULT_THEME)]
    assert roles == ["correct", "incorrect"]


def test_cursor_precedes_char_at_cursor_index() -> None:
    session = Session(target="abc", typed="a", started_at=1.0, blink=True, width=60, height=20)
    runs = input_runs(render(session))
    assert [(run.text, run.role) for run in runs] == [
        ("a", "correct"),
        ("|", "cursor"),
        ("b", "plain"),
        ("c", "plain"),
    ]
    xs = [run.x for run in runs]
    assert xs == list(range(xs[0], xs[0] + 4))


def test_typing_frame_layout() -> None:
    session = Session(target="hi", typed="h", started_at=1.0)
    lines = frame_lines(render(session))
    # widest line is the prompt: 19 + 2 * 2 padding + 2 borders
    assert lines[0] == "┌" + "─" * 23 + "┐"
    assert lines[7] == "└" + "─" * 23 + "┘"
    assert lines[2].strip("│ ") == "Type the following:"
    assert lines[3].strip("│ ") == "hi"
    assert lines[5].strip("│ ") == "Your input: h i"


def test_frame_is_centred_in_viewport() -> None:
    session = Session(target="hi", width=80, height=24)
    frame = render(session)
    top_left = frame.runs[0]
    assert top_left.role == "border"
    assert (top_left.y, top_left.x) == ((24 - 8) // 2, (80 - 25) // 2)


def test_frame_clamps_in_tiny_viewport() -> None:
    frame = render(Session(target="hello world", width=5, height=3))
    assert (frame.runs[0].y, frame.runs[0].x) == (0, 0)


def test_footer_on_second_to_last_row() -> None:
    frame = render(Session(target="hi", width=80, height=24))
    footer = [run for run in frame.runs if run.role == "footer"]
    assert footer == [Run(22, (80 - len(DEFAULT_THEME.footer_text)) // 2, DEFAULT_THEME.footer_text, "footer")]


def test_results_panel() -> None:
    session = update(Session(target="hello world", width=80, height=24), TypeChar("h"), 0.0)
    for ch in "ello world":
        session = update(session, TypeChar(ch), 30.0)
    assert session.is_complete
    text = "\n".join(frame_lines(render(session, now=500.0)))
    assert "You typed correctly!" in text
    assert "WPM: 4" in text
    assert "Accuracy: 100.00%" in text
    assert "Press 'r' to restart" in text
    result = next(run for run in render(session).runs if run.text == DEFAULT_THEME.success)
    assert result.role == "result"


def test_theme_is_injected() -> None:
    theme = Theme(cursor_on="#", prompt="Go:", padding_x=0, padding_y=0)
    session = Session(target="ab", blink=True)
    lines = frame_lines(render(session, theme))
    assert lines[1].strip("│ ") == "Go:"
    assert "#ab" in lines[4]
