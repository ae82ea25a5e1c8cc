"""Editing verbs that keymap bindings dispatch to."""

from .editing import (
    backward_char,
    backward_word,
    beginning_of_line,
    clear_screen,
    delete_backward,
    delete_forward,
    end_of_input,
    end_of_line,
    forward_char,
    forward_word,
    kill_line,
    kill_word,
    line_discard,
    submit_line,
    word_rubout,
)

__all__ = [
    "forward_char",
    "backward_char",
    "forward_word",
    "backward_word",
    "beginning_of_line",
    "end_of_line",
    "kill_word",
    "kill_line",
    "line_discard",
    "word_rubout",
    "delete_backward",
    "delete_forward",
    "clear_screen",
    "end_of_input",
    "submit_line",
]
