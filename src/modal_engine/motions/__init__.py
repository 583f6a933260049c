"""Pure position arithmetic: word motions, search and text objects."""

from .search import (
    char_count_in_range,
    find_char_backward,
    find_char_forward,
    match_bracket,
    search_backward,
    search_forward,
)
from .textobjects import (
    TextObjectRange,
    pair_range,
    quote_range,
    resolve_text_object,
    tag_range,
    word_range,
)
from .words import (
    first_non_blank,
    next_big_word_end,
    next_big_word_start,
    next_word_end,
    next_word_start,
    prev_big_word_start,
    prev_word_start,
)

__all__ = [
    "TextObjectRange",
    "char_count_in_range",
    "find_char_backward",
    "find_char_forward",
    "first_non_blank",
    "match_bracket",
    "next_big_word_end",
    "next_big_word_start",
    "next_word_end",
    "next_word_start",
    "pair_range",
    "prev_big_word_start",
    "prev_word_start",
    "quote_range",
    "resolve_text_object",
    "search_backward",
    "search_forward",
    "tag_range",
    "word_range",
]
