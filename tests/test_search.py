from vimdoc_engine.buffer import NOT_FOUND, TextBuffer
from vimdoc_engine.search import SearchEngine


def make_search(text: str, **kwargs) -> SearchEngine:
    return SearchEngine(TextBuffer(text), **kwargs)


def test_forward_search_skips_match_under_cursor() -> None:
    search = make_search("foo bar foo")

    assert search.find("foo", (0, 0)) == (0, 8)


def test_forward_search_wraps_once() -> None:
    search = make_search("foo bar foo")

    assert search.find("foo", (0, 8)) == (0, 0)


def test_backward_search_wraps_to_last_match() -> None:
    search = make_search("foo bar foo")

    assert search.find("foo", (0, 0), "backward") == (0, 8)


def test_search_across_lines() -> None:
    search = make_search("alpha\nbeta\ngamma beta")

    assert search.find("beta", (0, 2)) == (1, 0)
    assert search.repeat((1, 0)) == (2, 6)


def test_repeat_reverses_direction() -> None:
    search = make_search("x one x two x")
    search.find("x", (0, 0))

    assert search.repeat((0, 6), reverse=True) == (0, 0)
    assert search.last_direction == "forward"


def test_missing_pattern_reports_not_found() -> None:
    search = make_search("abc")

    assert search.find("zzz", (0, 0)) is NOT_FOUND
    assert search.repeat((0, 0)) is NOT_FOUND


def test_repeat_without_history_is_not_found() -> None:
    assert make_search("abc").repeat((0, 0)) is NOT_FOUND


def test_empty_pattern_reuses_last() -> None:
    search = make_search("ab ab ab")
    search.find("ab", (0, 0))

    assert search.find("", (0, 3)) == (0, 6)


def test_invalid_regex_is_searched_literally() -> None:
    search = make_search("call(x) and (y")

    assert search.find("(", (0, 0)) == (0, 4)


def test_regex_patterns() -> None:
    search = make_search("a1 b22 c333")

    assert search.find(r"\d{3}", (0, 0)) == (0, 8)


def test_ignore_case() -> None:
    assert make_search("Hello hello").find("HELLO", (0, 0)) is NOT_FOUND
    assert make_search("x Hello", ignore_case=True).find("hello", (0, 0)) == (0, 2)
