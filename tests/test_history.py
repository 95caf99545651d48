import pytest

from vimdoc_engine.buffer import (
    NO_OP,
    Buffer,
    EditTransaction,
    HistoryManager,
    OutOfBounds,
    TextBuffer,
    Transaction,
)


def make_transaction(before: str, after: str, label: str = "edit") -> EditTransaction:
    return EditTransaction(
        label=label,
        before_text=before,
        after_text=after,
        cursor_before=(0, 0),
        cursor_after=(0, len(after)),
    )


def test_undo_and_redo_restore_snapshots() -> None:
    document = TextBuffer("abc")
    history = HistoryManager(document)
    document.restore("abcd")
    history.commit(make_transaction("abc", "abcd"))

    assert history.undo() == (0, 0)
    assert document.text == "abc"
    assert history.redo() == (0, 4)
    assert document.text == "abcd"


def test_empty_stacks_return_no_op() -> None:
    history = HistoryManager(TextBuffer("abc"))

    assert history.undo() is NO_OP
    assert history.redo() is NO_OP


def test_commit_clears_redo_stack() -> None:
    document = TextBuffer("a")
    history = HistoryManager(document)
    document.restore("ab")
    history.commit(make_transaction("a", "ab"))
    history.undo()

    history.commit(make_transaction("a", "ac"))

    assert not history.can_redo()


def test_max_entries_drops_oldest() -> None:
    history = HistoryManager(TextBuffer(""), max_entries=2)
    for before, after in (("", "a"), ("a", "ab"), ("ab", "abc")):
        history.commit(make_transaction(before, after))

    history.undo()
    history.undo()

    assert history.undo() is NO_OP


def test_group_without_changes_commits_nothing() -> None:
    buffer = Buffer.from_text("abc")
    buffer.history.begin_group("insert", (0, 0))

    assert buffer.history.end_group((0, 0)) is None
    assert not buffer.history.can_undo()


def test_group_folds_edits_into_one_transaction() -> None:
    buffer = Buffer.from_text("abc")
    buffer.history.begin_group("insert", (0, 0))
    buffer.insert_text("x")
    buffer.insert_text("y")

    transaction = buffer.history.end_group(buffer.cursor.position)

    assert transaction is not None
    assert (transaction.before_text, transaction.after_text) == ("abc", "xyabc")
    assert buffer.history.undo() == (0, 0)
    assert buffer.text == "abc"
    assert buffer.history.undo() is NO_OP


def test_mark_boundary_splits_group() -> None:
    buffer = Buffer.from_text("")
    buffer.history.begin_group("insert", (0, 0))
    buffer.insert_text("one")
    buffer.history.mark_boundary(buffer.cursor.position)
    buffer.insert_text(" two")
    buffer.history.end_group(buffer.cursor.position)

    buffer.history.undo()
    assert buffer.text == "one"
    buffer.history.undo()
    assert buffer.text == ""


def test_without_coalescing_every_edit_is_undoable() -> None:
    buffer = Buffer.from_text("", coalesce=False)
    buffer.history.begin_group("insert", (0, 0))
    buffer.insert_text("a")
    buffer.insert_text("b")
    buffer.history.end_group(buffer.cursor.position)

    buffer.history.undo()
    assert buffer.text == "a"


def test_failed_transaction_rolls_back() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(RuntimeError):
        with Transaction(buffer, "broken"):
            buffer.document.insert((0, 0), "zz")
            raise RuntimeError("boom")

    assert buffer.text == "abc"
    assert not buffer.history.can_undo()


def test_out_of_range_edit_is_rejected_before_mutating() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(OutOfBounds):
        buffer.replace_range((0, 0), (0, 9), "x", label="broken")

    assert buffer.text == "abc"


def test_delete_lines_lands_on_following_line() -> None:
    buffer = Buffer.from_text("one\ntwo\nthree")
    buffer.cursor.set_position((1, 2))

    buffer.delete_lines(1, 1)

    assert buffer.lines == ("one", "three")
    assert buffer.cursor.position == (1, 0)


def test_delete_last_line_lands_on_previous() -> None:
    buffer = Buffer.from_text("one\ntwo")

    buffer.delete_lines(1, 1)

    assert buffer.lines == ("one",)
    assert buffer.cursor.position == (0, 0)
