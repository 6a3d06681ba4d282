from django.test import TestCase

from jeopardy_app.BoardState import Category, CellKey, Clue, GameSession, RevealState
from jeopardy_app.exceptions import InvalidCellError, NoBoardError


def make_board(category_count=2, question_count=3):
    return [
        Category(
            title=f"CATEGORY {c}",
            clues=[Clue(question=f"Q{c}-{q}", answer=f"A{c}-{q}") for q in range(question_count)],
        )
        for c in range(category_count)
    ]


class TestClue(TestCase):
    def test_initial_state_is_hidden(self):
        clue = Clue(question="Bell Jar Author", answer="Plath")
        self.assertEqual(clue.showing, RevealState.HIDDEN)
        self.assertIsNone(clue.visible_text)

    def test_reveal_progression(self):
        """Successive clicks walk hidden -> question -> answer and then stay on answer"""
        clue = Clue(question="Bell Jar Author", answer="Plath")
        observed = [clue.showing]
        changes = []
        for _ in range(4):
            changes.append(clue.reveal())
            observed.append(clue.showing)

        self.assertEqual(
            observed,
            [RevealState.HIDDEN, RevealState.QUESTION, RevealState.ANSWER, RevealState.ANSWER, RevealState.ANSWER],
        )
        self.assertEqual(changes, [True, True, False, False])

    def test_visible_text_follows_state(self):
        clue = Clue(question="Hamlet Author", answer="Shakespeare")
        clue.reveal()
        self.assertEqual(clue.visible_text, "Hamlet Author")
        clue.reveal()
        self.assertEqual(clue.visible_text, "Shakespeare")

    def test_answer_click_is_noop(self):
        clue = Clue(question="Hamlet Author", answer="Shakespeare", showing=RevealState.ANSWER)
        self.assertFalse(clue.reveal())
        self.assertEqual(clue.showing, RevealState.ANSWER)
        self.assertEqual(clue.visible_text, "Shakespeare")


class TestCellKey(TestCase):
    def test_from_dom_id(self):
        self.assertEqual(CellKey.from_dom_id("2-4"), CellKey(2, 4))
        self.assertEqual(CellKey.from_dom_id("10-0"), CellKey(10, 0))

    def test_dom_id_puts_category_first(self):
        self.assertEqual(CellKey(category=3, question=1).dom_id, "3-1")

    def test_malformed_dom_ids(self):
        for dom_id in ["", "2", "2-", "-4", "a-b", "1-2-3", "cat-0", "-1-2"]:
            with self.subTest(dom_id=dom_id):
                with self.assertRaises(InvalidCellError):
                    CellKey.from_dom_id(dom_id)


class TestGameSession(TestCase):
    def test_empty_session(self):
        game_session = GameSession()
        self.assertFalse(game_session.has_board)
        self.assertFalse(game_session.load_failed)
        self.assertEqual(game_session.rows(), [])
        self.assertEqual(game_session.category_count, 0)
        self.assertEqual(game_session.question_count, 0)

    def test_from_empty_dict(self):
        game_session = GameSession.from_dict({})
        self.assertIsNone(game_session.board)
        self.assertFalse(game_session.load_failed)
        self.assertIsNone(game_session.last_error)

    def test_dict_round_trip_keeps_reveal_state(self):
        game_session = GameSession(board=make_board())
        game_session.reveal(CellKey(0, 0))
        game_session.reveal(CellKey(1, 2))
        game_session.reveal(CellKey(1, 2))

        restored = GameSession.from_dict(game_session.to_dict())

        self.assertEqual(restored.get_clue(CellKey(0, 0)).showing, RevealState.QUESTION)
        self.assertEqual(restored.get_clue(CellKey(1, 2)).showing, RevealState.ANSWER)
        self.assertEqual(restored.get_clue(CellKey(0, 1)).showing, RevealState.HIDDEN)
        self.assertEqual(restored.board[1].title, "CATEGORY 1")

    def test_to_dict_stores_plain_values(self):
        data = GameSession(board=make_board(1, 1)).to_dict()
        self.assertEqual(
            data,
            {
                "board": [{"title": "CATEGORY 0", "clues": [{"question": "Q0-0", "answer": "A0-0", "showing": "hidden"}]}],
                "load_failed": False,
                "last_error": None,
            },
        )

    def test_reveal_reports_change(self):
        game_session = GameSession(board=make_board())
        clue, changed = game_session.reveal(CellKey(1, 0))
        self.assertTrue(changed)
        self.assertEqual(clue.showing, RevealState.QUESTION)
        self.assertEqual(clue.question, "Q1-0")

    def test_reveal_without_board(self):
        with self.assertRaises(NoBoardError):
            GameSession().reveal(CellKey(0, 0))

    def test_reveal_outside_board(self):
        game_session = GameSession(board=make_board(2, 3))
        for key in [CellKey(2, 0), CellKey(0, 3), CellKey(-1, 0), CellKey(0, -1)]:
            with self.subTest(key=key):
                with self.assertRaises(InvalidCellError):
                    game_session.reveal(key)

    def test_replace_board_clears_failure(self):
        game_session = GameSession()
        game_session.mark_load_failed("provider down")
        self.assertTrue(game_session.load_failed)
        self.assertEqual(game_session.last_error, "provider down")

        game_session.replace_board(make_board())
        self.assertFalse(game_session.load_failed)
        self.assertIsNone(game_session.last_error)
        self.assertTrue(game_session.has_board)

    def test_mark_load_failed_keeps_previous_board(self):
        board = make_board()
        game_session = GameSession(board=board)
        game_session.mark_load_failed("timeout")
        self.assertIs(game_session.board, board)

    def test_rows_are_question_major(self):
        game_session = GameSession(board=make_board(category_count=2, question_count=3))
        rows = game_session.rows()

        self.assertEqual(len(rows), 3)
        self.assertTrue(all(len(row) == 2 for row in rows))
        key, clue = rows[2][1]
        self.assertEqual(key, CellKey(category=1, question=2))
        self.assertEqual(clue.question, "Q1-2")
