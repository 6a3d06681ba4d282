from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from jeopardy_app.exceptions import InvalidCellError, NoBoardError
from jeopardy_app.tracing import trace_operation


class RevealState(str, Enum):
    HIDDEN = "hidden"
    QUESTION = "question"
    ANSWER = "answer"


class CellKey(NamedTuple):
    """Position of a clue on the board: category column first, then question row."""

    category: int
    question: int

    @classmethod
    def from_dom_id(cls, dom_id: str) -> "CellKey":
        """Parse the "<category>-<question>" identifier used on table cells."""
        parts = str(dom_id).split("-")
        if len(parts) != 2 or not all(part.isdecimal() for part in parts):
            raise InvalidCellError(f"Malformed cell id: {dom_id!r}")
        return cls(int(parts[0]), int(parts[1]))

    @property
    def dom_id(self) -> str:
        return f"{self.category}-{self.question}"


@dataclass
class Clue:
    question: str
    answer: str
    showing: RevealState = RevealState.HIDDEN

    def reveal(self) -> bool:
        """Advance the clue one step. Returns False when it was already showing the answer."""
        if self.showing == RevealState.HIDDEN:
            self.showing = RevealState.QUESTION
            return True
        if self.showing == RevealState.QUESTION:
            self.showing = RevealState.ANSWER
            return True
        return False

    @property
    def visible_text(self) -> Optional[str]:
        if self.showing == RevealState.QUESTION:
            return self.question
        if self.showing == RevealState.ANSWER:
            return self.answer
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"question": self.question, "answer": self.answer, "showing": self.showing.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Clue":
        return cls(
            question=data.get("question", ""),
            answer=data.get("answer", ""),
            showing=RevealState(data.get("showing", RevealState.HIDDEN.value)),
        )


@dataclass
class Category:
    title: str
    clues: List[Clue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "clues": [clue.to_dict() for clue in self.clues]}

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(title=data.get("title", ""), clues=[Clue.from_dict(c) for c in data.get("clues", [])])


Board = List[Category]


class GameSession:
    """Board and load status owned by a single browser session."""

    def __init__(
        self,
        board: Optional[Board] = None,
        load_failed: bool = False,
        last_error: Optional[str] = None,
    ) -> None:
        self.board: Optional[Board] = board
        self.load_failed: bool = load_failed
        self.last_error: Optional[str] = last_error

    @classmethod
    def from_dict(cls, data: dict) -> "GameSession":
        """Create a GameSession instance from a dictionary."""
        board_data = data.get("board")
        board = [Category.from_dict(c) for c in board_data] if board_data is not None else None
        return cls(
            board=board,
            load_failed=data.get("load_failed", False),
            last_error=data.get("last_error"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the GameSession instance to a dictionary."""
        return {
            "board": [category.to_dict() for category in self.board] if self.board is not None else None,
            "load_failed": self.load_failed,
            "last_error": self.last_error,
        }

    @property
    def has_board(self) -> bool:
        return self.board is not None

    def replace_board(self, board: Board) -> None:
        """Install a freshly loaded board, dropping the previous one wholesale."""
        self.board = board
        self.load_failed = False
        self.last_error = None

    def mark_load_failed(self, message: str) -> None:
        # The previous board stays as it was
        self.load_failed = True
        self.last_error = message

    def get_clue(self, key: CellKey) -> Clue:
        if self.board is None:
            raise NoBoardError("No board has been loaded yet")
        if not (0 <= key.category < len(self.board)):
            raise InvalidCellError(f"Category index {key.category} is outside the board")
        clues = self.board[key.category].clues
        if not (0 <= key.question < len(clues)):
            raise InvalidCellError(f"Question index {key.question} is outside category {key.category}")
        return clues[key.question]

    @trace_operation("GameSession.reveal")
    def reveal(self, key: CellKey) -> tuple[Clue, bool]:
        """Advance the clue at key and report whether its state changed."""
        clue = self.get_clue(key)
        changed = clue.reveal()
        return clue, changed

    @property
    def category_count(self) -> int:
        return len(self.board) if self.board else 0

    @property
    def question_count(self) -> int:
        return len(self.board[0].clues) if self.board else 0

    def rows(self) -> List[List[tuple[CellKey, Clue]]]:
        """Clues laid out row by row (one row per question index) for rendering."""
        if not self.board:
            return []
        return [
            [(CellKey(c, q), self.board[c].clues[q]) for c in range(self.category_count)]
            for q in range(self.question_count)
        ]
