import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.conf import settings

from jeopardy_app.BoardState import Board, Category, Clue, RevealState
from jeopardy_app.exceptions import InsufficientDataError, MalformedResponseError
from jeopardy_app.tracing import add_span_attribute, trace_operation
from jeopardy_app.trivia_api_wrapper import TriviaAPIWrapper, trivia_api_wrapper

logger = logging.getLogger(__name__)

# jService category ids are dense well past this range
CATEGORY_POOL_SIZE = 100
MIN_CATEGORY_OFFSET = 4
MAX_CATEGORY_OFFSET = 447

ITALIC_OPEN = "<i>"
ITALIC_CLOSE = "</i>"


@dataclass
class BoardConfig:
    category_count: int = 6
    question_count: int = 5

    @classmethod
    def from_settings(cls) -> "BoardConfig":
        return cls(
            category_count=settings.JEOPARDY_CATEGORY_COUNT,
            question_count=settings.JEOPARDY_QUESTION_COUNT,
        )


def strip_italic_wrapper(answer: str) -> str:
    """Remove a <i>...</i> wrapper when it encloses the whole answer."""
    if len(answer) >= len(ITALIC_OPEN) + len(ITALIC_CLOSE) and answer.startswith(ITALIC_OPEN) and answer.endswith(ITALIC_CLOSE):
        return answer[len(ITALIC_OPEN) : -len(ITALIC_CLOSE)]
    return answer


class BoardLoader(object):
    def __init__(
        self,
        category_count: int,
        question_count: int,
        client: Optional[TriviaAPIWrapper] = None,
        rng: Optional[random.Random] = None,
    ):
        if category_count < 1 or question_count < 1:
            raise ValueError("A board needs at least one category and one question")
        self.category_count = category_count
        self.question_count = question_count
        self.client = client or trivia_api_wrapper
        self.rng = rng or random.Random()

    def _sample(self, items: List[Any], count: int, what: str) -> List[Any]:
        """Pick count distinct items uniformly at random, refusing to pad or truncate."""
        if len(items) < count:
            raise InsufficientDataError(f"Provider returned {len(items)} {what}, need {count}")
        return self.rng.sample(items, count)

    @trace_operation("BoardLoader.select_categories")
    def select_categories(self) -> List[Dict[str, Any]]:
        offset = self.rng.randint(MIN_CATEGORY_OFFSET, MAX_CATEGORY_OFFSET)
        add_span_attribute("provider.offset", offset)
        pool = self.client.list_categories(count=CATEGORY_POOL_SIZE, offset=offset)

        for summary in pool:
            if not isinstance(summary, dict) or "id" not in summary:
                raise MalformedResponseError(f"Category summary without id: {summary!r}")

        selected = self._sample(pool, self.category_count, "categories")
        logger.debug(f"Selected categories {[c['id'] for c in selected]} from offset {offset}")
        return selected

    def build_clue(self, raw: Dict[str, Any]) -> Clue:
        try:
            question = raw["question"]
            answer = raw["answer"]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(f"Clue record without question/answer: {raw!r}") from e
        return Clue(question=str(question), answer=strip_italic_wrapper(str(answer)), showing=RevealState.HIDDEN)

    @trace_operation("BoardLoader.load_category")
    def load_category(self, summary: Dict[str, Any]) -> Category:
        category_id = summary["id"]
        raw_clues = self.client.list_clues(category_id)
        selected = self._sample(raw_clues, self.question_count, f"clues for category {category_id}")
        clues = [self.build_clue(raw) for raw in selected]

        # The clue records carry the category title; the summary is only a fallback
        first = raw_clues[0] if isinstance(raw_clues[0], dict) else {}
        clue_category = first.get("category")
        title = clue_category.get("title") if isinstance(clue_category, dict) else None
        title = title or summary.get("title")
        if title is None:
            raise MalformedResponseError(f"No title for category {category_id}")

        return Category(title=str(title), clues=clues)

    @trace_operation("BoardLoader.load_board")
    def load_board(self) -> Board:
        """
        Load a complete board. Either every category and clue is fetched, or an
        exception propagates and nothing is returned.
        """
        start_time = time.time()
        board = [self.load_category(summary) for summary in self.select_categories()]
        logger.info(
            f"Loaded board with {len(board)} categories x {self.question_count} clues in {time.time() - start_time:.2f}s"
        )
        return board


def load_board(category_count: int, question_count: int, client: Optional[TriviaAPIWrapper] = None) -> Board:
    return BoardLoader(category_count, question_count, client=client).load_board()
