import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from jeopardy_app.auth import basic_auth_required
from jeopardy_app.BoardLoader import BoardConfig, BoardLoader
from jeopardy_app.BoardState import CellKey, GameSession, RevealState
from jeopardy_app.exceptions import (
    BoardLoadError,
    InsufficientDataError,
    InvalidCellError,
    LoadInProgressError,
    MalformedResponseError,
    NoBoardError,
)
from jeopardy_app.metrics import (
    record_cell_reveal,
    record_duplicate_load_request,
    record_game_start,
    record_load_failure,
    track_request_latency,
)
from jeopardy_app.tracing import add_span_attribute, trace_operation, trace_view

logger = logging.getLogger(__name__)

GAME_SESSION_KEY = "game_session"


@trace_operation("views.get_game_session")
def get_game_session(request) -> GameSession:
    """Get the game session stored in the user's Django session (empty on first visit)."""
    return GameSession.from_dict(request.session.get(GAME_SESSION_KEY, {}))


def save_game_session(request, game_session: GameSession) -> None:
    request.session[GAME_SESSION_KEY] = game_session.to_dict()
    request.session.save()


def get_load_lock_key(request) -> str:
    if not request.session.session_key:
        request.session.save()
    return f"board_load_lock_{request.session.session_key}"


def failure_reason(error: BoardLoadError) -> str:
    if isinstance(error, InsufficientDataError):
        return "insufficient"
    if isinstance(error, MalformedResponseError):
        return "malformed"
    return "provider"


@trace_operation("views.load_new_board")
def load_new_board(request, game_session: GameSession, config: BoardConfig) -> None:
    """
    Replace the session's board with a freshly loaded one.

    Only one load per session may run at a time; a second request while the
    lock is held raises LoadInProgressError and leaves the board alone.
    """
    lock_key = get_load_lock_key(request)
    if not cache.add(lock_key, True, settings.JEOPARDY_LOAD_LOCK_TIMEOUT):
        raise LoadInProgressError("A board is already being loaded for this session")

    try:
        start_time = time.time()
        loader = BoardLoader(config.category_count, config.question_count)
        board = loader.load_board()
        game_session.replace_board(board)
        record_game_start(time.time() - start_time)
    finally:
        cache.delete(lock_key)


def render_board(request, game_session: GameSession, status: int = 200, notice: str = ""):
    return render(
        request,
        "board.html",
        {
            "game_session": game_session,
            "categories": game_session.board or [],
            "rows": game_session.rows(),
            "control_label": "Restart!" if game_session.has_board or game_session.load_failed else "Start!",
            "load_failed": game_session.load_failed,
            "last_error": game_session.last_error,
            "notice": notice,
        },
        status=status,
    )


@trace_view("index")
def index(request):
    """Render the current board, or just the start control before the first game."""
    timer_stop = track_request_latency("index")
    try:
        return render_board(request, get_game_session(request))
    finally:
        timer_stop()


@trace_view("new_game")
def new_game(request):
    """Load a new board for this session and show it."""
    if request.method != "POST":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    timer_stop = track_request_latency("new_game")
    game_session = get_game_session(request)
    config = BoardConfig.from_settings()
    add_span_attribute("board.category_count", config.category_count)
    add_span_attribute("board.question_count", config.question_count)

    try:
        load_new_board(request, game_session, config)
    except LoadInProgressError as e:
        logger.warning(f"Ignoring new game request for session {request.session.session_key}: {e}")
        record_duplicate_load_request()
        timer_stop(status="conflict")
        return render_board(request, game_session, status=409, notice="A new board is already loading.")
    except BoardLoadError as e:
        logger.error(f"Failed to load a new board: {e}")
        record_load_failure(failure_reason(e))
        game_session.mark_load_failed(str(e))
        save_game_session(request, game_session)
        timer_stop(status="error")
        return render_board(request, game_session, status=502)

    save_game_session(request, game_session)
    logger.info(f"New game started for session {request.session.session_key}")
    timer_stop()
    return redirect("index")


@trace_view("reveal_cell")
def reveal_cell(request, category, question):
    """Advance one cell through hidden -> question -> answer and return what it now shows."""
    if request.method != "POST":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    timer_stop = track_request_latency("reveal_cell")
    try:
        payload = apply_reveal(request, CellKey(category, question))
    except NoBoardError as e:
        timer_stop(status="error")
        return JsonResponse({"error": str(e)}, status=409)
    except InvalidCellError as e:
        timer_stop(status="error")
        return JsonResponse({"error": str(e)}, status=404)

    timer_stop()
    return JsonResponse(payload)


@trace_operation("views.apply_reveal")
def apply_reveal(request, key: CellKey) -> dict:
    """
    Advance the clue at key in this session's board and describe the cell afterwards.

    A click on a cell already showing its answer changes nothing and reports
    changed=False with the answer text.
    """
    game_session = get_game_session(request)
    clue, changed = game_session.reveal(key)

    if changed:
        save_game_session(request, game_session)
        record_cell_reveal(clue.showing.value)
        logger.debug(f"Cell {key.dom_id} now showing {clue.showing.value}")

    return {
        "category": key.category,
        "question": key.question,
        "id": key.dom_id,
        "showing": clue.showing.value,
        "text": clue.visible_text,
        "css_class": "answer" if clue.showing == RevealState.ANSWER else "",
        "changed": changed,
    }


@basic_auth_required
def metrics_view(request):
    """Expose the prometheus_client registry."""
    timer_stop = track_request_latency("metrics")
    try:
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
    finally:
        timer_stop()
