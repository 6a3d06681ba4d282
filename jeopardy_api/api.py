from typing import Optional

from django.conf import settings
from django.http import JsonResponse
from ninja import NinjaAPI, Schema
from ninja.security import APIKeyCookie

from jeopardy_app.BoardState import CellKey
from jeopardy_app.exceptions import InvalidCellError, NoBoardError
from jeopardy_app.metrics import track_request_latency
from jeopardy_app.templatetags.board_extras import to_title_case
from jeopardy_app.trivia_api_wrapper import get_trivia_api_status
from jeopardy_app.views import apply_reveal, get_game_session

api = NinjaAPI(title="Jeopardy Board API")


class BoardSessionCsrf(APIKeyCookie):
    """
    CSRF check for endpoints that change the session's board.

    The board belongs to the browser session, so there is no user to
    authenticate; a request passes once the CSRF token matches, even before a
    session cookie exists.
    """

    param_name = settings.SESSION_COOKIE_NAME

    def authenticate(self, request, key):
        return True


board_session_csrf = BoardSessionCsrf(csrf=True)


class CellSchema(Schema):
    id: str
    category: int
    question: int
    showing: str
    text: Optional[str] = None


class CategorySchema(Schema):
    title: str
    display_title: str


class BoardSchema(Schema):
    has_board: bool
    load_failed: bool
    last_error: Optional[str] = None
    category_count: int
    question_count: int
    categories: list[CategorySchema]
    cells: list[CellSchema]


@api.get("/health")
def health_check(request):
    """Health check endpoint that returns 200 if the service is up and running"""
    return {"status": "healthy", "message": "Service is up and running", "provider": get_trivia_api_status()}


@api.get("/board", response=BoardSchema)
def get_board(request):
    """Snapshot of this session's board. Only text that has already been revealed is included."""
    timer_stop = track_request_latency("get_board")
    try:
        game_session = get_game_session(request)
        categories = [
            {"title": category.title, "display_title": to_title_case(category.title)}
            for category in game_session.board or []
        ]
        cells = [
            {
                "id": key.dom_id,
                "category": key.category,
                "question": key.question,
                "showing": clue.showing.value,
                "text": clue.visible_text,
            }
            for row in game_session.rows()
            for key, clue in row
        ]
        return {
            "has_board": game_session.has_board,
            "load_failed": game_session.load_failed,
            "last_error": game_session.last_error,
            "category_count": game_session.category_count,
            "question_count": game_session.question_count,
            "categories": categories,
            "cells": cells,
        }
    finally:
        timer_stop()


@api.post("/board/cells/{cell_id}/reveal", auth=board_session_csrf)
def reveal_cell_by_id(request, cell_id: str):
    """Advance the cell with DOM id "<category>-<question>", same semantics as clicking it."""
    timer_stop = track_request_latency("reveal_cell_by_id")
    try:
        payload = apply_reveal(request, CellKey.from_dom_id(cell_id))
    except NoBoardError as e:
        timer_stop(status="error")
        return JsonResponse({"error": str(e)}, status=409)
    except InvalidCellError as e:
        timer_stop(status="error")
        return JsonResponse({"error": str(e)}, status=404)

    timer_stop()
    return payload
