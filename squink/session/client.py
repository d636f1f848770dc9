"""
Game Clients - How a driver reaches an engine.

Two transports share one small interface:
- LocalClient: in-process, calls the GameEngine directly
- HttpGameClient: talks to the REST API with requests

Both raise GameError subclasses for engine rejections and
TransportError for failures that say nothing about the move
(connection problems, timeouts, 5xx responses, unreadable
success bodies). A 4xx without an error body is a plain GameError.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
import logging

import requests

from ..engine_core.action import Move
from ..engine_core.engine import GameEngine
from ..engine_core.errors import GameError, error_from_code
from ..engine_core.grid import Cell, Coord, Grid
from ..engine_core.state import GameConfig, GamePhase, GameState, PlayerState

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A submission or query failed before reaching a verdict. Safe to retry."""


class GameClient(ABC):
    """Interface used by TurnDriver."""

    @abstractmethod
    def query_state(self) -> GameState:
        """Latest game snapshot."""
        pass

    @abstractmethod
    def submit_turn(self, player_id: str, move: Move) -> None:
        """Submit a move. Raises GameError if the engine rejects it."""
        pass


class LocalClient(GameClient):
    """In-process client around a GameEngine."""

    def __init__(self, engine: GameEngine):
        self.engine = engine

    def query_state(self) -> GameState:
        return self.engine.query_state()

    def submit_turn(self, player_id: str, move: Move) -> None:
        self.engine.submit_turn(player_id, move).unwrap()


class HttpGameClient(GameClient):
    """
    Client for the squink REST API.

    Usage:
        client = HttpGameClient("http://localhost:8000")
        state = client.query_state()
        client.submit_turn("alice", Move.to(1, 0))
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def query_state(self) -> GameState:
        data = self._request("GET", "/api/v1/game/state")
        return state_from_payload(data)

    def submit_turn(self, player_id: str, move: Move) -> None:
        self._request(
            "POST",
            "/api/v1/game/turns",
            json={"player_id": player_id, "x": move.target.x, "y": move.target.y},
        )

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 500:
            raise TransportError(f"{method} {path} returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                # Not an ErrorResponse (proxy page, wrong route)
                raise GameError(f"{method} {path} returned {response.status_code}") from e
            raise TransportError(f"{method} {path} returned invalid JSON") from e

        if response.status_code >= 400:
            if not isinstance(data, dict):
                raise GameError(f"{method} {path} returned {response.status_code}")
            raise error_from_code(data.get("error_code", ""), data.get("error"))
        return data


def state_from_payload(data: dict[str, Any]) -> GameState:
    """Rebuild a GameState from the API's GameStateResponse JSON."""
    config = GameConfig(
        dimensions=(data["width"], data["height"]),
        buy_in=data.get("buy_in", 0),
        forming_rounds=data.get("forming_rounds", 0),
        rounds=data.get("rounds", 1),
        opener=data.get("opener"),
    )
    grid = Grid(width=config.width, height=config.height)
    for idx, owner in enumerate(data.get("grid", [])):
        if owner is not None:
            grid.cells[idx] = Cell(owner=owner)

    players = [
        PlayerState(
            player_id=p["player_id"],
            name=p.get("name", p["player_id"]),
            position=Coord(p["x"], p["y"]),
            score=p.get("score", 0),
            paid=p.get("paid", 0),
            has_moved=p.get("has_moved", False),
            turns_taken=p.get("turns_taken", 0),
        )
        for p in data.get("players", [])
    ]

    return GameState(
        game_id=data["game_id"],
        config=config,
        grid=grid,
        phase=GamePhase(data["phase"]),
        forming_rounds_remaining=data.get("forming_rounds_remaining", 0),
        rounds_remaining=data.get("rounds_remaining", 0),
        rounds_played=data.get("rounds_played", 0),
        players=players,
    )
