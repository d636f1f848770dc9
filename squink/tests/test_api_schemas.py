"""
Tests for Pydantic schemas and OpenAPI generation.

Validates that:
- Request models reject malformed input
- Response models serialize to the documented JSON
- Error codes are stable strings
- OpenAPI schema generates correctly
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    CreateGameRequest,
    RegisterPlayerRequest,
    TurnRequest,
    GameStateResponse,
    PlayerInfo,
    ErrorResponse,
)
from ..engine_core.errors import ErrorCode
from ..engine_core.grid import Direction, MAX_EXTENT


class TestRequestSchemas:
    """Tests for request validation."""

    def test_create_game_defaults(self):
        request = CreateGameRequest(width=4, height=3)

        assert request.buy_in == 0
        assert request.forming_rounds == 0
        assert request.rounds == 10
        assert request.game_id is None

    @pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (MAX_EXTENT + 1, 3)])
    def test_create_game_bad_dimensions(self, width, height):
        with pytest.raises(ValidationError):
            CreateGameRequest(width=width, height=height)

    def test_create_game_needs_a_round(self):
        with pytest.raises(ValidationError):
            CreateGameRequest(width=2, height=2, rounds=0)

    def test_register_requires_player_id(self):
        with pytest.raises(ValidationError):
            RegisterPlayerRequest(player_id="")

        with pytest.raises(ValidationError):
            RegisterPlayerRequest(player_id="alice", payment=-5)

    def test_turn_by_coordinates(self):
        request = TurnRequest(player_id="alice", x=1, y=0)

        assert request.direction is None

    def test_turn_by_direction(self):
        request = TurnRequest.model_validate({"player_id": "alice", "direction": "left"})

        assert request.direction == Direction.LEFT

    @pytest.mark.parametrize("body", [
        {"player_id": "alice"},
        {"player_id": "alice", "x": 1},
        {"player_id": "alice", "x": 1, "y": 0, "direction": "up"},
        {"player_id": "alice", "direction": "diagonal"},
    ])
    def test_turn_needs_exactly_one_target(self, body):
        with pytest.raises(ValidationError):
            TurnRequest.model_validate(body)


class TestResponseSchemas:
    """Tests for response serialization."""

    def test_game_state_response(self):
        response = GameStateResponse(
            game_id="g1",
            phase="active",
            width=2,
            height=1,
            buy_in=10,
            forming_rounds=0,
            rounds=3,
            pot=20,
            rounds_remaining=3,
            rounds_played=0,
            forming_rounds_remaining=0,
            grid=["alice", None],
            players=[PlayerInfo(player_id="alice", name="alice", x=0, y=0, score=1)],
        )

        data = response.model_dump(mode="json")
        assert data["grid"] == ["alice", None]
        assert data["players"][0]["score"] == 1
        assert data["players"][0]["turns_taken"] == 0

    def test_error_response(self):
        error = ErrorResponse(error="Cell is taken", error_code=ErrorCode.ILLEGAL_MOVE)

        data = error.model_dump(mode="json")
        assert data["error_code"] == "ILLEGAL_MOVE"
        assert data["details"] is None


class TestErrorCodes:
    """Tests for error code coverage."""

    def test_all_error_codes_defined(self):
        required_codes = [
            "INVALID_DIMENSIONS",
            "ALREADY_STARTED",
            "INSUFFICIENT_BUY_IN",
            "ALREADY_REGISTERED",
            "NOT_YET_FORMED",
            "NO_PLAYERS",
            "GAME_NOT_ACTIVE",
            "UNKNOWN_PLAYER",
            "ILLEGAL_MOVE",
            "OUT_OF_BOUNDS",
            "GAME_FINISHED",
            "NO_LEGAL_MOVE",
        ]

        for code in required_codes:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_strings(self):
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        from fastapi.openapi.utils import get_openapi
        from ..api.app import create_app

        app = create_app()
        return get_openapi(title=app.title, version=app.version, routes=app.routes)

    def test_openapi_schema_generates(self, schema):
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]

        for name in [
            "GameStateResponse",
            "ActionResponse",
            "LeaderboardResponse",
            "CellResponse",
            "ErrorResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints_documented(self, schema):
        paths = schema["paths"]

        assert "post" in paths["/api/v1/game"]
        assert "delete" in paths["/api/v1/game"]
        assert "get" in paths["/api/v1/game/state"]
        assert "post" in paths["/api/v1/game/turns"]
        assert "409" in paths["/api/v1/game/turns"]["post"]["responses"]
        assert "/api/v1/game/cells/{x}/{y}" in paths
