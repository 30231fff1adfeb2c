"""
Tests for request and store logging, captured with structlog's test helpers.
"""

import warnings

import pytest
from structlog.testing import capture_logs

from friendgraph.models import Base
from friendgraph.relationships.errors import EdgeConflictError
from friendgraph.relationships.schemas import Edge, EdgeStatus

ANDY = "andy@example.com"
JOHN = "john@example.com"


def events_named(logs, name):
    return [entry for entry in logs if entry["event"] == name]


class TestRequestContext:

    @pytest.mark.asyncio
    async def test_request_event_matches_echoed_id(self, client):
        with capture_logs() as logs:
            response = await client.get("/health")

        [event] = events_named(logs, "http.request")
        assert event["request_id"] == response.headers["x-request-id"]
        assert event["method"] == "GET"
        assert event["path"] == "/health"
        assert event["status_code"] == 200
        assert event["log_level"] == "info"
        assert event["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_caller_request_id_is_reused(self, client):
        response = await client.get("/health", headers={"x-request-id": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_each_request_gets_its_own_id(self, client):
        first = await client.get("/health")
        second = await client.get("/health")

        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_store_failure_is_logged_once(self, client, async_engine):
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        with capture_logs() as logs:
            response = await client.get("/api/friends", params={"email": ANDY})

        assert response.status_code == 503
        errors = [entry for entry in logs if entry["log_level"] == "error"]
        assert len(errors) == 1
        assert errors[0]["error_code"] == "STORE_ERROR"
        [request] = events_named(logs, "http.request")
        assert request["status_code"] == 503
        assert request["log_level"] == "warning"


class TestStoreTiming:

    @pytest.mark.asyncio
    async def test_query_event_names_operation_and_user(self, store):
        with capture_logs() as logs:
            await store.find_friends_of(ANDY)

        [event] = events_named(logs, "store.find_friends_of")
        assert event["user"] == ANDY
        assert event["outcome"] == "ok"
        assert event["log_level"] == "debug"
        assert event["latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_edge_lookup_carries_both_users_and_status(self, store):
        with capture_logs() as logs:
            await store.edge_exists(ANDY, JOHN, EdgeStatus.BLOCKED)

        [event] = events_named(logs, "store.edge_exists")
        assert event["requestor"] == ANDY
        assert event["target"] == JOHN
        assert event["status"] == "blocked"

    @pytest.mark.asyncio
    async def test_conflict_outcome_is_the_error_name(self, store):
        await store.insert_edge(Edge.new(ANDY, JOHN, EdgeStatus.SUBSCRIBED))

        with capture_logs() as logs:
            with pytest.raises(EdgeConflictError):
                await store.insert_edge(Edge.new(ANDY, JOHN, EdgeStatus.SUBSCRIBED))

        [event] = events_named(logs, "store.insert_edges")
        assert event["edges"] == 1
        assert event["outcome"] == "EdgeConflictError"
        assert not [entry for entry in logs if entry["log_level"] == "error"]


class TestCurrentLibraryNames:

    def test_json_formatter_comes_from_the_json_module(self):
        from friendgraph.core import logging as app_logging

        assert app_logging.JsonFormatter.__module__ == "pythonjsonlogger.json"

    def test_validation_status_uses_current_starlette_name(self):
        from friendgraph.core.errors import ValidationError

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            error = ValidationError()

        assert error.status_code == 422
