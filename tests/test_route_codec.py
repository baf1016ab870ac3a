"""Route identity and registry codec."""

from __future__ import annotations

import pytest

from core.errors import MalformedSnapshotError
from routes.codec import RouteRegistry
from routes.pages import AppWindowRoute, BrowserTabRoute, build_default_registry


def test_route_identity_is_key_based() -> None:
    assert AppWindowRoute("notes", "todo") == AppWindowRoute("notes", "todo")
    assert AppWindowRoute("notes") != AppWindowRoute("notes", "todo")
    assert len({AppWindowRoute("finder"), AppWindowRoute("finder")}) == 1
    assert AppWindowRoute("notes", "todo").key == "/notes/todo"


def test_titles_and_capabilities() -> None:
    assert AppWindowRoute("text-edit", "readme").title() == "Text Edit - readme"
    assert BrowserTabRoute("https://example.com/").title() == "example.com"
    assert AppWindowRoute("calculator", resizable=False).can_resize is False
    assert BrowserTabRoute("https://example.com/", pinned=True).can_close is False


def test_registry_round_trip() -> None:
    registry = build_default_registry()
    routes = [
        AppWindowRoute("notes", "todo"),
        AppWindowRoute("calculator", resizable=False),
        BrowserTabRoute("https://example.com/", pinned=True),
    ]

    rebuilt = [registry.deserialize(registry.serialize(route)) for route in routes]

    assert rebuilt == routes
    assert rebuilt[1].can_resize is False
    assert registry.kinds() == ["app", "tab"]


@pytest.mark.parametrize(
    "blob",
    [
        ["app"],
        {"kind": "missing"},
        {"kind": "app", "params": "notes"},
        {"kind": "app", "params": {"name": "notes"}},
        {"kind": "app", "params": {"app": ""}},
        {"kind": "tab", "params": {}},
    ],
)
def test_bad_blobs_raise_malformed_snapshot(blob: object) -> None:
    with pytest.raises(MalformedSnapshotError):
        build_default_registry().deserialize(blob)


def test_serialize_unregistered_kind_raises() -> None:
    with pytest.raises(MalformedSnapshotError):
        RouteRegistry().serialize(AppWindowRoute("finder"))
