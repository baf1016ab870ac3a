"""Concrete route kinds: desktop app windows and browser tabs."""

from __future__ import annotations

from typing import Any

from routes.codec import RouteRegistry
from routes.route import Route


class AppWindowRoute(Route):
    """An application window, optionally showing one document."""

    kind = "app"

    def __init__(self, app: str, document: str | None = None, resizable: bool = True) -> None:
        if not app or "/" in app:
            raise ValueError(f"Invalid app name: {app!r}")
        self.app = app
        self.document = document
        self.resizable = resizable

    @property
    def key(self) -> str:
        if self.document:
            return f"/{self.app}/{self.document}"
        return f"/{self.app}"

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"app": self.app}
        if self.document:
            params["document"] = self.document
        if not self.resizable:
            params["resizable"] = False
        return params

    def title(self) -> str:
        name = self.app.replace("-", " ").title()
        return f"{name} - {self.document}" if self.document else name

    @property
    def can_resize(self) -> bool:
        return self.resizable


class BrowserTabRoute(Route):
    """A browser tab showing one URL."""

    kind = "tab"

    def __init__(self, url: str, pinned: bool = False) -> None:
        if not url:
            raise ValueError("Tab URL must not be empty.")
        self.url = url
        self.pinned = pinned

    @property
    def key(self) -> str:
        return self.url

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"url": self.url}
        if self.pinned:
            params["pinned"] = True
        return params

    def title(self) -> str:
        return self.url.split("://", 1)[-1].rstrip("/") or self.url

    @property
    def can_close(self) -> bool:
        return not self.pinned


def build_default_registry() -> RouteRegistry:
    """Codec that knows the built-in route kinds."""
    registry = RouteRegistry()
    registry.register(AppWindowRoute.kind, AppWindowRoute)
    registry.register(BrowserTabRoute.kind, BrowserTabRoute)
    return registry
