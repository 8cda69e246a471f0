"""Pytest configuration and shared fixtures for logokit."""

from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path

import httpx
import pytest

# Add the repository root to the path for imports
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from logokit.paths import Paths  # noqa: E402

SAMPLE_SVG = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<!-- exported -->\n"
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path fill-rule="evenodd" d="M0 0h24v24H0z"/></svg>'
)

GITHUB_LISTING_URL = "https://api.github.com/repos/acme/logos/contents/registry/components?ref=main"
RAW_BASE = "https://raw.githubusercontent.com/acme/logos/main/registry/components"
SVGL_URL = "https://api.svgl.app"


class FakeRemote:
    """URL → response table behind an ``httpx.MockTransport``, counting every request."""

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | Exception] = {}
        self.calls: Counter[str] = Counter()

    def json(self, url: str, payload: object, status: int = 200) -> None:
        self.routes[url] = httpx.Response(status, content=json.dumps(payload).encode())

    def text(self, url: str, body: str, status: int = 200) -> None:
        self.routes[url] = httpx.Response(status, text=body)

    def fail(self, url: str) -> None:
        self.routes[url] = httpx.ConnectError("connection refused")

    def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls[url] += 1
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle))


def github_entry(name: str, size: int = 100) -> dict:
    return {
        "name": f"{name}.svg",
        "type": "file",
        "size": size,
        "sha": f"sha-{name}",
        "download_url": f"{RAW_BASE}/{name}.svg",
    }


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def client(remote: FakeRemote) -> httpx.AsyncClient:
    return remote.client()


@pytest.fixture
def sample_svg() -> str:
    return SAMPLE_SVG


@pytest.fixture
def github_remote(remote: FakeRemote) -> FakeRemote:
    """Listing with three logos plus a README; all three SVGs downloadable."""
    remote.json(
        GITHUB_LISTING_URL,
        [
            github_entry("vercel"),
            github_entry("nextjs"),
            github_entry("react"),
            {"name": "README.md", "type": "file", "download_url": f"{RAW_BASE}/README.md"},
        ],
    )
    for name in ("vercel", "nextjs", "react"):
        remote.text(f"{RAW_BASE}/{name}.svg", SAMPLE_SVG.replace("0 0 24 24", f"0 0 {len(name)} 24"))
    return remote


@pytest.fixture
def svgl_catalog() -> list[dict]:
    return [
        {
            "id": 1,
            "title": "Next.js",
            "category": ["framework", "ui"],
            "route": {
                "light": "https://svgl.app/library/nextjs_icon_light.svg",
                "dark": "https://svgl.app/library/nextjs_icon_dark.svg",
            },
            "url": "https://nextjs.org",
        },
        {
            "id": 2,
            "title": "Astro",
            "category": "framework",
            "route": "https://svgl.app/library/astro.svg",
            "url": "https://astro.build",
        },
        {
            "id": 3,
            "title": "PostgreSQL",
            "category": ["database"],
            "route": "https://svgl.app/library/postgresql.svg",
            "url": "https://www.postgresql.org",
        },
        {"id": 4, "title": "Broken", "category": "misc", "route": {"dark": "https://svgl.app/x.svg"}},
    ]


@pytest.fixture
def svgl_remote(remote: FakeRemote, svgl_catalog: list[dict]) -> FakeRemote:
    remote.json(SVGL_URL, svgl_catalog)
    remote.text("https://svgl.app/library/nextjs_icon_light.svg", SAMPLE_SVG)
    remote.text("https://svgl.app/library/astro.svg", SAMPLE_SVG)
    remote.text("https://svgl.app/library/postgresql.svg", SAMPLE_SVG)
    return remote


@pytest.fixture
def components_dir(tmp_path: Path) -> Path:
    """A local component directory with two SVGs and a stray text file."""
    directory = tmp_path / "components"
    directory.mkdir()
    (directory / "vercel.svg").write_text(SAMPLE_SVG, encoding="utf-8")
    (directory / "github.svg").write_text(SAMPLE_SVG, encoding="utf-8")
    (directory / "notes.txt").write_text("not a logo", encoding="utf-8")
    return directory


@pytest.fixture
def index_payload() -> dict:
    return {
        "metadata": {
            "total": 2,
            "generated": "2025-01-01T00:00:00Z",
            "repository": "acme/logos",
            "branch": "main",
        },
        "components": [
            {
                "name": "vercel",
                "size": 120,
                "downloadLocation": f"{RAW_BASE}/vercel.svg",
                "contentHash": "sha-vercel",
            },
            {
                "name": "nextjs",
                "size": 140,
                "downloadUrl": f"{RAW_BASE}/nextjs.svg",
                "sha": "sha-nextjs",
            },
        ],
    }


@pytest.fixture
def index_file(tmp_path: Path, index_payload: dict) -> Path:
    path = tmp_path / "component-index.json"
    path.write_text(json.dumps(index_payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_paths():
    yield
    Paths.reset()
