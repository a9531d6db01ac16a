"""In-memory stand-in for the n8n public API, served through httpx.MockTransport."""

import copy
import itertools
import json
import sys
from pathlib import Path

import httpx

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from flowbridge.n8n.client import N8nClient

BASE_URL = "http://n8n.test:5678"
API_KEY = "test-key"
PREFIX = "/api/v1/workflows"


def sample_workflow(workflow_id: str = "wf-1", name: str = "Lead Intake") -> dict:
    """A small n8n document: webhook -> HTTP request -> email, plus a side branch."""
    return {
        "id": workflow_id,
        "name": name,
        "active": False,
        "nodes": [
            {
                "id": "a1",
                "name": "Incoming Lead",
                "type": "n8n-nodes-base.webhook",
                "typeVersion": 2,
                "position": [100, 300],
                "parameters": {"path": "lead", "httpMethod": "POST"},
                "webhookId": "lead-hook",
            },
            {
                "id": "b2",
                "name": "Enrich",
                "type": "n8n-nodes-base.httpRequest",
                "position": [300, 300],
                "parameters": {"url": "https://enrich.example.com", "method": "GET"},
                "credentials": {"httpHeaderAuth": {"id": "7", "name": "Enrich key"}},
            },
            {
                "id": "c3",
                "name": "Notify",
                "type": "n8n-nodes-base.emailSend",
                "position": [500, 200],
                "parameters": {"to": "sales@example.com", "subject": "New lead"},
            },
            {
                "id": "d4",
                "name": "Archive",
                "type": "n8n-nodes-base.set",
                "position": [500, 400],
                "parameters": {},
            },
        ],
        "connections": {
            "Incoming Lead": {"main": [[{"node": "Enrich", "type": "main", "index": 0}]]},
            "Enrich": {
                "main": [
                    [{"node": "Notify", "type": "main", "index": 0}],
                    [{"node": "Archive", "type": "main", "index": 0}],
                ]
            },
        },
        "settings": {"executionOrder": "v1", "timezone": "UTC"},
    }


class FakeN8n:
    """Keeps workflows in a dict and records every request it receives."""

    def __init__(self) -> None:
        self.workflows: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self._ids = itertools.count(100)

    def add(self, document: dict) -> dict:
        self.workflows[document["id"]] = copy.deepcopy(document)
        return document

    def client(self) -> N8nClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return N8nClient(BASE_URL, API_KEY, http_client=http)

    def sent(self, method: str, path: str) -> list[dict]:
        """JSON bodies of recorded requests matching method and path."""
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.url.path == path and r.content
        ]

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("X-N8N-API-KEY") != API_KEY:
            return httpx.Response(401, json={"message": "unauthorized"})

        rest = request.url.path[len(PREFIX):].strip("/")
        parts = rest.split("/") if rest else []
        body = json.loads(request.content) if request.content else None

        if not parts:
            if request.method == "GET":
                return httpx.Response(200, json={"data": list(self.workflows.values()), "nextCursor": None})
            if request.method == "POST":
                return self._create(body)
            return httpx.Response(405, json={"message": "method not allowed"})

        workflow_id = parts[0]
        current = self.workflows.get(workflow_id)
        if current is None:
            return httpx.Response(404, json={"message": "not found"})

        if len(parts) == 1:
            if request.method == "GET":
                return httpx.Response(200, json=current)
            if request.method == "PUT":
                if "active" in body:
                    return httpx.Response(400, json={"message": "request/body/active is read-only"})
                current.update(body)
                return httpx.Response(200, json=current)
            if request.method == "DELETE":
                return httpx.Response(200, json=self.workflows.pop(workflow_id))

        if len(parts) == 2 and request.method == "POST":
            if parts[1] == "activate":
                current["active"] = True
                return httpx.Response(200, json=current)
            if parts[1] == "deactivate":
                current["active"] = False
                return httpx.Response(200, json=current)
            if parts[1] == "execute":
                return httpx.Response(200, json={"id": f"exec-{workflow_id}", "finished": bool(body)})

        return httpx.Response(405, json={"message": "method not allowed"})

    def _create(self, body: dict) -> httpx.Response:
        if "active" in body:
            return httpx.Response(400, json={"message": "request/body/active is read-only"})
        workflow_id = str(next(self._ids))
        document = {"id": workflow_id, "active": False, **body}
        self.workflows[workflow_id] = document
        return httpx.Response(200, json=document)
