"""End-to-end client workflows against a mocked model server."""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio

from ollama_core import DeserializationError, OllamaClient, StreamState


class FakeModelServer:
    """In-memory stand-in for the model server's model endpoints."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.blobs: set[str] = set()
        self.models: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/api/blobs/"):
            digest = path.rsplit("/", 1)[-1]
            if request.method == "HEAD":
                return httpx.Response(200 if digest in self.blobs else 404)
            self.blobs.add(digest)
            return httpx.Response(201)

        body = json.loads(request.content)

        if path == "/api/create":
            self.models.add(body["name"])
            if body.get("stream"):
                frames = ["reading model metadata", "creating system layer", "writing manifest", "success"]
                text = "".join(f"data: {json.dumps({'status': s})}\n\n" for s in frames)
                return httpx.Response(200, content=text.encode(), headers={"content-type": "text/event-stream"})
            return httpx.Response(200, json={"status": "success"})

        if path == "/api/generate":
            if body["model"] not in self.models:
                return httpx.Response(404, json={"error": f"model '{body['model']}' not found"})
            reason = "unload" if body.get("keep_alive") == 0 else "load"
            return httpx.Response(200, json={"model": body["model"], "response": "", "done": True, "done_reason": reason})

        if path == "/api/push":
            return httpx.Response(200, json={"status": "success"})

        return httpx.Response(404, text="404 page not found")


@pytest.fixture
def server():
    return FakeModelServer()


@pytest_asyncio.fixture
async def client(server):
    http_client = httpx.AsyncClient(base_url="http://test", transport=httpx.MockTransport(server.handler))
    async with http_client:
        yield OllamaClient("http://test", http_client=http_client)


@pytest.mark.asyncio
async def test_create_model_returns_success(client):
    result = await client.create_model("mymodel", "FROM llama2")

    assert result.status == "success"


@pytest.mark.asyncio
async def test_push_body_omits_unset_insecure(client, server):
    await client.push_model("ns/model:tag")
    await client.push_model("ns/model:tag", insecure=True)

    first, second = (json.loads(r.content) for r in server.requests)
    # single-result calls ask the server for one JSON object
    assert first == {"name": "ns/model:tag", "stream": False}
    assert second == {"name": "ns/model:tag", "insecure": True, "stream": False}


@pytest.mark.asyncio
async def test_create_with_blob_then_load_and_unload(client, server):
    digest = "sha256:29fdb92e57cf082e"

    assert await client.has_blob(digest) is False
    await client.create_blob(digest, b"GGUF...")
    assert await client.has_blob(digest) is True

    stream = await client.create_model_streaming("ns/mymodel:latest", f"FROM @{digest}")
    async with stream:
        statuses = [progress.status async for progress in stream]

    assert statuses[-1] == "success"
    assert stream.state is StreamState.CLOSED

    loaded = await client.load_model("ns/mymodel:latest")
    unloaded = await client.unload_model("ns/mymodel:latest")
    assert loaded.done_reason == "load"
    assert unloaded.done_reason == "unload"

    create_calls = [r for r in server.requests if r.url.path == "/api/create"]
    assert len(create_calls) == 1


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(client, server):
    results = await asyncio.gather(
        client.create_model("a", "FROM llama2"),
        client.create_model("b", "FROM llama2"),
        client.push_model("ns/c:tag"),
    )

    assert [r.status for r in results] == ["success", "success", "success"]
    assert server.models == {"a", "b"}


@pytest.mark.asyncio
async def test_unknown_endpoint_text_is_not_a_result(server):
    http_client = httpx.AsyncClient(
        base_url="http://test",
        transport=httpx.MockTransport(lambda _r: httpx.Response(200, text="<html>proxy</html>")),
    )
    async with http_client:
        client = OllamaClient("http://test", http_client=http_client)
        with pytest.raises(DeserializationError) as exc_info:
            await client.create_model("mymodel", "FROM llama2")

    assert exc_info.value.response_content == "<html>proxy</html>"
