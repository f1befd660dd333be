"""
Unit tests for UpscalingServiceClient.

Requests are served by httpx.MockTransport so the multipart body, cookies
and query strings sent to the service can be asserted directly.
"""

from functools import partial

import httpx
import pytest

from app.jobs.orchestrator import run_job
from app.jobs.schemas import StatusSnapshot
from app.media.upscaling_client import JobKind, UploadPayload, UpscalingServiceClient
from lumen_core.runtime.errors import ErrorCode, RetryableError, TerminalError
from lumen_core.runtime.retry import RetryPolicy


class Recorder:
    """MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def make_client(recorder: Recorder) -> UpscalingServiceClient:
    return UpscalingServiceClient(
        client_id="abc123",
        base_url="https://jobs.example.test/",
        retry_policy=RetryPolicy(max_attempts=2, base_delay=0.01, jitter=False),
        transport=httpx.MockTransport(recorder),
    )


class TestClientInit:
    def test_requires_client_id(self):
        with pytest.raises(ValueError):
            UpscalingServiceClient(client_id="")

    def test_strips_base_url(self):
        client = make_client(Recorder(httpx.Response(200)))
        assert client.base_url == "https://jobs.example.test"


class TestSubmit:
    """Tests for job uploads."""

    @pytest.mark.asyncio
    async def test_uploads_multipart_with_cookie(self):
        recorder = Recorder(httpx.Response(200, json={"status": "queued"}))
        payload = UploadPayload(
            filename="photo1-0a1b2c3d.png",
            content=b"PNGDATA",
            fields={"scale": "4", "model": "plus", "fx": ""},
        )

        async with make_client(recorder) as client:
            result = await client.submit(JobKind.UPSCALE, payload)

        assert result.ok is True
        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/upscaling_upload"
        assert request.headers["Cookie"] == "client_id=abc123"
        assert b'name="image"; filename="photo1-0a1b2c3d.png"' in request.content
        assert b"PNGDATA" in request.content
        assert b'name="scale"' in request.content
        assert b'name="fx"' in request.content

    @pytest.mark.asyncio
    async def test_rejected_upload_is_not_retried(self):
        recorder = Recorder(httpx.Response(503))

        async with make_client(recorder) as client:
            result = await client.submit(
                JobKind.REMOVE_BACKGROUND,
                UploadPayload(filename="photo1.png", content=b"x"),
            )

        assert result.ok is False
        assert result.error == "Upload error: 503"
        assert result.status_code == 503
        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.path == "/removebg_upload"

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = UpscalingServiceClient(
            client_id="abc123",
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(RetryableError) as exc_info:
            await client.submit(
                JobKind.UPSCALE, UploadPayload(filename="photo1.png", content=b"x")
            )

        assert exc_info.value.code == ErrorCode.CONNECTION_ERROR
        await client.close()


class TestGetStatus:
    """Tests for the shared status endpoint."""

    @pytest.mark.asyncio
    async def test_parses_snapshot(self):
        recorder = Recorder(
            httpx.Response(
                200,
                json={
                    "pending": [],
                    "processing": ["https://cdn.test/photo2.png"],
                    "processed": ["https://cdn.test/photo1_nobg.png"],
                },
            )
        )

        async with make_client(recorder) as client:
            snapshot = await client.get_status(JobKind.REMOVE_BACKGROUND)

        assert snapshot == StatusSnapshot(
            processing=("https://cdn.test/photo2.png",),
            processed=("https://cdn.test/photo1_nobg.png",),
        )
        request = recorder.requests[0]
        assert request.url.path == "/removebg_get_status"
        assert request.headers["Cookie"] == "client_id=abc123"

    @pytest.mark.asyncio
    async def test_malformed_body_is_retryable(self):
        recorder = Recorder(httpx.Response(200, text="<html>maintenance</html>"))

        async with make_client(recorder) as client:
            with pytest.raises(RetryableError) as exc_info:
                await client.get_status(JobKind.UPSCALE)

        assert exc_info.value.code == ErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_unauthorized_is_terminal(self):
        recorder = Recorder(httpx.Response(401))

        async with make_client(recorder) as client:
            with pytest.raises(TerminalError):
                await client.get_status(JobKind.UPSCALE)


class TestDownload:
    """Tests for result downloads."""

    @pytest.mark.asyncio
    async def test_downloads_with_delete_flag(self):
        recorder = Recorder(httpx.Response(200, content=b"RESULT"))

        async with make_client(recorder) as client:
            content = await client.download("https://cdn.test/out/photo1_nobg.png")

        assert content == b"RESULT"
        request = recorder.requests[0]
        assert request.url.host == "cdn.test"
        assert request.url.path == "/out/photo1_nobg.png"
        assert request.url.params["delete_after_download"] == ""
        assert request.headers["Cookie"] == "client_id=abc123"

    @pytest.mark.asyncio
    async def test_follows_redirect_to_cdn(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            if request.url.host == "jobs.example.test":
                return httpx.Response(
                    302, headers={"Location": "https://cdn.example/real.png"}
                )
            return httpx.Response(200, content=b"REAL")

        client = UpscalingServiceClient(
            client_id="abc123",
            base_url="https://jobs.example.test",
            transport=httpx.MockTransport(handler),
        )

        content = await client.download("https://jobs.example.test/out/photo1.png")

        assert content == b"REAL"
        assert hosts == ["jobs.example.test", "cdn.example"]
        await client.close()

    @pytest.mark.asyncio
    async def test_redirected_result_is_saved_with_content(self):
        """A job whose result URL redirects stores the redirect target's bytes."""

        def handler(request):
            if request.url.path == "/upscaling_upload":
                return httpx.Response(200)
            if request.url.path == "/upscaling_get_status":
                return httpx.Response(
                    200, json={"processed": ["https://jobs.example.test/out/photo1.png"]}
                )
            if request.url.host == "jobs.example.test":
                return httpx.Response(
                    302, headers={"Location": "https://cdn.example/real.png"}
                )
            return httpx.Response(200, content=b"REAL")

        saved = {}

        async def sink(content, name):
            saved[name] = content
            return name

        async with UpscalingServiceClient(
            client_id="abc123",
            base_url="https://jobs.example.test",
            transport=httpx.MockTransport(handler),
        ) as client:
            refs = await run_job(
                UploadPayload(filename="photo1.png", content=b"x"),
                "photo1",
                submit_fn=partial(client.submit, JobKind.UPSCALE),
                poll_fn=partial(client.get_status, JobKind.UPSCALE),
                fetch_fn=client.download,
                persist_fn=sink,
                max_attempts=2,
                poll_interval=0.01,
            )

        assert refs == ["photo1_0.png"]
        assert saved["photo1_0.png"] == b"REAL"

    @pytest.mark.asyncio
    async def test_missing_result_raises(self):
        recorder = Recorder(httpx.Response(404))

        async with make_client(recorder) as client:
            with pytest.raises(TerminalError) as exc_info:
                await client.download("https://cdn.test/out/gone.png")

        assert exc_info.value.code == ErrorCode.NOT_FOUND
