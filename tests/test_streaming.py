import asyncio
import json

import httpx
import pytest

from conftest import RecordingHandler
from flex_http import FlexHttpError, Interceptor, RequestCancelledError, RequestTimeoutError


class ChunkStream(httpx.AsyncByteStream):
    def __init__(self, chunks: list[bytes], gap: float = 0.0):
        self.chunks = chunks
        self.gap = gap
        self.served = 0
        self.closed = False

    async def __aiter__(self):
        for index, chunk in enumerate(self.chunks):
            if index and self.gap:
                await asyncio.sleep(self.gap)
            self.served += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


def _streaming(body: ChunkStream):
    return RecordingHandler(
        lambda r: httpx.Response(200, headers={"content-type": "text/plain"}, stream=body)
    )


class TestStream:
    @pytest.mark.asyncio
    async def test_yields_one_event_per_chunk(self, builder):
        body = ChunkStream([b"chunk1", b"chunk2", b"chunk3"])
        client = builder.with_transport(httpx.MockTransport(_streaming(body))).build()

        received = []
        async with client:
            async for event in client.stream("/events"):
                assert event.status_code == 200
                assert event.headers["content-type"] == "text/plain"
                received.append(event.data)

        assert received == ["chunk1", "chunk2", "chunk3"]
        assert body.closed

    @pytest.mark.asyncio
    async def test_consumer_breaks_after_first_chunk(self, builder):
        body = ChunkStream([b"chunk1", b"chunk2", b"chunk3"])
        client = builder.with_transport(httpx.MockTransport(_streaming(body))).build()

        received = []
        async with client:
            async with client.stream("/events") as events:
                async for event in events:
                    received.append(event.data)
                    break
            assert events.closed

        assert received == ["chunk1"]
        assert body.closed

    @pytest.mark.asyncio
    async def test_line_decoder_is_applied(self, builder):
        body = ChunkStream([b'{"n": 1}', b'{"n": 2}'])
        client = builder.with_transport(httpx.MockTransport(_streaming(body))).build()

        async with client:
            events = [event async for event in client.stream("/events", line_decoder=json.loads)]

        assert [event.data["n"] for event in events] == [1, 2]

    @pytest.mark.asyncio
    async def test_stream_interceptors_run_before_yield(self, builder):
        seen = []

        class ChunkRecorder(Interceptor):
            async def on_stream_chunk(self, chunk):
                seen.append(chunk.data)

        body = ChunkStream([b"a", b"b"])
        client = (
            builder.with_interceptor(ChunkRecorder())
            .with_transport(httpx.MockTransport(_streaming(body)))
            .build()
        )
        async with client:
            stream = client.stream("/events")
            first = await stream.__anext__()
            assert seen == ["a"]
            assert first.data == "a"
            await stream.aclose()

    @pytest.mark.asyncio
    async def test_nothing_is_sent_until_iteration(self, builder):
        handler = _streaming(ChunkStream([b"x"]))
        client = builder.with_transport(httpx.MockTransport(handler)).build()

        stream = client.stream("/events")
        assert handler.calls == 0
        await stream.aclose()
        assert handler.calls == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_cancelled_stream_emits_nothing(self, builder):
        class Cancel(Interceptor):
            async def on_request(self, ctx):
                ctx.cancel()

        handler = _streaming(ChunkStream([b"x"]))
        client = builder.with_interceptor(Cancel()).with_transport(httpx.MockTransport(handler)).build()

        received = []
        with pytest.raises(RequestCancelledError) as exc_info:
            async for event in client.stream("/events"):
                received.append(event)

        assert exc_info.value.message == "Stream request cancelled"
        assert received == []
        assert handler.calls == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped_without_retry(self, builder):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        handler = RecordingHandler(refuse)
        client = builder.with_max_retries(3).with_transport(httpx.MockTransport(handler)).build()

        with pytest.raises(FlexHttpError) as exc_info:
            async for _ in client.stream("/events"):
                pass

        assert "Network error" in exc_info.value.message
        assert handler.calls == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_stream_is_not_restartable(self, builder):
        handler = RecordingHandler(
            lambda r: httpx.Response(200, stream=ChunkStream([b"one"]))
        )
        client = builder.with_transport(httpx.MockTransport(handler)).build()

        async with client:
            stream = client.stream("/events")
            assert [e.data async for e in stream] == ["one"]
            assert [e.data async for e in stream] == []
            assert [e.data async for e in client.stream("/events")] == ["one"]

        assert handler.calls == 2


class TestStreamTimeout:
    @pytest.mark.asyncio
    async def test_idle_gap_longer_than_timeout_keeps_streaming(self, builder):
        handler = RecordingHandler(
            lambda r: httpx.Response(200, stream=ChunkStream([b"one", b"two"], gap=0.3))
        )
        client = builder.with_timeout(0.1).with_transport(httpx.MockTransport(handler)).build()

        async with client:
            received = [event.data async for event in client.stream("/events")]

        assert received == ["one", "two"]
        timeout = handler.requests[0].extensions["timeout"]
        assert timeout["read"] is None
        assert timeout["connect"] == 0.1

    @pytest.mark.asyncio
    async def test_late_headers_time_out(self, builder):
        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200, stream=ChunkStream([b"never"]))

        client = builder.with_timeout(0.05).with_transport(httpx.MockTransport(slow)).build()

        received = []
        with pytest.raises(RequestTimeoutError) as exc_info:
            async for event in client.stream("/events"):
                received.append(event)

        assert exc_info.value.message == "Request timed out"
        assert received == []
        await client.close()

    @pytest.mark.asyncio
    async def test_buffered_requests_keep_client_read_timeout(self, builder):
        handler = RecordingHandler()
        client = builder.with_timeout(0.5).with_transport(httpx.MockTransport(handler)).build()

        async with client:
            await client.get("/posts/1")

        assert handler.requests[0].extensions["timeout"]["read"] == 0.5
