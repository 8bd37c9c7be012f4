"""
JSON-Lines Request Transport

Reads one JSON request object per line, dispatches it to the matching tool
and writes one JSON response object per line.

Request:   {"type": "request", "id": "1", "tool": "get-weather", "params": {"city": "Tokyo"}}
Success:   {"type": "response", "id": "1", "result": {"content": [{"type": "text", "text": "..."}]}}
Failure:   {"type": "response", "id": "1", "error": {"message": "..."}}

Every line is handled in its own task so one request's backoff sleep
never holds up the others. Responses are written in completion order.
"""

import asyncio
import json
import os
import stat
import sys
from typing import IO, Awaitable, Callable, Optional, Union

from fastmcp.utilities.logging import get_logger
from pydantic import ValidationError

from city_weather.config.constants import (
    MAX_LINE_BYTES,
    REQUEST_TYPE,
    TOOL_NAME,
    UNKNOWN_REQUEST_ID,
)
from city_weather.errors import ParseError, UnknownToolError
from city_weather.formatting import format_error, format_summary
from city_weather.models import (
    ErrorBody,
    TextContent,
    ToolRequest,
    ToolResponse,
    ToolResult,
    WeatherParams,
    WeatherSummary,
)

logger = get_logger("transport")


async def run_weather_tool(
    get_weather: Callable[[str], Awaitable[WeatherSummary]], city: str
) -> str:
    """
    Run a weather lookup and render it as tool text.

    Lookup failures are rendered, not raised.
    """
    try:
        summary = await get_weather(city)
    except Exception as e:
        logger.debug(f"Error processing weather request: {e}")
        return format_error(city, e)
    return format_summary(summary)


class RequestHandler:
    """
    Decodes request lines and routes them to tools.

    Args:
        get_weather: Coroutine function resolving a city to a WeatherSummary
    """

    def __init__(self, get_weather: Callable[[str], Awaitable[WeatherSummary]]):
        self.get_weather = get_weather

    @staticmethod
    def parse(line: Union[str, bytes]) -> ToolRequest:
        try:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            payload = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(str(e)) from e
        if not isinstance(payload, dict):
            raise ParseError("request must be a JSON object")
        try:
            return ToolRequest.model_validate(payload)
        except ValidationError as e:
            raise ParseError(str(e)) from e

    async def handle_line(self, line: Union[str, bytes]) -> Optional[dict]:
        """
        Handle one inbound line.

        Returns:
            Optional[dict]: Response envelope, or None for messages that
                            are not requests
        """
        logger.debug(f"Received line: {line!r}")
        try:
            request = self.parse(line)
        except ParseError as e:
            logger.debug(f"Error parsing request: {e}")
            return _error(UNKNOWN_REQUEST_ID, str(e))

        if request.type != REQUEST_TYPE:
            logger.debug(f"Ignoring non-request message: {request.type}")
            return None

        try:
            return await self.dispatch(request)
        except Exception as e:
            logger.error(f"Error handling request {request.id}: {e}")
            return _error(request.id, str(e))

    async def dispatch(self, request: ToolRequest) -> dict:
        if request.tool != TOOL_NAME:
            logger.debug(f"Unknown tool: {request.tool}")
            raise UnknownToolError(request.tool)

        try:
            params = WeatherParams.model_validate(request.params)
        except ValidationError as e:
            return _error(request.id, f"Invalid params: {e}")

        text = await run_weather_tool(self.get_weather, params.city)
        return ToolResponse(
            id=request.id,
            result=ToolResult(content=[TextContent(text=text)]),
        ).to_wire()


def _error(request_id, message: str) -> dict:
    return ToolResponse(id=request_id, error=ErrorBody(message=message)).to_wire()


async def serve(
    readline: Callable[[], Awaitable[bytes]],
    handler: RequestHandler,
    write: Callable[[str], None],
) -> None:
    """
    Serve requests until the line source reports end of input.

    Args:
        readline: Returns the next raw line, b"" at end of input, or raises
                  ParseError for a line that cannot be read
        handler: Request handler
        write: Sink for one serialized response line (newline excluded)
    """
    pending: set[asyncio.Task] = set()

    def _send(response: dict) -> None:
        logger.debug(f"Sending response: {response}")
        write(json.dumps(response, ensure_ascii=False))

    async def _handle(line: bytes) -> None:
        response = await handler.handle_line(line)
        if response is not None:
            _send(response)

    while True:
        try:
            line = await readline()
        except ParseError as e:
            logger.debug(f"Error reading request: {e}")
            _send(_error(UNKNOWN_REQUEST_ID, str(e)))
            continue

        if not line:
            logger.debug("Input closed")
            break
        if not line.strip():
            continue

        task = asyncio.create_task(_handle(line))
        pending.add(task)
        task.add_done_callback(pending.discard)

    if pending:
        await asyncio.gather(*pending)


class StreamLineReader:
    """
    Reads newline-terminated lines from an asyncio stream.

    A line longer than the stream's limit is discarded through its newline
    and reported as a ParseError; reading continues with the next line.
    """

    def __init__(self, stream: asyncio.StreamReader):
        self.stream = stream

    async def readline(self) -> bytes:
        try:
            return await self.stream.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            return e.partial
        except asyncio.LimitOverrunError:
            await self._discard_line()
            raise ParseError("line exceeds maximum request size")

    async def _discard_line(self) -> None:
        while True:
            try:
                await self.stream.readuntil(b"\n")
                return
            except asyncio.LimitOverrunError as e:
                await self.stream.readexactly(e.consumed)
            except asyncio.IncompleteReadError:
                return


class FileLineReader:
    """Reads lines from a blocking binary file in a worker thread."""

    def __init__(self, file: IO[bytes], limit: int = MAX_LINE_BYTES):
        self.file = file
        self.limit = limit

    async def readline(self) -> bytes:
        line = await asyncio.to_thread(self.file.readline)
        if len(line) > self.limit:
            raise ParseError("line exceeds maximum request size")
        return line


async def open_stdin_reader(limit: int = MAX_LINE_BYTES):
    """
    Build a line reader for stdin.

    Pipes, sockets and terminals are read through the event loop; anything
    else (e.g. a redirected regular file) is read in a worker thread.
    """
    mode = os.fstat(sys.stdin.fileno()).st_mode
    if stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode) or stat.S_ISCHR(mode):
        loop = asyncio.get_running_loop()
        stream = asyncio.StreamReader(limit=limit)
        protocol = asyncio.StreamReaderProtocol(stream)
        await loop.connect_read_pipe(lambda: protocol, sys.stdin)
        return StreamLineReader(stream)
    return FileLineReader(sys.stdin.buffer, limit)


def write_stdout(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()
