"""aiogram message handlers.

Contract: every incoming message gets exactly one reply, a JSON document produced by
`src.bot.formatting`. Domain errors are replied with their status; any other failure is logged
internally and replied as a generic internal error.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from time import monotonic
from typing import Any

from aiogram.filters import CommandObject
from aiogram.types import Message

from src.app import App
from src.bot.commands import parse_filter_args
from src.bot.formatting import (
    DOMAIN_ERRORS,
    render_deleted,
    render_error,
    render_list,
    render_record,
    render_usage,
    to_reply_text,
)

logger = logging.getLogger(__name__)

Payload = dict[str, Any]


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


async def _run(message: Message, operation: str, action: Callable[[], Awaitable[Payload]]) -> None:
    started = monotonic()

    # noinspection PyBroadException
    try:
        payload = await action()
        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "handled operation=%s status=%s latency_ms=%d",
            operation,
            payload["status"],
            latency_ms,
        )
    except DOMAIN_ERRORS as exc:
        payload = render_error(exc)
        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "rejected operation=%s status=%s reason=%s latency_ms=%d",
            operation,
            payload["status"],
            exc,
            latency_ms,
        )
    except Exception as exc:
        # Handler boundary: storage/transport failures must not leak details to the user.
        logger.exception("handler failed operation=%s", operation)
        payload = render_error(exc)

    await message.answer(to_reply_text(payload))


async def handle_help(message: Message) -> None:
    """Reply with command usage (`/start`, `/help`)."""

    await message.answer(to_reply_text(render_usage()))


async def handle_analyze(message: Message, command: CommandObject, app: App) -> None:
    """`/analyze <text>`: analyze and store a string."""

    async def action() -> Payload:
        stored = await app.service.create_string(command.args)
        return render_record(stored, status=201)

    await _run(message, "analyze", action)


async def handle_get(message: Message, command: CommandObject, app: App) -> None:
    """`/get <text>`: look up a stored string by its exact value."""

    async def action() -> Payload:
        stored = await app.service.get_string(command.args or "")
        return render_record(stored)

    await _run(message, "get", action)


async def handle_list(message: Message, command: CommandObject, app: App) -> None:
    """`/list key=value ...`: list stored strings matching structured filters."""

    async def action() -> Payload:
        result = await app.service.list_strings(parse_filter_args(command.args))
        return render_list(result, max_records=app.settings.reply_max_records)

    await _run(message, "list", action)


async def handle_query(message: Message, command: CommandObject, app: App) -> None:
    """`/query <text>`: list stored strings matching a natural-language query."""

    await _handle_natural_language(message, command.args, app)


async def handle_delete(message: Message, command: CommandObject, app: App) -> None:
    """`/delete <text>`: delete a stored string by its exact value."""

    async def action() -> Payload:
        await app.service.delete_string(command.args or "")
        return render_deleted()

    await _run(message, "delete", action)


async def handle_text(message: Message, app: App) -> None:
    """Fallback: plain text is a natural-language query; unknown commands get usage."""

    raw_text = message.text or message.caption
    if raw_text is not None and _is_command_text(raw_text):
        await message.answer(to_reply_text(render_usage(status=400)))
        return

    await _handle_natural_language(message, raw_text, app)


async def _handle_natural_language(message: Message, query: str | None, app: App) -> None:
    async def action() -> Payload:
        result = await app.service.list_strings_by_query(query)
        return render_list(result, max_records=app.settings.reply_max_records)

    await _run(message, "query", action)
