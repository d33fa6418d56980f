"""Bot router composition.

Command handlers are registered before the plain-text fallback, which catches everything else.
"""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart

from src.bot.handlers import (
    handle_analyze,
    handle_delete,
    handle_get,
    handle_help,
    handle_list,
    handle_query,
    handle_text,
)

router = Router(name="root")
router.message.register(handle_help, CommandStart())
router.message.register(handle_help, Command("help"))
router.message.register(handle_analyze, Command("analyze"))
router.message.register(handle_get, Command("get"))
router.message.register(handle_list, Command("list"))
router.message.register(handle_query, Command("query"))
router.message.register(handle_delete, Command("delete"))
router.message.register(handle_text)
