"""Обработчики команд и сообщений Telegram-бота."""

from __future__ import annotations

import html
import os

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import KeyboardButton, Message, ReplyKeyboardMarkup, WebAppInfo

from .messages import MENU_PROMPT, OPEN_MENU_BUTTON, WELCOME_TEXT, format_webapp_notice

router = Router()

WEBAPP_URL = os.getenv("WEBAPP_URL", "http://localhost:8080/")


def menu_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=OPEN_MENU_BUTTON, web_app=WebAppInfo(url=WEBAPP_URL))]
        ],
        resize_keyboard=True,
    )


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    """Обработчик команды /start."""
    user = message.from_user
    name = user.first_name if user and user.first_name else "cliente"
    await message.answer(WELCOME_TEXT.format(name=html.escape(name)), reply_markup=menu_keyboard())


@router.message(Command("menu"))
async def cmd_menu(message: Message) -> None:
    await message.answer(MENU_PROMPT, reply_markup=menu_keyboard())


@router.message(F.web_app_data)
async def handle_webapp_data(message: Message) -> None:
    """Уведомление о результате оформления в мини-приложении."""
    await message.answer(format_webapp_notice(message.web_app_data.data))
