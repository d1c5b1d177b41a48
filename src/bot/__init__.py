"""Telegram-бот: вход в меню и уведомления о пред-заказах."""
