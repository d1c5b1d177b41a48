"""Веб-приложение меню и корзины."""
