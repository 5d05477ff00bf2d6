"""Telegram expense logger backed by a Google spreadsheet with one sheet per month."""
