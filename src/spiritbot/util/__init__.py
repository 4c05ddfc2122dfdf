"""
Utility functions and helpers for SpiritBot.

- **logger.py**: Centralized logging with coloured console output through
  prompt_toolkit and a per-session log file. Silences Discord internals.

- **discord_utils.py**: Stateless Discord helpers: message quote embeds,
  attachment re-upload, best-effort DMs, role checks and component waits.

- **format_utils.py**: Roman numerals, Discord timestamp markup and
  truncation helpers.
"""
