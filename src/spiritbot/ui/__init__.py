"""
User interface components for SpiritBot.

- **console.py**: Interactive operator console for live bot management
  (status, guild listing, graceful shutdown/restart). Uses prompt_toolkit for
  non-blocking I/O that doesn't interfere with Discord event handling.

- **help_ui.py**: Embeds and module buttons for the paginated /help command.

- **profile_embed.py**: Profile embed with account dates, moderator status
  and badges.
"""
