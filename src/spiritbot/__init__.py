"""
SpiritBot - Discord community moderation bot

Core Components:

- **Art Policy**: Keeps the art channel media-only. Posts need an image of at
  least 40x40 pixels or, without attachments, a link to an allow-listed art site
- **Audit Notifier**: Auto-deletes rejected posts, DMs the author, and quotes
  every deleted message into the audit channels
- **Event Dispatcher**: Runs each gateway event as its own task behind an
  error boundary that reports faults to the operator channel
- **Badge Store**: SQLite-backed profile badges with per-badge counts
- **Commands**: /help, /profile, /ticket and moderator badge text commands
- **Interactive Console**: Live status checks and graceful restart/shutdown

Usage:
    from spiritbot.main import main
    main()
"""
