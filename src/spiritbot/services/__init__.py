"""
Cross-cutting services wired at startup.

- **exception_reporter.py**: Logs unhandled faults and forwards them, with
  the event context, to the operator error channel.
- **channel_registry.py**: Resolves the configured channel and role ids to
  live Discord objects.
"""
