"""
Discord-facing layer of SpiritBot: the client, the task-per-event dispatcher,
the volatile state and the cogs.
"""
