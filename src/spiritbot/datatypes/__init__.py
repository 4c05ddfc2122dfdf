"""
Plain data structures shared across SpiritBot.

- **badge_datatypes.py**: Badge catalog entries and per-user badge rows.
- **policy_datatypes.py**: Inputs and verdicts of the art-channel policy.
- **discord_datatypes.py**: Explicit variants over inbound and deleted message shapes.
"""
