"""
Moderation decisions and actions for SpiritBot.

- **art_policy.py**: Pure accept/reject decision for art-channel posts.
- **audit_notifier.py**: Auto-deletion of rejected posts and audit entries
  for every deleted message.
- **moderator_paging.py**: Mentions one online moderator when the
  any-moderator role is pinged.
"""
