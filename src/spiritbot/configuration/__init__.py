"""
Configuration management for SpiritBot.

- **app_configuration.py**: File-locked YAML loader for global settings: the
  text-command prefix, designated channel and role ids, the greeting pattern
  and file locations. Falls back to defaults on missing or malformed files.

- **allowed_sites.py**: Loads the flat allow-list of trusted art sites once at
  startup.
"""
