"""
dayz_launcher package
---------------------
DZSM - DayZ dedicated server manager. Installs the server and its workshop
mods via SteamCMD, activates the configured mods as ``@<name>`` directories
with their signature keys, and launches the server with matching mod flags.
"""

__version__ = "0.4.0"
