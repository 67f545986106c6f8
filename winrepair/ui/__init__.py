"""
Console rendering for Windows System Repair.

Modules:
  theme.py  — palette, rich Theme, outcome icons and styles.
  header.py — planned-operations panel shown before confirmation.
  report.py — end-of-session summary lines and panel.
"""
