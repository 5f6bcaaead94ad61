"""
Legacy data migration package.

Responsibilities:
- Read submissions from the legacy SQLite ``recommendations`` table.
- Copy them, with their original timestamps, into the current row store.
"""
