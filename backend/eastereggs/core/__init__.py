"""Pure ledger rules: access guards, egg guards, lookup, registry transitions, upkeep.

Nothing here awaits, touches a database or reads a clock; callers pass `now`.
Guards return an error instead of raising so the shell can chain them with `or`.
"""
