"""
Backend GameScore: activity/trust scoring for in-game economy wallets.

Scores each wallet from its player profile and transaction history to flag
likely automated (sybil/bot) actors. The analysis engine is a pure scorer;
the database, agent worker and tools packages wrap it for storage and
scheduled batch recomputation.
"""

__version__ = "0.1.0"
