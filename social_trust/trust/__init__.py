"""
Social trust scoring engine.

Responsibilities:
- Index the directed "follows" graph and measure social distance (max 2 hops).
- Turn interactions on a recommendation into quality, recency and diversity signals.
- Combine the signals into a personalised 0-10 trust score with a confidence estimate.
- Rank a feed of recommendations for one evaluating user, reusing their neighbourhood.
"""
