"""Token Resolver package.

Merges harvested profiles with enriched trading pairs into one canonical record per address.
Pure-python, deterministic. See `metahunter/resolver/core.py`.
"""
