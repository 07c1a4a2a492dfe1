"""
Xtream IPTV provider client.

Authenticates a subscriber, lists live/VOD/series catalogs, resolves EPG
now/next views and builds playable stream addresses.
"""
