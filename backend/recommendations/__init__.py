"""
Place recommendation aggregation.

Responsibilities:
- Quantize submitted coordinates into location keys.
- Group raw submissions that refer to the same physical spot.
- Pick a representative name and address for each group.
- Disambiguate groups that share a name but sit at different locations.
- Persist raw submissions in a small CSV-backed row store.
"""
