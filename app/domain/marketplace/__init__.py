"""
Marketplace bounded context, domain layer.

This module contains all domain logic for the marketplace context:
- Reference geography (provinces, cities, regions)
- Commodities, lands and land-commodity allocations
- Capacity checking for land allocations
- Shadow history for prices, demands and supplies
"""
