from .nearby_business import StoreNearbyBusiness
from .org_unit import OrgUnitArea
from .store_sqm import StoreSqm

__all__ = ["OrgUnitArea", "StoreNearbyBusiness", "StoreSqm"]
