from rateshop.models.serviceability import PincodeZone, WarehouseCoverage
from rateshop.models.carrier import Carrier, ShippingRate, RateSurcharge

__all__ = [
    "PincodeZone",
    "WarehouseCoverage",
    "Carrier",
    "ShippingRate",
    "RateSurcharge",
]
