from dataclasses import dataclass, field
from typing import List


@dataclass
class BuildingRecord:
    id: int
    name: str
    address: str
    district: str
    green_mark_rating: str
    building_type: str
    energy_intensity: int
    total_floor_area: float
    year_built: int
    certification_valid_until: str
    estimated_monthly_cost: int
    carbon_savings: int
    occupancy_rate: int
    amenities: List[str] = field(default_factory=list)
    coordinates: List[float] = field(default_factory=list)  # [lon, lat]

    def to_json(self) -> dict:
        # key order and casing are what the web front end reads
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "district": self.district,
            "greenMarkRating": self.green_mark_rating,
            "buildingType": self.building_type,
            "energyIntensity": self.energy_intensity,
            "totalFloorArea": self.total_floor_area,
            "yearBuilt": self.year_built,
            "certificationValidUntil": self.certification_valid_until,
            "estimatedMonthlyCost": self.estimated_monthly_cost,
            "carbonSavings": self.carbon_savings,
            "occupancyRate": self.occupancy_rate,
            "amenities": list(self.amenities),
            "coordinates": list(self.coordinates),
        }
