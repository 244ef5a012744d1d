from dataclasses import dataclass


@dataclass
class Farm:
    farm_id: str
    name: str
