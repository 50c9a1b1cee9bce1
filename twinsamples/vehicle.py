"""A simple simulated vehicle for the mixed provider."""

from __future__ import annotations

from dataclasses import dataclass

MAX_HVAC_TEMPERATURE = 100
MIN_HVAC_TEMPERATURE = 65


@dataclass
class Vehicle:
    """Vehicle state that changes one step at a time."""

    ambient_air_temperature: int = 75
    is_air_conditioning_active: bool = False
    hybrid_battery_remaining: int = 100

    def execute_epoch(self) -> None:
        """Advance the simulation by one step."""
        # The A/C will not be active without power.
        if self.hybrid_battery_remaining == 0:
            self.is_air_conditioning_active = False

        if self.is_air_conditioning_active:
            if self.ambient_air_temperature > MIN_HVAC_TEMPERATURE:
                self.ambient_air_temperature -= 1
        elif self.ambient_air_temperature < MAX_HVAC_TEMPERATURE:
            self.ambient_air_temperature += 1

        if self.is_air_conditioning_active and self.hybrid_battery_remaining > 0:
            self.hybrid_battery_remaining -= 1