"""Error types and the device location abstraction shared by the dashboard."""
from abc import ABC, abstractmethod
from typing import Tuple


class WeatherDashboardError(Exception):
    """Base class for every failure the dashboard raises."""
    pass


class NetworkError(WeatherDashboardError):
    """Transport, non-2xx or parse failure from a weather or search endpoint."""
    pass


class LocationNotFoundError(WeatherDashboardError):
    """A location search returned no matches."""

    def __init__(self, message: str = "Location not found"):
        super().__init__(message)


class DeviceLocationError(WeatherDashboardError):
    """The device location could not be resolved."""
    pass


class UnsupportedError(DeviceLocationError):
    """The platform offers no location capability."""

    def __init__(self, message: str = "Geolocation is not supported on this platform"):
        super().__init__(message)


class LocationError(DeviceLocationError):
    """Location lookup was denied or timed out."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Geolocation error: {reason}")


class ReverseGeocodeError(WeatherDashboardError):
    """Reverse geocoding failed. Always recovered by the gateway."""
    pass


class DeviceLocatorBase(ABC):
    """Abstract base class for device location sources."""

    @abstractmethod
    def locate(self) -> Tuple[float, float]:
        """
        Resolve the device position.

        Returns:
            Tuple of (latitude, longitude)

        Raises:
            LocationError: If the position cannot be obtained
        """
        pass
