"""Static lookup tables exposed as pure functions."""
import math
from typing import List, Tuple

from weather_data import Condition


_CONDITIONS = {
    "Clear": ("clear sky", "01d"),
    "Clouds": ("scattered clouds", "03d"),
    "Rain": ("light rain", "10d"),
    "Snow": ("light snow", "13d"),
    "Drizzle": ("light drizzle", "09d"),
}
_DEFAULT_CONDITION = ("partly cloudy", "02d")

# level, hex color, health impact
_AQI_LEVELS = {
    1: ("Good", "#00E400", "No health concerns"),
    2: ("Fair", "#FFFF00", "Sensitive individuals should limit outdoor activities"),
    3: ("Moderate", "#FF7E00", "Everyone should limit prolonged outdoor exertion"),
    4: ("Poor", "#FF0000", "Everyone should avoid all outdoor exertion"),
    5: ("Very Poor", "#8F3F97", "Emergency conditions - everyone should stay indoors"),
}
_AQI_UNKNOWN = ("Unknown", "#808080", "Unknown")

# upper bound (exclusive), level, recommendation
_UV_BANDS = (
    (3, "Low", "No protection needed"),
    (6, "Moderate", "Seek shade during midday hours"),
    (8, "High", "Seek shade, wear sun protective clothing"),
    (11, "Very High", "Avoid being outside during midday hours"),
)
_UV_EXTREME = ("Extreme", "Take all precautions - avoid sun exposure")

_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def condition_details(main: str) -> Tuple[str, str]:
    """Return (description, icon code) for a condition category."""
    return _CONDITIONS.get(main, _DEFAULT_CONDITION)


def condition_for(main: str) -> Condition:
    description, icon = condition_details(main)
    return Condition(main=main, description=description, icon=icon)


def aqi_level(aqi: int) -> str:
    return _AQI_LEVELS.get(aqi, _AQI_UNKNOWN)[0]


def aqi_color(aqi: int) -> str:
    return _AQI_LEVELS.get(aqi, _AQI_UNKNOWN)[1]


def aqi_health_impact(aqi: int) -> str:
    return _AQI_LEVELS.get(aqi, _AQI_UNKNOWN)[2]


def _uv_band(uv_index: float) -> Tuple[str, str]:
    for upper, level, recommendation in _UV_BANDS:
        if uv_index < upper:
            return level, recommendation
    return _UV_EXTREME


def uv_level(uv_index: float) -> str:
    return _uv_band(uv_index)[0]


def uv_recommendation(uv_index: float) -> str:
    return _uv_band(uv_index)[1]


def wind_direction_text(degrees: float) -> str:
    """16-point compass name for a bearing, e.g. 200 -> "SSW"."""
    index = int(((degrees % 360) + 11.25) // 22.5) % 16
    return _COMPASS_POINTS[index]


def dew_point(temperature_c: float, humidity: int) -> float:
    """
    Dew point in Celsius using the Magnus formula.

    Humidity must be above zero; the result is rounded to one decimal.
    """
    a, b = 17.27, 237.7
    alpha = (a * temperature_c) / (b + temperature_c) + math.log(humidity / 100.0)
    return round((b * alpha) / (a - alpha), 1)


def activity_recommendations(condition_main: str, temperature_c: float, wind_speed_ms: float) -> List[str]:
    """Suggested activities; thresholds are Celsius and metres per second."""
    if "rain" in condition_main.lower():
        activities = [
            "Visit a museum or gallery",
            "Go to a shopping mall",
            "Try indoor rock climbing",
            "Visit a cinema",
        ]
    elif temperature_c > 25:
        activities = [
            "Go to the beach or swimming pool",
            "Have a picnic in the park",
            "Go for a bike ride",
            "Outdoor barbecue",
        ]
    elif temperature_c < 10:
        activities = [
            "Visit a cozy café",
            "Go ice skating",
            "Museum hopping",
            "Indoor yoga class",
        ]
    else:
        activities = [
            "Go for a walk in the park",
            "Outdoor photography",
            "Visit local markets",
            "Hiking",
        ]

    if wind_speed_ms > 10:
        activities += ["Go kite flying", "Try windsurfing"]
    return activities


# lower bound (exclusive) in Celsius, items; the last band catches the rest
_CLOTHING_BANDS = (
    (30, ("Light, breathable fabrics", "Shorts or light pants", "T-shirt or tank top",
          "Sun hat and sunglasses", "Sandals or breathable shoes")),
    (20, ("Light layers", "Long pants or jeans", "Light sweater or cardigan", "Comfortable walking shoes")),
    (10, ("Medium weight jacket", "Long pants", "Sweater or hoodie", "Closed-toe shoes")),
    (0, ("Warm coat or heavy jacket", "Thermal layers", "Warm pants", "Gloves and warm hat", "Insulated boots")),
)
_CLOTHING_FREEZING = ("Heavy winter coat", "Multiple thermal layers", "Insulated pants",
                      "Winter gloves and hat", "Warm winter boots", "Scarf")
_RAIN_GEAR = ("Waterproof jacket or raincoat", "Umbrella", "Waterproof shoes or boots", "Quick-dry clothing")


def clothing_recommendations(
    condition_main: str,
    temperature_c: float,
    wind_speed_ms: float,
    humidity: int
) -> List[str]:
    """What to wear: rain gear first, then the temperature band, then wind and humidity extras."""
    clothing = list(_RAIN_GEAR) if "rain" in condition_main.lower() else []

    for lower_bound, items in _CLOTHING_BANDS:
        if temperature_c > lower_bound:
            clothing += items
            break
    else:
        clothing += _CLOTHING_FREEZING

    if wind_speed_ms > 15:
        clothing.append("Windbreaker or wind-resistant jacket")
    if humidity > 80:
        clothing += ["Moisture-wicking fabrics", "Breathable materials"]
    return clothing
