# ecotrack/calculator.py
"""
Emission and eco-point calculations.

Every function here is pure: the result depends only on the arguments and
the tables in ``factors``.
"""
import logging
import math
from collections import namedtuple

from .errors import InvalidActivityInput
from .factors import (
    ACTIVITY_TYPES,
    DEFAULT_FOOD_FACTOR,
    DEFAULT_FOOD_POINTS,
    DEFAULT_TRANSPORT_FACTOR,
    DEFAULT_TRANSPORT_MULTIPLIER,
    ENERGY_FACTOR_PER_KWH,
    FOOD_FACTORS,
    FOOD_POINTS,
    MAX_POINTS,
    MAX_POINTS_DISTANCE_KM,
    MAX_POINTS_ENERGY_KWH,
    PRIVATE_VEHICLE_MODES,
    TRANSPORT_FACTORS,
    TRANSPORT_POINT_MULTIPLIERS,
)

logger = logging.getLogger(__name__)

CarbonResult = namedtuple("CarbonResult", ["carbon_kg", "points_earned"])

MAX_RECOMMENDATIONS = 6

HIGH_FOOTPRINT_MSG = "Your carbon footprint is quite high! Focus on reducing your top emission sources to make a significant impact."
GOOD_PROGRESS_MSG = "You are making good progress! Consider adopting more eco-friendly habits to reduce your footprint further."
LOW_FOOTPRINT_MSG = "Great job! Your carbon footprint is relatively low. Keep up the sustainable practices!"
TRANSPORT_DOMINANT_MSG = "Transportation is your biggest emission source. Consider using public transport, carpooling, or eco-friendly alternatives."
ENERGY_DOMINANT_MSG = "Energy consumption is your main concern. Try using energy-efficient appliances and reduce AC usage."
FOOD_DOMINANT_MSG = "Food-related emissions are your primary source. Consider adopting more plant-based meals."
PUBLIC_TRANSPORT_MSG = "For your commute, switch to the Metro, Bus, or shared auto to cut emissions and traffic congestion."
SHORT_TRIPS_MSG = "Try walking or cycling for short errands under 3 km to stay fit and eliminate emissions."
AC_SETTING_MSG = "Adjust your AC setting to 25°C or higher and use electronic fan regulators to save significant power."
PHANTOM_LOAD_MSG = "Unplug electronics like phone chargers, TVs, and set-top boxes when not in use to combat phantom load."
DIET_MSG = "Focus on reducing dairy (paneer, excess milk) and switch to traditional protein sources like Dal and Pulses."
WASTE_MSG = "Practice segregation of waste (wet and dry) at home for efficient composting and recycling."
LOCAL_PRODUCE_MSG = "Support local street vendors and farmers by buying seasonal Indian produce to minimize transport footprint."


def round_half_up(value):
    return int(math.floor(value + 0.5))


def parse_measurement(value, field):
    """Turn a submitted measurement into a positive float.

    Raises InvalidActivityInput for missing, non-numeric, non-finite, zero
    or negative values. Nothing downstream ever sees a rejected value.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidActivityInput(f"{field} is required")
    if isinstance(value, bool):
        raise InvalidActivityInput(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidActivityInput(f"{field} must be a number")
    if not math.isfinite(number) or number <= 0:
        raise InvalidActivityInput(f"{field} must be greater than zero")
    return number


def calculate_transportation_carbon(mode, distance_km):
    factor = TRANSPORT_FACTORS.get(mode, DEFAULT_TRANSPORT_FACTOR)
    carbon_kg = distance_km * factor

    multiplier = TRANSPORT_POINT_MULTIPLIERS.get(mode, DEFAULT_TRANSPORT_MULTIPLIER)
    points = min(distance_km / MAX_POINTS_DISTANCE_KM * 100 * multiplier, MAX_POINTS)
    return CarbonResult(carbon_kg, round_half_up(points))


def calculate_energy_carbon(kwh):
    carbon_kg = kwh * ENERGY_FACTOR_PER_KWH
    # lower usage earns more
    points = max(0, (MAX_POINTS_ENERGY_KWH - kwh) / MAX_POINTS_ENERGY_KWH * 100)
    return CarbonResult(carbon_kg, round_half_up(points))


def calculate_food_carbon(diet_type):
    carbon_kg = FOOD_FACTORS.get(diet_type, DEFAULT_FOOD_FACTOR)
    points = FOOD_POINTS.get(diet_type, DEFAULT_FOOD_POINTS)
    return CarbonResult(carbon_kg, points)


def calculate_activity(activity_type, transportation_mode=None, distance_km=None, energy_kwh=None, diet_type=None):
    """
    Validate the raw fields of one activity submission and compute its result.

    Returns a ``(fields, result)`` pair where ``fields`` holds only the
    columns meaningful for ``activity_type``, already converted to numbers.
    """
    if activity_type not in ACTIVITY_TYPES:
        raise InvalidActivityInput(f"Unknown activity type: {activity_type!r}")

    if activity_type == "transportation":
        if transportation_mode not in TRANSPORT_FACTORS:
            raise InvalidActivityInput(f"Unknown transportation mode: {transportation_mode!r}")
        distance = parse_measurement(distance_km, "distance_km")
        fields = {"transportation_mode": transportation_mode, "distance_km": distance}
        result = calculate_transportation_carbon(transportation_mode, distance)
    elif activity_type == "energy":
        kwh = parse_measurement(energy_kwh, "energy_kwh")
        fields = {"energy_kwh": kwh}
        result = calculate_energy_carbon(kwh)
    else:
        if diet_type not in FOOD_FACTORS:
            raise InvalidActivityInput(f"Unknown diet type: {diet_type!r}")
        fields = {"diet_type": diet_type}
        result = calculate_food_carbon(diet_type)

    fields["activity_type"] = activity_type
    logger.debug("Calculated %s activity: %s", activity_type, result)
    return fields, result


def carbon_by_type(activities):
    totals = {t: 0.0 for t in ACTIVITY_TYPES}
    for a in activities:
        if a.get("activity_type") in totals:
            totals[a["activity_type"]] += float(a.get("carbon_kg") or 0)
    return totals


def get_recommendations(activities, total_carbon):
    """
    Build the ordered advice list for a set of activity dicts.

    Rules are evaluated in a fixed order and the result is capped at six
    entries, so the generic tips at the end drop off first.
    """
    recs = []
    by_type = carbon_by_type(activities)
    transport, energy, food = by_type["transportation"], by_type["energy"], by_type["food"]

    has_high_energy = any(
        a.get("activity_type") == "energy" and (a.get("energy_kwh") or 0) > 150 for a in activities
    )
    has_heavy_diet = any(
        a.get("activity_type") == "food" and a.get("diet_type") == "dairy-meat-heavy" for a in activities
    )
    private_vehicle_trips = sum(1 for a in activities if a.get("transportation_mode") in PRIVATE_VEHICLE_MODES)

    if total_carbon > 200:
        recs.append(HIGH_FOOTPRINT_MSG)
    elif total_carbon > 100:
        recs.append(GOOD_PROGRESS_MSG)
    elif total_carbon > 0:
        recs.append(LOW_FOOTPRINT_MSG)

    # ties between categories produce no message
    if transport > energy and transport > food:
        recs.append(TRANSPORT_DOMINANT_MSG)
    elif energy > transport and energy > food:
        recs.append(ENERGY_DOMINANT_MSG)
    elif food > transport and food > energy:
        recs.append(FOOD_DOMINANT_MSG)

    if private_vehicle_trips > 3:
        recs.append(PUBLIC_TRANSPORT_MSG)
    if private_vehicle_trips > 0:
        recs.append(SHORT_TRIPS_MSG)

    if has_high_energy:
        recs.append(AC_SETTING_MSG)
        recs.append(PHANTOM_LOAD_MSG)

    if has_heavy_diet:
        recs.append(DIET_MSG)

    recs.append(WASTE_MSG)
    recs.append(LOCAL_PRODUCE_MSG)

    return recs[:MAX_RECOMMENDATIONS]
