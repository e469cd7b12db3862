# ecotrack/factors.py
# Emission factors tuned for India (kg CO2e).

ACTIVITY_TYPES = ("transportation", "energy", "food")

# per km
TRANSPORT_FACTORS = {
    "car": 0.192,            # petrol/diesel car
    "bus": 0.567,
    "metro_train": 0.008,    # per passenger-km
    "two_wheeler": 0.035,    # scooter/motorcycle
    "auto_rickshaw": 0.1135,
    "bike": 0,
    "walk": 0,
    "electric_car": 0.096,   # grid-charged
}
DEFAULT_TRANSPORT_FACTOR = 0.21

# Points multiplier applied on top of the distance-normalised score
TRANSPORT_POINT_MULTIPLIERS = {
    "walk": 1.5,
    "bike": 1.5,
    "bus": 1.2,
    "metro_train": 1.2,
    "auto_rickshaw": 1.2,
    "electric_car": 1.0,
}
DEFAULT_TRANSPORT_MULTIPLIER = 0.5
MAX_POINTS_DISTANCE_KM = 20

PRIVATE_VEHICLE_MODES = ("car", "two_wheeler")

# Indian grid, per kWh
ENERGY_FACTOR_PER_KWH = 0.82
MAX_POINTS_ENERGY_KWH = 200

# per day of the given diet
FOOD_FACTORS = {
    "dairy-meat-heavy": 3.3,
    "poultry-moderate": 2.7,
    "traditional-vegetarian": 2.0,
    "plant-based-local": 1.5,
}
DEFAULT_FOOD_FACTOR = 3.2

FOOD_POINTS = {
    "plant-based-local": 100,
    "traditional-vegetarian": 75,
    "poultry-moderate": 40,
    "dairy-meat-heavy": 0,
}
DEFAULT_FOOD_POINTS = 30

MAX_POINTS = 100
