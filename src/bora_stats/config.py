from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DB_PATH = DATA_DIR / "bora_stats.duckdb"

# Station
STATION_TIMEZONE = "Europe/Ljubljana"

# Ingestion contract
CSV_DELIMITER = ";"
MISSING_MARKERS = ["", "-", "--", "---", "NA", "N/A", "NaN", "nan", "null"]
YEAR_FILE_PATTERN = r"(?<!\d)(19\d{2}|20\d{2})(?!\d)"

# Valid year-tag range (inclusive)
MIN_YEAR = 1900
MAX_YEAR = 2100

# Semantic hourly schema (year tag comes from the source table, not the row)
CALENDAR_FIELDS = ["month", "day", "hour"]
MEASUREMENT_FIELDS = [
    "wind_speed_kmh",
    "wind_speed_kmh_max",
    "wind_direction_deg",
    "pressure_hpa",
    "temperature_c",
    "humidity_pct",
    "rain_mm",
    "radiation_kj_m2",
    "leaf_wetness_min",
]
HOURLY_FIELDS = ["year"] + CALENDAR_FIELDS + MEASUREMENT_FIELDS

# Station export labels -> semantic names. Semantic names map to themselves
# so already-translated extracts pass through unchanged.
COLUMN_MAP = {
    "mesec": "month",
    "dan": "day",
    "ura": "hour",
    "ura (utc)": "hour",
    "povp. hitrost vetra (km/h)": "wind_speed_kmh",
    "hitrost vetra (km/h)": "wind_speed_kmh",
    "maks. hitrost vetra (km/h)": "wind_speed_kmh_max",
    "sunek vetra (km/h)": "wind_speed_kmh_max",
    "smer vetra (°)": "wind_direction_deg",
    "smer vetra": "wind_direction_deg",
    "zračni tlak (hpa)": "pressure_hpa",
    "tlak (hpa)": "pressure_hpa",
    "temperatura zraka (°c)": "temperature_c",
    "temperatura (°c)": "temperature_c",
    "relativna vlaga (%)": "humidity_pct",
    "vlaga (%)": "humidity_pct",
    "padavine (mm)": "rain_mm",
    "globalno sevanje (kj/m2)": "radiation_kj_m2",
    "sevanje (kj/m2)": "radiation_kj_m2",
    "omočenost listov (min)": "leaf_wetness_min",
    **{name: name for name in CALENDAR_FIELDS + MEASUREMENT_FIELDS},
}

# Event predicates
KMH_TO_MS = 0.27778
BORA_KMH_THRESHOLD = 36.0
BORA_KMH_DIRECTION = (0.0, 90.0)
BORA_GUST_MS_THRESHOLD = 10.0
BORA_GUST_MS_DIRECTION = (45.0, 90.0)

# Statistics
CONFIDENCE_LEVEL = 0.95
NULL_PROPORTION = 0.5
MIN_TREND_YEARS = 3

# Physical bounds for measurements; values outside become absent.
# (low, high) inclusive, None = unbounded.
FIELD_RANGES = {
    "wind_speed_kmh": (0.0, None),
    "wind_speed_kmh_max": (0.0, None),
    "wind_direction_deg": (0.0, 360.0),
    "humidity_pct": (0.0, 100.0),
    "rain_mm": (0.0, None),
    "radiation_kj_m2": (0.0, None),
    "leaf_wetness_min": (0.0, 60.0),
}
