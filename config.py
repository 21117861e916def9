"""
Configuration file for the Ultra Race Planner
All tunable parameters in one place with clear documentation
"""

# ========================================
# SEGMENTATION
# ========================================

# Nominal length of one simulation segment (meters)
# Every leg is cut into steps of this size; the last step of a leg carries the remainder
SEGMENT_LENGTH_M = 25.0

# Remainders shorter than this are merged into the previous segment (meters)
MIN_SEGMENT_M = 1e-6

# ========================================
# GRADE & HIKING MODEL
# ========================================

# Downhills steeper than this (% grade) switch from "benefit" to "penalty"
STEEP_DOWNHILL_GRADE = -3.0

# Horizontal walking pace relative to flat running pace once hiking starts
HIKE_HORIZONTAL_BASE = 1.5
# Extra slowdown for every 10 grade points above the hike threshold
HIKE_HORIZONTAL_PER_10PCT = 0.2

# ========================================
# FATIGUE MODEL
# ========================================

# Effort-seconds are normalised by this (10 hours of flat running = 1 unit)
EFFORT_NORMALISER_S = 36000.0

# Muscular damage coefficients per km, by (hiking, grade) band
DAMAGE_HIKING = 0.2
DAMAGE_STEEP_DOWNHILL = 3.0   # grade < -10%
DAMAGE_DOWNHILL = 2.0         # grade < -2%
DAMAGE_UPHILL = 1.0           # grade > 2%
DAMAGE_FLAT = 0.5
STEEP_DOWNHILL_DAMAGE_GRADE = -10.0
DOWNHILL_DAMAGE_GRADE = -2.0
UPHILL_DAMAGE_GRADE = 2.0

# "Finish line pull": in the final 10% of the race the fade rate ramps down
FINISH_PULL_START = 0.9
FINISH_PULL_STRENGTH = 0.25

# Fallbacks when a profile leaves a fatigue parameter unset
DEFAULT_FADE_PER_10K = 1.0
DEFAULT_MUSCULAR_RESILIENCE = 0.003
DEFAULT_HIKING_ECONOMY = 0.085

# ========================================
# SLEEP RECOVERY
# ========================================

# (minutes slept, fraction of fatigue removed) breakpoints, linear in between
# Metabolic fatigue recovers faster and more completely than muscular damage
METABOLIC_RESET_CURVE = ((0.0, 0.0), (30.0, 0.20), (90.0, 0.50), (180.0, 0.80), (270.0, 0.95))
MUSCULAR_RESET_CURVE = ((0.0, 0.0), (30.0, 0.05), (60.0, 0.10), (90.0, 0.20), (180.0, 0.30))

# ========================================
# NIGHT & WEATHER
# ========================================

# Pace multiplier while running in the dark, by night-running confidence
NIGHT_FACTORS = {"High": 1.0, "Medium": 1.05, "Low": 1.10}

# Heat: 5% penalty per 10C above 15C
HEAT_REFERENCE_C = 15.0
HEAT_PENALTY_PER_10C = 0.05

# Humidity: 1% penalty per 10% above 60%
HUMIDITY_REFERENCE_PCT = 60.0
HUMIDITY_PENALTY_PER_10PCT = 0.01

# Sky condition adjustments
SKY_ADJUSTMENT = {"Sunny": 0.02, "Overcast": -0.01, "Partly Cloudy": 0.0}

# ========================================
# GOAL SOLVER & DISTANCE SCALING
# ========================================

# Fixed bisection budget: 20 halvings of [0, 2 x goal] is sub-second for real races
GOAL_SOLVER_ITERATIONS = 20

# Riegel exponent (how pace degrades with distance)
# 1.06 is standard for road races
RIEGEL_EXPONENT = 1.06

# Reference performances the flat time can be derived from (km)
REFERENCE_DISTANCES_KM = {
    "10k": 10.0,
    "half": 21.0975,
    "marathon": 42.195,
    "50k": 50.0,
}

# ========================================
# RUNNER PROFILE PRESETS
# ========================================

PROFILE_PRESETS = {
    "allrounder": dict(heat=1.0, fade_per_10k=1.0, night_conf="Medium", up_cost_pct=2.8, down_benefit_pct=1.0,
                       down_penalty_pct=1.2, t_road=1.0, t_smooth=1.0, t_mixed=1.05, t_tech=1.15, t_sand=1.20,
                       t_slow=1.25, hike=True, hike_thr=15.0, vam=800.0,
                       muscular_resilience=0.003, hiking_economy_factor=0.085),
    "mountain": dict(heat=1.0, fade_per_10k=1.2, night_conf="High", up_cost_pct=2.5, down_benefit_pct=1.2,
                     down_penalty_pct=1.0, t_road=1.02, t_smooth=1.0, t_mixed=1.05, t_tech=1.12, t_sand=1.25,
                     t_slow=1.30, hike=True, hike_thr=12.0, vam=1000.0,
                     muscular_resilience=0.0015, hiking_economy_factor=0.085),
    "endurance": dict(heat=1.0, fade_per_10k=0.8, night_conf="Medium", up_cost_pct=2.8, down_benefit_pct=1.0,
                      down_penalty_pct=1.4, t_road=1.0, t_smooth=1.0, t_mixed=1.05, t_tech=1.20, t_sand=1.20,
                      t_slow=1.25, hike=True, hike_thr=18.0, vam=700.0,
                      muscular_resilience=0.004, hiking_economy_factor=0.085),
    "beginner": dict(heat=0.9, fade_per_10k=1.5, night_conf="Low", up_cost_pct=3.5, down_benefit_pct=0.8,
                     down_penalty_pct=1.8, t_road=1.0, t_smooth=1.02, t_mixed=1.10, t_tech=1.25, t_sand=1.30,
                     t_slow=1.35, hike=True, hike_thr=10.0, vam=600.0,
                     muscular_resilience=0.005, hiking_economy_factor=0.085),
    "undertrained": dict(heat=0.85, fade_per_10k=2.5, night_conf="Low", up_cost_pct=4.0, down_benefit_pct=0.7,
                         down_penalty_pct=2.5, t_road=1.0, t_smooth=1.03, t_mixed=1.12, t_tech=1.30, t_sand=1.35,
                         t_slow=1.40, hike=True, hike_thr=8.0, vam=550.0,
                         muscular_resilience=0.008, hiking_economy_factor=0.085),
    "crammer": dict(heat=1.05, fade_per_10k=0.9, night_conf="Medium", up_cost_pct=3.2, down_benefit_pct=0.8,
                    down_penalty_pct=2.8, t_road=1.0, t_smooth=1.0, t_mixed=1.10, t_tech=1.28, t_sand=1.30,
                    t_slow=1.30, hike=True, hike_thr=16.0, vam=650.0,
                    muscular_resilience=0.009, hiking_economy_factor=0.085),
}
DEFAULT_PRESET = "allrounder"

# ========================================
# RACE DAY DEFAULTS
# ========================================
DEFAULT_START_TIME = "06:00"
DEFAULT_NIGHT_FROM = "19:00"
DEFAULT_NIGHT_TO = "06:00"
DEFAULT_TEMP_C = 18.0
DEFAULT_NIGHT_TEMP_DROP_C = 8.0
DEFAULT_HUMIDITY_PCT = 50.0
DEFAULT_CARBS_PER_HOUR = 70  # grams
DEFAULT_WATER_PER_HOUR = 500  # ml

# ========================================
# GPX PROCESSING PARAMETERS
# ========================================

# Earth radius for distance calculations (meters)
EARTH_R = 6371000.0

# ========================================
# PHYSICAL LIMITS & SAFETY BOUNDS
# ========================================

# Small number to prevent division by zero
EPSILON = 1e-6

# ========================================
# UNIT CONVERSIONS
# ========================================
METERS_PER_KM = 1000.0
MILES_TO_KM = 1.609344
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60
