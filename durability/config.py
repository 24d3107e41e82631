# Sanitizer clamp ranges
WATTS_MIN = 0.0
WATTS_MAX = 2000.0
HEARTRATE_MIN = 40.0
HEARTRATE_MAX = 220.0

# Stream channels (raw key -> canonical name)
CHANNELS = {
    'time': 'time',
    'watts': 'watts',
    'heartrate': 'heartrate',
    'distance': 'distance',
    'altitude': 'altitude',
    'velocity_smooth': 'velocity',
    'cadence': 'cadence',
}

# Hard-failure guard
MIN_SAMPLES = 10               # aligned time/watts/heartrate samples

# Segmentation
QUARTILE_FRACTIONS = (0.25, 0.5, 0.75)

# Windowed statistics
NP_WINDOW_SEC = 30.0           # normalized power rolling window
NP_MIN_SAMPLES = 30
ROLLING_BEST_SEC = 300.0       # rolling 5-minute best power

# Power at fixed heart rate
POWER_AT_HR_CENTER = 150.0     # bpm
POWER_AT_HR_TOLERANCE = 2.5    # bpm either side

# Zones
Z2_FIXED_BAND = (120.0, 150.0)         # bpm
Z2_HRR_BAND = (60.0, 70.0)             # percent of heart rate reserve

# Fatigue resistance curve
FATIGUE_OFFSETS_SEC = (0, 3600, 7200, 10800)
FATIGUE_DURATIONS_SEC = (300, 600, 1200, 3600)

# Scoring
SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Cadence / HR fatigue summary thresholds
CADENCE_DROP_WARN = -5.0       # rpm
HR_CREEP_WARN = 5.0            # bpm

# Baseline
BASELINE_FIELDS = {
    'pw_hr_drift': 'pwHrDrift',
    'rolling5_diff': 'rolling5Diff',
    'power_150_delta': 'power150Delta',
    'z2_early': 'z2Early',
    'z2_late': 'z2Late',
    'cadence_drop': 'cadenceDrop',
    'hr_creep': 'hrCreep',
}
BASELINE_WINDOW_DAYS = 56
