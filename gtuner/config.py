# Standard guitar tuning: { string_label: frequency_hz } (low to high)
STANDARD_TUNING = {
    "E2": 82.41,
    "A2": 110.00,
    "D3": 146.83,
    "G3": 196.00,
    "B3": 246.94,
    "E4": 329.63,
}

# Name used for the unlocked target (nearest string wins)
AUTO_NAME = "AUTO"

# Audio settings
# Browsers and most sound cards run at 44.1kHz; the engine never resamples,
# so this is only the default for synthetic signals and the benchmark
SAMPLE_RATE = 44100

# Frame size delivered by the audio source (~93ms window at 44.1kHz)
FRAME_SIZE = 4096

# Note naming: A4 = 440 Hz = MIDI 69
A4_HZ = 440.0
A4_MIDI = 69
NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
NO_NOTE = "—"

# --- Pitch detection (autocorrelation) ---
# Frames quieter than this RMS are treated as silence
RMS_GATE = 0.005

# Lag search range: periods between 1/500 s and 1/75 s
# (high E4 plus margin down to below low E2)
PERIOD_MIN_HZ = 500.0
PERIOD_MAX_HZ = 75.0

# Edge samples louder than this are trimmed before autocorrelating
TRIM_THRESHOLD = 0.15

# Normalized autocorrelation peaks must exceed this to count as periodic
PEAK_THRESHOLD = 0.4

# Final accepted frequency range
FMIN = 70.0
FMAX = 500.0

# --- Octave correction (relative to the locked target) ---
OCTAVE_UPPER_RATIO = 1.5
OCTAVE_LOWER_RATIO = 0.75

# --- Temporal smoothing ---
# Above this frequency strings change faster: shorter median window and
# faster smoothing
HIGH_FREQ_HZ = 200.0
MEDIAN_WINDOW_HIGH = 4
MEDIAN_WINDOW_LOW = 7

# Velocity = exponential estimate of how fast the cents offset moves
VELOCITY_DECAY = 0.7
VELOCITY_GAIN = 0.3
# |velocity| at which smoothing is damped the most, and the damping floor
VELOCITY_DAMPING_SPAN = 30.0
VELOCITY_FACTOR_FLOOR = 0.5

# Adaptive EMA rates when locked to a string: (large deviation, small deviation)
LOCKED_ALPHA_HIGH = (0.3, 0.2)
LOCKED_ALPHA_LOW = (0.25, 0.15)
LOCKED_DEVIATION_CENTS = 15.0

# Adaptive EMA rates in auto mode: (large deviation, small deviation)
AUTO_ALPHA = (0.45, 0.35)
AUTO_DEVIATION_CENTS = 10.0

# --- Evaluation ---
# |velocity| at which a reading counts as fully unstable
STABILITY_SPAN = 20.0
CONFIDENCE_DECAY = 0.8
CONFIDENCE_GAIN = 0.2

IN_TUNE_CENTS = 5.0
IN_TUNE_CONFIDENCE = 0.6
SETTLING_CONFIDENCE = 0.5

# Display range of the needle in cents
DISPLAY_CENTS = 50.0
MIN_NEEDLE_OPACITY = 0.4

# --- Reference tone ---
REFERENCE_DURATION = 1.0
REFERENCE_TAIL = 0.05
REFERENCE_ATTACK = 0.05
REFERENCE_GAIN = 0.25

# --- Benchmark ---
BENCHMARK_SAMPLES = 300
BENCHMARK_FREQ_RANGE = (75.0, 400.0)
