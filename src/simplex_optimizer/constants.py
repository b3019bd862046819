EPS = 1e-9  # general comparison tolerance
MIN_EPS = 1e-12  # objective-row cleanup
EQUALITY_EPS = 1e-7  # "=" check in vertex enumeration
DEFAULT_DECIMALS = 6
DEFAULT_MAX_ITERATIONS = 100
PHASE1_MAX_ITERATIONS = 200
