"""Protocol constants for the Swapper exchange.

Centralizes fee bounds, liquidity guards, and oracle parameters.
"""

# Null identity; never accepted as a token address
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

# Fees are expressed as numerator / FEE_DENOMINATOR (3 = 0.3%)
FEE_DENOMINATOR = 1000
DEFAULT_FEE_NUMERATOR = 3
# 5% ceiling on the owner-settable fee
MAX_FEE_NUMERATOR = 50

# A swap may never leave fewer than this many units of the output token
MIN_LIQUIDITY = 1000

# Maximum share of the output reserve a single swap can take (in percent)
MAX_SWAP_IMPACT_PERCENT = 30

# Fixed-point base for oracle prices (1e18)
PRICE_SCALE = 10**18

# Multiplier applied to SCALE^2 / balance so that a balance of 100 whole
# tokens prices at exactly 1.0 (PRICE_SCALE)
PRICE_SCALE_ADJUST = 100

# Oracle history and averaging window
MAX_PRICE_HISTORY = 5
MIN_TWAP_OBSERVATIONS = 5
TWAP_WINDOW = 24 * 60 * 60  # 1 day, in seconds

# Default custody account of the exchange itself
EXCHANGE_ADDRESS = "0xe4f50a80a19a36077fdda1ce1baac9a208fab97d"
