"""Protocol constants for the launchpad.

Centralizes namespace tags, fee bounds, metadata limits and the default
reserve parameters for newly created curves.
"""

# Namespace tags for deterministic address derivation
CURVE_SEED = b"bonding_curve"
CONFIG_SEED = b"global"
VESTING_SEED = b"vesting"

# Basis point denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Governance bound on the trading fee (1000 bps = 10%)
MAX_FEE_BPS = 1_000
DEFAULT_FEE_BPS = 100

# Metadata length limits (characters)
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200

# Default reserve parameters (token amounts at 6 decimals, sol in lamports)
INITIAL_VIRTUAL_TOKEN_RESERVES = 1_073_000_000_000_000
INITIAL_VIRTUAL_SOL_RESERVES = 30_000_000_000
INITIAL_REAL_TOKEN_RESERVES = 793_100_000_000_000
TOKEN_TOTAL_SUPPLY = 1_000_000_000_000_000

# Threshold graduation fires once real sol reserves reach 69 SOL
GRADUATION_THRESHOLD = 69_000_000_000

# Scale for the integer price handed to liquidity venues
MIGRATION_PRICE_SCALE = 1_000_000

LAMPORTS_PER_SOL = 1_000_000_000
TOKEN_DECIMALS = 6
