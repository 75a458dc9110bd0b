"""Shared identities and amounts for tests.

Usage:
    from tests.helpers import BUYER, SOL
    # or
    from tests.helpers.constants import BUYER, SOL
"""

from launchpad.constants import LAMPORTS_PER_SOL

# =============================================================================
# Identities
# =============================================================================

AUTHORITY = "authority"
FEE_RECIPIENT = "fee-recipient"
CREATOR = "creator"
BUYER = "buyer"
SELLER = "seller"
OUTSIDER = "outsider"

ASSET_ID = "DOGE2"

# =============================================================================
# Amounts
# =============================================================================

SOL = LAMPORTS_PER_SOL
TOKEN = 10**6  # one whole token at 6 decimals

# Worked example at the default reserves and 100 bps:
# buying 100,000 whole tokens costs 2,796,160 lamports plus a 27,961 fee
EXAMPLE_TOKENS_OUT = 100_000 * TOKEN
EXAMPLE_COST = 2_796_160
EXAMPLE_FEE = 27_961
EXAMPLE_TOTAL = 2_824_121

# Starting balance for funded traders
FUNDED_BALANCE = 1_000 * SOL

# Fixed clock value
NOW = 1_700_000_000
