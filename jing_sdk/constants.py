"""Constants for the Jing SDK."""

# =============================================================================
# Units
# =============================================================================

STX_DECIMALS = 6

# Contract identifier used by the order-book API for the STX side of a listing
STX_SENTINEL = "STX"
QUOTE_SYMBOL = "STX"
PAIR_SEPARATOR = "-"

# =============================================================================
# Fees
# =============================================================================

# Bid fee tiers: (exclusive lower bound in ustx, divisor). Values are the
# contract's own, not rounded percentages.
BID_FEE_TIERS = (
    (10_000_000_000, 450),
    (5_000_000_000, 200),
)
BID_FEE_BASE_DIVISOR = 133
ASK_FEE_DIVISOR = 400

# =============================================================================
# Contracts
# =============================================================================

JING_DEPLOYER = "SP2BE8TZATXEVPGZ8HAFZYE5GKZ02X0YDKAN7ZTGW"

JING_CONTRACTS = {
    "BID": {"address": JING_DEPLOYER, "name": "stx-ft-swap-v1"},
    "ASK": {"address": JING_DEPLOYER, "name": "ft-stx-swap-v1"},
    "YIN": {"address": JING_DEPLOYER, "name": "yin"},
    "YANG": {"address": JING_DEPLOYER, "name": "yang"},
}

# Read-only and public function names of the swap contracts
FN_GET_SWAP = "get-swap"
FN_GET_DECIMALS = "get-decimals"
FN_OFFER = "offer"
FN_CANCEL = "cancel"
FN_SUBMIT_SWAP = "submit-swap"
FN_RE_PRICE = "re-price"

# =============================================================================
# Token registry
# =============================================================================

# symbol -> "address.contract-name::asset-name"
TOKEN_MAP = {
    "ALEX": "SP102V8P0F7JX67ARQ77WEA3D3CFB5XW39REDT0AM.token-alex::alex",
    "CHA": "SP2ZNGJ85ENDY6QRHQ5P2D4FXKGZWCKTB2T0Z55KS.charisma-token::charisma",
    "DOG": "SP14NS8MVBRHXMM96BQY0727AJ59SWPV7RMHC0NCG.pontis-bridge-DOG::DOG",
    "LEO": "SP1AY6K3PQV5MRT6R4S671NWW2FRVPKM0BR162CT6.leo-token::leo",
    "NOT": "SP32AEEF6WW5Y0NMJ1S8SBSZDAY8R5J32NBZFPKKZ.nope::NOT",
    "PEPE": "SP1Z92MPDQEWZXW36VX71Q25HKF5K2EPCJ304F275.tokensoft-token-v4k68639zxz::tokensoft-token",
    "ROO": "SP2C1WREHGM75C7TGFAEJPFKTFTEGZKF6DFT6E2GE.kangaroo::kangaroo",
    "VELAR": "SP1Y5YSTAHZ88XYK1VPDH24GY0HPX5J4JECTMY4A1.velar-token::velar",
    "WELSH": "SP3NE50GEXFG9SZGTT51P40X2CKYSZ5CC4ZTZ7A2G.welshcorgicoin-token::welshcorgicoin",
    "sBTC": "SM3VDXK3WZZSA84XXFKAFAF15NNZX32CTSG82JFQ4.sbtc-token::sbtc-token",
}

# =============================================================================
# REST API
# =============================================================================

DEFAULT_PAGE_LIMIT = 50
MAX_PAGINATION_LIMIT = 500
OFFER_STATUS_OPEN = "open"
OFFER_STATUS_PRIVATE = "private"
