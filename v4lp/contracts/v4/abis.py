"""
Uniswap V4 ABIs

V4 uses a PoolManager singleton (state read through StateView)
and an action-based PositionManager.
"""

_POOL_KEY_COMPONENTS = [
    {"name": "currency0", "type": "address"},
    {"name": "currency1", "type": "address"},
    {"name": "fee", "type": "uint24"},
    {"name": "tickSpacing", "type": "int24"},
    {"name": "hooks", "type": "address"}
]

# V4 StateView ABI (for reading pool state)
# NOTE: StateView contract already knows the PoolManager address (via ImmutableState)
# so we only pass poolId, NOT poolManager address
V4_STATE_VIEW_ABI = [
    # Get pool slot0 (price, tick, fees)
    {
        "inputs": [
            {"name": "poolId", "type": "bytes32"}
        ],
        "name": "getSlot0",
        "outputs": [
            {"name": "sqrtPriceX96", "type": "uint160"},
            {"name": "tick", "type": "int24"},
            {"name": "protocolFee", "type": "uint24"},
            {"name": "lpFee", "type": "uint24"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    # Get pool liquidity
    {
        "inputs": [
            {"name": "poolId", "type": "bytes32"}
        ],
        "name": "getLiquidity",
        "outputs": [{"name": "", "type": "uint128"}],
        "stateMutability": "view",
        "type": "function"
    },
]

V4_POSITION_MANAGER_ABI = [
    # Entry point for action streams: unlockData = abi.encode(bytes actions, bytes[] params)
    {
        "inputs": [
            {"name": "unlockData", "type": "bytes"},
            {"name": "deadline", "type": "uint256"}
        ],
        "name": "modifyLiquidities",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    },
    # Returns (PoolKey, PositionInfo) where PositionInfo is packed data
    {
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "name": "getPoolAndPositionInfo",
        "outputs": [
            {
                "components": _POOL_KEY_COMPONENTS,
                "name": "poolKey",
                "type": "tuple"
            },
            {"name": "info", "type": "uint256"}  # Packed PositionInfo
        ],
        "stateMutability": "view",
        "type": "function"
    },
    # Get position liquidity
    {
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "name": "getPositionLiquidity",
        "outputs": [{"name": "liquidity", "type": "uint128"}],
        "stateMutability": "view",
        "type": "function"
    },
    # ERC721 functions
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    # ERC721Enumerable functions for wallet scanning
    {
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "index", "type": "uint256"}
        ],
        "name": "tokenOfOwnerByIndex",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    # Transfer event
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": True, "name": "tokenId", "type": "uint256"}
        ],
        "name": "Transfer",
        "type": "event"
    },
]
