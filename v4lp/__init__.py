"""
v4lp - Uniswap V4 concentrated liquidity toolkit.

Tick math, liquidity math, action-stream encoding and range selection
for V4 PositionManager payloads.
"""

__version__ = "1.0.0"
