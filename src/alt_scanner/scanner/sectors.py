"""Static symbol-to-sector catalog."""

from typing import Dict, Optional

UNKNOWN_SECTOR = "Unknown"

SECTOR_MAPPING: Dict[str, str] = {
    # Layer 1
    "BTC": "Layer 1",
    "ETH": "Layer 1",
    "SOL": "Layer 1",
    "BNB": "Layer 1",
    "AVAX": "Layer 1",
    "ADA": "Layer 1",
    "TRX": "Layer 1",
    "TON": "Layer 1",
    "NEAR": "Layer 1",
    "SUI": "Layer 1",
    # Memecoin
    "DOGE": "Memecoin",
    "SHIB": "Memecoin",
    "PEPE": "Memecoin",
    "WIF": "Memecoin",
    "FLOKI": "Memecoin",
    "BONK": "Memecoin",
    # DeFi
    "UNI": "DeFi",
    "LINK": "DeFi",
    "LDO": "DeFi",
    "AAVE": "DeFi",
    "MAKER": "DeFi",
    "ENA": "DeFi",
    "PENDLE": "DeFi",
    # AI
    "TAO": "AI",
    "RNDR": "AI",
    "FET": "AI",
    "AGIX": "AI",
    "OCEAN": "AI",
    # Gaming / metaverse
    "IMX": "Gaming",
    "SAND": "Gaming",
    "MANA": "Gaming",
    "GALA": "Gaming",
    # Real-world assets
    "ONDO": "RWA",
    "POLYX": "RWA",
    # Decentralized physical infrastructure
    "FIL": "DePIN",
    "ICP": "DePIN",
    "HNT": "DePIN",
    "AR": "DePIN",
}


class SectorCatalog:
    """Sector lookup with optional overrides layered over the built-in mapping."""

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        self._mapping = dict(SECTOR_MAPPING)
        if overrides:
            self._mapping.update({k.upper(): v for k, v in overrides.items()})

    def get_sector(self, symbol: str) -> str:
        return self._mapping.get(symbol.upper(), UNKNOWN_SECTOR)

    def __len__(self) -> int:
        return len(self._mapping)


def get_sector(symbol: str) -> str:
    """Sector of a symbol in the built-in catalog."""
    return SECTOR_MAPPING.get(symbol.upper(), UNKNOWN_SECTOR)
