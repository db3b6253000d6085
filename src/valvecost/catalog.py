"""
Demo catalog used to pre-fill a costing session.

The three seeding inputs live here as plain mappings so the session can start
without any external files:

- ``SUB_MATERIALS_MAP``: material name -> applicable grades
- ``VALID_DEMO_COMBOS``: material name -> process -> eligible suppliers
- ``BASE_PRICE``: material name -> grade -> size -> base rate

Grades without a ``BASE_PRICE`` block are still valid choices in the BOM but
carry no seeded rates.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .models import BUY, MAKE

SAND_CAST = "SAND CAST"
INVESTMENT_CASTING = "INVESTMENT CASTING"
BROUGHT_OUT = "BROUGHT OUT"

SUB_MATERIALS_MAP: Dict[str, List[str]] = {
    # MAKE items
    "BODY": ["CI", "DI", "WCB", "CF8", "CF8M", "LCB", "CF3", "CF3M", "4A", "5A", "6A"],
    "DISC": [
        "NDI",
        "ADI",
        "WCB+NYLON COATED",
        "WCB+AROXY COATED",
        "CF8",
        "CF8M",
        "CF3M",
        "C95400",
        "DUPLEX 4A",
        "DUPLEX 5A",
        "DUPLEX 6A",
        "CF3",
        "LCB+NYLON COATED",
        "LCB+AROXY COATED",
    ],
    # BUY items
    "SEAT": [
        "EPDM Black",
        "BUNA Black",
        "VITON",
        "SILICONE",
        "WHITE EPDM",
        "WHITE NBR",
        "HNBR",
        "HYPALON",
    ],
    "STEM": ["SS 410", "SS316", "17-4PH", "F51", "F53", "F55"],
    "PACKING": ["Corrugated Box"],
    "OPERATOR": ["BARE", "LEVER", "GEAR"],
    "COMPONENTS": [
        "Bushing",
        "Double U Cup Seal",
        "Retainer Ring,Internal Circlip",
        "External Circlip",
        "Spacer",
        "Bottom Plate",
        "Name Plate",
        "Parallel Key",
        "Thrust Bearing",
        "CAUTION STICKER,PAPER",
        "HAMMER SCREW",
    ],
}

VALID_DEMO_COMBOS: Dict[str, Dict[str, List[str]]] = {
    "BODY": {
        SAND_CAST: ["IRONCORE CASTINGS PVT. LTD.", "SHREE GANESH FOUNDRY"],
        INVESTMENT_CASTING: ["PRIMECAST ENGINEERING"],
    },
    "DISC": {
        SAND_CAST: ["IRONCORE CASTINGS PVT. LTD."],
        INVESTMENT_CASTING: ["PRIMECAST ENGINEERING", "PRECIFORM ALLOYS"],
    },
    "SEAT": {
        BROUGHT_OUT: ["ELASTOSEAL RUBBER INDUSTRIES", "POLYSEAL TECHNOLOGIES"],
    },
    "STEM": {
        BROUGHT_OUT: ["SHAFTLINE PRECISION COMPONENTS"],
    },
    "PACKING": {
        BROUGHT_OUT: ["BOXWELL PACKAGING"],
    },
    "OPERATOR": {
        BROUGHT_OUT: ["ACTUMATIC CONTROLS", "TORQFLOW GEARBOXES"],
    },
}

# Rates for MAKE items are per Kg, BUY items per unit.
BASE_PRICE: Dict[str, Dict[str, Dict[str, float]]] = {
    "BODY": {
        "CI": {"2": 104, "3": 118, "4": 136, "6": 172, "8": 214, "10": 260, "12": 318},
        "DI": {"2": 128, "3": 142, "4": 160, "6": 198, "8": 246, "10": 300, "12": 362},
        "WCB": {"2": 186, "3": 204, "4": 230, "6": 284, "8": 350, "10": 420},
        "CF8M": {"2": 412, "3": 446, "4": 498, "6": 590, "8": 704},
    },
    "DISC": {
        "NDI": {"2": 96, "3": 108, "4": 124, "6": 158, "8": 196},
        "CF8M": {"2": 398, "3": 430, "4": 476, "6": 566},
        "C95400": {"2": 720, "3": 780, "4": 860},
    },
    "SEAT": {
        "EPDM Black": {"2": 38, "3": 46, "4": 58, "6": 84, "8": 112},
        "VITON": {"2": 165, "3": 190, "4": 236, "6": 318},
    },
    "STEM": {
        "SS 410": {"2": 210, "3": 238, "4": 276, "6": 352, "8": 448},
        "SS316": {"2": 268, "3": 302, "4": 348, "6": 440},
    },
    "PACKING": {
        "Corrugated Box": {"2": 22, "3": 26, "4": 32, "6": 44, "8": 58},
    },
    "OPERATOR": {
        "LEVER": {"2": 240, "3": 260, "4": 295, "6": 380},
        "GEAR": {"4": 1850, "6": 2300, "8": 2950, "10": 3600, "12": 4400},
    },
}

# Surcharge factors applied while seeding, keyed on (material, process).
PROCESS_RATE_MULTIPLIERS: Dict[Tuple[str, str], float] = {
    ("BODY", INVESTMENT_CASTING): 1.5,
}

DEFAULT_BOM: List[Dict[str, object]] = [
    {"name": "BODY", "qty": 1, "type": MAKE},
    {"name": "DISC", "qty": 1, "type": MAKE},
    {"name": "SEAT", "qty": 1, "type": BUY},
    {"name": "STEM", "qty": 1, "type": BUY},
    {"name": "PACKING", "qty": 1, "type": BUY},
    {"name": "OPERATOR", "qty": 1, "type": BUY},
]

BUY_ITEMS = frozenset({"SEAT", "STEM", "PACKING", "OPERATOR", "COMPONENTS"})

UNIT_PER_KG = "per Kg"
UNIT_PER_UNIT = "per Unit"


def get_unit_for_material(material_name: str) -> str:
    """Return the pricing unit label shown next to a material's rates."""
    return UNIT_PER_UNIT if material_name in BUY_ITEMS else UNIT_PER_KG


__all__ = [
    "SAND_CAST",
    "INVESTMENT_CASTING",
    "BROUGHT_OUT",
    "SUB_MATERIALS_MAP",
    "VALID_DEMO_COMBOS",
    "BASE_PRICE",
    "PROCESS_RATE_MULTIPLIERS",
    "DEFAULT_BOM",
    "BUY_ITEMS",
    "UNIT_PER_KG",
    "UNIT_PER_UNIT",
    "get_unit_for_material",
]
