"""
Bio-energetic food-web simulations of nutrient enrichment.
"""

__version__ = "0.1.0"
