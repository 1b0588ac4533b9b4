"""
Core classes and functions for bio-energetic food-web simulations
"""

from befw.allometry import carrying
from befw.foodweb import FoodWeb
from befw.metrics import (
    ProducerGrowth,
    population_stability,
    producer_growth,
    species_persistence,
    total_biomass,
)
from befw.model import BioenergeticResponse, BioRates, Environment, ModelParameters
from befw.simulate import Solution, simulate
from befw.sweep import SummaryRecord, records_to_dataframe, sweep_carrying_capacity

__all__ = [
    # Model building
    "BioRates",
    "BioenergeticResponse",
    "Environment",
    "FoodWeb",
    "ModelParameters",
    # Simulation
    "ProducerGrowth",
    "Solution",
    "SummaryRecord",
    "carrying",
    "population_stability",
    "producer_growth",
    "records_to_dataframe",
    "simulate",
    "species_persistence",
    "sweep_carrying_capacity",
    "total_biomass",
]
