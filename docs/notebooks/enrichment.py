# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.18.1
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %% [markdown]
# # Enrichment in the bio-energetic food-web model
#
# This notebook builds on the previous notebooks of the series, especially
# those on using the bio-energetic food-web (BEFW) model and on including
# temperature effects. Here we describe how to simulate nutrient enrichment.
#
# ## Overview
#
# This tutorial covers:
# - The theory of enrichment and logistic producer growth
# - System-wide versus species-specific carrying capacities
# - An enrichment experiment on a niche-model food web
# - Mass and temperature dependence of the carrying capacity

# %% [markdown]
# ## Setup

# %%
import matplotlib.pyplot as plt
import numpy as np

from befw.allometry import T0, carrying
from befw.core import (
    BioenergeticResponse,
    Environment,
    FoodWeb,
    ModelParameters,
    records_to_dataframe,
    simulate,
    sweep_carrying_capacity,
    total_biomass,
)
from befw.plotting import plot_enrichment, plot_trajectory

# %% [markdown]
# ## Nutrient enrichment: the theory
#
# Enrichment can have surprising effects on population and community
# dynamics. It increases the amount of otherwise limiting resources (e.g.
# nitrogen), can favour some species over others through their competitive
# abilities, and can destabilise ecosystem dynamics up to the non-random loss
# of species: the *paradox of enrichment*. It can also change food-web
# structure, for example by raising primary production enough to support
# longer food chains.
#
# Enrichment can be simulated in two ways: with a nutrient intake model, or
# by changing the carrying capacity of the system. We only describe the
# latter here.
#
# Producer growth is a function of the intrinsic growth rate $r_i$, a net
# growth function $G_i$ and the biomass $B_i$. $G_i$ usually describes
# logistic growth:
#
# $$G_i = 1 - \frac{\sum_{j \in competitors} B_j}{K_i}$$
#
# where $K_i$ is the carrying capacity ($K$ when it is defined for the whole
# system). With a system-wide $K$ all producers compete for the same $K$.
# With a species-specific $K_i$, producer $i$ only competes with itself and
# $\sum_j B_j = B_i$.
#
# *Note*: with a system-wide carrying capacity, `alpha` sets the strength of
# intra-specific competition relative to inter-specific competition. It is
# weaker when `alpha < 1`, equal when `alpha == 1` and stronger otherwise.

# %% [markdown]
# ## Changing `K`
#
# To simulate enrichment, change `K` in the `Environment`. A scalar `K` is
# shared by all producers; an array gives each producer its own capacity.
# Pass `productivity="species"` to give every producer the same scalar `K`.
#
# We use `h = 2.0`, a type III functional response, to avoid the collapse of
# the system that happens otherwise.

# %%
web = FoodWeb([[0, 0], [0, 0]])  # just 2 producers, without any consumer
B_init = np.ones(web.richness)

p_sys = ModelParameters(
    web,
    environment=Environment(web, K=10.0),
    functional_response=BioenergeticResponse(web, h=2.0),
)
s_sys = simulate(p_sys, B_init, tmax=500)

p_sp = ModelParameters(
    web,
    environment=Environment(web, K=[10.0, 5.0]),
    functional_response=BioenergeticResponse(web, h=2.0),
)
s_sp = simulate(p_sp, B_init, stop=500)

# %% [markdown]
# In the first case (left) the two producers share a common $K = 10$, so
# each settles at 5 in the absence of consumption. In the second case
# (right) they have capacities of 10 and 5 and both reach their own $K_i$.
# This introduces a hierarchy of competition between producers, similar to a
# common carrying capacity of 15 that is not evenly shared.

# %%
fig, axes = plt.subplots(1, 2, figsize=(10, 3.5))
plot_trajectory(
    s_sys, ax=axes[0], ylims=(0, 10.1), title="$K = 10$", labels=["p1", "p2"]
)
plot_trajectory(
    s_sp, ax=axes[1], ylims=(0, 10.1), title="$K_i = [10, 5]$", labels=["p1", "p2"]
)
plt.tight_layout()
plt.show()

print(f"System-wide K: final biomass {s_sys.final().round(3).to_dict()}")
print(f"Species-specific K: final biomass {s_sp.final().round(3).to_dict()}")

# %% [markdown]
# ## Enrichment
#
# We now look at how a food web of 10 species reacts to increasing carrying
# capacity. A weak type III functional response stabilises the dynamics and
# makes the results easier to interpret.

# %%
rng = np.random.default_rng(123)

K_range = np.arange(1.0, 41.0)
niche_web = FoodWeb.from_model("niche", S=10, C=0.15, rng=rng)
B_init_niche = rng.uniform(size=niche_web.richness)

print(niche_web)
print(f"Connectance: {niche_web.connectance:.3f}")

# %%
records = sweep_carrying_capacity(
    niche_web,
    K_range,
    B_init_niche,
    tmax=500,
    last=100,
    h=2.0,
    progress=lambda i, K: print(K),
)
df_niche = records_to_dataframe(records)
df_niche.head()

# %%
fig = plot_enrichment(df_niche)
plt.show()

# %% [markdown]
# ## Mass and temperature dependence of K
#
# The ability of species to capture and use shared resources depends on
# many factors, among which size and temperature. To simulate their joint
# effect we use the same type of allometric Boltzmann equation that we used
# for biological rates:
#
# $$K_i(M, T) = k_0 M_i^{\beta} \exp\left(E_k \frac{T_0 - T}{k T_0 T}\right)$$
#
# where
# - $K_i$ is the carrying capacity of species $i$ in $[g.m^{-2}]$,
# - the intercept $k_0$ is dimensionless,
# - $M_i$ is the body mass in $[g]$,
# - $E_k$ is the activation energy in $[eV]$,
# - $k$ is the Boltzmann constant in $[eV.K^{-1}]$,
# - $T_0$ and $T$ are the reference and system temperatures in $[K]$.
#
# Parameter values are taken from
# [Binzer et al. (2016)](https://onlinelibrary.wiley.com/doi/abs/10.1111/gcb.13086).

# %%
masses = np.array([1.0, 10.0, 100.0])
temperatures = np.linspace(T0 - 10, T0 + 20, 61)

plt.figure(figsize=(8, 4))
for mass in masses:
    K = carrying(mass, 1.0, temperatures)
    plt.plot(temperatures - 273.15, K, label=f"M = {mass:g} g")
plt.axvline(T0 - 273.15, color="gray", linestyle="--", alpha=0.5)
plt.xlabel("Temperature (°C)")
plt.ylabel("$K_i$ ($k_0 = 1$)")
plt.title("Carrying capacity decreases with warming")
plt.legend()
plt.grid(True, alpha=0.3)
plt.show()

# %% [markdown]
# To simulate enrichment we only need to manipulate $k_0$. Here producers
# get species-specific capacities from their body mass and the temperature
# of the system, and we compare the total biomass across two temperatures.

# %%
producers = niche_web.producers
producer_mass = niche_web.body_mass[producers]
k0_range = np.arange(1.0, 21.0, 2.0)

plt.figure(figsize=(8, 4))
for T in (T0, T0 + 10):
    biomass = []
    for k0 in k0_range:
        params = ModelParameters(
            niche_web,
            environment=Environment(niche_web, K=carrying(producer_mass, k0, T)),
            functional_response=BioenergeticResponse(niche_web, h=2.0),
        )
        sol = simulate(params, B_init_niche, tmax=500)
        biomass.append(total_biomass(sol, last=100))
    plt.plot(k0_range, biomass, "o-", label=f"T = {T - 273.15:.0f} °C")

plt.xlabel("$k_0$")
plt.ylabel("Total biomass")
plt.legend()
plt.grid(True, alpha=0.3)
plt.show()
