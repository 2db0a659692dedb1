"""Emit a slow stream of random facet records on stdout.

    uv run python examples/generate_tsv.py | uv run nicefacets
"""
import time

import numpy as np

rng = np.random.default_rng()

colors = {"red": 12.0, "blue": 10.0, "green": 8.0}
cities = ["seattle", "portland", "san jose", "boise"]

for i in range(5000):
    color = rng.choice(list(colors))
    city = rng.choice(cities)
    value = rng.normal(colors[color], 2.0)
    print(f"{value:.2f}\t{color}\t{city}", flush=True)
    if i % 50 == 0:
        time.sleep(0.2)
