"""
Angle model fit to the Berry (1996) putting data
------------------------------------------------

Fits the one-parameter angle model with NUTS, checks convergence, and plots
the posterior predictive success curve (mean and 90% band) against the
empirical proportions. A Langevin fit and a Laplace fit are overlaid as
cross-checks of the sampler.

Run after `pip install -e .[examples]`.
"""
from __future__ import annotations

import os

import matplotlib.pyplot as plt
import numpy as np

from golfputt.data import load_berry_1996
from golfputt.inference import LangevinSampler, LaplaceApproximation, NUTSSampler
from golfputt.model import AngleModel
from golfputt.utils import print_parameter_summary

PLOTS_DIR = os.path.join(os.path.dirname(__file__), "plots")
INCHES_PER_FOOT = 12.0


# 1) Data
print("[1/5] Loading data...")
data = load_berry_1996()
summary = data.empirical_summary()
print(data)

# 2) NUTS fit
print("[2/5] Sampling with NUTS (4 chains)...")
model = AngleModel()
model.fit(data, inference=NUTSSampler(num_samples=1000, num_chains=4, seed=0))
param_post = model.posterior(kind="parameter")
print_parameter_summary(param_post, n_samples=4000)

# 3) Diagnostics
print("[3/5] Convergence diagnostics...")
report = param_post.diagnostics()
print(f"  R-hat: {report.rhat['sigma']:.4f}")
print(f"  ESS:   {report.ess['sigma']:.0f} ({report.ess_ratio['sigma']:.2f} of draws)")
print(f"  divergent transitions: {report.num_divergent}")
if not report.ok:
    for message in report.warnings:
        print(f"  WARNING: {message}")

# 4) Cross-checks
print("[4/5] Langevin and Laplace cross-checks...")
langevin_post = LangevinSampler(num_samples=2000, num_chains=4, seed=1).fit(model, data)
laplace_post = LaplaceApproximation().fit(model, data)
for name, post in (("NUTS", param_post), ("Langevin", langevin_post), ("Laplace", laplace_post)):
    print(f"  {name:9s} sigma = {float(post.sigma_degrees):.3f} deg")

# 5) Posterior predictive curves
print("[5/5] Plotting...")
grid = data.distance_grid(200, start=model.geometry.threshold_distance + 1.0)
pred = model.posterior(grid)
lower, upper = pred.credible_band(0.9)
curves = np.asarray(pred.curves)

os.makedirs(PLOTS_DIR, exist_ok=True)
fig, ax = plt.subplots(figsize=(8, 5))
feet = grid / INCHES_PER_FOOT
for curve in curves[:: max(1, len(curves) // 40)]:
    ax.plot(feet, curve, color="tab:blue", alpha=0.05, lw=1)
ax.fill_between(feet, lower, upper, color="tab:blue", alpha=0.25, label="90% band")
ax.plot(feet, pred.mean, color="tab:blue", lw=2, label="posterior mean")
ax.errorbar(
    summary["distance"] / INCHES_PER_FOOT,
    summary["proportion"],
    yerr=summary["std_error"],
    fmt="o",
    color="k",
    ms=4,
    label="data (±1 s.e.)",
)
ax.set_xlabel("Distance from hole (feet)")
ax.set_ylabel("Probability of success")
ax.set_ylim(0, 1.02)
ax.set_title(f"Angle model, sigma = {float(param_post.sigma_degrees):.2f} deg")
ax.legend()
fig.tight_layout()
out = os.path.join(PLOTS_DIR, "berry_angle_model.png")
fig.savefig(out, dpi=150)
print(f"Saved plot to {out}")
