# MIT License (see LICENSE)
"""
Exception and warning types raised by the simulation.

Invalid configuration is reported with plain ValueError; the types here
cover runtime conditions specific to cable deployment.
"""
from __future__ import annotations


class DeploymentLagWarning(RuntimeWarning):
    """
    The anchor moved away from the cable faster than points could be added.

    Emitted when the gap between the anchor and the anchor-adjacent point
    still exceeds one link length after the per-step insertion limit was
    reached. The deployed length then trails the true separation.
    """


class DeploymentLagError(RuntimeError):
    """Strict-mode counterpart of DeploymentLagWarning, raised before the step mutates state."""
