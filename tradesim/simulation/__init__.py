"""
Simulation Module
================

Recompute-on-demand / recompute-on-tick orchestration of the cost model.
"""

from .controller import SimulationController

__all__ = ['SimulationController']
