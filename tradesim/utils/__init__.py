"""
Utilities Module for the Trade Simulator
=======================================

Configuration management and logging setup shared by every component.
"""

from .config import config, Config

__all__ = ['config', 'Config']
