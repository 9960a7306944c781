# -*- coding: utf-8 -*-
"""Meals domain: one entry per (identity, day, meal type)."""
