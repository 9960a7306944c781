# -*- coding: utf-8 -*-
"""Workouts domain: any number of workout types per day, one row per type."""
