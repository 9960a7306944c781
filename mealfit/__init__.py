# -*- coding: utf-8 -*-
"""mealfit — personal meal & workout log with an approval-gated sign-in."""

__version__ = "0.1.0"
