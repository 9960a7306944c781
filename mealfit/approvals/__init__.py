# -*- coding: utf-8 -*-
"""Admin approval of newly signed-in identities."""
