# -*- coding: utf-8 -*-
"""Identity store, session tokens and the Google sign-in flow."""
