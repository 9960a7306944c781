# -*- coding: utf-8 -*-
"""Shared helpers for storage-level tests (fresh SQLite file per test case)."""

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from mealfit.app_db import init_app_db
from mealfit.auth.storage import upsert_identity
from mealfit.identifiers import IdentityId

ADMIN_EMAIL = "boss@example.com"


class StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="mealfit-test-"))
        self.db_path = self._tmp / "mealfit.db"
        init_app_db(self.db_path)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def make_identity(self, email: str, **fields) -> IdentityId:
        identity, _ = upsert_identity(email=email, super_admin_email=ADMIN_EMAIL, db_path=self.db_path, **fields)
        return IdentityId.parse(identity.id)
