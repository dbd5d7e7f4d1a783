"""Tests that every gymdesk module imports cleanly."""

import importlib
import pkgutil

import pytest

import gymdesk

MODULES = sorted(
    info.name for info in pkgutil.walk_packages(gymdesk.__path__, prefix="gymdesk.")
)


class TestImports:
    """Class bodies and annotations are evaluated at import time."""

    def test_modules_found(self):
        assert "gymdesk.db.repositories" in MODULES
        assert "gymdesk.web.app" in MODULES

    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name):
        assert importlib.import_module(name) is not None

    def test_trainer_listing_does_not_shadow_list(self):
        from gymdesk.db import TrainerRepository

        assert "list" not in vars(TrainerRepository)
        assert callable(TrainerRepository.list_filtered)
