"""Unit tests for the scene control actions."""

import pytest
from wildfire.controls import (
    create_hazard,
    create_hazard_from_selection,
    mark_regions_flammable,
    mark_selected_regions_flammable,
)
from wildfire.dice import Chance
from wildfire.errors import PreconditionError
from wildfire.notifications import Notifier
from wildfire.registry import HazardRegistry
from wildfire.scene import TokenData


class TestCreateHazard:
    """Test cases for turning a token into a wildfire."""

    def test_marks_and_registers_source(self, scene, run):
        """Test that the source becomes the hazard's first fire."""
        source = scene.add_token(TokenData(name="Campfire", x=100, y=100))
        registry = HazardRegistry()

        hazard = run(create_hazard(scene, source, "2d6", 8, registry=registry))

        assert source.is_hazard(hazard.id)
        assert hazard.id == source.unique_id
        assert registry.get(hazard.id) is hazard
        assert hazard.chance == Chance("2d6", 8)
        assert hazard.template.name == "Campfire"
        assert hazard.burning_cells() == {source.cell}

    def test_reports_creation(self, scene, run):
        """Test the user notification for a new hazard."""
        notifier = Notifier()
        source = scene.add_token(TokenData())
        run(create_hazard(scene, source, notifier=notifier))
        assert notifier.history == [
            ("info", "Fire will now spread with 1d6 (success on 5 or higher).")
        ]

    def test_missing_source(self, scene, run):
        """Test that no source aborts before anything changes."""
        registry = HazardRegistry()
        with pytest.raises(PreconditionError) as excinfo:
            run(create_hazard(scene, None, registry=registry))
        assert excinfo.value.key == "WILDFIRE.NoSource"
        assert len(registry) == 0

    def test_from_selection_warns_without_selection(self, scene, run):
        """Test that the control warns the user when no token is selected."""
        notifier = Notifier()
        result = run(create_hazard_from_selection(scene, HazardRegistry(), notifier))
        assert result is None
        assert notifier.history == [("warning", "Select a token to use as the source of the fire.")]

    def test_from_selection_uses_controlled_token(self, scene, run):
        """Test that the first controlled token becomes the source."""
        token = scene.add_token(TokenData())
        scene.controlled_tokens = [token]
        registry = HazardRegistry()
        hazard = run(create_hazard_from_selection(scene, registry, Notifier(), "1d4", 3))
        assert hazard.id == token.unique_id
        assert hazard.id in registry


class TestMarkRegionsFlammable:
    """Test cases for marking regions flammable."""

    def test_marks_given_regions(self, scene, run):
        """Test that only the given regions become flammable."""
        a = scene.add_region(0, 0, 100, 100)
        scene.add_region(100, 0, 100, 100)
        updated = run(mark_regions_flammable(scene, [a]))
        assert [region.id for region in updated] == [a.id]
        assert scene.flammable_regions() == updated

    def test_no_regions(self, scene, run):
        """Test that an empty selection is rejected."""
        with pytest.raises(PreconditionError):
            run(mark_regions_flammable(scene, []))

    def test_selection(self, scene, run):
        """Test marking the controlled regions and reporting the count."""
        notifier = Notifier()
        scene.controlled_regions = [scene.add_region(0, 0, 50, 50), scene.add_region(50, 0, 50, 50)]
        updated = run(mark_selected_regions_flammable(scene, notifier))
        assert len(updated) == 2
        assert notifier.history == [("info", "Marked 2 tiles as flammable.")]

    def test_selection_empty(self, scene, run):
        """Test the warning for an empty selection."""
        notifier = Notifier()
        assert run(mark_selected_regions_flammable(scene, notifier)) == []
        assert notifier.history == [("warning", "Select one or more tiles to mark as flammable.")]
