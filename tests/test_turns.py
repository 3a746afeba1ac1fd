"""Unit tests for the turn tracker, turn trigger and hazard registry."""

import pytest
from wildfire.dice import Chance
from wildfire.geometry import Cell
from wildfire.hazard import Wildfire
from wildfire.registry import HazardRegistry
from wildfire.scene import TokenData
from wildfire.turns import TurnTracker, TurnTrigger


class TestHazardRegistry:
    """Test cases for HazardRegistry."""

    def test_register_and_get(self, scene, fixed_roller):
        """Test registering and looking up hazards."""
        registry = HazardRegistry()
        hazard = Wildfire(scene, TokenData(), roller=fixed_roller(1), hazard_id=4)
        assert registry.register(hazard) is hazard
        assert 4 in registry
        assert registry.get(4) is hazard
        assert registry.get(None) is None
        assert list(registry) == [hazard]

    def test_unregister_and_clear(self, scene, fixed_roller):
        """Test removing hazards."""
        registry = HazardRegistry()
        registry.register(Wildfire(scene, TokenData(), roller=fixed_roller(1), hazard_id=1))
        registry.register(Wildfire(scene, TokenData(), roller=fixed_roller(1), hazard_id=2))
        assert registry.unregister(1).id == 1
        assert registry.unregister(1) is None
        registry.clear()
        assert len(registry) == 0


class TestTurnTracker:
    """Test cases for TurnTracker."""

    def test_turn_order_wraps_into_next_round(self, run):
        """Test that turns cycle through combatants and count rounds."""
        tracker = TurnTracker()
        tracker.add_combatant("Hero")
        tracker.add_combatant("Goblin")
        seen = []

        async def listener(combatant):
            seen.append((tracker.round, combatant.name))

        tracker.on_turn(listener)

        async def three_turns():
            for _ in range(3):
                await tracker.next_turn()

        run(three_turns())
        assert seen == [(1, "Hero"), (1, "Goblin"), (2, "Hero")]

    def test_empty_tracker_does_not_start(self, run):
        """Test that a tracker without combatants has no turns."""
        tracker = TurnTracker()
        assert run(tracker.next_turn()) is None
        assert not tracker.started

    def test_end_clears_session(self, scene, run, fixed_roller):
        """Test that ending the session drops combatants and hazards."""
        tracker = TurnTracker()
        hazard = Wildfire(scene, TokenData(), roller=fixed_roller(1), hazard_id=1)
        tracker.add_hazard(hazard)
        run(tracker.start())
        run(tracker.end())
        assert tracker.combatants == []
        assert len(tracker.registry) == 0
        assert tracker.current is None

    def test_add_hazard_stores_chance(self, scene, fixed_roller):
        """Test that a hazard combatant carries the hazard's chance."""
        tracker = TurnTracker()
        hazard = Wildfire(scene, TokenData(), chance=Chance("2d6", 9), roller=fixed_roller(1), hazard_id=7)
        combatant = tracker.add_hazard(hazard)
        assert combatant.token_id == 7
        assert combatant.chance == Chance("2d6", 9)
        assert combatant.name == "Fire"
        assert 7 in tracker.registry


class TestTurnTrigger:
    """Test cases for spreading hazards on their turn."""

    @pytest.fixture
    def burning_scene(self, scene):
        """A scene with a flammable 3x3 corner and an unmarked token at (0, 0)."""
        scene.add_region(0, 0, 150, 150, flammable=True)
        source = scene.add_token(TokenData(x=0, y=0))
        return scene, source

    def test_spreads_on_hazard_turn(self, burning_scene, run):
        """Test that the hazard's turn runs one spread step with the stored chance."""
        scene, source = burning_scene
        hazard = Wildfire(scene, source, chance=Chance("1d6", 7))
        source.data = source.data.with_flag("hazard", hazard.id)

        tracker = TurnTracker()
        tracker.add_combatant("Hero")
        tracker.registry.register(hazard)
        tracker.add_combatant("Fire", token=source, chance=Chance("1d1", 0))
        TurnTrigger.bind(tracker)

        run(tracker.next_turn())
        assert hazard.burning_cells() == {Cell(0, 0)}

        run(tracker.next_turn())
        assert hazard.burning_cells() == {Cell(0, 0), Cell(0, 1), Cell(1, 0), Cell(1, 1)}

    def test_falls_back_to_hazard_chance(self, burning_scene, run):
        """Test that a combatant without a stored chance uses the hazard's."""
        scene, source = burning_scene
        source.data = source.data.with_flag("hazard", source.unique_id)
        hazard = Wildfire(scene, source, chance=Chance("1d1", 0))

        tracker = TurnTracker()
        tracker.registry.register(hazard)
        tracker.add_combatant("Fire", token=source)
        trigger = TurnTrigger.bind(tracker)

        assert run(trigger(tracker.combatants[0])) != []

    def test_ignores_other_combatants(self, scene, run):
        """Test that combatants without a hazard do nothing."""
        tracker = TurnTracker()
        combatant = tracker.add_combatant("Hero", token=scene.add_token(TokenData(name="Hero")))
        trigger = TurnTrigger(tracker.registry)
        assert run(trigger(combatant)) == []

    def test_failed_step_propagates_after_turn_advances(self, burning_scene, run):
        """Test that a failing spread surfaces from next_turn."""
        scene, source = burning_scene
        source.data = source.data.with_flag("hazard", source.unique_id)
        hazard = Wildfire(scene, source, chance=Chance("1d1", 0))

        async def fail(records):
            raise RuntimeError("offline")

        scene.create_tokens = fail
        tracker = TurnTracker()
        tracker.add_combatant("Hero")
        tracker.add_hazard(hazard)
        TurnTrigger.bind(tracker)

        run(tracker.start())
        with pytest.raises(RuntimeError, match="offline"):
            run(tracker.next_turn())
        assert tracker.current.token_id == hazard.id
        assert not hazard.spreading
