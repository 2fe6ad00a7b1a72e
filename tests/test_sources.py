"""
Tests for the point-source records and SourceRegistry.
"""

import pytest

from field_studio.sources import ElevationPoint, Pole, SourceRegistry, TurbulenceSource, generate_source_id


class TestSourceRecords:
    def test_unknown_pole_kind_rejected(self):
        with pytest.raises(ValueError, match="attractor"):
            Pole(id="x", x=0.0, y=0.0, kind="monopole")

    def test_unknown_elevation_kind_rejected(self):
        with pytest.raises(ValueError):
            ElevationPoint(id="x", x=0.0, y=0.0, kind="plateau")

    def test_unknown_turbulence_kind_rejected(self):
        with pytest.raises(ValueError):
            TurbulenceSource(id="x", x=0.0, y=0.0, kind="jet")

    def test_defaults(self):
        pole = Pole(id="x", x=1.0, y=2.0)
        assert pole.strength == 25.0
        assert pole.is_positive
        assert pole.kind == "attractor"

    def test_generated_ids_are_short_and_distinct(self):
        ids = {generate_source_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 9 for i in ids)


class TestSourceRegistry:
    def test_add_assigns_id_and_display_name(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        first = reg.add("attractor", 10, 20)
        second = reg.add("vortex", 30, 40, strength=5.0)
        assert (first, second) == ("s0", "s1")
        assert [p.name for p in reg] == ["Pole 1", "Pole 2"]
        assert reg.get(second).strength == 5.0
        assert len(reg) == 2

    def test_kind_specific_names(self):
        peaks = SourceRegistry(ElevationPoint)
        peaks.add("valley", 0, 0)
        assert peaks.list()[0].name == "Valley 1"

        flows = SourceRegistry(TurbulenceSource)
        flows.add("uniform", 0, 0)
        assert flows.list()[0].name == "Flow 1"

    def test_add_invalid_kind_raises(self):
        reg = SourceRegistry(TurbulenceSource)
        with pytest.raises(ValueError):
            reg.add("tornado", 0, 0)
        assert len(reg) == 0

    def test_remove_missing_is_noop(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        reg.add("attractor", 0, 0)
        reg.remove("nope")
        assert len(reg) == 1

    def test_remove_keeps_order(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        ids = [reg.add("attractor", i, 0) for i in range(3)]
        reg.remove(ids[1])
        assert [p.id for p in reg] == [ids[0], ids[2]]
        assert ids[1] not in reg

    def test_update_and_move(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        pid = reg.add("attractor", 0, 0)
        reg.update(pid, strength=80.0, is_positive=False)
        reg.move(pid, 5, 6)
        pole = reg.get(pid)
        assert (pole.x, pole.y, pole.strength, pole.is_positive) == (5.0, 6.0, 80.0, False)

    def test_update_missing_is_noop(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        pid = reg.add("attractor", 1, 2)
        before = reg.list()
        reg.update("missing", strength=1.0)
        reg.move("missing", 0, 0)
        assert reg.list() == before
        assert reg.get(pid).x == 1.0
        with pytest.raises(KeyError):
            reg.get("missing")

    def test_update_cannot_change_id(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        pid = reg.add("attractor", 0, 0)
        with pytest.raises(ValueError):
            reg.update(pid, id="other")

    def test_update_validates_kind(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        pid = reg.add("attractor", 0, 0)
        with pytest.raises(ValueError):
            reg.update(pid, kind="bogus")

    def test_list_is_a_snapshot(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        reg.add("attractor", 0, 0)
        snapshot = reg.list()
        reg.clear()
        assert len(snapshot) == 1
        assert len(reg) == 0

    def test_insert_rejects_wrong_type_and_duplicates(self):
        reg = SourceRegistry(Pole)
        reg.insert(Pole(id="fixed", x=0.0, y=0.0))
        with pytest.raises(ValueError):
            reg.insert(Pole(id="fixed", x=1.0, y=1.0))
        with pytest.raises(TypeError):
            reg.insert(ElevationPoint(id="e", x=0.0, y=0.0))

    def test_id_collisions_are_retried(self):
        ids = iter(["a", "a", "b"])
        reg = SourceRegistry(Pole, id_factory=lambda: next(ids))
        assert reg.add("attractor", 0, 0) == "a"
        assert reg.add("attractor", 1, 1) == "b"

    def test_find_at_picks_closest_within_radius(self, counter_ids):
        reg = SourceRegistry(Pole, id_factory=counter_ids)
        far = reg.add("attractor", 0, 0)
        near = reg.add("attractor", 12, 0)
        assert reg.find_at(10, 0).id == near
        assert reg.find_at(-5, 0).id == far
        assert reg.find_at(100, 100) is None

    def test_renumber_after_removal(self, counter_ids):
        reg = SourceRegistry(ElevationPoint, id_factory=counter_ids)
        first = reg.add("peak", 0, 0)
        reg.add("peak", 1, 1)
        reg.remove(first)
        reg.renumber()
        assert reg.list()[0].name == "Peak 1"
