"""Tests for AttributeModel."""

from epoxy import AttributeModel


class TestAttributeModel:
    def test_creation(self):
        m = AttributeModel({"x": 10, "y": "hello"})
        assert m.get("x") == 10
        assert m.get("y") == "hello"

    def test_defaults(self):
        class Point(AttributeModel):
            defaults = {"x": 0, "y": 0, "tags": list}

        p = Point({"x": 5})
        assert p.get("x") == 5
        assert p.get("y") == 0
        assert p.get("tags") == []
        assert Point().get("tags") is not p.get("tags")  # one list per instance

    def test_get_nonexistent(self):
        m = AttributeModel({"x": 1})
        assert m.get("nope") is None
        assert m.get("nope", 7) == 7

    def test_has(self):
        m = AttributeModel({"x": 1, "n": None})
        assert m.has("x")
        assert not m.has("n")
        assert not m.has("nope")

    def test_set_single_and_mapping(self):
        m = AttributeModel()
        m.set("x", 1)
        m.set({"y": 2, "z": 3})
        assert m.to_dict() == {"x": 1, "y": 2, "z": 3}

    def test_set_returns_model(self):
        m = AttributeModel()
        assert m.set("x", 1) is m


class TestChangeEvents:
    def test_specific_then_generic(self):
        m = AttributeModel({"x": 0})
        log = []
        m.on("change:x", lambda model, value: log.append(("change:x", value)))
        m.on("change", lambda model: log.append(("change",)))
        m.set("x", 1)
        assert log == [("change:x", 1), ("change",)]

    def test_all_values_applied_before_events(self):
        m = AttributeModel({"x": 0, "y": 0})
        seen = []
        m.on("change:x", lambda model, value: seen.append(model.get("y")))
        m.set({"x": 1, "y": 2})
        assert seen == [2]

    def test_one_generic_event_per_write(self):
        m = AttributeModel()
        log = []
        m.on("change", lambda model: log.append(1))
        m.set({"a": 1, "b": 2, "c": 3})
        assert log == [1]

    def test_equal_value_is_silent(self):
        m = AttributeModel({"items": [1, 2]})
        log = []
        m.on("change change:items", lambda *args: log.append(args))
        m.set("items", [1, 2])  # a different but equal list
        assert log == []
        assert m.changed == {}

    def test_changed_and_previous(self):
        m = AttributeModel({"x": 1, "y": 1})
        m.set({"x": 2, "y": 1})
        assert m.changed == {"x": 2}
        assert m.previous("x") == 1

    def test_silent(self):
        m = AttributeModel()
        log = []
        m.on("change", lambda model: log.append(1))
        m.set("x", 1, silent=True)
        assert m.get("x") == 1
        assert log == []


class TestUnset:
    def test_unset(self):
        m = AttributeModel({"x": 1})
        log = []
        m.on("change:x", lambda model, value: log.append(value))
        m.unset("x")
        assert "x" not in m.to_dict()
        assert log == [None]

    def test_unset_missing_is_silent(self):
        m = AttributeModel()
        log = []
        m.on("change", lambda model: log.append(1))
        m.unset("nope")
        assert log == []

    def test_clear(self):
        m = AttributeModel({"x": 1, "y": 2})
        m.clear()
        assert m.to_dict() == {}


class TestDestroy:
    def test_destroy_event_then_release(self):
        m = AttributeModel({"x": 1})
        log = []
        m.on("destroy", lambda model: log.append("destroy"))
        m.on("change:x", lambda model, value: log.append(value))
        m.destroy()
        assert log == ["destroy"]
        assert m.destroyed
        m.set("x", 2)
        assert log == ["destroy"]  # handlers released

    def test_destroy_stops_listening(self):
        source = AttributeModel({"x": 1})
        listener = AttributeModel()
        log = []
        listener.listen_to(source, "change:x", lambda model, value: log.append(value))
        listener.destroy()
        source.set("x", 2)
        assert log == []
