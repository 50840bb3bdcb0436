"""
Test module for chainlog.core.fields
"""

import pytest

from chainlog.core.fields import DefaultFields


class TestDefaultFields:
    """Test cases for DefaultFields."""

    def test_empty_store(self):
        store = DefaultFields()

        assert store.collect() == {}
        assert len(store) == 0

    def test_add_is_cumulative_and_last_write_wins(self):
        store = DefaultFields()
        store.add({"clientIP": "127.0.0.1", "port": 1})
        store.add({"object": "/tata/self.txt", "port": 2})

        assert store.collect() == {
            "clientIP": "127.0.0.1",
            "object": "/tata/self.txt",
            "port": 2,
        }

    def test_add_does_not_modify_argument(self):
        add1 = {"attr1": 0}
        add2 = {"attr2": "string"}
        store = DefaultFields()

        store.add(add1)
        store.add(add2)

        assert add1 == {"attr1": 0}
        assert add2 == {"attr2": "string"}

    def test_later_mutation_of_argument_is_not_observed(self):
        """Test that a snapshot is stored, including nested values."""
        source = {"a": 1, "nested": {"k": [1, 2]}}
        store = DefaultFields()
        store.add(source)

        source["a"] = 2
        source["nested"]["k"].append(3)

        assert store.collect() == {"a": 1, "nested": {"k": [1, 2]}}

    def test_collect_returns_fresh_copy(self):
        store = DefaultFields({"tags": ["x"]})

        snapshot = store.collect()
        snapshot["tags"].append("y")
        snapshot["extra"] = True

        assert store.collect() == {"tags": ["x"]}

    def test_copy_is_independent(self):
        parent = DefaultFields({"a": 1})
        child = parent.copy()

        child.add({"b": 2})
        parent.add({"a": 3})

        assert parent.collect() == {"a": 3}
        assert child.collect() == {"a": 1, "b": 2}

    @pytest.mark.parametrize("value", ["string", 1, None, ["a"]])
    def test_add_rejects_non_mapping(self, value):
        store = DefaultFields()

        with pytest.raises(TypeError):
            store.add(value)
