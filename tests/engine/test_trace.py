"""Tests for the immutable construction trace."""

from primed.engine.trace import Trace


class TestTrace:
    def test_empty(self) -> None:
        trace = Trace()
        assert len(trace) == 0
        assert "Foo" not in trace
        assert str(trace) == "<root>"

    def test_extend_returns_new_trace(self) -> None:
        root = Trace()
        child = root.extend("Foo")
        assert "Foo" in child
        assert "Foo" not in root

    def test_siblings_independent(self) -> None:
        parent = Trace().extend("Foo")
        left = parent.extend("Bar")
        right = parent.extend("Baz")
        assert list(left) == ["Foo", "Bar"]
        assert list(right) == ["Foo", "Baz"]
        assert "Bar" not in right

    def test_depth_and_str(self) -> None:
        trace = Trace().extend("Foo").extend("Bar")
        assert trace.depth == 2
        assert str(trace) == "Foo -> Bar"
